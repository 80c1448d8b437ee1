import contextlib
import io
import json
from pathlib import Path
from typing import List, Optional

import pytest
from rich.console import Console

from kubedeck.commands.context import KubeDeckContext
from kubedeck.core.config import ConfigManager
from kubedeck.core.models import ShellResult
from kubedeck.ui.formatter import KubeFormatter


def ok(stdout: str = "") -> ShellResult:
    return ShellResult(code=0, stdout=stdout)


def failed(stderr: str, code: int = 1) -> ShellResult:
    return ShellResult(code=code, stderr=stderr)


def pod_list(*names: str, namespace: str = "default", containers=None) -> str:
    items = []
    for name in names:
        pod = {"metadata": {"name": name, "namespace": namespace}, "status": {"phase": "Running"}}
        if containers is not None:
            pod["spec"] = {"containers": containers}
        items.append(pod)
    return json.dumps({"kind": "List", "items": items})


class FakeShell:
    """
    Scripted stand-in for Shell. Responses are registered per argv prefix;
    the longest matching prefix wins and its last response repeats.
    """

    def __init__(self):
        self.routes = []
        self.calls: List[List[str]] = []
        self.cwds = []
        self.spawned: List[List[str]] = []
        self.interactive: List[List[str]] = []
        self.spawn_result = object()

    def on(self, prefix: List[str], *results: Optional[ShellResult]):
        self.routes.append((list(prefix), list(results)))

    def _route(self, argv: List[str]):
        best = None
        for prefix, results in self.routes:
            if argv[:len(prefix)] == prefix and (best is None or len(prefix) > len(best[0])):
                best = (prefix, results)
        return best

    async def exec(self, argv, cwd=None, stdin_text=None):
        argv = list(argv)
        self.calls.append(argv)
        self.cwds.append(cwd)
        route = self._route(argv)
        if route is None:
            return failed(f"unscripted command: {' '.join(argv)}")
        results = route[1]
        return results.pop(0) if len(results) > 1 else results[0]

    async def spawn(self, argv):
        self.spawned.append(list(argv))
        return self.spawn_result

    async def run_interactive(self, argv):
        self.interactive.append(list(argv))
        return 0

    def calls_to(self, *prefix: str) -> List[List[str]]:
        return [c for c in self.calls if c[:len(prefix)] == list(prefix)]


class FakePrompter:
    """Answers prompts from queues; an empty queue means the user dismissed it."""

    def __init__(self):
        self.inputs = []
        self.picks = []
        self.confirms = []
        self.asked = []

    async def input_box(self, prompt, placeholder=None, value=None):
        self.asked.append(("input", prompt, value))
        return self.inputs.pop(0) if self.inputs else None

    async def quick_pick(self, items, placeholder=None):
        self.asked.append(("pick", [item.label for item in items], placeholder))
        if not self.picks:
            return None
        choice = self.picks.pop(0)
        for item in items:
            if item.label == choice:
                return item
        return None

    async def confirm(self, message, *actions, level="info"):
        self.asked.append(("confirm", message, actions))
        return self.confirms.pop(0) if self.confirms else None

    def questions(self, kind: str):
        return [entry for entry in self.asked if entry[0] == kind]


class RecordingFormatter(KubeFormatter):
    def __init__(self):
        super().__init__(Console(file=io.StringIO(), width=120))
        self.messages = []

    def info(self, message):
        self.messages.append(("info", message))

    def warning(self, message):
        self.messages.append(("warning", message))

    def error(self, message):
        self.messages.append(("error", message))

    def note(self, message):
        self.messages.append(("note", message))

    def status(self, message):
        return contextlib.nullcontext()

    def show_output(self, text, title):
        self.messages.append(("output", text))

    def show_markdown(self, text):
        self.messages.append(("markdown", text))

    def show_document(self, text, language, title):
        self.messages.append(("document", text))

    def of(self, level: str) -> List[str]:
        return [m for lvl, m in self.messages if lvl == level]


@pytest.fixture
def shell():
    return FakeShell()


@pytest.fixture
def prompter():
    return FakePrompter()


@pytest.fixture
def formatter():
    return RecordingFormatter()


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def make_ctx(tmp_path, shell, prompter, formatter, sleeps):
    """Builds a fully wired context over the fakes; `settings` is YAML text."""
    temp_dir = tmp_path / "tmp"
    temp_dir.mkdir()

    async def fake_sleep(seconds):
        sleeps.append(seconds)

    def _make(editor=None, project_root: Optional[Path] = None, settings: Optional[str] = None):
        config_file = tmp_path / "kubedeck-test.yaml"
        if settings:
            config_file.write_text(settings, encoding="utf-8")
        config = ConfigManager(project_root, config_file, environ={})
        return KubeDeckContext.build(
            config, project_root=project_root, editor=editor, formatter=formatter,
            prompter=prompter, shell=shell, sleep=fake_sleep, temp_dir=temp_dir,
        )

    return _make
