#!/usr/bin/env python3
"""
KUBEDECK COMMAND INVOKER
------------------------
The single seam through which KubeDeck talks to external tools.

Two failure modes are kept apart:
1. The tool could not be launched (binary missing, spawn error) -> None
2. The tool ran and exited non-zero -> ShellResult with code != 0

No retries happen here; retry policy belongs to the caller.

Author: KubeDeck Team
Date: 2026-10-18
"""

import asyncio
import json
import logging
import shlex
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union

from kubedeck.core.errors import CommandFailedError, LaunchError
from kubedeck.core.models import ShellResult

logger = logging.getLogger("kubedeck.shell")

Command = Union[str, Sequence[str]]
ShellHandler = Callable[[int, str, str], None]


def to_argv(command: Command) -> List[str]:
    """Accepts either command text or an argv list."""
    if isinstance(command, str):
        return shlex.split(command)
    return list(command)


def to_wsl_path(file_path: str) -> str:
    """
    Rewrites a Windows path into its WSL mount point.
    C:\\Users\\me\\app.yaml -> /mnt/c/Users/me/app.yaml
    """
    drive = file_path[0].lower()
    rest = file_path[2:].replace("\\", "/").lstrip("/")
    return f"/mnt/{drive}/{rest}"


class Shell:
    """
    Thin asyncio wrapper over process creation. Every call is one
    suspension point for the caller.
    """

    async def exec(self, argv: Sequence[str], cwd: Optional[Path] = None,
                   stdin_text: Optional[str] = None) -> Optional[ShellResult]:
        logger.debug(f"Running: {' '.join(argv)}")
        try:
            proc = await asyncio.create_subprocess_exec(
                *argv,
                cwd=str(cwd) if cwd else None,
                stdin=asyncio.subprocess.PIPE if stdin_text is not None else None,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            logger.error(f"Unable to launch {argv[0]}: {e}")
            return None

        out_b, err_b = await proc.communicate(
            stdin_text.encode("utf-8") if stdin_text is not None else None
        )
        out = out_b.decode("utf-8", errors="replace") if out_b else ""
        err = err_b.decode("utf-8", errors="replace") if err_b else ""
        code = proc.returncode if proc.returncode is not None else 0
        if code != 0:
            logger.debug(f"{argv[0]} exited with {code}: {err.strip()}")
        return ShellResult(code=code, stdout=out, stderr=err)

    async def spawn(self, argv: Sequence[str]) -> Optional[asyncio.subprocess.Process]:
        """Starts a long-running process without waiting for it."""
        logger.debug(f"Spawning: {' '.join(argv)}")
        try:
            return await asyncio.create_subprocess_exec(
                *argv,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
            )
        except OSError as e:
            logger.error(f"Unable to launch {argv[0]}: {e}")
            return None

    async def run_interactive(self, argv: Sequence[str]) -> Optional[int]:
        """Runs attached to the current terminal's stdio."""
        logger.debug(f"Running interactively: {' '.join(argv)}")
        try:
            proc = await asyncio.create_subprocess_exec(*argv)
        except OSError as e:
            logger.error(f"Unable to launch {argv[0]}: {e}")
            return None
        return await proc.wait()


class KubeInvoker:
    """
    Runs kubectl. Commands are kubectl arguments without the binary, given
    either as text ("get pods -o json") or as an argv list.
    """

    def __init__(self, shell: Shell, binary: str = "kubectl",
                 kubeconfig: Optional[str] = None, formatter=None):
        self.shell = shell
        self.binary = binary
        self.kubeconfig = kubeconfig
        self.formatter = formatter

    def _argv(self, command: Command) -> List[str]:
        argv = [self.binary]
        if self.kubeconfig:
            argv += ["--kubeconfig", self.kubeconfig]
        return argv + to_argv(command)

    async def invoke_async(self, command: Command) -> Optional[ShellResult]:
        return await self.shell.exec(self._argv(command))

    async def invoke(self, command: Command,
                     handler: Optional[ShellHandler] = None) -> Optional[ShellResult]:
        """Awaits the command and hands (code, stdout, stderr) to `handler`."""
        result = await self.invoke_async(command)
        if handler and result is not None:
            handler(result.code, result.stdout, result.stderr)
        return result

    async def invoke_with_progress(self, command: Command, progress_message: str,
                                   handler: Optional[ShellHandler] = None) -> Optional[ShellResult]:
        if self.formatter:
            with self.formatter.status(progress_message):
                result = await self.invoke_async(command)
        else:
            result = await self.invoke_async(command)

        if result is None:
            if self.formatter:
                self.formatter.error(f"Unable to call {self.binary}")
            return None

        if handler:
            handler(result.code, result.stdout, result.stderr)
        elif self.formatter:
            self._default_handler(result)
        return result

    def _default_handler(self, result: ShellResult):
        if result.succeeded:
            self.formatter.info(result.stdout.strip())
        else:
            self.formatter.error(f"Kubectl command failed: {result.stderr.strip()}")

    async def invoke_in_shared_terminal(self, command: Command) -> Optional[int]:
        return await self.shell.run_interactive(self._argv(command))

    async def run_as_terminal(self, argv: Sequence[str], title: str) -> Optional[int]:
        if self.formatter:
            self.formatter.note(title)
        return await self.shell.run_interactive(self._argv(argv))

    async def spawn(self, command: Command):
        return await self.shell.spawn(self._argv(command))

    async def as_json(self, command: Command):
        """Runs a `-o json` query and returns the decoded object."""
        result = await self.invoke_async(command)
        if result is None:
            raise LaunchError(self.binary)
        if not result.succeeded:
            raise CommandFailedError(f"Kubectl command failed: {result.stderr.strip()}",
                                     result.stderr, result.code)
        try:
            return json.loads(result.stdout)
        except json.JSONDecodeError as e:
            raise CommandFailedError(f"Kubectl returned unreadable JSON: {e}", result.stdout)

    async def as_lines(self, command: Command) -> List[str]:
        """Runs a table-style query and returns its rows, header dropped."""
        result = await self.invoke_async(command)
        if result is None:
            raise LaunchError(self.binary)
        if not result.succeeded:
            raise CommandFailedError(f"Kubectl command failed: {result.stderr.strip()}",
                                     result.stderr, result.code)
        lines = [line for line in result.stdout.splitlines() if line.strip()]
        return lines[1:]
