#!/usr/bin/env python3
"""
KUBEDECK DIFF ENGINE - Local vs Live
------------------------------------
Compares the resource in the open document with the object the cluster
currently holds, and classifies every attempt into exactly one outcome:

    Succeeded | NoEditor | NoKindName | NoClusterResource | GetFailed | NothingToDiff

"Succeeded" means the comparison was displayed; what the user does after
looking at it is the caller's business.

Temporary files (local.<ext>, server.<ext>) are written to the system temp
directory and left there.

Author: KubeDeck Team
Date: 2026-10-18
"""

import logging
import tempfile
from pathlib import Path
from typing import Optional

from kubedeck.core.errors import ResolutionError
from kubedeck.core.models import (
    DiffGetFailed,
    DiffNoClusterResource,
    DiffNoEditor,
    DiffNoKindName,
    DiffNothingToDiff,
    DiffOutcome,
    DiffSucceeded,
    ResourceIdentifier,
)
from kubedeck.editor.active import detect_format, get_text_for_active_window
from kubedeck.editor.document import Editor
from kubedeck.resolution.resolver import KubeResolver
from kubedeck.shell.invoker import KubeInvoker
from kubedeck.ui.formatter import KubeFormatter

logger = logging.getLogger("kubedeck.diff")

YAML_LANGUAGES = ("yaml", "helm")


class RichDiffPresenter:
    """Shows the comparison as a unified diff in the terminal."""

    def __init__(self, formatter: KubeFormatter):
        self.formatter = formatter

    async def show(self, server_path: Path, local_path: Path, title: str) -> bool:
        server_text = server_path.read_text(encoding="utf-8")
        local_text = local_path.read_text(encoding="utf-8-sig")
        return self.formatter.display_diff(
            server_text, local_text,
            from_name=f"cluster: {title}",
            to_name=f"local: {local_path.name}",
        )


class DiffEngine:

    def __init__(self, kubectl: KubeInvoker, resolver: KubeResolver, prompter, presenter,
                 temp_dir: Optional[Path] = None):
        self.kubectl = kubectl
        self.resolver = resolver
        self.prompter = prompter
        self.presenter = presenter
        self.temp_dir = temp_dir or Path(tempfile.gettempdir())

    def _write_temp(self, name: str, content: str) -> Path:
        path = self.temp_dir / name
        path.write_text(content, encoding="utf-8")
        return path

    async def classify(self, editor: Optional[Editor]) -> DiffOutcome:
        if editor is None:
            return DiffNoEditor()

        text, file_path = await get_text_for_active_window(editor, self.prompter)

        if text:
            file_format = detect_format(text)
            try:
                identifier = self.resolver.find_identifier(text)
            except ResolutionError as e:
                return DiffNoKindName(reason=e.message)
            local_path = self._write_temp(f"local.{file_format}", text)
        elif file_path:
            try:
                identifier = self.resolver.find_identifier_in_editor(editor)
            except ResolutionError as e:
                return DiffNoKindName(reason=e.message)
            local_path = file_path
            file_format = detect_format(editor.document.text)
            if editor.document.language_id.lower() in YAML_LANGUAGES:
                file_format = "yaml"
        else:
            return DiffNothingToDiff()

        return await self._compare_with_cluster(identifier, local_path, file_format)

    async def _compare_with_cluster(self, identifier: ResourceIdentifier,
                                    local_path: Path, file_format: str) -> DiffOutcome:
        command = ["get", "-o", file_format, identifier.kind_name]
        if identifier.namespace:
            command += ["--namespace", identifier.namespace]

        result = await self.kubectl.invoke_async(command)
        if result is None:
            return DiffGetFailed(stderr="Unable to call kubectl")
        if result.code == 1 and "NotFound" in result.stderr:
            return DiffNoClusterResource(resource_name=identifier.kind_name)
        if result.code != 0:
            logger.warning(f"Live query for {identifier.kind_name} failed ({result.code})")
            return DiffGetFailed(stderr=result.stderr)

        server_path = self._write_temp(f"server.{file_format}", result.stdout)
        await self.presenter.show(server_path, local_path, identifier.kind_name)
        return DiffSucceeded()
