#!/usr/bin/env python3
"""
KUBEDECK ACTIVE DOCUMENT
------------------------
The "open editor" that resource commands operate on. In the terminal it is
built from a file path, from stdin (an untitled buffer) and from an
optional line selection, but the engine only sees the attributes below.

Author: KubeDeck Team
Date: 2026-10-18
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

logger = logging.getLogger("kubedeck.editor")

LANGUAGE_BY_SUFFIX = {
    ".yaml": "yaml",
    ".yml": "yaml",
    ".json": "json",
    ".tpl": "helm",
}


@dataclass
class Document:
    text: str
    file_path: Optional[Path] = None
    is_untitled: bool = False
    is_dirty: bool = False
    language_id: str = "plaintext"
    scheme: str = "file"

    @property
    def is_persisted_file(self) -> bool:
        return self.scheme == "file" and self.file_path is not None

    def save(self) -> bool:
        """Writes the buffer back to its file. False when that is impossible."""
        if not self.is_persisted_file:
            return False
        try:
            self.file_path.write_text(self.text, encoding="utf-8")
        except OSError as e:
            logger.error(f"Save failed for {self.file_path}: {e}")
            return False
        self.is_dirty = False
        return True


@dataclass
class Editor:
    document: Document
    # 1-based inclusive line range
    selection: Optional[Tuple[int, int]] = None

    def selected_text(self) -> str:
        if not self.selection:
            return ""
        start, end = self.selection
        lines = self.document.text.splitlines(keepends=True)
        return "".join(lines[max(start, 1) - 1:end])


def language_for(path: Path) -> str:
    return LANGUAGE_BY_SUFFIX.get(path.suffix.lower(), "plaintext")


def parse_line_range(spec: str) -> Tuple[int, int]:
    """'5-20' -> (5, 20); '7' -> (7, 7)."""
    start, _, end = spec.partition("-")
    first = int(start)
    last = int(end) if end else first
    if first < 1 or last < first:
        raise ValueError(f"Invalid line range '{spec}'")
    return first, last


def editor_from_file(path: Path, lines: Optional[str] = None) -> Editor:
    """Opens a saved document; BOM-aware like the rest of the tool."""
    text = path.read_text(encoding="utf-8-sig")
    document = Document(text=text, file_path=path.resolve(), language_id=language_for(path))
    return Editor(document=document, selection=parse_line_range(lines) if lines else None)


def editor_from_text(text: str, language_id: str = "plaintext") -> Editor:
    """An untitled buffer, e.g. text piped on stdin."""
    document = Document(text=text, is_untitled=True, language_id=language_id, scheme="untitled")
    return Editor(document=document)
