#!/usr/bin/env python3
"""
KUBEDECK ACTIVE SOURCE
----------------------
Decides which text an editor-driven command works on. The order is fixed:
1. The current selection
2. The whole buffer of an untitled document
3. A dirty document: offer to save, then use the file
4. The saved file itself

Author: KubeDeck Team
Date: 2026-10-18
"""

import logging
from pathlib import Path
from typing import Optional, Tuple

from kubedeck.editor.document import Editor

logger = logging.getLogger("kubedeck.editor")

SAVE_ACTION = "Save"


def detect_format(text: str) -> str:
    """'json' when the first non-blank character opens an object, else 'yaml'."""
    stripped = text.strip()
    return "json" if stripped and stripped[0] == "{" else "yaml"


async def get_text_for_active_window(editor: Optional[Editor],
                                     prompter) -> Tuple[Optional[str], Optional[Path]]:
    """
    Returns (text, None) for in-memory sources, (None, path) for a file on
    disk, and (None, None) when there is nothing to work on.
    """
    if editor is None:
        return None, None

    document = editor.document

    text = editor.selected_text()
    if text:
        return text, None

    if document.is_untitled:
        return (document.text or None), None

    if document.is_dirty:
        choice = await prompter.confirm("You have unsaved changes!", SAVE_ACTION, level="warning")
        if choice == SAVE_ACTION and not document.save():
            logger.error("Save failed.")
            return None, None

    if not document.is_persisted_file:
        return (document.text or None), None

    return None, document.file_path
