#!/usr/bin/env python3
"""
KUBEDECK DOCKER CLIENT
----------------------
Image build and push, delegated to the docker CLI. KubeDeck only cares
about whether each step ran and how it exited.

Author: KubeDeck Team
Date: 2026-10-18
"""

import re
from pathlib import Path
from typing import Optional

from kubedeck.core.models import ShellResult
from kubedeck.shell.invoker import Shell

# Docker repository names allow lower-case alphanumerics and . _ - separators
INVALID_TAG_CHARS = re.compile(r"[^a-z0-9._-]+")


def sanitise_tag(name: str) -> str:
    """Turns a folder name into a usable image repository name."""
    cleaned = INVALID_TAG_CHARS.sub("-", name.strip().lower())
    return cleaned.strip("._-") or "app"


def diagnose_push_error(exit_code: int, stderr: str, image_user: Optional[str] = None) -> str:
    if "denied" in stderr:
        if image_user:
            return "Failed to push to Docker Hub. Try running docker login."
        return "Failed to push to Docker Hub. Try setting docker.image_user."
    return "Image push failed."


class Docker:

    def __init__(self, shell: Shell, binary: str = "docker"):
        self.shell = shell
        self.binary = binary

    async def build(self, image: str, context_dir: Path) -> Optional[ShellResult]:
        return await self.shell.exec([self.binary, "build", "-t", image, "."], cwd=context_dir)

    async def push(self, image: str) -> Optional[ShellResult]:
        return await self.shell.exec([self.binary, "push", image])
