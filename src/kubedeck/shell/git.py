#!/usr/bin/env python3
"""
KUBEDECK GIT CLIENT
-------------------
The three git questions KubeDeck asks: what version is checked out, how old
is a commit, and please check one out.

Author: KubeDeck Team
Date: 2026-10-18
"""

import logging
from pathlib import Path
from typing import Optional

from kubedeck.core.errors import CommandFailedError, LaunchError
from kubedeck.core.models import ShellResult
from kubedeck.shell.invoker import Shell

logger = logging.getLogger("kubedeck.git")


class Git:

    def __init__(self, shell: Shell, binary: str = "git", cwd: Optional[Path] = None):
        self.shell = shell
        self.binary = binary
        self.cwd = cwd

    async def _git(self, *args: str) -> Optional[ShellResult]:
        return await self.shell.exec([self.binary, *args], cwd=self.cwd)

    async def describe(self) -> Optional[ShellResult]:
        return await self._git("describe", "--always", "--dirty")

    async def when_created(self, commit_id: str) -> Optional[str]:
        """Relative age of a commit ("3 days ago"), or None if git cannot tell."""
        result = await self._git("log", "--pretty=format:%cr", "-n", "1", commit_id)
        if result is None or not result.succeeded:
            return None
        return result.stdout.strip() or None

    async def checkout(self, commit_id: str):
        result = await self._git("checkout", commit_id)
        if result is None:
            raise LaunchError("git")
        if not result.succeeded:
            raise CommandFailedError(
                f"Error checking out commit {commit_id}: {result.stderr.strip()}",
                result.stderr, result.code,
            )
