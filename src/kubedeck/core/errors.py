#!/usr/bin/env python3
"""
KUBEDECK ERROR TAXONOMY
-----------------------
Typed failures raised by the engine and caught only by the command layer,
which is the single place that turns them into user-visible messages.

Interactive cancellation is absent: a dismissed prompt returns
None and the enclosing operation stops silently.

Author: KubeDeck Team
Date: 2026-10-18
"""

from typing import Optional


class KubeDeckError(Exception):
    """Base class. `level` selects how the formatter presents the message."""
    level = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


# --- Resolution ---------------------------------------------------------------

class ResolutionError(KubeDeckError):
    pass


class ResourceParseError(ResolutionError):
    """The document is not well-formed YAML/JSON."""


class NotAResourceError(ResolutionError):
    """The document parsed but is not a Kubernetes resource."""


class MultipleResourcesError(ResolutionError):
    """A single-target operation found more than one resource."""


class NoEditorError(ResolutionError):
    pass


# --- External commands -----------------------------------------------------------

class LaunchError(KubeDeckError):
    """The external tool could not be started at all."""

    def __init__(self, tool: str, message: Optional[str] = None):
        super().__init__(message or f"Unable to call {tool}")
        self.tool = tool


class CommandFailedError(KubeDeckError):
    """The external tool ran and exited non-zero."""

    def __init__(self, message: str, stderr: str = "", code: int = 1):
        super().__init__(message)
        self.stderr = stderr
        self.code = code


class BuildError(CommandFailedError):
    pass


class PushError(CommandFailedError):
    pass


# --- Workflow ---------------------------------------------------------------

class NoPodsError(KubeDeckError):
    pass


class NoResourcesError(KubeDeckError):
    level = "info"


class NoProjectError(KubeDeckError):
    pass


class DebugError(KubeDeckError):
    pass


class PodNotReadyError(DebugError):
    pass


class PollCancelledError(DebugError):
    level = "warning"


class ConfigError(KubeDeckError):
    pass
