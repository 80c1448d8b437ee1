#!/usr/bin/env python3
"""
KUBEDECK SESSION CONTEXT
------------------------
Holds the only process-wide mutable state: the "explain mode" toggle and the
cached API specification it reads from. The CLI creates one context and hands
it to the command layer; nothing else reaches for globals.

Author: KubeDeck Team
Date: 2026-10-18
"""

import logging
from typing import Any, Awaitable, Callable, Dict, Optional

logger = logging.getLogger("kubedeck.session")

SpecLoader = Callable[[], Awaitable[Optional[Dict[str, Any]]]]


class SessionContext:

    def __init__(self, spec_loader: SpecLoader):
        self._spec_loader = spec_loader
        self._spec: Optional[Dict[str, Any]] = None
        self.explain_active = False

    def toggle_explain(self) -> bool:
        """Flips explain mode. Turning it off drops the cached spec."""
        self.explain_active = not self.explain_active
        if not self.explain_active:
            self.invalidate()
        logger.debug(f"Explain mode {'on' if self.explain_active else 'off'}")
        return self.explain_active

    def invalidate(self):
        self._spec = None

    @property
    def has_spec(self) -> bool:
        return self._spec is not None

    async def get_spec(self) -> Optional[Dict[str, Any]]:
        """Loads the API spec on first use. A failed load is not cached."""
        if self._spec is None:
            self._spec = await self._spec_loader()
        return self._spec
