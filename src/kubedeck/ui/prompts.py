#!/usr/bin/env python3
"""
KUBEDECK PROMPTS - Interactive Input
------------------------------------
Terminal implementation of the three questions the engine ever asks:
free text, pick one of a list, confirm an action.

Every method returns None when the user dismisses the prompt (Ctrl-C,
Ctrl-D, empty pick). Callers treat None as a silent abort.

Author: KubeDeck Team
Date: 2026-10-18
"""

import signal
import threading
from dataclasses import dataclass
from typing import Any, List, Optional

from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt
from rich.table import Table


@dataclass
class PickItem:
    label: str
    description: str = ""
    detail: str = ""
    value: Any = None


class ConsolePrompter:
    """
    Asks on the event-loop thread. The CLI runs one operation at a time, so
    nothing else is waiting to be scheduled while the user types.
    """

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def _ask(self, *args, **kwargs) -> Optional[str]:
        # asyncio.run turns the first Ctrl-C into a task cancellation, which
        # cannot interrupt a blocking read; restore the plain handler meanwhile
        previous = None
        if threading.current_thread() is threading.main_thread():
            previous = signal.signal(signal.SIGINT, signal.default_int_handler)
        try:
            return Prompt.ask(*args, console=self.console, **kwargs)
        except (EOFError, KeyboardInterrupt):
            self.console.print()
            return None
        finally:
            if previous is not None:
                signal.signal(signal.SIGINT, previous)

    async def input_box(self, prompt: str, placeholder: Optional[str] = None,
                        value: Optional[str] = None) -> Optional[str]:
        text = f"[bold yellow]{escape(prompt)}[/bold yellow]"
        if placeholder:
            text += f" [dim]({escape(placeholder)})[/dim]"
        if value is not None:
            return self._ask(text, default=value)
        return self._ask(text, default="", show_default=False)

    async def quick_pick(self, items: List[PickItem],
                         placeholder: Optional[str] = None) -> Optional[PickItem]:
        if not items:
            return None

        table = Table(title=escape(placeholder) if placeholder else None, show_header=False, box=None)
        table.add_column("#", style="bold cyan", justify="right")
        table.add_column("Item", style="white")
        table.add_column("Detail", style="dim")
        for index, item in enumerate(items, 1):
            table.add_row(str(index), escape(item.label), escape(item.detail or item.description))
        self.console.print(table)

        choices = [str(i) for i in range(1, len(items) + 1)]
        answer = self._ask("[bold yellow]Select[/bold yellow]", default="", show_default=False)
        if not answer or answer not in choices:
            return None
        return items[int(answer) - 1]

    async def confirm(self, message: str, *actions: str, level: str = "info") -> Optional[str]:
        """Shows `message` and offers `actions`; returns the chosen one."""
        style = "bold yellow" if level == "warning" else "bold white"
        self.console.print(f"[{style}]{escape(message)}[/{style}]")
        options = " / ".join(f"\\[{i}] {escape(a)}" for i, a in enumerate(actions, 1))
        answer = self._ask(f"{options}, anything else to cancel", default="", show_default=False)
        if not answer:
            return None
        for index, action in enumerate(actions, 1):
            if answer == str(index) or answer.lower() == action.lower():
                return action
        return None
