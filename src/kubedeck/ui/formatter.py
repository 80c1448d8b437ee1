# src/kubedeck/ui/formatter.py
import difflib
from typing import Optional

from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.text import Text

from kubedeck.core.errors import KubeDeckError

# Initialize the Rich console for high-quality terminal output
console = Console()


class KubeFormatter:
    """
    KubeFormatter: The visual heart of the CLI.
    Responsible for messages, command output panels and file comparisons.
    Messages carry kubectl/docker/git output, so they are never parsed as markup.
    """

    def __init__(self, out: Optional[Console] = None):
        self.console = out or console

    def info(self, message: str):
        if message:
            self.console.print(f"[bold green]ℹ[/bold green] {escape(message)}")

    def warning(self, message: str):
        self.console.print(f"[bold yellow]⚠️  {escape(message)}[/bold yellow]")

    def error(self, message: str):
        self.console.print(f"[bold red]Error:[/bold red] {escape(message)}")

    def note(self, message: str):
        self.console.print(f"[dim]{escape(message)}[/dim]")

    def status(self, message: str):
        """Spinner shown while a command runs."""
        return self.console.status(f"[bold cyan]{escape(message)}[/bold cyan]")

    def present(self, err: KubeDeckError):
        """Routes a typed failure to the message style its level asks for."""
        if err.level == "info":
            self.info(err.message)
        elif err.level == "warning":
            self.warning(err.message)
        else:
            self.error(err.message)

    def show_output(self, text: str, title: str):
        self.console.print(Panel(Text(text.rstrip()), title=f"[bold cyan]{escape(title)}[/bold cyan]",
                                 border_style="cyan"))

    def show_markdown(self, text: str):
        self.console.print(Markdown(text))

    def show_document(self, text: str, language: str, title: str):
        """Syntax-highlighted view of a serialized resource."""
        syntax = Syntax(text.rstrip(), language, theme="monokai", line_numbers=True)
        self.console.print(Panel(syntax, title=f"[bold cyan]{escape(title)}[/bold cyan]", border_style="cyan"))

    def display_diff(self, original_text: str, new_text: str, from_name: str, to_name: str) -> bool:
        """
        Calculates and renders a colorized diff between the live object and
        the local document. Returns True once something was shown.
        """
        # Generate a Unified Diff (standard format for line changes)
        diff = difflib.unified_diff(
            original_text.splitlines(),
            new_text.splitlines(),
            fromfile=from_name,
            tofile=to_name,
            lineterm=""
        )

        diff_list = list(diff)

        if not diff_list:
            self.console.print(f"[dim]ℹ No differences between {escape(from_name)} and {escape(to_name)}.[/dim]")
            return True

        # Combine diff lines and wrap in a Rich Panel for clear UI separation
        diff_output = "\n".join(diff_list)
        syntax = Syntax(diff_output, "diff", theme="monokai", line_numbers=True)

        self.console.print(Panel(
            syntax,
            title=f"{escape(from_name)} ↔ {escape(to_name)}",
            border_style="green"
        ))
        return True
