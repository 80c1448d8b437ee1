#!/usr/bin/env python3
"""
KUBEDECK CLI - Cluster Workbench
--------------------------------
Primary interface. Translates subcommands into engine operations and builds
the "editor" that document-driven commands work on:
  -f FILE        a saved document
  -f -           an untitled buffer read from stdin
  --lines A-B    a selection inside FILE

Author: KubeDeck Team
Date: 2026-10-18
"""

import sys
import asyncio
import logging
import argparse
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from kubedeck.commands import resources, workloads
from kubedeck.commands.context import KubeDeckContext
from kubedeck.core.config import ConfigManager
from kubedeck.editor.active import detect_format
from kubedeck.editor.document import Editor, editor_from_file, editor_from_text

# Global console for consistent styling across the application
console = Console()

VERSION = "1.0.0"


class KubeDeckCLI:
    """
    CLI wrapper that turns user commands into engine actions.
    """

    def __init__(self):
        self.parser = argparse.ArgumentParser(
            prog="kubedeck",
            description="KubeDeck - Kubernetes workbench for manifests, pods and remote debugging",
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )
        self._setup_args()

    def _setup_args(self):
        """Configures the command-line flags and subcommands."""
        self.parser.add_argument("--version", action="version", version=f"kubedeck v{VERSION}")
        self.parser.add_argument("-v", "--verbose", action="count", default=0,
                                 help="More logging (-v info, -vv debug)")
        self.parser.add_argument("--project", default=".", help="Project folder (default: current directory)")
        self.parser.add_argument("--config", help="Configuration file (default: .kubedeck.yaml lookup)")

        # Shared by every command that reads the open document
        document = argparse.ArgumentParser(add_help=False)
        document.add_argument("-f", "--file", help="Manifest to work on; '-' reads stdin")
        document.add_argument("--lines", help="Only use lines A-B of the file")

        subparsers = self.parser.add_subparsers(dest="command", metavar="Command")

        diff_parser = subparsers.add_parser("diff", parents=[document], help="🔍 Compare a manifest with the cluster")
        diff_parser.set_defaults(handler=resources.diff)

        apply_parser = subparsers.add_parser("apply", parents=[document], help="🚀 Show the change, then apply it")
        apply_parser.set_defaults(handler=resources.apply)

        create_parser = subparsers.add_parser("create", parents=[document], help="Create the resource in a manifest")
        create_parser.set_defaults(handler=resources.create)

        for name, handler, help_text in (
            ("get", resources.get, "List or show a resource"),
            ("describe", resources.describe, "Describe a resource"),
            ("expose", resources.expose, "Expose a resource as a service"),
            ("load", resources.load, "Print the live serialization of a resource"),
        ):
            sub = subparsers.add_parser(name, parents=[document], help=help_text)
            sub.add_argument("target", nargs="?", help="kind/name (prompted when omitted)")
            sub.set_defaults(handler=handler)

        delete_parser = subparsers.add_parser("delete", parents=[document], help="🗑️ Delete a resource")
        delete_parser.add_argument("target", nargs="?", help="kind/name, or a kind to delete all")
        delete_parser.add_argument("--now", action="store_true", help="Delete immediately")
        delete_parser.set_defaults(handler=resources.delete)

        scale_parser = subparsers.add_parser("scale", parents=[document], help="Scale a workload")
        scale_parser.add_argument("target", nargs="?", help="kind/name (prompted when omitted)")
        scale_parser.add_argument("--replicas", help="Replica count (prompted when omitted)")
        scale_parser.set_defaults(handler=resources.scale)

        context_parser = subparsers.add_parser("use-context", help="Switch the current cluster")
        context_parser.add_argument("context_name", help="kubeconfig context")
        context_parser.set_defaults(handler=resources.use_context)

        cron_parser = subparsers.add_parser("cronjob-run", help="Run a CronJob now")
        cron_parser.add_argument("cronjob_name", nargs="?", help="CronJob (picked when omitted)")
        cron_parser.set_defaults(handler=resources.cronjob_run)

        explain_parser = subparsers.add_parser("explain", parents=[document], help="📖 Explain a kind or field")
        explain_parser.add_argument("reference", nargs="?", help="e.g. Deployment.spec.replicas")
        explain_parser.set_defaults(handler=resources.explain)

        run_parser = subparsers.add_parser("run", help="Build, push and run the project")
        run_parser.set_defaults(handler=workloads.run)

        for name, handler, help_text in (
            ("exec", workloads.exec_in_pod, "Run a command in an app pod"),
            ("terminal", workloads.terminal, "Open a shell in an app pod"),
        ):
            sub = subparsers.add_parser(name, help=help_text)
            sub.add_argument("exec_command", nargs="?", help="Command (prompted when omitted)")
            sub.set_defaults(handler=handler)

        sync_parser = subparsers.add_parser("sync", help="Check out the commit running in the cluster")
        sync_parser.set_defaults(handler=workloads.sync)

        debug_parser = subparsers.add_parser("debug", help="🐞 Build, deploy and attach a debugger")
        debug_parser.add_argument("debug_command", nargs="?", help="Container command, e.g. 'node debug server.js'")
        debug_parser.set_defaults(handler=workloads.debug)

        remove_parser = subparsers.add_parser("remove-debug", help="Remove the debug deployment and service")
        remove_parser.add_argument("name", nargs="?", help="App name (default: project folder)")
        remove_parser.set_defaults(handler=workloads.remove_debug)

    def print_header(self, subtitle: str):
        """Renders the KubeDeck splash header."""
        console.print(Panel.fit(
            f"[bold cyan]KubeDeck v{VERSION}[/bold cyan]\n"
            "══════════════════════════════════════════════════",
            title=f"[bold white]{subtitle}[/bold white]",
            border_style="cyan"
        ))

    def _configure_logging(self, verbosity: int):
        level = logging.WARNING
        if verbosity == 1:
            level = logging.INFO
        elif verbosity >= 2:
            level = logging.DEBUG
        logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    def _build_editor(self, args: argparse.Namespace) -> Optional[Editor]:
        file_arg = getattr(args, "file", None)
        if not file_arg:
            return None
        if file_arg == "-":
            text = sys.stdin.read()
            return editor_from_text(text, detect_format(text))

        path = Path(file_arg)
        if not path.is_file():
            console.print(f"[bold red]Error:[/bold red] File '{escape(file_arg)}' not found.")
            sys.exit(1)
        try:
            return editor_from_file(path, getattr(args, "lines", None))
        except ValueError as e:
            console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
            sys.exit(1)

    def _handler_args(self, args: argparse.Namespace) -> dict:
        names = {
            "target": "target",
            "now": "now",
            "replicas": "replicas",
            "context_name": "context_name",
            "cronjob_name": "cronjob_name",
            "reference": "reference",
            "exec_command": "command",
            "debug_command": "command",
            "name": "name",
        }
        return {param: getattr(args, attr) for attr, param in names.items() if hasattr(args, attr)}

    def run(self, argv=None):
        """Primary routing entry point."""
        if argv is None and len(sys.argv) == 1:
            self.print_header("Kubernetes Workbench")
            self.parser.print_help()
            sys.exit(0)

        args = self.parser.parse_args(argv)
        if not getattr(args, "handler", None):
            self.parser.print_help()
            return

        self._configure_logging(args.verbose)
        project_root = Path(args.project).resolve()
        config = ConfigManager(project_root, Path(args.config) if args.config else None)
        ctx = KubeDeckContext.build(config, project_root=project_root, editor=self._build_editor(args))

        asyncio.run(args.handler(ctx, **self._handler_args(args)))


def main():
    """Application entry point with interrupt handling."""
    try:
        KubeDeckCLI().run()
    except KeyboardInterrupt:
        console.print("\n[bold red]Terminated by user.[/bold red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
