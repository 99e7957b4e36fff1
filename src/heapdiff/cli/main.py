#!/usr/bin/env python3
"""
HEAPDIFF CLI
------------
Command-line interface for comparing two heap object dumps.

    heapdiff compare before.txt after.txt --policy suppress.yaml

Exit status: 0 when the dumps match, 1 when differences were reported,
2 when the comparison could not be completed.

Author: HeapDiff Team
Date: 2026-10-19
"""

import sys
import logging
import argparse
from typing import List, Optional

# Rich library components for high-fidelity terminal UI
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from heapdiff.cli.formatter import DiffFormatter
from heapdiff.core.engine import CompareEngine
from heapdiff.core.errors import HeapDiffError

EXIT_IDENTICAL = 0
EXIT_DIFFERENT = 1
EXIT_FAILURE = 2

# Global console for consistent styling across the application
console = Console()


class HeapDiffCLI:
    """
    CLI wrapper that translates user commands into Engine actions.
    Streams differences as they are found and closes with a summary.
    """

    def __init__(self):
        """Initializes the CLI and sets up the argument parser."""
        self.parser = argparse.ArgumentParser(
            prog="heapdiff",
            description="HeapDiff - Semantic comparison of heap object dumps",
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )
        self.formatter = DiffFormatter(console)
        self._setup_args()

    def _setup_args(self):
        """Configures the command-line flags and subcommands."""
        self.parser.add_argument("-v", "--version", action="version", version="heapdiff v1.0.0")
        subparsers = self.parser.add_subparsers(dest="command", metavar="Command")

        compare_parser = subparsers.add_parser("compare", help="Compare two heap object dumps")
        compare_parser.add_argument("left", help="Baseline dump file")
        compare_parser.add_argument("right", help="Dump file to compare against the baseline")
        compare_parser.add_argument("--policy", default=None,
                                    help="Suppression rules (.yaml) or 'module:attribute' policy object")
        compare_parser.add_argument("--left-label", default=None, help="Name shown for the left dump")
        compare_parser.add_argument("--right-label", default=None, help="Name shown for the right dump")
        compare_parser.add_argument("--summary", action="store_true", help="Print a counts table at the end")
        compare_parser.add_argument("-q", "--quiet", action="store_true",
                                    help="Do not print differences, only set the exit status")
        compare_parser.add_argument("--log-level", default="WARNING",
                                    choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                                    help="Logging verbosity (default: WARNING)")

    def print_header(self, subtitle: str):
        console.print(Panel.fit(
            "[bold cyan]HeapDiff v1.0.0[/bold cyan]",
            title=f"[bold white]{subtitle}[/bold white]",
            border_style="cyan"
        ))

    def _run_compare(self, args: argparse.Namespace) -> int:
        try:
            engine = CompareEngine(args.policy, args.left_label, args.right_label)
            on_entry = None if args.quiet else self.formatter.print_entry
            report = engine.compare_files(args.left, args.right, on_entry=on_entry)
        except HeapDiffError as e:
            console.print(f"[bold red]Error:[/bold red] {escape(str(e))}", highlight=False)
            return EXIT_FAILURE

        if not args.quiet:
            self.formatter.show_warnings(report["warnings"])
        if args.summary:
            self.formatter.print_summary(report)

        return EXIT_IDENTICAL if report["identical"] else EXIT_DIFFERENT

    def run(self, argv: Optional[List[str]] = None) -> int:
        """Primary routing entry point."""
        args = self.parser.parse_args(argv)
        logging.basicConfig(level=getattr(logging, getattr(args, "log_level", "WARNING")),
                            format="%(levelname)s %(name)s: %(message)s")

        if args.command == "compare":
            return self._run_compare(args)

        self.print_header("Heap Dump Comparison")
        self.parser.print_help()
        return EXIT_IDENTICAL


def main():
    """Application entry point with interrupt handling."""
    try:
        sys.exit(HeapDiffCLI().run())
    except KeyboardInterrupt:
        console.print("\n[bold red]Terminated by user.[/bold red]")
        sys.exit(EXIT_FAILURE)


if __name__ == "__main__":
    main()
