# src/heapdiff/cli/formatter.py
from typing import Any, Dict, List

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from heapdiff.core.models import (
    DiffEntry, ParseWarning,
    DIFF_MISSING, DIFF_TYPE_MISMATCH, DIFF_LINE_MISMATCH, DIFF_LENGTH_MISMATCH,
)

# Initialize the Rich console for high-quality terminal output
console = Console()

KIND_STYLES = {
    DIFF_MISSING: "bold red",
    DIFF_TYPE_MISMATCH: "bold magenta",
    DIFF_LINE_MISMATCH: "yellow",
    DIFF_LENGTH_MISMATCH: "cyan",
}


def format_entry(entry: DiffEntry) -> List[str]:
    """
    Renders one DiffEntry as plain report lines:
    '<key>: <label>: <message>' per detail, '<key>: <message>' when unlabeled.
    """
    if not entry.detail:
        return [f"{entry.key}: {entry.kind}"]

    lines = []
    for detail in entry.detail:
        if detail.label:
            lines.append(f"{entry.key}: {detail.label}: {detail.message}")
        else:
            lines.append(f"{entry.key}: {detail.message}")
    return lines


class DiffFormatter:
    """
    DiffFormatter: The visual heart of the CLI.
    Responsible for rendering DiffEntries, parse warnings and the run summary.
    """

    def __init__(self, out: Console = None):
        self.console = out or console

    def print_entry(self, entry: DiffEntry):
        style = KIND_STYLES.get(entry.kind, "white")
        for line in format_entry(entry):
            # Dump lines may contain '[...]', which rich would read as markup
            self.console.print(line, style=style, markup=False, highlight=False)

    def show_warnings(self, warnings: List[ParseWarning]):
        for w in warnings:
            self.console.print(
                f"⚠  {w.stage.upper()} {w.source}:{w.line_no}: {w.reason}",
                style="bold yellow", markup=False, highlight=False,
            )

    def print_summary(self, report: Dict[str, Any]):
        """Builds the per-run counts table shown at the end of a comparison."""
        summary = report["summary"]

        table = Table(title="HeapDiff Comparison Report", show_header=True, header_style="bold magenta")
        table.add_column("Metric", style="dim")
        table.add_column("Count", justify="right")

        for label, count in summary["records_parsed"].items():
            table.add_row(f"Records parsed ({label})", str(count))
        table.add_row("Keys joined", str(summary["records_joined"]))
        for kind, count in summary["diffs_by_kind"].items():
            table.add_row(f"Diffs: {kind}", str(count))
        table.add_row("Suppressed keys", str(summary["suppressed_keys"]))
        table.add_row("Suppressed lines", str(summary["suppressed_lines"]))
        table.add_row("Warnings", str(summary["warnings"]))

        self.console.print(table)

        verdict = "[green]IDENTICAL[/green]" if report["identical"] else \
            f"[red]{summary['diffs_emitted']} DIFFERENCE(S)[/red]"
        self.console.print(Panel(
            f"[bold white]Result:[/bold white] {verdict}\n"
            f"Elapsed: {report['elapsed']:.2f}s",
            border_style="dim"
        ))
