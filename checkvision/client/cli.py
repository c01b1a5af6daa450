"""
cli.py

Command-line client for CheckVision.

Usage:
    checkvision analyze path/to/check.jpg
    checkvision analyze path/to/check.jpg --local
    checkvision analyze path/to/check.jpg --json
    checkvision health --server http://localhost:8000

analyze validates the file, shows a progress bar while the check is
being read and prints the thirteen fields as a table.
Exit code is 0 on success and 1 on any failure.
"""

from functools import partial
from pathlib import Path
from typing import Callable, List, Optional
import argparse
import logging

from rich.console import Console
from rich.markup import escape
from rich.progress import BarColumn, Progress, TextColumn
from rich.table import Table
from rich.text import Text

from checkvision.client.api import CheckVisionClient, analyze_locally
from checkvision.client.progress import ProgressEstimator
from checkvision.config import load_settings
from checkvision.errors import CheckVisionError
from checkvision.schemas.check import AnalysisResult, FIELD_LABELS


def build_parser(default_server: str) -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="checkvision", description="Extract bank check fields with Gemini")
    ap.add_argument("-v", "--verbose", action="store_true", help="Show debug logs")
    sub = ap.add_subparsers(dest="command", required=True)

    analyze = sub.add_parser("analyze", help="Analyze one check image (JPG, PNG, WebP or PDF, max 10MB)")
    analyze.add_argument("file", type=Path)
    analyze.add_argument("--server", default=default_server,
                         help=f"CheckVision server URL (default: {default_server})")
    analyze.add_argument("--local", action="store_true",
                         help="Call Gemini directly using GEMINI_API_KEY instead of a server")
    analyze.add_argument("--json", action="store_true", help="Print the raw JSON result")

    health = sub.add_parser("health", help="Check that the server is up")
    health.add_argument("--server", default=default_server)

    return ap


def run_with_progress(console: Console, work: Callable[[], AnalysisResult]) -> AnalysisResult:
    """Run `work` while a cosmetic progress bar fills up."""
    columns = (
        TextColumn("[bold blue]{task.description}"),
        BarColumn(),
        TextColumn("{task.percentage:>3.0f}%"),
    )
    with Progress(*columns, console=console, transient=True) as bar:
        task = bar.add_task("Analyzing check", total=100)
        with ProgressEstimator(on_update=lambda value: bar.update(task, completed=value)) as progress:
            result = work()
            progress.finish()
    return result


def render_result(console: Console, result: AnalysisResult) -> None:
    table = Table(title="Check Analysis Results", show_header=True)
    table.add_column("Field", style="bold")
    table.add_column("Value")

    for name, value in result.to_fields().items():
        table.add_row(FIELD_LABELS[name], Text(value))

    console.print(table)
    console.print(f"Extraction confidence: {result.extraction_confidence}%")


def cmd_analyze(args: argparse.Namespace, console: Console) -> int:
    if args.local:
        settings = load_settings()
        work = partial(analyze_locally, args.file, settings)
    else:
        client = CheckVisionClient(args.server)
        work = partial(client.analyze_file, args.file)

    result = run_with_progress(console, work)

    if args.json:
        console.print_json(result.model_dump_json(by_alias=True))
    else:
        render_result(console, result)
        console.print("[green]Check analysis completed successfully![/green]")
    return 0


def cmd_health(args: argparse.Namespace, console: Console) -> int:
    report = CheckVisionClient(args.server).health()

    table = Table(show_header=False)
    for key in ("message", "version", "environment", "apiKeyConfigured", "timestamp"):
        table.add_row(key, Text(str(report.get(key))))
    console.print(table)

    if not report.get("apiKeyConfigured"):
        console.print("[yellow]API key is not configured on the server[/yellow]")
    return 0


def main(argv: Optional[List[str]] = None, console: Optional[Console] = None) -> int:
    settings = load_settings()
    args = build_parser(settings.server_url).parse_args(argv)
    console = console or Console()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    commands = {"analyze": cmd_analyze, "health": cmd_health}
    try:
        return commands[args.command](args, console)
    except (CheckVisionError, ValueError) as error:
        console.print(f"[red]{escape(str(error))}[/red]")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
