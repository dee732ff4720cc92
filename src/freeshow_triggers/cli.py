"""Command-line utilities for FreeShow Triggers.

Usage:
    freeshow-triggers scan NOTES.md          Render markdown and print HTML
    freeshow-triggers scan page.html --html  Scan existing HTML
    freeshow-triggers send slide "Intro"     Select a slide once
    freeshow-triggers send show "Sunday"     Select a show once
    freeshow-triggers serve                  Start the web app
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

if TYPE_CHECKING:
    from freeshow_triggers.config import Settings

console = Console()


def _build_parser() -> argparse.ArgumentParser:
    """Build argparse parser for freeshow-triggers subcommands."""
    parser = argparse.ArgumentParser(
        prog="freeshow-triggers",
        description="Turn inline markup into FreeShow slide/show controls.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    # scan
    scan_p = sub.add_parser("scan", help="Render a document and convert triggers")
    scan_p.add_argument("path", type=Path, help="Markdown (or HTML) file")
    scan_p.add_argument(
        "--html", action="store_true", help="Input is already-rendered HTML"
    )
    scan_p.add_argument(
        "--summary", action="store_true", help="List controls instead of HTML"
    )

    # send
    send_p = sub.add_parser("send", help="Dispatch one action to FreeShow")
    send_p.add_argument("kind", choices=["show", "slide"], help="What to select")
    send_p.add_argument("label", help="Show or slide name")
    send_p.add_argument(
        "--endpoint", default=None, help="Override the configured endpoint"
    )

    # serve
    serve_p = sub.add_parser("serve", help="Start the web app")
    serve_p.add_argument(
        "--reload", action="store_true", help="Reload on source changes"
    )

    return parser


def _current_settings() -> Settings:
    from freeshow_triggers.preferences import get_preference_store

    return get_preference_store().settings


def _cmd_scan(path: Path, *, is_html: bool, summary: bool) -> int:
    from freeshow_triggers.document import render_document
    from freeshow_triggers.triggers import extract_controls, scan_html

    if not path.is_file():
        console.print(f"[red]Error:[/] {escape(str(path))} not found.")
        return 1

    settings = _current_settings()
    source = path.read_text(encoding="utf-8")
    if is_html:
        html = scan_html(source, settings.triggers, settings.display)
    else:
        html = render_document(source, settings)

    if not summary:
        # Plain stdout so the output can be piped unchanged.
        sys.stdout.write(html)
        if html and not html.endswith("\n"):
            sys.stdout.write("\n")
        return 0

    controls = extract_controls(html)
    table = Table(title=f"{len(controls)} trigger(s) in {escape(path.name)}")
    table.add_column("#", justify="right")
    table.add_column("Kind")
    table.add_column("Label")
    for i, control in enumerate(controls, start=1):
        # Text cells bypass markup parsing
        table.add_row(str(i), control.kind.display_name, Text(control.label))
    console.print(table)
    return 0


async def _cmd_send(kind_name: str, label: str, endpoint: str | None) -> int:
    from freeshow_triggers.dispatch import describe_outcome, dispatch
    from freeshow_triggers.triggers import TriggerKind

    freeshow = _current_settings().freeshow
    if endpoint is not None:
        freeshow = freeshow.model_copy(update={"endpoint": endpoint})

    outcome = await dispatch(TriggerKind(kind_name), label, freeshow)
    note = describe_outcome(outcome)
    colour = "green" if outcome.success else "red"
    console.print(Text(note.message, style=colour))
    if outcome.url:
        console.print(Text(outcome.url, style="dim"))
    return 0 if outcome.success else 1


def main(argv: list[str] | None = None) -> None:
    """Run a freeshow-triggers subcommand."""
    parser = _build_parser()
    args = parser.parse_args(sys.argv[1:] if argv is None else argv)

    match args.command:
        case "scan":
            code = _cmd_scan(args.path, is_html=args.html, summary=args.summary)
        case "send":
            code = asyncio.run(_cmd_send(args.kind, args.label, args.endpoint))
        case "serve":
            from freeshow_triggers import main as serve

            serve(reload=args.reload)
            code = 0
        case _:  # pragma: no cover - argparse enforces choices
            parser.error(f"unknown command {args.command}")

    sys.exit(code)
