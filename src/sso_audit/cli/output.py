"""Output helpers for rendering envelopes in the CLI."""

from __future__ import annotations
import json
from typing import Any
from rich.console import Console
from rich.pretty import Pretty
from rich.table import Table
from rich.text import Text


_SEVERITY_STYLES = {"high": "bold red", "medium": "yellow"}


def render_table(
    console: Console,
    *,
    title: str,
    columns: list[str],
    rows: list[list[Any]],
) -> None:
    """Render a table with ``columns`` and ``rows`` to ``console``."""
    table = Table(title=title, show_lines=False)
    for column in columns:
        table.add_column(column)
    for row in rows:
        table.add_row(*[str(cell) for cell in row])
    console.print(table)


def render_json(console: Console, payload: Any, *, title: str | None = None) -> None:
    """Render a JSON-like payload using Rich's pretty printer."""
    if title:
        console.print(Text(title, style="bold"))
    console.print(Pretty(payload, indent_guides=True))


def render_raw_json(console: Console, payload: Any) -> None:
    """Print ``payload`` as indented JSON that stays machine-readable."""
    console.print_json(json.dumps(payload, sort_keys=True))


def render_findings(console: Console, findings: list[dict[str, Any]]) -> None:
    """Render audit findings, or a short notice when there are none."""
    if not findings:
        console.print("[green]No audit findings.[/green]")
        return
    table = Table(title="Audit findings", show_lines=False)
    for column in ("Severity", "Code", "Location", "Message"):
        table.add_column(column)
    for finding in findings:
        severity = str(finding.get("severity", ""))
        table.add_row(
            Text(severity, style=_SEVERITY_STYLES.get(severity, "")),
            str(finding.get("code", "")),
            str(finding.get("location", "")),
            str(finding.get("message", "")),
        )
    console.print(table)


def render_errors(console: Console, error: dict[str, Any]) -> None:
    """Render an error envelope's items as a table."""
    console.print(
        f"[red]{error.get('code')} {error.get('status')}:[/red] {error.get('message')}"
    )
    items = error.get("errors") or []
    if not items:
        return
    render_table(
        console,
        title="Errors",
        columns=["Location", "Reason", "Message"],
        rows=[
            [item.get("location"), item.get("reason"), item.get("message")]
            for item in items
        ],
    )


__all__ = [
    "render_errors",
    "render_findings",
    "render_json",
    "render_raw_json",
    "render_table",
]
