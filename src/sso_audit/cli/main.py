"""SSO audit CLI entrypoint."""

from __future__ import annotations
import json
import sys
from pathlib import Path
from typing import Annotated, Any
import click
import typer
from rich.console import Console
from sso_audit.cli.errors import CLIError, PayloadFileError
from sso_audit.cli.output import (
    render_errors,
    render_findings,
    render_json,
    render_raw_json,
)
from sso_audit.config import get_settings
from sso_audit.contract import SuccessEnvelope, load_json, to_payload
from sso_audit.dispatcher import Mode, describe, dispatch


app = typer.Typer(help="Validate, normalize and audit SSO federation configs.")


def _load_payload(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        msg = f"Unable to read {path}: {getattr(exc, 'strerror', None) or exc}"
        raise PayloadFileError(msg) from exc
    try:
        return load_json(text)
    except json.JSONDecodeError as exc:
        msg = f"{path} is not valid JSON: {exc.msg} (line {exc.lineno})"
        raise PayloadFileError(msg) from exc
    except (ValueError, RecursionError) as exc:
        msg = f"{path} is not valid JSON: {exc}"
        raise PayloadFileError(msg) from exc


@app.command()
def check(
    path: Annotated[Path, typer.Argument(help="JSON file holding the payload.")],
    mode: Annotated[
        Mode,
        typer.Option("--mode", "-m", help="Pipeline to run against the payload."),
    ] = Mode.AUDIT_SAML_CONFIG,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the raw response envelope as JSON."),
    ] = False,
) -> None:
    """Run PATH through the selected pipeline and print the envelope."""
    console = Console()
    payload = _load_payload(path)
    envelope = dispatch({"mode": mode.value, "payload": payload})
    body = to_payload(envelope)

    if as_json:
        render_raw_json(console, body)
    elif isinstance(envelope, SuccessEnvelope):
        result = body["result"][0]
        console.print(f"[green]{path}: valid[/green] ({result['type']})")
        if "normalized" in result:
            render_json(console, result["normalized"], title="Normalized payload")
        if "findings" in result:
            render_findings(console, result["findings"])
    else:
        error = body["error"]
        if isinstance(error, str):
            console.print(f"[red]{error}[/red]")
        else:
            render_errors(console, error)

    if not isinstance(envelope, SuccessEnvelope):
        raise typer.Exit(code=1)


@app.command()
def modes() -> None:
    """Print the supported modes and the response contract."""
    console = Console()
    render_json(console, to_payload(describe())["result"][0], title="Service spec")


@app.command()
def serve(
    host: Annotated[
        str | None, typer.Option("--host", help="Interface to bind.")
    ] = None,
    port: Annotated[int | None, typer.Option("--port", help="Port to bind.")] = None,
) -> None:
    """Serve the HTTP API with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "sso_audit_backend.app:app",
        host=host or str(settings.host),
        port=port or int(settings.port),
    )


def run() -> None:
    """Entry point used by console scripts."""
    console = Console()
    try:
        exit_code = app(standalone_mode=False)
    except click.UsageError as exc:
        console.print(f"[red]Error:[/red] {exc.message}")
        if exc.ctx and exc.ctx.command_path:
            help_cmd = f"{exc.ctx.command_path} --help"
            console.print(f"\nRun '[cyan]{help_cmd}[/cyan]' for usage information.")
        sys.exit(1)
    except CLIError as exc:
        console.print(f"[red]Error: {exc}[/red]")
        sys.exit(1)
    if isinstance(exit_code, int) and exit_code:
        sys.exit(exit_code)
