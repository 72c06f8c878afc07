"""SUBENUM CLI — terminal interface built with Typer + Rich."""

from __future__ import annotations

import asyncio
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from subenum import __version__
from subenum.core.config import load_config
from subenum.core.errors import EnumerationError
from subenum.core.models import EnumerationOptions, EnumerationResponse
from subenum.core.orchestrator import EnumerationOrchestrator
from subenum.utils.logger import configure_logging

app = typer.Typer(
    name="subenum",
    help="[bold cyan]SUBENUM[/] — REST façade for subfinder subdomain enumeration",
    rich_markup_mode="rich",
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)


# ---------------------------------------------------------------------------
# serve command
# ---------------------------------------------------------------------------


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address (overrides config)"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="TCP port (overrides config)"),
    api_key: Optional[str] = typer.Option(None, "--api-key", help="API key for authentication (overrides config)"),
    config_file: Optional[str] = typer.Option(None, "--config", help="Custom config file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """[bold]Start the SUBENUM REST API server.[/]

    Examples:

        subenum serve

        subenum serve --host 127.0.0.1 --port 8080 --api-key mysecretkey
    """
    cfg = load_config(config_file)
    configure_logging(cfg.logging, verbose=verbose)

    if host is not None:
        cfg.api.host = host
    if port is not None:
        if not 0 < port < 65536:
            err_console.print(f"[red]Invalid port {port}.[/]")
            raise typer.Exit(1)
        cfg.api.port = port
    if api_key is not None:
        cfg.api.api_key = api_key

    console.print(
        f"[bold green]►[/] Starting SUBENUM API server at "
        f"[bold]http://{cfg.api.host}:{cfg.api.port}[/]"
    )
    if not cfg.api.api_key:
        console.print("[yellow]  ⚠ No API key configured — server is open to all.[/]")

    from subenum.api.server import run_server
    run_server(cfg)


# ---------------------------------------------------------------------------
# enumerate command
# ---------------------------------------------------------------------------


@app.command("enumerate")
def enumerate_domains(
    domains: List[str] = typer.Argument(..., help="Domain(s) to enumerate"),
    threads: int = typer.Option(0, "--threads", "-t", help="Engine worker count (0 = default)"),
    timeout: int = typer.Option(0, "--timeout", help="Per-source timeout in seconds (0 = default)"),
    max_time: int = typer.Option(0, "--max-time", help="Max enumeration minutes per domain (0 = default)"),
    use_all: Optional[bool] = typer.Option(None, "--all/--no-all", help="Use all sources (slow); default from config"),
    recursive: Optional[bool] = typer.Option(
        None, "--recursive/--no-recursive", help="Only use recursive sources; default from config"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the raw JSON response"),
    config_file: Optional[str] = typer.Option(None, "--config", help="Custom config file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """[bold]Enumerate subdomains without starting the server.[/]

    One domain runs a single enumeration; several run a batch.

    Examples:

        subenum enumerate hackerone.com

        subenum enumerate hackerone.com bugcrowd.com --all --json
    """
    cfg = load_config(config_file)
    configure_logging(cfg.logging, verbose=verbose)

    options = EnumerationOptions(
        threads=threads,
        timeout=timeout,
        max_enumeration_time=max_time,
        all=cfg.defaults.all if use_all is None else use_all,
        only_recursive=cfg.defaults.only_recursive if recursive is None else recursive,
    )
    orchestrator = EnumerationOrchestrator.from_config(cfg)

    try:
        if len(domains) == 1:
            response = asyncio.run(orchestrator.enumerate(domains[0], options))
        else:
            response = asyncio.run(orchestrator.enumerate_batch(domains, options))
    except EnumerationError as exc:
        err_console.print(f"[bold red]Error:[/] {exc.message}")
        raise typer.Exit(1)

    if as_json:
        console.print_json(response.model_dump_json(exclude_none=True))
    else:
        _display_results(response)


def _display_results(response: EnumerationResponse) -> None:
    """Render an enumeration response as a Rich table."""
    table = Table(title=f"{response.count} subdomains in {response.duration}")
    table.add_column("Subdomain", style="bold")
    table.add_column("Sources")
    table.add_column("#", justify="right")
    for result in response.results:
        table.add_row(result.subdomain, ", ".join(result.sources), str(result.source_count))
    console.print(table)

    for outcome in response.domains or []:
        if not outcome.success:
            err_console.print(f"[yellow]⚠ {outcome.domain}: {outcome.error}[/]")


# ---------------------------------------------------------------------------
# config / version commands
# ---------------------------------------------------------------------------


@app.command()
def config(
    config_file: Optional[str] = typer.Option(None, "--config", help="Config file path"),
) -> None:
    """[bold]Show the effective configuration.[/]"""
    cfg = load_config(config_file)
    data = cfg.model_dump()
    if data["api"]["api_key"]:
        data["api"]["api_key"] = "***"
    console.print_json(data=data)


@app.command()
def version() -> None:
    """[bold]Show SUBENUM version information.[/]"""
    console.print(f"[bold cyan]SUBENUM[/] version [bold]{__version__}[/]")


def main() -> None:
    """Entry point registered in pyproject.toml."""
    app()
