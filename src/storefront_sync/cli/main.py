"""Root ``storefront-sync`` command group."""

from __future__ import annotations

import functools
import json
from typing import Any

import click
from rich.console import Console
from rich.table import Table

from storefront_sync import __version__
from storefront_sync.cli._client import ApiClient, CliApiError, run_async

_DEFAULT_URL = "http://localhost:9100"

_HEALTH_STYLE = {"healthy": "green", "warning": "yellow", "error": "red"}


def handle_errors(fn: Any) -> Any:
    """Render :class:`CliApiError` as a click error instead of a traceback."""

    @functools.wraps(fn)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return fn(*args, **kwargs)
        except CliApiError as exc:
            raise click.ClickException(str(exc)) from exc

    return wrapper


@click.group()
@click.option("--url", envvar="STOREFRONT_URL", default=_DEFAULT_URL, show_default=True, help="Server base URL.")
@click.option("--timeout", type=float, default=30.0, show_default=True, help="Request timeout in seconds.")
@click.option("--json", "json_mode", is_flag=True, default=False, help="Print raw JSON.")
@click.version_option(version=__version__, prog_name="storefront-sync")
@click.pass_context
def cli(ctx: click.Context, url: str, timeout: float, json_mode: bool) -> None:
    """Storefront provider and product integration sync."""
    ctx.obj = {"url": url, "timeout": timeout, "json": json_mode, "console": Console()}


@cli.command()
@click.option("--host", default=None, help="Bind address (defaults to STOREFRONT_HOST).")
@click.option("--port", type=int, default=None, help="Bind port (defaults to STOREFRONT_PORT).")
def serve(host: str | None, port: int | None) -> None:
    """Run the API server."""
    import uvicorn

    from storefront_sync.app import create_app
    from storefront_sync.settings import SyncSettings

    settings = SyncSettings()
    uvicorn.run(create_app(settings), host=host or settings.host, port=port or settings.port)


@cli.command()
@click.option(
    "--cron-secret",
    envvar="STOREFRONT_CRON_SECRET",
    required=True,
    help="Shared sync-trigger secret.",
)
@click.pass_obj
@handle_errors
def trigger(obj: dict[str, Any], cron_secret: str) -> None:
    """Run one sync pass on a running server."""
    api = ApiClient(obj["url"], {"X-Cron-Secret": cron_secret}, obj["timeout"])
    result = run_async(api.request("POST", "/sync-trigger"))

    console: Console = obj["console"]
    if obj["json"]:
        console.print_json(json.dumps(result))
        return
    console.print(
        f"Processed {result['processed']}: "
        f"[green]{result['succeeded']} succeeded[/green], "
        f"[red]{result['failed']} failed[/red]"
    )
    for error in result.get("errors", []):
        console.print(f"  [red]-[/red] {error}")
    if result.get("failed"):
        raise SystemExit(1)


@cli.command()
@click.option("--api-key", envvar="STOREFRONT_API_KEY", default="", help="Admin API key.")
@click.option(
    "--filter",
    "health_filter",
    type=click.Choice(["healthy", "warning", "error"]),
    default=None,
    help="Only list integrations in this bucket.",
)
@click.pass_obj
@handle_errors
def health(obj: dict[str, Any], api_key: str, health_filter: str | None) -> None:
    """Show the integration health summary."""
    headers = {"Authorization": f"Bearer {api_key}"} if api_key else {}
    api = ApiClient(obj["url"], headers, obj["timeout"])
    params = {"health": health_filter} if health_filter else None
    report = run_async(api.request("GET", "/integrations/health", params=params))

    console: Console = obj["console"]
    if obj["json"]:
        console.print_json(json.dumps(report))
        return

    stats = report["stats"]
    console.print(
        f"{stats['total']} integrations, {stats['active']} active, "
        f"{stats['withErrors']} with errors, {stats['neverSynced']} never synced"
    )
    table = Table(title="Integrations")
    for header in ("ID", "Product", "Type", "Name", "Health", "Last sync", "Error"):
        table.add_column(header)
    for item in report["integrations"]:
        style = _HEALTH_STYLE.get(item["health"], "")
        table.add_row(
            str(item["id"]),
            item["productName"],
            item["integrationType"],
            item["integrationName"],
            f"[{style}]{item['health']}[/{style}]" if style else item["health"],
            item["lastSyncedAt"] or "never",
            item["errorMessage"] or "",
        )
    console.print(table)
