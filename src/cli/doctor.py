"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import httpx
import typer
from rich.console import Console
from rich.table import Table

from adapters.http_client import build_async_client
from core.config import AppSettings, write_user_env_vars

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_http(
    url: str,
    *,
    settings: AppSettings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> tuple[bool, str]:
    try:
        async with build_async_client(settings, transport=transport) as client:
            response = await client.get(url)
    except httpx.HTTPError as exc:
        return False, str(exc) or type(exc).__name__
    if response.status_code == 429:
        return True, "HTTP 429 (reachable, currently rate limited)"
    return True, f"HTTP {response.status_code}"


async def _check_endpoints(settings: AppSettings) -> list[tuple[str, bool, str]]:
    endpoints = {
        "Users API": settings.users_api_url,
        "Friends API": settings.friends_api_url,
        "Groups API": settings.groups_api_url,
    }
    checks = await asyncio.gather(*(_check_http(url, settings=settings) for url in endpoints.values()))
    return [(label, ok, detail) for label, (ok, detail) in zip(endpoints, checks)]


@app.command()
def run() -> None:
    """Run baseline diagnostics and show the effective configuration."""

    settings = AppSettings()

    table = Table(title="bgcheck Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    policy = settings.threshold_policy()
    table.add_row(
        "Thresholds",
        "OK",
        f"age >= {policy.min_account_age_days}d, friends >= {policy.min_friends}, "
        f"groups >= {policy.min_groups}",
    )
    table.add_row(
        "Retry policy",
        "OK",
        f"{settings.fetch_max_attempts} attempts, {settings.rate_limit_backoff_seconds:.1f}s backoff",
    )

    # Connectivity (best-effort)
    for label, ok, detail in asyncio.run(_check_endpoints(settings)):
        table.add_row(label, "OK" if ok else "FAIL", detail)

    _console.print(table)


@app.command()
def configure() -> None:
    """Interactive threshold setup (stored in the user config .env)."""

    settings = AppSettings()

    min_age = typer.prompt("Minimum account age (days)", default=settings.min_account_age_days, type=int)
    min_friends = typer.prompt("Minimum friends", default=settings.min_friends, type=int)
    min_groups = typer.prompt("Minimum groups", default=settings.min_groups, type=int)

    if min(min_age, min_friends, min_groups) < 0:
        raise typer.BadParameter("thresholds must be >= 0")

    env_path = write_user_env_vars(
        {
            "BGCHECK_MIN_ACCOUNT_AGE_DAYS": str(min_age),
            "BGCHECK_MIN_FRIENDS": str(min_friends),
            "BGCHECK_MIN_GROUPS": str(min_groups),
        }
    )

    _console.print(f"[green]Saved thresholds to:[/green] {env_path}")
