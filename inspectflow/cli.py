"""CLI tools for inspection tracking diagnostics."""

import asyncio
import sys

import click
import httpx

from inspectflow.core.config import settings
from inspectflow.core.structured_logging import configure_logging
from inspectflow.enums import DateNormalizationStrategy
from inspectflow.services.api_client import ApiError, InspectionApiClient
from inspectflow.services.auth_service import AuthSession
from inspectflow.utils.dates import (
    DATE_ONLY_RE,
    InvalidDateError,
    is_date_preserved,
    normalize_date,
)


@click.group()
@click.option("--log-level", default=None, help="Logging level (default from settings)")
def cli(log_level: str | None):
    """Inspection tracking CLI tools."""
    configure_logging(log_level or settings.LOG_LEVEL)


@cli.command("normalize-date")
@click.argument("value")
@click.option(
    "--strategy",
    type=click.Choice([s.value for s in DateNormalizationStrategy]),
    default=None,
    help="Normalization strategy (default from settings)",
)
@click.option("--timezone", "tz_name", default=None, help="IANA zone for zone_midnight")
def normalize_date_cmd(value: str, strategy: str | None, tz_name: str | None):
    """
    Normalize a calendar date and check the date survives.

    Example:
        inspectflow normalize-date 2025-06-10 --strategy zone_midnight
    """
    try:
        result = normalize_date(value, strategy=strategy, tz_name=tz_name)
    except InvalidDateError as e:
        click.echo(f"❌ Error: {e}")
        sys.exit(1)

    click.echo(f"Input:      {value}")
    click.echo(f"Normalized: {result}")
    if DATE_ONLY_RE.match(value) and not is_date_preserved(value, result):
        click.echo("❌ Date part NOT preserved")
        sys.exit(1)
    click.echo("✓ Date part preserved")


def _backend_unreachable(base_url: str | None, error: httpx.RequestError):
    click.echo(f"❌ Cannot reach backend at {base_url or settings.api_base_url}: {error}")
    sys.exit(1)


@cli.command()
@click.option("--email", required=True, help="Account email")
@click.option("--password", prompt=True, hide_input=True, help="Account password")
@click.option("--base-url", default=None, help="Backend base URL (default from settings)")
def login(email: str, password: str, base_url: str | None):
    """Log in and print the bearer token."""

    async def _run():
        async with InspectionApiClient(base_url=base_url) as client:
            return await client.login(email, password)

    try:
        response = asyncio.run(_run())
    except httpx.RequestError as e:
        _backend_unreachable(base_url, e)
    except ApiError as e:
        click.echo(f"❌ Login failed ({e.status_code}): {e.message}")
        sys.exit(1)

    click.echo(f"✓ Logged in as {response.user.name} ({response.user.role.value})")
    click.echo(response.token)


@cli.command()
@click.option("--token", envvar="INSPECTFLOW_TOKEN", required=True, help="Bearer token")
@click.option("--base-url", default=None, help="Backend base URL (default from settings)")
def whoami(token: str, base_url: str | None):
    """Print the user a token belongs to."""

    async def _run():
        async with InspectionApiClient(base_url=base_url, session=AuthSession(token)) as client:
            return await client.load_user()

    try:
        user = asyncio.run(_run())
    except httpx.RequestError as e:
        _backend_unreachable(base_url, e)
    except ApiError as e:
        click.echo(f"❌ Error ({e.status_code}): {e.message}")
        sys.exit(1)

    click.echo(f"✓ {user.name} <{user.email}>")
    click.echo(f"  Role: {user.role.value}")
    click.echo(f"  Organization: {user.organization_id}")


if __name__ == "__main__":
    cli()
