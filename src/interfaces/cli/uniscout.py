#!/usr/bin/env python3
"""UniScout command-line interface.

Operational commands for the result cache: create the schema, sweep expired
results, and run a degree search through the same cache-first flow the API
uses.
"""

import asyncio
import sys

import click
import structlog
from rich.console import Console
from rich.table import Table

from src.application.use_cases import (
    ClearExpiredResultsUseCase,
    SearchOutcome,
    SearchUniversitiesUseCase,
)
from src.domain.services import FreshnessPolicy
from src.domain.value_objects import DegreeQuery
from src.infrastructure.caching import ResultCache
from src.infrastructure.persistence.postgres import (
    DatabaseConnection,
    PostgresResultStore,
)
from src.infrastructure.search import TavilyConfig, TavilySearchAdapter
from src.shared.config import get_settings
from src.shared.exceptions import (
    ConfigurationError,
    FetchError,
    QueryValidationError,
    UniScoutException,
)
from src.shared.utils import configure_logging

logger = structlog.get_logger(__name__)
console = Console()


def format_search_outcome(outcome: SearchOutcome) -> Table:
    """Format search results as a rich table."""
    source = "cache" if outcome.cached else "provider"
    table = Table(
        title=f"{outcome.degree} ({len(outcome.results)} results, {source})",
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("Rank", style="green", justify="right")
    table.add_column("University", style="white")
    table.add_column("Country")
    table.add_column("Post-study work")
    table.add_column("Full ride", justify="center")

    for result in outcome.results:
        table.add_row(
            str(result.ranking),
            result.university_name,
            result.country,
            result.psw_duration,
            "yes" if result.full_ride_available else "no",
        )
    return table


async def _open_cache(
    database_url: str | None, require_schema: bool = True
) -> tuple[DatabaseConnection, ResultCache]:
    """Build the cache over the store.

    With ``require_schema`` off, an unreachable store is only logged; the
    cache then serves misses and reports failed writes.
    """
    settings = get_settings()
    connection = DatabaseConnection(database_url=database_url)
    try:
        await connection.create_schema()
    except Exception as e:
        if require_schema:
            await connection.close()
            raise
        logger.error("database_schema_unavailable", error=str(e))
    cache = ResultCache(
        store=PostgresResultStore(connection.session_factory),
        policy=FreshnessPolicy.from_hours(settings.cache.cache_ttl_hours),
    )
    return connection, cache


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def cli(debug: bool) -> None:
    """UniScout university discovery tools."""
    configure_logging("DEBUG" if debug else get_settings().monitoring.log_level)


@cli.command("init-db")
@click.option("--database-url", help="Override DATABASE_URL")
def init_db(database_url: str | None) -> None:
    """Create the search_queries and search_results tables."""

    async def run() -> None:
        connection = DatabaseConnection(database_url=database_url)
        try:
            await connection.create_schema()
        finally:
            await connection.close()

    try:
        asyncio.run(run())
    except Exception as e:
        logger.exception("schema_creation_failed")
        console.print(f"[red]Could not create schema: {e}[/red]")
        sys.exit(1)

    console.print("[green]Database schema is ready[/green]")


@cli.command()
@click.option("--database-url", help="Override DATABASE_URL")
def sweep(database_url: str | None) -> None:
    """Delete cached results that have expired."""

    async def run() -> int:
        connection, cache = await _open_cache(database_url)
        try:
            return await ClearExpiredResultsUseCase(cache).execute()
        finally:
            await connection.close()

    try:
        deleted = asyncio.run(run())
    except Exception as e:
        logger.exception("expired_sweep_failed")
        console.print(f"[red]Sweep failed: {e}[/red]")
        sys.exit(1)

    console.print(f"[cyan]Deleted {deleted} expired results[/cyan]")


@cli.command()
@click.argument("degree")
@click.option("--database-url", help="Override DATABASE_URL")
def search(degree: str, database_url: str | None) -> None:
    """Search universities offering DEGREE.

    Example:
        $ uniscout search "Computer Science"
    """
    settings = get_settings()

    async def run() -> SearchOutcome:
        connection, cache = await _open_cache(database_url, require_schema=False)
        provider = TavilySearchAdapter(
            TavilyConfig.from_settings(settings.search_provider)
        )
        try:
            use_case = SearchUniversitiesUseCase(cache=cache, provider=provider)
            return await use_case.execute(degree)
        finally:
            await provider.close()
            await connection.close()

    try:
        DegreeQuery.parse(degree)
        settings.validate_required()
        outcome = asyncio.run(run())
    except QueryValidationError as e:
        console.print(f"[red]Invalid degree: {e.message}[/red]")
        sys.exit(2)
    except FetchError as e:
        console.print(f"[red]Search provider error: {e.reason}[/red]")
        sys.exit(1)
    except ConfigurationError as e:
        console.print(f"[red]Configuration error: {e}[/red]")
        sys.exit(1)
    except UniScoutException as e:
        console.print(f"[red]{e.message}[/red]")
        sys.exit(1)
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(130)
    except Exception as e:
        logger.exception("degree_search_failed", degree=degree)
        console.print(f"[red]Search failed: {e}[/red]")
        sys.exit(1)

    console.print(format_search_outcome(outcome))


if __name__ == "__main__":
    cli()
