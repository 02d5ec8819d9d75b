import logging
from typing import Optional

import typer
from sqlalchemy import create_engine

from weatherblock.config import load_config
from weatherblock.domain.units import MeasurementSystem
from weatherblock.errors import CacheError, FetchError
from weatherblock.infra.db.tables import metadata
from weatherblock.infra.db.weather_cache_repository import SqlWeatherCache
from weatherblock.services.block import BlockAttributes, register, render_block

app = typer.Typer(help="Operate the weather block")


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging")):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _require_block():
    handle = register(load_config())
    if handle is None:
        typer.echo("WEATHERBLOCK_API_KEY is not set", err=True)
        raise typer.Exit(code=1)
    return handle


def _require_database_url(database_url: Optional[str]) -> str:
    database_url = database_url or load_config().database_url
    if not database_url:
        typer.echo("WEATHERBLOCK_DATABASE_URL is required", err=True)
        raise typer.Exit(code=1)
    return database_url


@app.command("render")
def cli_render(
    location: str = typer.Option(..., help="City name or post code"),
    unit: MeasurementSystem = typer.Option(MeasurementSystem.IMPERIAL, help="imperial or metric"),
    hourly: bool = typer.Option(False, help="Include the hourly forecast"),
):
    handle = _require_block()
    attributes = BlockAttributes(location=location, measurementunit=unit, show_hourly=hourly)
    typer.echo(render_block(handle, attributes))


@app.command("fetch")
def cli_fetch(
    location: str = typer.Option(..., help="City name or post code"),
    refresh: bool = typer.Option(False, help="Bypass the cache"),
):
    handle = _require_block()
    if refresh:
        try:
            handle.fetcher.cache.delete(handle.fetcher.key_for(location))
        except CacheError as exc:
            typer.echo(f"Warning: {exc}", err=True)
    try:
        typer.echo(handle.fetcher.fetch_body(location))
    except FetchError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=2)


@app.command("init-db")
def cli_init_db(database_url: Optional[str] = typer.Option(None, help="Database URL")):
    engine = create_engine(_require_database_url(database_url), future=True)
    metadata.create_all(engine)
    typer.echo("weather_cache table ready")


@app.command("purge-cache")
def cli_purge_cache(database_url: Optional[str] = typer.Option(None, help="Database URL")):
    config = load_config()
    engine = create_engine(_require_database_url(database_url), future=True)
    metadata.create_all(engine)
    try:
        removed = SqlWeatherCache(engine, ttl_seconds=config.cache_ttl_seconds).purge_expired()
    except CacheError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Purged expired entries: {removed}")


if __name__ == "__main__":
    app()
