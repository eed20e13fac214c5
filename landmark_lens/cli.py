"""Typer Admin CLI: site catalog management and one-shot recognition."""

import json
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from landmark_lens.ai.factory import get_signal_extractor
from landmark_lens.core.config import get_config
from landmark_lens.core.logging import setup_logging
from landmark_lens.models.entities import CulturalSite
from landmark_lens.recognition.patterns import REFERENCE_PATTERNS
from landmark_lens.recognition.service import RecognitionService
from landmark_lens.repository.site_repo import SiteRepository

app = typer.Typer(no_args_is_help=True)
site_app = typer.Typer(help="Add, remove, list, and seed cultural sites.")
app.add_typer(site_app, name="site")


@app.callback()
def main(
    log_level: str = typer.Option(None, "--log-level", help="Override log level from config"),
) -> None:
    setup_logging(log_level)


def _get_session_factory():
    from sqlalchemy import create_engine
    from sqlalchemy.orm import sessionmaker

    cfg = get_config()
    engine = create_engine(cfg.database_url, pool_pre_ping=True)
    return sessionmaker(engine, autocommit=False, autoflush=False, expire_on_commit=False)


@site_app.command("add")
def site_add(
    name: str = typer.Argument(..., help="Display name of the site"),
    city: str = typer.Argument(..., help="City"),
    country: str = typer.Argument(..., help="Country"),
    site_type: str = typer.Option("", "--type", help="Site type, e.g. cathedral"),
    keyword: list[str] = typer.Option([], "--keyword", "-k", help="Image keyword (repeatable)"),
    description: str = typer.Option("", "--description", help="Short description"),
) -> None:
    """Add a cultural site to the catalog."""
    site_repo = SiteRepository(_get_session_factory())
    try:
        site = site_repo.add_site(
            CulturalSite(
                name=name,
                location_city=city,
                location_country=country,
                site_type=site_type,
                description=description,
                image_keywords=list(keyword),
            )
        )
        typer.echo(f"Added site '{site.name}' with id {site.id}.")
    except ValueError as e:
        typer.secho(str(e), fg=typer.colors.RED)
        raise typer.Exit(1)


@site_app.command("remove")
def site_remove(
    site_id: int = typer.Argument(..., help="Site id to delete"),
) -> None:
    """Delete a site (refused while recognition history references it)."""
    site_repo = SiteRepository(_get_session_factory())
    try:
        deleted = site_repo.delete_site(site_id)
    except ValueError as e:
        typer.secho(str(e), fg=typer.colors.RED)
        raise typer.Exit(1)
    if not deleted:
        typer.secho(f"Site {site_id} not found.", fg=typer.colors.YELLOW)
        raise typer.Exit(1)
    typer.echo("Site deleted.")


@site_app.command("list")
def site_list(
    limit: int = typer.Option(50, "--limit", help="Maximum rows to show"),
) -> None:
    """List sites in a table (id, name, location, type, keywords)."""
    site_repo = SiteRepository(_get_session_factory())
    sites = site_repo.list_sites(limit=limit)
    if not sites:
        typer.echo("No sites in the catalog.")
        return
    table = Table(title=None)
    table.add_column("ID")
    table.add_column("Name")
    table.add_column("Location")
    table.add_column("Type")
    table.add_column("Keywords")
    for s in sites:
        location = ", ".join(p for p in (s.location_city, s.location_country) if p)
        table.add_row(str(s.id), s.name, location, s.site_type, ", ".join(s.image_keywords or []))
    Console().print(table)


@site_app.command("seed")
def site_seed() -> None:
    """Insert the built-in reference landmarks, skipping names already present."""
    site_repo = SiteRepository(_get_session_factory())
    added = 0
    for pattern in REFERENCE_PATTERNS:
        if site_repo.get_by_name(pattern.name) is not None:
            continue
        site_repo.add_site(
            CulturalSite(
                name=pattern.name,
                location_city=pattern.city,
                location_country=pattern.country,
                site_type=pattern.site_type,
                image_keywords=list(pattern.keywords),
            )
        )
        added += 1
    typer.secho(f"Seeded {added} site(s).", fg=typer.colors.GREEN)


@app.command("recognize")
def recognize(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Image file"),
    method: str = typer.Option(None, "--method", help="Heuristic analysis method: primary, secondary, tertiary"),
    as_json: bool = typer.Option(False, "--json", help="Print the full result as JSON"),
) -> None:
    """Recognize the landmark in an image file against the catalog."""
    cfg = get_config()
    try:
        extractor = get_signal_extractor(cfg.vision_backend, method=method, settings=cfg)
    except ValueError as e:
        typer.secho(str(e), fg=typer.colors.RED, err=True)
        raise typer.Exit(1)
    service = RecognitionService(
        extractor,
        SiteRepository(_get_session_factory()),
        catalog_limit=cfg.catalog_limit,
    )
    result = service.recognize(path.read_bytes())
    if as_json:
        typer.echo(json.dumps(result.model_dump(mode="json"), indent=2))
    else:
        color = typer.colors.GREEN if result.success else typer.colors.YELLOW
        typer.secho(result.message, fg=color)
        if result.site is not None:
            typer.echo(f"Site: {result.site.name} ({result.site.location}) id={result.site.id}")
        typer.echo(f"Confidence: {result.confidence:.2f}")
    if not result.success:
        raise typer.Exit(2)


if __name__ == "__main__":
    app()
