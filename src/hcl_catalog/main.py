from __future__ import annotations

import json
import logging
from typing import Optional

import typer
import uvicorn

from hcl_catalog.config import settings
from hcl_catalog.logic.os_normalizer import classify
from hcl_catalog.services.loader import load_catalog
from hcl_catalog.sync.provider import build_provider
from hcl_catalog.sync.service import SyncService

cli = typer.Typer(help="HCL Catalog CLI")


def _load():
    logging.basicConfig(level=getattr(logging, settings.logging.level.upper(), logging.INFO))
    provider = build_provider(settings.sheets, settings.google)
    return load_catalog(SyncService(provider=provider))


@cli.command()
def version() -> None:
    """Print runtime version."""
    typer.echo(f"{settings.app.name} {settings.app.version}")


@cli.command()
def serve(
    host: str = typer.Option("127.0.0.1", help="Host to bind"),
    port: int = typer.Option(8000, help="Port to bind"),
    reload: bool = typer.Option(False, help="Enable autoreload for local development"),
) -> None:
    """Run the HCL Catalog API server."""
    uvicorn.run(
        "hcl_catalog.api.main:app",
        host=host,
        port=port,
        reload=reload,
        app_dir="src",
    )


@cli.command()
def load() -> None:
    """Fetch all sheets once and print a catalog summary."""
    catalog = _load()
    typer.echo(json.dumps(catalog.summary(), ensure_ascii=False, indent=2))


@cli.command()
def search(
    keyword: str = typer.Argument("", help="Substring of model or brand"),
    os: Optional[str] = typer.Option(None, "--os", help="Exact OS label for the driver column"),
) -> None:
    """Search the catalog and print the driver status per product."""
    catalog = _load()
    target_os = os or catalog.default_os
    for product in catalog.filter(keyword):
        display, _ = catalog.driver_status(product, target_os)
        typer.echo(f"{product.type}\t{product.brand}\t{product.model}\tFW {product.fw}\t{target_os}: {display}")


@cli.command("classify")
def classify_label(label: str) -> None:
    """Show the family/version badge for an OS label."""
    info = classify(label)
    typer.echo(json.dumps({"family": info.family, "version_tag": info.version_tag, "badge": info.badge}))


if __name__ == "__main__":
    cli()
