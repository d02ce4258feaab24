"""LuseVarsel CLI — sea lice risk scoring for aquaculture sites.

Commands:
  refresh   — acquire sites and vessels, print the riskiest sites
  regions   — per-region site count and average score
  explain   — rule-by-rule breakdown of one site's scores
  correct   — show where a raw coordinate is moved to
  serve     — run the HTTP API
"""
from __future__ import annotations

import asyncio
import logging

import typer
from rich.console import Console
from rich.table import Table


app = typer.Typer(
    name="lusevarsel",
    help="Sea lice and disease risk scoring for aquaculture sites.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)
console = Console()

_LEVEL_STYLES = {
    "critical": "bold red",
    "high": "dark_orange",
    "medium": "yellow",
    "low": "green",
}


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging")):
    from lusevarsel.config import settings

    logging.basicConfig(level="DEBUG" if verbose else settings.LOG_LEVEL)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command("refresh")
def refresh(
    limit: int = typer.Option(20, "--limit", "-n", help="Rows to show"),
):
    """Acquire the site and vessel feeds and show the riskiest sites."""
    from lusevarsel.modules.risk_scoring import assess_site

    sites, vessels = _acquire()
    if not sites:
        console.print("[yellow]No sites available[/yellow]")
        return

    table = Table(title=f"Riskiest sites ({len(sites)} total, {len(vessels)} vessels)")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Region", justify="right")
    table.add_column("Position")
    table.add_column("Now", justify="right")
    table.add_column("Predictive", justify="right")
    table.add_column("1–2 weeks", justify="right")

    for site in sites[:limit]:
        a = assess_site(site, sites, vessels)
        table.add_row(
            a.site_id,
            a.name,
            str(a.region_id),
            f"{a.lat:.4f}, {a.lng:.4f}",
            _styled(a.current.score, a.current.level.value),
            _styled(a.predictive.score, a.predictive.level.value),
            _styled(a.future.score, a.future.level.value),
        )
    console.print(table)


@app.command("regions")
def regions():
    """Site count and averages per production region."""
    from lusevarsel.modules.region_summary import summarize_regions

    sites, _ = _acquire()
    summaries = summarize_regions(sites)

    table = Table(title="Production regions")
    table.add_column("Region", justify="right", style="cyan")
    table.add_column("Sites", justify="right")
    table.add_column("Avg score", justify="right")
    table.add_column("Critical", justify="right")
    table.add_column("Avg lice", justify="right")
    table.add_column("Avg temp °C", justify="right")
    for s in summaries:
        table.add_row(
            str(s.region_id),
            str(s.site_count),
            f"{s.average_score:.2f}",
            str(s.critical_count),
            f"{s.average_parasite_load:.3f}",
            f"{s.average_water_temp:.1f}" if s.average_water_temp is not None else "—",
        )
    console.print(table)


@app.command("explain")
def explain(site_id: str = typer.Argument(..., help="Locality id, e.g. 12345")):
    """Show which rules contributed to a site's scores."""
    from lusevarsel.modules.risk_scoring import (
        compute_current_breakdown,
        compute_future_breakdown,
        compute_predictive_breakdown,
    )

    sites, vessels = _acquire()
    site = next((s for s in sites if s.id == site_id), None)
    if site is None:
        console.print(f"[red]Site {site_id} not found[/red]")
        raise typer.Exit(1)

    console.print(f"\n[bold cyan]{site.name}[/bold cyan] ({site.id}), region {site.region_id}")
    console.print(f"  Position: {site.lat:.4f}, {site.lng:.4f}")
    for label, (score, breakdown) in (
        ("Current", compute_current_breakdown(site)),
        ("Predictive", compute_predictive_breakdown(site, sites, vessels)),
        ("Future", compute_future_breakdown(site, sites, vessels)),
    ):
        console.print(f"\n[bold]{label}: {score}[/bold]")
        for rule, points in breakdown.items():
            if rule.startswith("_"):
                continue
            console.print(f"  {rule:<30} {points:+g}")


@app.command("correct")
def correct(
    lat: float = typer.Argument(..., help="Raw latitude"),
    lng: float = typer.Argument(..., help="Raw longitude"),
):
    """Show the seaward correction applied to a raw coordinate."""
    from lusevarsel.config import settings
    from lusevarsel.modules.position_corrector import PositionCorrector
    from lusevarsel.utils.geo import haversine_meters

    corrector = PositionCorrector(settings.CORRECTOR_SEED)
    try:
        new_lat, new_lng = corrector.correct(lat, lng)
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1)
    bearing, _ = corrector.offset_for(lat, lng)
    distance = haversine_meters(lat, lng, new_lat, new_lng)
    console.print(f"({lat:.5f}, {lng:.5f}) → ({new_lat:.5f}, {new_lng:.5f})")
    console.print(f"  bearing {bearing:.0f}°, {distance:.0f} m")


@app.command("serve")
def serve(
    host: str = typer.Option("127.0.0.1", "--host"),
    port: int = typer.Option(8000, "--port"),
):
    """Run the HTTP API."""
    import uvicorn

    console.print(f"[green]Serving on http://{host}:{port}[/green]")
    uvicorn.run("lusevarsel.main:app", host=host, port=port)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _styled(score: int, level: str) -> str:
    style = _LEVEL_STYLES.get(level, "")
    return f"[{style}]{score}[/{style}]" if style else str(score)


def _acquire():
    """Initialise the cache table and run both acquisitions."""
    from lusevarsel.database import SessionLocal, init_db
    from lusevarsel.modules.acquisition import SiteAcquirer
    from lusevarsel.modules.site_cache import SqlCacheStore

    init_db()
    acquirer = SiteAcquirer(SqlCacheStore(SessionLocal))
    with console.status("[bold]Fetching sites and vessels..."):
        return asyncio.run(acquirer.acquire_all())


if __name__ == "__main__":
    app()
