# src/rhjobs/cli.py
"""
Command-line interface for the Robert Half harvester.

Commands:
- scrape  search the job board and append records to the dataset
- export  turn a dataset file into a CSV
"""

from dotenv import load_dotenv
load_dotenv(override=False)  # picks up RH_* settings from a .env in the project root

import json
import logging
from functools import partial
from pathlib import Path
from typing import Optional

import typer

from rhjobs.clients import roberthalf
from rhjobs.config import ConfigError, load_settings
from rhjobs.io.dataset import DATASET_FILENAME, JsonlDataset, export_csv
from rhjobs.pipeline.run import DETAIL_WORKERS, run_search
from rhjobs.pipeline.sources import default_sources

logger = logging.getLogger("rhjobs")

app = typer.Typer(help="Robert Half job harvester")


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command()
def scrape(
    keyword: Optional[str] = typer.Option(None, help="Search keywords"),
    location: Optional[str] = typer.Option(None, help="City, state or ZIP"),
    specialization: Optional[str] = typer.Option(None, help="Line-of-business id"),
    job_type: Optional[str] = typer.Option(None, "--job-type", help="Employment type"),
    remote: Optional[str] = typer.Option(None, help="Any, Yes or No"),
    results_wanted: Optional[str] = typer.Option(None, "--results-wanted", help="Stop after this many records"),
    max_pages: Optional[str] = typer.Option(None, "--max-pages", help="Never visit more pages than this"),
    details: Optional[bool] = typer.Option(None, "--details/--no-details", help="Fetch each job's detail page"),
    proxy: Optional[str] = typer.Option(None, help="Proxy URL passed to the HTTP client"),
    output_dir: Optional[Path] = typer.Option(None, "--output-dir", help="Where dataset.jsonl is written"),
    input_file: Optional[Path] = typer.Option(None, "--input", help="JSON input file (Apify-style keys)"),
    skip_api_after_auth: bool = typer.Option(
        False, "--skip-api-after-auth", help="Stop calling the API once it asks for auth"
    ),
    workers: int = typer.Option(DETAIL_WORKERS, help="Concurrent detail-page fetches"),
    log_level: str = typer.Option("INFO", "--log-level"),
):
    """
    Search roberthalf.com: API first, HTML fallback, deduped, budgeted.
    """
    _setup_logging(log_level)
    try:
        settings = load_settings(
            input_file,
            {
                "keyword": keyword,
                "location": location,
                "specialization": specialization,
                "job_type": job_type,
                "remote": remote,
                "results_wanted": results_wanted,
                "max_pages": max_pages,
                "collect_details": details,
                "proxy": proxy,
                "output_dir": output_dir,
            },
        )
    except ConfigError as e:
        logger.error("Invalid configuration: %s", e)
        raise typer.Exit(code=1)

    logger.info("Starting Roberthalf Jobs Scraper (API-first mode)")
    dataset = JsonlDataset(settings.output_dir / DATASET_FILENAME)
    sources = default_sources(settings.query, settings.budget.page_size, settings.proxy)

    fetch_detail = None
    if settings.collect_details:
        fetch_detail = partial(roberthalf.fetch_detail_page, proxy=settings.proxy)

    state = run_search(
        sources,
        settings.budget,
        dataset,
        fetch_detail=fetch_detail,
        detail_workers=workers,
        skip_api_after_auth=skip_api_after_auth,
    )
    typer.echo(json.dumps({
        "saved": state.saved,
        "pages": state.pages_visited,
        "unique_ids": len(state.seen),
        "dataset": str(dataset.path),
    }, indent=2))


@app.command()
def export(
    dataset: Path = typer.Argument(..., help="dataset.jsonl produced by `scrape`"),
    csv_path: Path = typer.Argument(..., help="CSV file to write"),
):
    """
    Convert a dataset to CSV (columns in output-record order).
    """
    if not dataset.exists():
        typer.echo(f"No dataset at {dataset}", err=True)
        raise typer.Exit(code=1)
    rows = export_csv(dataset, csv_path)
    typer.echo(f"Wrote {rows} rows to {csv_path}")


if __name__ == "__main__":
    app()
