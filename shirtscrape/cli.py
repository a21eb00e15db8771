"""shirtscrape CLI: scrape the shop into a dated CSV.

Usage:
    shirtscrape run                          # Scrape into data/<Y-M-D>.csv
    shirtscrape run --output-dir out -v      # Other directory, debug logging
    shirtscrape run --url-style concat       # Legacy base + "/" + href URLs
    shirtscrape steps                        # List the scraper's steps
"""

from __future__ import annotations

import logging
from pathlib import Path

import click

from shirtscrape.common.request_manager import DEFAULT_TIMEOUT
from shirtscrape.normalize import UrlStyle
from shirtscrape.output import DEFAULT_OUTPUT_DIR
from shirtscrape.run import ScrapeRun
from shirtscrape.scrapers import Shirts4MikeScraper
from shirtscrape.settings import DEFAULT_RUN_TIMEOUT, ScrapeSettings


@click.group()
@click.version_option(package_name="shirtscrape")
def cli() -> None:
    """shirtscrape: Shirts 4 Mike catalog scraper."""


@cli.command()
@click.option(
    "--base-url",
    default=None,
    help=f"Site to scrape. [default: {Shirts4MikeScraper.site_url}]",
)
@click.option(
    "--output-dir",
    type=click.Path(file_okay=False),
    default=str(DEFAULT_OUTPUT_DIR),
    show_default=True,
    help="Directory for the data file and the error log.",
)
@click.option(
    "--timeout",
    type=float,
    default=DEFAULT_TIMEOUT,
    show_default=True,
    help="Per-request timeout in seconds.",
)
@click.option(
    "--run-timeout",
    type=float,
    default=DEFAULT_RUN_TIMEOUT,
    show_default=True,
    help="Timeout for the whole run in seconds.",
)
@click.option(
    "--url-style",
    type=click.Choice([style.value for style in UrlStyle]),
    default=UrlStyle.RESOLVE.value,
    show_default=True,
    help="How product hrefs become the URL column.",
)
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging.")
def run(
    base_url: str | None,
    output_dir: str,
    timeout: float,
    run_timeout: float,
    url_style: str,
    verbose: bool,
) -> None:
    """Scrape every product into today's CSV data file.

    Errors are appended to the error log in the output directory and the
    data file is skipped for that run. The exit code is 0 either way.
    Error log lines are stamped with local time; the zone in parentheses
    is the abbreviation the system reports (e.g. CEST), not its long name.

    \b
    Examples:
        shirtscrape run
        shirtscrape run --base-url http://localhost:8080/ --output-dir /tmp/out
    """
    log_level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    settings = ScrapeSettings(
        base_url=base_url,
        output_dir=Path(output_dir),
        request_timeout=timeout,
        run_timeout=run_timeout,
        url_style=UrlStyle(url_style),
    )
    outcome = ScrapeRun(settings).run()

    click.echo(f"Records: {len(outcome.records)}")
    click.echo(f"Errors:  {len(outcome.errors)}")
    if outcome.data_file is not None:
        click.echo(f"Data file: {outcome.data_file}")
    else:
        error_log = settings.output_dir / settings.error_log_name
        click.echo(f"No data file written, see {error_log}")


@cli.command()
def steps() -> None:
    """List the scraper's step methods."""
    for name in Shirts4MikeScraper.list_steps():
        click.echo(f"  {name}")


def main() -> None:
    """Entry point for the ``shirtscrape`` console script."""
    cli()
