"""Run configuration.

ScrapeSettings defaults reproduce the fixed behavior of a plain
``shirtscrape run``: scrape the live shop and write into ``data/``.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from shirtscrape.common.request_manager import DEFAULT_TIMEOUT
from shirtscrape.normalize import UrlStyle
from shirtscrape.output import DEFAULT_OUTPUT_DIR, ERROR_LOG_NAME

DEFAULT_RUN_TIMEOUT = 300.0


@dataclass(frozen=True)
class ScrapeSettings:
    """Configuration for a single scraping run.

    Attributes:
        base_url: Site to start from. None means the scraper's own site_url.
        output_dir: Directory receiving the data file and the error log.
        request_timeout: Per-request timeout in seconds (None = no timeout).
        run_timeout: Budget for the whole run in seconds (None = unbounded).
        url_style: How captured hrefs become record URLs.
        error_log_name: File name of the error log inside output_dir.
    """

    base_url: str | None = None
    output_dir: Path = DEFAULT_OUTPUT_DIR
    request_timeout: float | None = DEFAULT_TIMEOUT
    run_timeout: float | None = DEFAULT_RUN_TIMEOUT
    url_style: UrlStyle = UrlStyle.RESOLVE
    error_log_name: str = ERROR_LOG_NAME
