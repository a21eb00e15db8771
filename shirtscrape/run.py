"""One end-to-end scraping run.

ScrapeRun wires the driver to the rest of the pipeline::

    SyncDriver -> normalize() -> records -> CSV data file
         \\-> errors -> error log

Errors never abort the run. Each one is recorded as a RunError, appended
to the error log, and the driver is told to carry on. The data file is only
written when the run finished without a single error.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path

from shirtscrape.common.deferred_validation import (
    DeferredValidation,
)
from shirtscrape.common.exceptions import (
    DataFormatAssumptionException,
    OutputWriteException,
    RunTimeoutException,
    ScraperAssumptionException,
    TransientException,
)
from shirtscrape.common.request_manager import SyncRequestManager
from shirtscrape.data_types import BaseScraper
from shirtscrape.driver.callbacks import combine_callbacks, log_data
from shirtscrape.driver.sync_driver import SyncDriver
from shirtscrape.models import ProductRecord, RawProduct
from shirtscrape.normalize import normalize
from shirtscrape.output import (
    ErrorLog,
    data_file_path,
    ensure_output_dir,
    error_log_path,
    records_to_csv,
    write_data_file,
)
from shirtscrape.scrapers import Shirts4MikeScraper
from shirtscrape.settings import ScrapeSettings

logger = logging.getLogger(__name__)

RERUN_MESSAGE = (
    "There was an error when writing the output file, "
    "please execute script again"
)


class RunState(Enum):
    """Lifecycle of a ScrapeRun.

    NOT_STARTED -> RUNNING -> (SUCCESS | ERROR) -> TERMINATED
    """

    NOT_STARTED = "not_started"
    RUNNING = "running"
    SUCCESS = "success"
    ERROR = "error"
    TERMINATED = "terminated"


class ErrorKind(Enum):
    NAVIGATION = "navigation"
    EXTRACTION = "extraction"
    TIMEOUT = "timeout"
    WRITE = "write"


@dataclass(frozen=True)
class RunError:
    """One failure met during a run.

    Attributes:
        kind: Which stage failed.
        message: The error text, as written to the error log.
        url: The page involved, when there is one.
    """

    kind: ErrorKind
    message: str
    url: str = ""


@dataclass
class RunOutcome:
    """What a run produced.

    Attributes:
        status: RunState.SUCCESS or RunState.ERROR.
        records: Normalized records, in the order they were scraped.
        errors: Every failure met, in order.
        data_file: The CSV written, or None if it was withheld.
        started_at: UTC start time.
        finished_at: UTC end time.
    """

    status: RunState
    records: list[ProductRecord] = field(default_factory=list)
    errors: list[RunError] = field(default_factory=list)
    data_file: Path | None = None
    started_at: datetime | None = None
    finished_at: datetime | None = None

    @property
    def had_error(self) -> bool:
        return bool(self.errors)


class ScrapeRun:
    """A single-use scraping run.

    Example::

        outcome = ScrapeRun(ScrapeSettings(output_dir=Path("data"))).run()
        if outcome.had_error:
            print(f"{len(outcome.errors)} error(s), see the error log")
    """

    def __init__(
        self,
        settings: ScrapeSettings | None = None,
        scraper: BaseScraper[RawProduct] | None = None,
        request_manager: SyncRequestManager | None = None,
    ) -> None:
        """Set up a run.

        Args:
            settings: Run configuration; defaults reproduce a plain run.
            scraper: Scraper to walk. Defaults to Shirts4MikeScraper
                pointed at ``settings.base_url``.
            request_manager: Optional request manager shared with the caller.
                When None, the driver builds and closes its own.
        """
        self.settings = settings or ScrapeSettings()
        self.scraper = scraper or Shirts4MikeScraper(self.settings.base_url)
        self.request_manager = request_manager
        self.state = RunState.NOT_STARTED
        self.records: list[ProductRecord] = []
        self.errors: list[RunError] = []
        self.error_log = ErrorLog(
            error_log_path(
                self.settings.output_dir, self.settings.error_log_name
            )
        )

    def run(self) -> RunOutcome:
        """Walk the site, then write the data file if nothing went wrong.

        Raises:
            RuntimeError: If this run has already been started.
        """
        if self.state is not RunState.NOT_STARTED:
            raise RuntimeError(f"Run already {self.state.value}")

        self.state = RunState.RUNNING
        started_at = datetime.now(timezone.utc)
        logger.info("Scraping process......... START")

        data_file: Path | None = None
        try:
            ensure_output_dir(self.settings.output_dir)
        except OSError as e:
            # Without the directory the error log can't be written either
            logger.error(f"Could not create {self.settings.output_dir}: {e}")
            self.errors.append(RunError(ErrorKind.WRITE, str(e)))
        else:
            self._walk()
            if self.errors:
                logger.warning(
                    "An error has happened during the execution. "
                    "Please restart the process"
                )
            else:
                data_file = self._write_data_file()

        status = RunState.ERROR if self.errors else RunState.SUCCESS
        self.state = RunState.TERMINATED
        return RunOutcome(
            status=status,
            records=list(self.records),
            errors=list(self.errors),
            data_file=data_file,
            started_at=started_at,
            finished_at=datetime.now(timezone.utc),
        )

    def _walk(self) -> None:
        driver: SyncDriver[RawProduct] = SyncDriver(
            self.scraper,
            request_manager=self.request_manager,
            on_data=combine_callbacks(log_data(), self._accumulate),
            on_structural_error=self._on_structural_error,
            on_invalid_data=self._on_invalid_data,
            on_transient_exception=self._on_transient_exception,
            request_timeout=self.settings.request_timeout,
            run_timeout=self.settings.run_timeout,
        )
        driver.run()

    def _write_data_file(self) -> Path | None:
        path = data_file_path(self.settings.output_dir)
        try:
            write_data_file(records_to_csv(self.records), path)
        except OutputWriteException as e:
            self._record_error(ErrorKind.WRITE, e.message, e.path)
            logger.error(RERUN_MESSAGE)
            return None
        logger.info(
            f"Wrote {len(self.records)} record(s) to '{path}'. "
            "Scraping process......... END"
        )
        return path

    # -- driver callbacks ---------------------------------------------

    def _accumulate(self, product: RawProduct) -> None:
        self.records.append(
            normalize(product, self.scraper.base_url, self.settings.url_style)
        )

    def _record_error(self, kind: ErrorKind, message: str, url: str = "") -> None:
        logger.error(f"{kind.value} error: {message}")
        self.errors.append(RunError(kind=kind, message=message, url=url))
        self.error_log.append(message)

    def _on_structural_error(self, exc: ScraperAssumptionException) -> bool:
        self._record_error(ErrorKind.EXTRACTION, str(exc), exc.request_url)
        return True

    def _on_invalid_data(self, data: DeferredValidation) -> None:
        try:
            data.confirm()
        except DataFormatAssumptionException as e:
            self._record_error(ErrorKind.EXTRACTION, str(e), e.request_url)

    def _on_transient_exception(self, exc: TransientException) -> bool:
        if isinstance(exc, RunTimeoutException):
            self._record_error(ErrorKind.TIMEOUT, exc.message)
            return False
        self._record_error(
            ErrorKind.NAVIGATION, str(exc), getattr(exc, "url", "")
        )
        return True
