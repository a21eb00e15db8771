"""Synchronous driver implementation.

The driver walks a scraper: it pops a request off its queue, fetches it,
hands the response to the continuation method named on the request, and
sorts what the step yields into new requests or data.

- Requests are kept in a heapq priority queue. A counter breaks ties so that
  requests of equal priority are fetched in the order they were yielded.
- Data is passed to on_data. DeferredValidation data is confirmed first and
  failures go to on_invalid_data.
- Structural and transient errors go to on_structural_error and
  on_transient_exception. Each returns True to keep walking.
- A stop_event or a run_timeout ends the walk early.
"""

from __future__ import annotations

import heapq
import logging
import threading
import time
from collections.abc import Callable, Generator
from typing import Generic, TypeVar

from typing_extensions import assert_never

from shirtscrape.common.deferred_validation import (
    DeferredValidation,
)
from shirtscrape.common.exceptions import (
    DataFormatAssumptionException,
    RunTimeoutException,
    ScraperAssumptionException,
    TransientException,
)
from shirtscrape.common.request_manager import (
    DEFAULT_TIMEOUT,
    SyncRequestManager,
)
from shirtscrape.data_types import (
    BaseScraper,
    ParsedData,
    Request,
    Response,
    ScraperYield,
)

logger = logging.getLogger(__name__)

ScraperReturnDatatype = TypeVar("ScraperReturnDatatype")


class SyncDriver(Generic[ScraperReturnDatatype]):
    """Synchronous driver for running scrapers.

    Example usage::

        records = []
        driver = SyncDriver(scraper, on_data=records.append)
        driver.run()
    """

    def __init__(
        self,
        scraper: BaseScraper[ScraperReturnDatatype],
        request_manager: SyncRequestManager | None = None,
        on_data: Callable[[ScraperReturnDatatype], None] | None = None,
        on_structural_error: Callable[[ScraperAssumptionException], bool]
        | None = None,
        on_invalid_data: Callable[[DeferredValidation], None] | None = None,
        on_transient_exception: Callable[[TransientException], bool]
        | None = None,
        stop_event: threading.Event | None = None,
        request_timeout: float | None = DEFAULT_TIMEOUT,
        run_timeout: float | None = None,
    ) -> None:
        """Initialize the driver.

        Args:
            scraper: Scraper instance with continuation methods.
            request_manager: SyncRequestManager for handling HTTP requests.
                If None, one is created with ``request_timeout`` and the
                scraper's User-Agent, and closed when the run ends.
            on_data: Optional callback invoked with the unwrapped data each
                time a step yields ParsedData.
            on_structural_error: Optional callback invoked when a step raises
                ScraperAssumptionException. Return True to continue scraping,
                False to stop. If not provided, the exception propagates.
            on_invalid_data: Optional callback invoked when deferred data
                fails validation. If not provided, the validation exception
                propagates.
            on_transient_exception: Optional callback invoked when fetching a
                request raises TransientException. Return True to continue,
                False to stop. If not provided, the exception propagates.
                Also receives RunTimeoutException when run_timeout elapses.
            stop_event: Optional threading.Event for graceful shutdown. When
                set, the driver stops after the current request.
            request_timeout: Per-request timeout for the default request
                manager.
            run_timeout: Overall budget for the run in seconds, or None.
        """
        self.scraper = scraper
        # Each entry is (priority, counter, request) for stable FIFO ordering
        self.request_queue: list[tuple[int, int, Request]] = []
        self._queue_counter = 0

        if request_manager is not None:
            self.request_manager = request_manager
            self._owns_request_manager = False
        else:
            self.request_manager = SyncRequestManager(
                timeout=request_timeout,
                headers={"User-Agent": scraper.user_agent},
            )
            self._owns_request_manager = True

        self.on_data = on_data
        self.on_structural_error = on_structural_error
        self.on_invalid_data = on_invalid_data
        self.on_transient_exception = on_transient_exception
        self.stop_event = stop_event
        self.run_timeout = run_timeout

    def _push(self, request: Request) -> None:
        heapq.heappush(
            self.request_queue,
            (request.priority, self._queue_counter, request),
        )
        self._queue_counter += 1

    def run(self) -> None:
        """Run the scraper starting from the scraper's entry point.

        Data is passed to the on_data callback as it is yielded.
        """
        deadline = (
            time.monotonic() + self.run_timeout
            if self.run_timeout is not None
            else None
        )

        try:
            self.request_queue = []
            for entry_request in self.scraper.get_entry():
                self._push(entry_request)

            while self.request_queue:
                if self.stop_event and self.stop_event.is_set():
                    logger.info("Stop event set, ending run early")
                    break

                if deadline is not None and time.monotonic() >= deadline:
                    timeout_error = RunTimeoutException(
                        timeout_seconds=self.run_timeout or 0.0,
                        pending_requests=len(self.request_queue),
                    )
                    if self.on_transient_exception:
                        self.on_transient_exception(timeout_error)
                        break
                    raise timeout_error

                _priority, _counter, request = heapq.heappop(
                    self.request_queue
                )

                try:
                    response = self.resolve_request(request)
                except TransientException as e:
                    if self.on_transient_exception:
                        if not self.on_transient_exception(e):
                            return
                        continue
                    raise

                continuation_name = (
                    request.continuation
                    if isinstance(request.continuation, str)
                    else request.continuation.__name__
                )
                continuation_method = self.scraper.get_continuation(
                    continuation_name
                )

                try:
                    self._process_generator(
                        continuation_method(response), response
                    )
                except ScraperAssumptionException as e:
                    if not self.on_structural_error:
                        raise
                    if not self.on_structural_error(e):
                        return
        finally:
            if self._owns_request_manager:
                self.request_manager.close()

    def enqueue_request(
        self, new_request: Request, context: Response | Request
    ) -> None:
        """Resolve a yielded request against its context and queue it.

        Args:
            new_request: The new request to enqueue.
            context: Response or originating request for URL resolution.
        """
        self._push(new_request.resolve_from(context))

    def resolve_request(self, request: Request) -> Response:
        """Fetch a Request and return the Response.

        Raises:
            TransientException: If the fetch fails.
        """
        return self.request_manager.resolve_request(request)

    def handle_data(self, data: ScraperReturnDatatype) -> None:
        if isinstance(data, DeferredValidation):
            try:
                validated_data: ScraperReturnDatatype = data.confirm()
            except DataFormatAssumptionException:
                if self.on_invalid_data:
                    self.on_invalid_data(data)
                    return
                raise
            if self.on_data:
                self.on_data(validated_data)
        elif self.on_data:
            self.on_data(data)

    def _process_generator(
        self,
        gen: Generator[ScraperYield, bool | None, None],
        response: Response,
    ) -> None:
        """Process generator yields, enqueueing requests and handling data.

        Items yielded before a structural error are kept; the error itself
        propagates to run().
        """
        for item in gen:
            match item:
                case ParsedData():
                    self.handle_data(item.unwrap())
                case Request():
                    self.enqueue_request(item, response)
                case None:
                    pass
                case _:
                    assert_never(item)
