"""Test utilities for driver and run tests."""

import logging
from collections.abc import Callable
from typing import Any

from shirtscrape.common.exceptions import (
    HTMLStructuralAssumptionException,
    ScraperAssumptionException,
    TransientException,
)

logger = logging.getLogger(__name__)


def collect_results() -> tuple[Callable[[Any], None], list[Any]]:
    """Create a callback that collects results in a list.

    Returns:
        A tuple of (callback_function, results_list).
        The results list is shared and can be inspected after driver.run().

    Example:
        callback, results = collect_results()
        driver = SyncDriver(scraper, on_data=callback)
        driver.run()
        assert len(results) > 0
    """
    results: list[Any] = []

    def callback(data: Any) -> None:
        results.append(data)

    return callback, results


def collect_errors(
    keep_going: bool = True,
) -> tuple[Callable[[Exception], bool], list[Exception]]:
    """Create an error callback that records every exception it receives.

    Usable as on_structural_error or on_transient_exception.

    Args:
        keep_going: Value the callback returns to the driver.
    """
    errors: list[Exception] = []

    def callback(exc: Exception) -> bool:
        errors.append(exc)
        return keep_going

    return callback, errors


def log_structural_error_and_stop(
    exception: ScraperAssumptionException,
) -> bool:
    """Log structural error and return False to stop scraping."""
    extra = (
        {
            "selector": exception.selector,
            "actual_count": exception.actual_count,
        }
        if isinstance(exception, HTMLStructuralAssumptionException)
        else {}
    )
    logger.error(
        f"Structural assumption failed: {exception.message}",
        extra=extra,
    )
    return False


def log_transient_and_stop(exception: TransientException) -> bool:
    logger.error(f"Transient failure: {exception}")
    return False
