"""Callback functions for the driver's on_data parameter.

Example::

    from shirtscrape.driver.callbacks import combine_callbacks, log_data
    from shirtscrape.driver.sync_driver import SyncDriver

    products = []
    driver = SyncDriver(
        scraper, on_data=combine_callbacks(products.append, log_data())
    )
    driver.run()
"""

import logging
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)


def log_data(
    level: int = logging.DEBUG, prefix: str = "Scraped"
) -> Callable[[Any], None]:
    """Create a callback that logs each data item.

    Pydantic models are logged as their field dict so the log line stays
    readable.

    Args:
        level: Logging level for the message.
        prefix: Text placed before each item.

    Returns:
        A callback function that can be passed to driver's on_data parameter.
    """

    def callback(data: Any) -> None:
        payload = data.model_dump() if hasattr(data, "model_dump") else data
        logger.log(level, f"{prefix}: {payload}")

    return callback


def combine_callbacks(
    *callbacks: Callable[[Any], None],
) -> Callable[[Any], None]:
    """Combine multiple callbacks into a single callback.

    The callbacks run in the order given. An exception in one of them
    propagates and the remaining callbacks are not called.

    Returns:
        A single callback function that invokes all provided callbacks.
    """

    def callback(data: Any) -> None:
        for cb in callbacks:
            cb(data)

    return callback
