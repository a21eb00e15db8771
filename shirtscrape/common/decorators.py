"""The @step decorator.

A step declares the values it wants by parameter name and the decorator
supplies them from the Response:

- response: the Response itself
- request: the Request that was fetched
- accumulated_data: the fetched Request's accumulated_data
- page: the body parsed into an LxmlPageElement

The page is only parsed if a step asks for it. Requests yielded with a
method as continuation are rewritten to carry the method's name.
"""

import inspect
from collections.abc import Callable, Generator
from functools import wraps
from typing import Any

from lxml import etree
from lxml import html as lxml_html

from shirtscrape.common.checked_html import CheckedHtmlElement
from shirtscrape.common.exceptions import (
    ScraperAssumptionException,
)
from shirtscrape.common.lxml_page_element import LxmlPageElement
from shirtscrape.data_types import (
    Request,
    Response,
    ScraperYield,
)


def _parse_page(response: Response) -> LxmlPageElement:
    """Parse the body, letting lxml detect the charset from the bytes.

    Raises:
        ScraperAssumptionException: If the body is not parseable HTML.
    """
    try:
        root = lxml_html.fromstring(response.content)
    except (etree.ParserError, etree.XMLSyntaxError) as e:
        raise ScraperAssumptionException(
            f"Failed to parse HTML: {e}",
            request_url=response.url,
            context={"error": str(e)},
        ) from e
    return LxmlPageElement(CheckedHtmlElement(root, response.url), response.url)


def _name_continuation(yielded: Any) -> Any:
    if isinstance(yielded, Request) and not isinstance(
        yielded.continuation, str
    ):
        object.__setattr__(
            yielded, "continuation", yielded.continuation.__name__
        )
    return yielded


def _injected_values(wanted: set[str], response: Response) -> dict[str, Any]:
    values: dict[str, Any] = {}
    if "response" in wanted:
        values["response"] = response
    if "request" in wanted:
        values["request"] = response.request
    if "accumulated_data" in wanted:
        values["accumulated_data"] = response.request.accumulated_data
    if "page" in wanted:
        values["page"] = _parse_page(response)
    return values


def step(
    func: Callable[..., Generator[ScraperYield, Any, None]],
) -> Callable[..., Generator[ScraperYield, Any, None]]:
    """Mark a scraper method as a step and inject its arguments.

    Example::

        @step
        def parse_category(self, page: LxmlPageElement):
            for link in page.find_links(".products li a", "product links"):
                yield link.follow(
                    self.parse_product, accumulated_data={"href": link.href}
                )
    """
    wanted = set(inspect.signature(func).parameters) - {"self"}

    @wraps(func)
    def wrapper(
        scraper_self: Any, response: Response, *args: Any, **kwargs: Any
    ) -> Generator[ScraperYield, Any, None]:
        injected = _injected_values(wanted, response)
        for yielded in func(scraper_self, *args, **injected, **kwargs):
            yield _name_continuation(yielded)

    wrapper._is_step = True  # type: ignore[attr-defined]
    return wrapper
