"""Value objects produced by page queries.

A Link is what a step gets back from ``page.find_links()``. It keeps both
the raw ``href`` attribute, exactly as written in the markup, and the URL
resolved against the page it was found on.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from shirtscrape.data_types import Request


@dataclass(frozen=True)
class Link:
    """Represents an HTML <a> element with its href and text.

    Link is a pure value object; it performs no I/O.

    Attributes:
        url: Resolved absolute URL from the href attribute.
        href: The href attribute exactly as it appears in the page.
        text: Visible text content of the link.
        selector: The selector that found this link.
    """

    url: str
    href: str
    text: str
    selector: str

    def follow(
        self,
        continuation: Any = "",
        accumulated_data: dict[str, Any] | None = None,
    ) -> Request:
        """Follow the link as a request.

        Args:
            continuation: Step method (or its name) that should parse the page.
            accumulated_data: Values to carry to that step.

        Returns:
            A GET Request for the link's resolved URL.
        """
        from shirtscrape.data_types import (
            HttpMethod,
            HTTPRequestParams,
            Request,
        )

        return Request(
            request=HTTPRequestParams(url=self.url, method=HttpMethod.GET),
            continuation=continuation,
            accumulated_data=accumulated_data or {},
        )


@dataclass(frozen=True)
class ImageRef:
    """The attributes of an <img> element that the shop pages carry.

    Attributes:
        src: The src attribute as written (may be relative).
        alt: The alt text.
    """

    src: str
    alt: str
