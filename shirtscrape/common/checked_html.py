"""Count-checked queries over parsed HTML.

Every query states how many matches it expects. When a shop template
changes, the first query that no longer fits raises
HTMLStructuralAssumptionException naming the selector and the page, instead
of the run quietly skipping products.
"""

from __future__ import annotations

from cssselect import SelectorError
from lxml.html import HtmlElement

from shirtscrape.common.exceptions import (
    HTMLStructuralAssumptionException,
)


class CheckedHtmlElement:
    """An lxml element whose queries validate their match counts.

    Attribute access not defined here falls through to the wrapped element,
    so ``text_content()``, ``get()`` and ``tag`` work as usual.

    Example::

        tree = CheckedHtmlElement(lxml.html.fromstring(html), url)
        (price,) = tree.checked_css("span.price", "price", max_count=1)
        (image,) = tree.checked_xpath("//img", "images", max_count=1)
    """

    def __init__(self, element: HtmlElement, request_url: str = "") -> None:
        self._element = element
        self._request_url = request_url

    @property
    def request_url(self) -> str:
        return self._request_url

    def _check_count(
        self,
        selector: str,
        selector_type: str,
        description: str,
        found: int,
        min_count: int,
        max_count: int | None,
    ) -> None:
        too_few = found < min_count
        too_many = max_count is not None and found > max_count
        if too_few or too_many:
            raise HTMLStructuralAssumptionException(
                selector=selector,
                selector_type=selector_type,
                description=description,
                expected_min=min_count,
                expected_max=max_count,
                actual_count=found,
                request_url=self._request_url,
            )

    def _wrap(self, elements: list[HtmlElement]) -> list[CheckedHtmlElement]:
        return [CheckedHtmlElement(el, self._request_url) for el in elements]

    def checked_xpath(
        self,
        xpath: str,
        description: str,
        min_count: int = 1,
        max_count: int | None = None,
    ) -> list[CheckedHtmlElement]:
        """Run an XPath query and check how many elements it matched.

        Non-element results (attribute values, text nodes) are not counted.

        Raises:
            HTMLStructuralAssumptionException: If the number of elements
                falls outside ``[min_count, max_count]``.
        """
        results = self._element.xpath(xpath)
        elements = [r for r in results if isinstance(r, HtmlElement)]
        self._check_count(
            xpath, "xpath", description, len(elements), min_count, max_count
        )
        return self._wrap(elements)

    def checked_css(
        self,
        selector: str,
        description: str,
        min_count: int = 1,
        max_count: int | None = None,
    ) -> list[CheckedHtmlElement]:
        """Run a CSS selector and check how many elements it matched.

        A selector cssselect cannot parse is reported the same way as one
        that matched nothing.

        Raises:
            HTMLStructuralAssumptionException: On a count mismatch or an
                unparseable selector.
        """
        try:
            elements = self._element.cssselect(selector)
        except SelectorError as e:
            raise HTMLStructuralAssumptionException(
                selector=selector,
                selector_type="css",
                description=description,
                expected_min=min_count,
                expected_max=max_count,
                actual_count=0,
                request_url=self._request_url,
            ) from e

        self._check_count(
            selector, "css", description, len(elements), min_count, max_count
        )
        return self._wrap(elements)

    def __getattr__(self, name: str):
        return getattr(self._element, name)
