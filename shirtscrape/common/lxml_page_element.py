"""The ``page`` object handed to steps.

LxmlPageElement answers the questions the shop scraper asks of a page
(the links under a selector, the text of the price, the src and alt of the
picture) with every lookup going through CheckedHtmlElement's count checks.
"""

from __future__ import annotations

from urllib.parse import urljoin

from shirtscrape.common.checked_html import CheckedHtmlElement
from shirtscrape.common.exceptions import (
    HTMLStructuralAssumptionException,
)
from shirtscrape.common.page_element import ImageRef, Link


def _is_xpath(selector: str) -> bool:
    # ".nav a" is a CSS class selector, ".//a" is relative XPath
    return selector.startswith(("/", "./", "../", "("))


class LxmlPageElement:
    """A parsed page, or one element of it, plus the URL it came from.

    Selectors may be CSS or XPath; path-like ones (``//a``, ``./li``) run as
    XPath, everything else as CSS.
    """

    def __init__(self, element: CheckedHtmlElement, url: str = ""):
        self._element = element
        self._url = url

    @property
    def url(self) -> str:
        return self._url

    def query(
        self,
        selector: str,
        description: str,
        min_count: int = 1,
        max_count: int | None = None,
    ) -> list[LxmlPageElement]:
        """Elements matching *selector*, between min_count and max_count.

        Raises:
            HTMLStructuralAssumptionException: On a count mismatch.
        """
        if _is_xpath(selector):
            found = self._element.checked_xpath(
                selector, description, min_count, max_count
            )
        else:
            found = self._element.checked_css(
                selector, description, min_count, max_count
            )
        return [LxmlPageElement(el, self._url) for el in found]

    def text_content(self) -> str:
        return self._element.text_content()

    def get_attribute(self, name: str) -> str | None:
        return self._element.get(name)

    def find_text(self, selector: str, description: str) -> str:
        """Whitespace-stripped text of the first element matching *selector*.

        Raises:
            HTMLStructuralAssumptionException: If nothing matches.
        """
        first = self.query(selector, description)[0]
        return first.text_content().strip()

    def find_image(self, selector: str, description: str) -> ImageRef:
        """src and alt of the first <img> matching *selector*.

        An image missing either attribute counts as a template change too.

        Raises:
            HTMLStructuralAssumptionException: If nothing matches or the
                first match lacks src or alt.
        """
        first = self.query(selector, description)[0]
        src = first.get_attribute("src")
        alt = first.get_attribute("alt")
        for attribute, value in (("src", src), ("alt", alt)):
            if value is None:
                raise HTMLStructuralAssumptionException(
                    selector=f"{selector}@{attribute}",
                    selector_type="xpath" if _is_xpath(selector) else "css",
                    description=f"{description} {attribute} attribute",
                    expected_min=1,
                    expected_max=1,
                    actual_count=0,
                    request_url=self._url,
                    is_element_query=False,
                )
        return ImageRef(src=src or "", alt=alt or "")

    def find_links(
        self,
        selector: str,
        description: str,
        min_count: int = 1,
        max_count: int | None = None,
    ) -> list[Link]:
        """Links for the <a> elements matching *selector*.

        Each Link keeps the href exactly as written and its URL resolved
        against this page. Anchors without an href are skipped after the
        count check.

        Raises:
            HTMLStructuralAssumptionException: On a count mismatch.
        """
        links = []
        anchors = self.query(selector, description, min_count, max_count)
        for position, anchor in enumerate(anchors, start=1):
            href = anchor.get_attribute("href")
            if href:
                links.append(
                    Link(
                        url=urljoin(self._url, href),
                        href=href,
                        text=anchor.text_content().strip(),
                        selector=f"({selector})[{position}]",
                    )
                )
        return links
