"""Shirts 4 Mike catalog scraper.

The shop is walked in two hops: the home page's navigation links lead to
category pages, whose product list links lead to product pages. Each product
page yields one RawProduct. The href of the product link and the category
page it was found on are carried to the product step in accumulated_data,
because the product page itself does not repeat them.
"""

from __future__ import annotations

from collections.abc import Generator
from typing import Any

from shirtscrape.common.decorators import step
from shirtscrape.common.lxml_page_element import LxmlPageElement
from shirtscrape.data_types import (
    BaseScraper,
    HTTPRequestParams,
    ParsedData,
    Request,
    Response,
    ScraperYield,
)
from shirtscrape.models import RawProduct

CATEGORY_LINKS = ".nav .shirts a"
PRODUCT_LINKS = ".products li a"
PICTURE_IMAGE = ".shirt-picture img"
PRICE = "span.price"


class Shirts4MikeScraper(BaseScraper[RawProduct]):
    """Scraper for http://www.shirts4mike.com/."""

    site_url = "http://www.shirts4mike.com/"

    def get_entry(self) -> Generator[Request, None, None]:
        yield Request(
            request=HTTPRequestParams(url=self.base_url),
            continuation=self.parse_homepage.__name__,
        )

    @step
    def parse_homepage(
        self, page: LxmlPageElement
    ) -> Generator[ScraperYield, None, None]:
        """Follow every category link in the navigation bar."""
        for link in page.find_links(CATEGORY_LINKS, "category links"):
            yield link.follow(self.parse_category)

    @step
    def parse_category(
        self, page: LxmlPageElement
    ) -> Generator[ScraperYield, None, None]:
        """Follow every product on a category page, remembering its href."""
        for link in page.find_links(PRODUCT_LINKS, "product links"):
            yield link.follow(
                self.parse_product,
                accumulated_data={"href": link.href, "category_url": page.url},
            )

    @step
    def parse_product(
        self,
        page: LxmlPageElement,
        response: Response,
        accumulated_data: dict[str, Any],
    ) -> Generator[ScraperYield[RawProduct], None, None]:
        """Extract title, price and image from a product page.

        Title is the picture's alt text and the price is kept as display
        text. When a selector matches more than once the first match wins.
        """
        image = page.find_image(PICTURE_IMAGE, "shirt picture")
        price = page.find_text(PRICE, "price")

        yield ParsedData(
            RawProduct.raw(
                request_url=response.url,
                title=image.alt,
                price=price,
                image_url=image.src,
                href=accumulated_data.get("href", ""),
                category_url=accumulated_data.get("category_url", ""),
            )
        )
