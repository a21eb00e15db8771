"""Record normalization.

Turns a RawProduct into a ProductRecord: the captured href becomes an
absolute product URL and the record is stamped with the time it was made.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from urllib.parse import urljoin

from shirtscrape.models import ProductRecord, RawProduct


class UrlStyle(Enum):
    """How a captured href is turned into the record's URL.

    Values:
        RESOLVE: Standard relative reference resolution against the page the
            href was found on, which gives the URL that was actually fetched.
        CONCAT: ``base + "/" + href`` verbatim. Produces a double slash when
            either side already has one, which some existing CSV consumers
            depend on.
    """

    RESOLVE = "resolve"
    CONCAT = "concat"


def product_url(
    base_url: str,
    href: str,
    style: UrlStyle = UrlStyle.RESOLVE,
    page_url: str = "",
) -> str:
    """Build the absolute product URL for a captured href.

    ``page_url`` is the category page the href came from. RESOLVE joins
    against it, falling back to ``base_url`` when it is unknown; CONCAT
    always uses ``base_url``.

    >>> product_url("http://www.shirts4mike.com/", "shirt.php?id=101")
    'http://www.shirts4mike.com/shirt.php?id=101'
    >>> product_url("http://www.shirts4mike.com/", "shirt.php?id=101", UrlStyle.CONCAT)
    'http://www.shirts4mike.com//shirt.php?id=101'
    """
    if style is UrlStyle.CONCAT:
        return base_url + "/" + href
    return urljoin(page_url or base_url, href)


def format_record_time(moment: datetime) -> str:
    """Format a moment as UTC ``YYYY-MM-DD HH:MM:SS``.

    Naive datetimes are taken to be UTC already.
    """
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%d %H:%M:%S")


def normalize(
    raw: RawProduct,
    base_url: str,
    style: UrlStyle = UrlStyle.RESOLVE,
    now: datetime | None = None,
) -> ProductRecord:
    """Build the CSV record for one scraped product.

    Args:
        raw: Product fields as extracted from the page.
        base_url: The site URL the run started from.
        style: How to join base_url and the captured href.
        now: Timestamp to use; defaults to the current time.
    """
    return ProductRecord(
        title=raw.title,
        price=raw.price,
        image_url=raw.image_url,
        url=product_url(base_url, raw.href, style, raw.category_url),
        time=format_record_time(now or datetime.now(timezone.utc)),
    )
