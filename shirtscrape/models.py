"""Pydantic data models for scraped products."""

from __future__ import annotations

from pydantic import ConfigDict, Field

from shirtscrape.common.data_models import ScrapedData

# Column order of the CSV file.
CSV_FIELDS: tuple[str, ...] = ("Title", "Price", "ImageURL", "URL", "Time")

TIMESTAMP_PATTERN = r"^\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}$"


class RawProduct(ScrapedData):
    """Field values as found on a product page, before normalization.

    Empty strings are kept: a selector that matched an element with no text
    still gives a record, with an empty cell.
    """

    title: str = Field(..., description="Image alt text")
    price: str = Field(..., description="Price display text")
    image_url: str = Field(..., description="Image src, absolute or relative")
    href: str = Field(
        ..., description="Product link href captured on the category page"
    )
    category_url: str = Field(
        "", description="URL of the category page the href was found on"
    )


class ProductRecord(ScrapedData):
    """One normalized product, as written to a CSV row.

    Field aliases are the CSV column names, so ``model_dump(by_alias=True)``
    yields a row keyed like the header.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    title: str = Field(..., alias="Title")
    price: str = Field(..., alias="Price")
    image_url: str = Field(..., alias="ImageURL")
    url: str = Field(..., alias="URL")
    time: str = Field(..., alias="Time", pattern=TIMESTAMP_PATTERN)

    def to_row(self) -> dict[str, str]:
        return self.model_dump(by_alias=True)
