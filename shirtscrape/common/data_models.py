"""Base pydantic model for items a scraper emits."""

from typing import Any, TypeVar

from pydantic import BaseModel

from shirtscrape.common.deferred_validation import (
    DeferredValidation,
)

ModelT = TypeVar("ModelT", bound="ScrapedData")


class ScrapedData(BaseModel):
    """Adds ``raw()`` to a pydantic model.

    ``RawProduct(...)`` validates on the spot; ``RawProduct.raw(...)``
    returns a DeferredValidation and leaves the check to the driver.
    """

    @classmethod
    def raw(
        cls: type[ModelT], request_url: str = "", **data: Any
    ) -> DeferredValidation[ModelT]:
        return DeferredValidation(cls, request_url, **data)
