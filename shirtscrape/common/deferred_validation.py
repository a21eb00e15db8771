"""Validation that waits for the driver.

A step hands over whatever it pulled off the page wrapped in
DeferredValidation. The driver calls confirm() and routes a failure to its
on_invalid_data callback, so one bad product page is reported and skipped
rather than ending the run inside the step.
"""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ValidationError

from shirtscrape.common.exceptions import (
    DataFormatAssumptionException,
)

T = TypeVar("T", bound=BaseModel)


class DeferredValidation(Generic[T]):
    """Raw field values paired with the model that should accept them."""

    def __init__(
        self,
        model_class: type[T],
        request_url: str = "",
        **data: Any,
    ) -> None:
        self._model_class = model_class
        self._request_url = request_url
        self._data = data

    def confirm(self) -> T:
        """Build the model from the raw values.

        Raises:
            DataFormatAssumptionException: If pydantic rejects the values.
        """
        try:
            return self._model_class.model_validate(self._data)
        except ValidationError as e:
            raise DataFormatAssumptionException(
                errors=[dict(err) for err in e.errors()],
                failed_doc=self._data,
                model_name=self.model_name,
                request_url=self._request_url,
            ) from e

    @property
    def raw_data(self) -> dict[str, Any]:
        return dict(self._data)

    @property
    def request_url(self) -> str:
        return self._request_url

    @property
    def model_name(self) -> str:
        return self._model_class.__name__
