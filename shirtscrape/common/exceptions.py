"""Errors raised while scraping the shop.

Two families:

- Assumption errors: a page no longer looks the way the scraper expects
  (a selector count is off, or the extracted values fail validation). The
  scraper code needs attention.
- Transient errors: a fetch failed (bad status, timeout, connection
  problem). Running again later may well succeed.

OutputWriteException sits outside both; it is raised after scraping, when
the data file cannot be written.
"""

from typing import Any


class ScraperAssumptionException(Exception):
    """A page broke one of the scraper's assumptions.

    Attributes:
        message: One-line description of what went wrong.
        request_url: Page the scraper was looking at.
        context: Extra details (selector, counts, offending values).
    """

    def __init__(
        self,
        message: str,
        request_url: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.request_url = request_url
        self.context = context or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        lines = [self.message, f"URL: {self.request_url}"]
        if self.context:
            lines.append("Context:")
            lines.extend(
                f"  {key}: {value}" for key, value in self.context.items()
            )
        return "\n".join(lines)


def _describe_count(minimum: int, maximum: int | None) -> str:
    if maximum is None:
        return f"at least {minimum}"
    if minimum == maximum:
        return f"exactly {minimum}"
    return f"between {minimum} and {maximum}"


class HTMLStructuralAssumptionException(ScraperAssumptionException):
    """A selector matched the wrong number of nodes.

    Usually means the shop changed its templates.
    """

    def __init__(
        self,
        selector: str,
        selector_type: str,
        description: str,
        expected_min: int,
        expected_max: int | None,
        actual_count: int,
        request_url: str,
        is_element_query: bool = True,
    ) -> None:
        """Record a selector count mismatch.

        Args:
            selector: The CSS or XPath expression.
            selector_type: "css" or "xpath".
            description: What the selector was meant to find, e.g. "price".
            expected_min: Fewest matches allowed.
            expected_max: Most matches allowed, None for no upper bound.
            actual_count: Matches found.
            request_url: Page the selector ran against.
            is_element_query: False when attribute or text values were
                queried rather than elements.
        """
        self.selector = selector
        self.selector_type = selector_type
        self.description = description
        self.expected_min = expected_min
        self.expected_max = expected_max
        self.actual_count = actual_count
        self.is_element_query = is_element_query

        super().__init__(
            f"HTML structure mismatch: Expected "
            f"{_describe_count(expected_min, expected_max)} elements for "
            f"'{description}', but found {actual_count}",
            request_url,
            {
                "selector": selector,
                "selector_type": selector_type,
                "expected_min": expected_min,
                "expected_max": "unlimited"
                if expected_max is None
                else expected_max,
                "actual_count": actual_count,
                "is_element_query": is_element_query,
            },
        )


class DataFormatAssumptionException(ScraperAssumptionException):
    """Extracted values failed pydantic validation.

    Attributes:
        errors: pydantic's error dicts.
        failed_doc: The raw values that were rejected.
        model_name: The model they were validated against.
    """

    def __init__(
        self,
        errors: list[dict[str, Any]],
        failed_doc: dict[str, Any],
        model_name: str,
        request_url: str,
    ) -> None:
        self.errors = errors
        self.failed_doc = failed_doc
        self.model_name = model_name

        summary = ", ".join(
            f"{err['loc'][0] if err['loc'] else '__root__'}: {err['msg']}"
            for err in errors
        )
        super().__init__(
            f"Data validation failed for model '{model_name}': {summary}",
            request_url,
            {
                "model": model_name,
                "error_count": len(errors),
                "failed_doc": failed_doc,
            },
        )


class TransientException(Exception):
    """A fetch failed in a way a later run might not repeat.

    Nothing retries these within a run; they are recorded and the walk
    moves on. Subclasses set ``message``.
    """

    message: str


class HTMLResponseAssumptionException(TransientException):
    """The server answered with an error status.

    Attributes:
        status_code: Status received.
        expected_codes: Statuses that would have been accepted.
        url: URL that was requested.
    """

    def __init__(
        self,
        status_code: int,
        expected_codes: list[int],
        url: str,
    ) -> None:
        self.status_code = status_code
        self.expected_codes = expected_codes
        self.url = url
        accepted = ", ".join(str(code) for code in expected_codes)
        self.message = (
            f"HTTP {status_code} from {url} (expected one of: {accepted})"
        )
        super().__init__(self.message)


class RequestTimeoutException(TransientException):
    """No response arrived within the per-request timeout."""

    def __init__(self, url: str, timeout_seconds: float | None) -> None:
        self.url = url
        self.timeout_seconds = timeout_seconds
        self.message = f"Request to {url} timed out after {timeout_seconds}s"
        super().__init__(self.message)


class RequestFailedException(TransientException):
    """The request failed before any response: refused connection, DNS
    failure or a protocol error reported by httpx."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        self.message = f"Request to {url} failed: {reason}"
        super().__init__(self.message)


class RunTimeoutException(TransientException):
    """The run as a whole used up its time budget.

    Attributes:
        timeout_seconds: The budget.
        pending_requests: Requests left in the queue when the run stopped.
    """

    def __init__(self, timeout_seconds: float, pending_requests: int) -> None:
        self.timeout_seconds = timeout_seconds
        self.pending_requests = pending_requests
        self.message = (
            f"Run exceeded {timeout_seconds}s with "
            f"{pending_requests} request(s) still queued"
        )
        super().__init__(self.message)


class OutputWriteException(Exception):
    """The CSV data file could not be written."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.message = f"Could not write {path}: {reason}"
        super().__init__(self.message)
