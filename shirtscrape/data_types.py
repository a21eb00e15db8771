"""Types passed between scrapers and the driver.

A step method receives a Response and yields:

- ParsedData: a product was found on the page.
- Request: another page has to be fetched, and names the step that will
  parse it.
- None: nothing to report (ignored by the driver).

Continuations are stored as method names so a Request is plain data.
"""

from __future__ import annotations

from collections.abc import Callable, Generator
from copy import deepcopy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Generic, TypeVar
from urllib.parse import quote, unquote, urljoin, urlsplit, urlunsplit

T = TypeVar("T")
ScraperReturnType = TypeVar("ScraperReturnType")


@dataclass(frozen=True)
class ParsedData(Generic[T]):
    """Wraps one scraped item so the driver can match on it.

    Example:
        yield ParsedData(RawProduct.raw(request_url=url, title=alt, ...))
    """

    data: T
    __match_args__ = ("data",)

    def unwrap(self) -> T:
        return self.data


class HttpMethod(Enum):
    GET = "GET"


@dataclass(frozen=True)
class HTTPRequestParams:
    """What to send: the method and the URL.

    The URL may be relative until the driver resolves it against the page
    the request was found on.
    """

    method: HttpMethod = HttpMethod.GET
    url: str = ""


@dataclass(frozen=True)
class Request:
    """A page to fetch and the step that parses it.

    Attributes:
        request: HTTP parameters.
        continuation: Step name, or the step method itself; @step turns a
            method into its name before the driver sees the request.
        current_location: URL that relative URLs are resolved against.
        previous_requests: The requests that led here, oldest first.
        accumulated_data: Values handed down the chain, e.g. the product
            href captured on the category page.
        priority: Queue priority, lower is fetched first. Ties keep the
            order in which requests were yielded.
    """

    request: HTTPRequestParams
    continuation: str | Callable[..., Any]
    current_location: str = ""
    previous_requests: list[Request] = field(default_factory=list)
    accumulated_data: dict[str, Any] = field(default_factory=dict)
    priority: int = 9

    def __post_init__(self) -> None:
        # Siblings built from one dict must not see each other's changes
        object.__setattr__(
            self, "accumulated_data", deepcopy(self.accumulated_data)
        )

    @property
    def url(self) -> str:
        return self.request.url

    def resolve_url(self, current_location: str) -> str:
        """Absolute form of this request's URL.

        The path and query are unquoted and quoted again first, so an href
        that is already percent-encoded is not encoded a second time.
        """
        parts = urlsplit(self.request.url)
        normalized = urlunsplit(
            parts._replace(
                path=quote(unquote(parts.path), safe="/;"),
                query=quote(unquote(parts.query), safe="=&"),
            )
        )
        return urljoin(current_location, normalized)

    def resolve_from(self, context: Response | Request) -> Request:
        """Copy of this request with an absolute URL and extended ancestry.

        A Response context contributes its final (post-redirect) URL; a
        Request context contributes its own current_location.
        """
        match context:
            case Response(url=location, request=parent):
                pass
            case Request(current_location=location):
                parent = context

        return Request(
            request=HTTPRequestParams(
                method=self.request.method,
                url=self.resolve_url(location),
            ),
            continuation=self.continuation,
            current_location=location,
            previous_requests=[*parent.previous_requests, parent],
            accumulated_data=self.accumulated_data,
            priority=self.priority,
        )


@dataclass
class Response:
    """A fetched page.

    ``url`` is the final URL after redirects; ``request`` is the Request
    that produced it.
    """

    status_code: int
    headers: dict[str, str]
    content: bytes
    text: str
    url: str
    request: Request


ScraperYield = ParsedData[T] | Request | None


class BaseScraper(Generic[ScraperReturnType]):
    """Base class for site scrapers.

    Subclasses set ``site_url``, implement ``get_entry()`` and define their
    steps with @step. The type parameter is the item type their steps emit.

    Example:
        class MyScraper(BaseScraper[RawProduct]):
            site_url = "http://shop.example/"

            def get_entry(self):
                yield Request(
                    request=HTTPRequestParams(url=self.base_url),
                    continuation="parse_page",
                )

            @step
            def parse_page(self, page: LxmlPageElement):
                yield ParsedData(RawProduct.raw(...))
    """

    site_url: ClassVar[str] = ""
    user_agent: ClassVar[str] = "shirtscrape/1.0"

    def __init__(self, base_url: str | None = None) -> None:
        self.base_url = base_url or self.site_url

    def get_entry(self) -> Generator[Request, None, None]:
        """Yield the request(s) a run starts from."""
        raise NotImplementedError(
            f"{self.__class__.__name__} must implement get_entry()"
        )

    def get_continuation(
        self, name: str
    ) -> Callable[[Response], Generator[ScraperYield[Any], Any, None]]:
        """The bound step method called *name*.

        Raises:
            AttributeError: If the scraper has no such method.
        """
        return getattr(self, name)

    @classmethod
    def list_steps(cls) -> list[str]:
        """Names of every @step method on the class, sorted.

        Example:
            >>> Shirts4MikeScraper.list_steps()
            ['parse_category', 'parse_homepage', 'parse_product']
        """
        return [
            name
            for name in dir(cls)
            if not name.startswith("_")
            and getattr(getattr(cls, name, None), "_is_step", False)
        ]
