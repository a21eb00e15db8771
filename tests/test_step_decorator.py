"""Tests for the @step decorator, Request resolution and scraper introspection."""

import pytest

from shirtscrape.common.decorators import step
from shirtscrape.common.exceptions import ScraperAssumptionException
from shirtscrape.common.lxml_page_element import LxmlPageElement
from shirtscrape.data_types import (
    BaseScraper,
    HttpMethod,
    HTTPRequestParams,
    ParsedData,
    Request,
    Response,
)
from shirtscrape.scrapers import Shirts4MikeScraper

PAGE_HTML = b"<html><body><span class='price'>$18</span></body></html>"


def make_response(
    content: bytes = PAGE_HTML,
    url: str = "http://shop.test/shirt.php?id=1",
    accumulated_data: dict | None = None,
) -> Response:
    parent = Request(
        request=HTTPRequestParams(url="http://shop.test/"),
        continuation="parse_homepage",
    )
    request = Request(
        request=HTTPRequestParams(url=url),
        continuation="parse_product",
        previous_requests=[parent],
        accumulated_data=accumulated_data or {},
    )
    return Response(
        status_code=200,
        headers={},
        content=content,
        text=content.decode("utf-8"),
        url=url,
        request=request,
    )


class InjectionScraper(BaseScraper[dict]):
    @step
    def wants_everything(self, page, response, request, accumulated_data):
        yield ParsedData(
            {
                "page": page,
                "response": response,
                "request": request,
                "accumulated_data": accumulated_data,
            }
        )

    @step
    def target(self, response):
        yield None

    @step
    def yields_callable(self, response):
        yield Request(
            request=HTTPRequestParams(url="next"),
            continuation=self.target,
        )

    @step
    def never_parses(self, response):
        yield ParsedData(response.url)


class TestStepInjection:
    def test_injects_requested_arguments(self):
        """@step shall inject each argument named in the signature."""
        response = make_response(accumulated_data={"href": "shirt.php?id=1"})

        (item,) = list(InjectionScraper().wants_everything(response))
        data = item.unwrap()

        assert isinstance(data["page"], LxmlPageElement)
        assert data["page"].find_text("span.price", "price") == "$18"
        assert data["response"] is response
        assert data["request"] is response.request
        assert data["accumulated_data"] == {"href": "shirt.php?id=1"}

    def test_unparseable_html_raises_assumption(self):
        """Content lxml cannot parse shall raise ScraperAssumptionException."""
        response = make_response(content=b"")

        with pytest.raises(ScraperAssumptionException):
            list(InjectionScraper().wants_everything(response))

    def test_page_is_only_parsed_when_asked_for(self):
        """A step without a page argument shall accept an unparseable body."""
        response = make_response(content=b"")

        (item,) = list(InjectionScraper().never_parses(response))

        assert item.unwrap() == response.url

    def test_callable_continuation_becomes_name(self):
        """A yielded Callable continuation shall be resolved to its name."""
        (request,) = list(InjectionScraper().yields_callable(make_response()))

        assert request.continuation == "target"
        assert request.priority == 9


class TestRequest:
    def test_resolve_from_response_uses_final_url(self):
        """Relative URLs shall resolve against the response URL."""
        response = make_response(url="http://shop.test/shirts.php")
        new = Request(
            request=HTTPRequestParams(url="shirt.php?id=7"),
            continuation="parse_product",
        )

        resolved = new.resolve_from(response)

        assert resolved.url == "http://shop.test/shirt.php?id=7"
        assert resolved.current_location == "http://shop.test/shirts.php"
        assert resolved.previous_requests[-1] is response.request

    def test_resolve_keeps_absolute_url(self):
        new = Request(
            request=HTTPRequestParams(url="http://other.test/a?b=c"),
            continuation="x",
        )

        assert new.resolve_url("http://shop.test/") == (
            "http://other.test/a?b=c"
        )

    def test_accumulated_data_is_copied(self):
        """Sibling requests shall never share accumulated_data."""
        shared = {"href": "shirt.php?id=1"}
        first = Request(
            request=HTTPRequestParams(url="a"),
            continuation="x",
            accumulated_data=shared,
        )
        shared["href"] = "changed"

        assert first.accumulated_data == {"href": "shirt.php?id=1"}

    def test_defaults(self):
        request = Request(request=HTTPRequestParams(), continuation="x")

        assert request.request.method == HttpMethod.GET
        assert request.priority == 9


class TestScraperIntrospection:
    def test_list_steps(self):
        """list_steps shall report every @step method of the scraper."""
        steps = Shirts4MikeScraper.list_steps()

        assert steps == [
            "parse_category",
            "parse_homepage",
            "parse_product",
        ]

    def test_base_url_override(self):
        assert Shirts4MikeScraper().base_url == "http://www.shirts4mike.com/"
        assert (
            Shirts4MikeScraper("http://127.0.0.1:9/").base_url
            == "http://127.0.0.1:9/"
        )

    def test_entry_request(self):
        (entry,) = list(Shirts4MikeScraper("http://shop.test/").get_entry())

        assert entry.url == "http://shop.test/"
        assert entry.continuation == "parse_homepage"

    def test_unknown_continuation(self):
        with pytest.raises(AttributeError):
            Shirts4MikeScraper().get_continuation("parse_nothing")

    def test_base_scraper_has_no_entry(self):
        with pytest.raises(NotImplementedError):
            list(BaseScraper().get_entry())
