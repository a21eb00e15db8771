"""Mock Shirts 4 Mike shop.

This module defines the catalog used across the tests and an aiohttp app
that serves it with the same page structure as the live shop:

- ``/`` has a navigation bar whose ``li.shirts`` items link to categories.
- ``/<category>.php`` lists products as ``ul.products li a`` links. A
  category slug may contain slashes, placing it under a subpath.
- ``/shirt.php?id=N`` (also below any subpath) shows ``.shirt-picture img``
  and ``span.price``.

Shirts can be marked broken in several ways so tests can exercise the error
paths without a second app.
"""

import asyncio
from dataclasses import dataclass, field
from html import escape

from aiohttp import web


@dataclass
class MockShirt:
    """A product in the mock shop."""

    shirt_id: int
    name: str
    price: str
    # Error knobs
    missing_picture: bool = False
    # Rendered as a second span.price after the real one
    extra_price: str | None = None
    status: int = 200
    delay: float = 0.0

    @property
    def href(self) -> str:
        return f"shirt.php?id={self.shirt_id}"

    @property
    def image_src(self) -> str:
        return f"img/shirts/shirt-{self.shirt_id}.jpg"


@dataclass
class MockCategory:
    """A category page listing shirts."""

    slug: str
    title: str
    shirts: list[MockShirt] = field(default_factory=list)
    # Extra product links pointing at pages that do not exist
    dead_links: list[str] = field(default_factory=list)

    @property
    def href(self) -> str:
        return f"{self.slug}.php"


SHIRTS: list[MockShirt] = [
    MockShirt(101, "Logo Shirt, Red", "$18"),
    MockShirt(102, "Mike the Frog Shirt, Black", "$20"),
    MockShirt(103, "Mike the Frog Shirt, Blue", "$20"),
    MockShirt(104, "Logo Shirt, Green", "$18"),
    MockShirt(105, "Mike the Frog Shirt, Yellow", "$25"),
    MockShirt(106, "Logo Shirt, Gray", "$20"),
    MockShirt(107, "Logo Shirt, Teal", "$20"),
    MockShirt(108, "Mike the Frog Shirt, Orange", "$25"),
]


def default_catalog() -> list[MockCategory]:
    return [MockCategory("shirts", "Shirts", list(SHIRTS))]


def generate_home_html(catalog: list[MockCategory]) -> str:
    """Generate the home page with one navigation item per category."""
    items = "".join(
        f"""
            <li class="shirts"><a href="{category.href}">{escape(category.title)}</a></li>"""
        for category in catalog
    )
    return f"""<!DOCTYPE html>
<html>
<head>
    <title>Shirts 4 Mike</title>
</head>
<body>
    <div class="header">
        <a class="logo" href="./"><h1>Shirts 4 Mike</h1></a>
        <ul class="nav">{items}
            <li class="contact"><a href="contact.php">Contact</a></li>
        </ul>
    </div>
    <div class="section banner">
        <a class="btn call-to-action" href="shirts.php">Hey, I'm Mike!</a>
    </div>
</body>
</html>"""


def generate_category_html(category: MockCategory) -> str:
    """Generate a category page listing its shirts."""
    hrefs = [shirt.href for shirt in category.shirts] + category.dead_links
    items = "".join(
        f"""
            <li><a href="{escape(href)}"><img src="img/thumb.jpg" alt="thumb"><p>View Details</p></a></li>"""
        for href in hrefs
    )
    return f"""<!DOCTYPE html>
<html>
<head>
    <title>Mike's Full Catalog of {escape(category.title)}</title>
</head>
<body>
    <div class="section shirts page">
        <h1>Mike&rsquo;s Full Catalog of {escape(category.title)}</h1>
        <ul class="products">{items}
        </ul>
    </div>
</body>
</html>"""


def generate_shirt_html(shirt: MockShirt) -> str:
    """Generate a product page.

    A shirt marked ``missing_picture`` gets a page without the picture block,
    which the scraper treats as a structural change. ``extra_price`` adds a
    second price span, as on a page showing a sale price.
    """
    picture = (
        ""
        if shirt.missing_picture
        else f"""
        <div class="shirt-picture">
            <span><img src="{shirt.image_src}" alt="{escape(shirt.name)}"></span>
        </div>"""
    )
    extra = (
        ""
        if shirt.extra_price is None
        else f"""
            <p>Was <span class="price">{escape(shirt.extra_price)}</span></p>"""
    )
    return f"""<!DOCTYPE html>
<html>
<head>
    <title>{escape(shirt.name)}</title>
</head>
<body>
    <div class="section page">{picture}
        <div class="shirt-details">
            <h1><span class="price">{escape(shirt.price)}</span> {escape(shirt.name)}</h1>{extra}
        </div>
    </div>
</body>
</html>"""


def not_found(what: str) -> web.Response:
    return web.Response(
        text=f"<html><body><h1>404</h1><p>{escape(what)} not found</p></body></html>",
        status=404,
        content_type="text/html",
    )


def create_app(catalog: list[MockCategory] | None = None) -> web.Application:
    """Create the aiohttp application serving *catalog*.

    Args:
        catalog: Categories to serve. Defaults to a single "shirts"
            category holding SHIRTS.

    Returns:
        Configured aiohttp Application.
    """
    categories = catalog if catalog is not None else default_catalog()
    shirts = {
        shirt.shirt_id: shirt
        for category in categories
        for shirt in category.shirts
    }

    async def handle_home(request: web.Request) -> web.Response:
        return web.Response(
            text=generate_home_html(categories), content_type="text/html"
        )

    async def handle_category(request: web.Request) -> web.Response:
        slug = request.match_info["slug"]
        for category in categories:
            if category.slug == slug:
                return web.Response(
                    text=generate_category_html(category),
                    content_type="text/html",
                )
        return not_found(f"Category {slug}")

    async def handle_shirt(request: web.Request) -> web.Response:
        try:
            shirt = shirts.get(int(request.query.get("id", "")))
        except ValueError:
            shirt = None
        if shirt is None:
            return not_found(f"Shirt {request.query.get('id')}")

        if shirt.delay:
            await asyncio.sleep(shirt.delay)

        if shirt.status != 200:
            return web.Response(
                text=f"<html><body><h1>{shirt.status}</h1></body></html>",
                status=shirt.status,
                content_type="text/html",
            )

        return web.Response(
            text=generate_shirt_html(shirt), content_type="text/html"
        )

    async def handle_user_agent(request: web.Request) -> web.Response:
        return web.Response(text=request.headers.get("User-Agent", ""))

    app = web.Application()
    app.router.add_get("/", handle_home)
    # Echo endpoint for header assertions
    app.router.add_get("/user-agent", handle_user_agent)
    app.router.add_get("/shirt.php", handle_shirt)
    app.router.add_get("/{prefix:.+}/shirt.php", handle_shirt)
    app.router.add_get("/{slug:.+}.php", handle_category)
    return app
