"""Site scrapers."""

from shirtscrape.scrapers.shirts4mike import Shirts4MikeScraper

__all__ = ["Shirts4MikeScraper"]
