"""
Single-site product scraper.

This package scrapes the Shirts 4 Mike catalog with a clean separation
between parsing (Scraper) and I/O (Driver), then normalizes the extracted
products and writes them to a dated CSV file alongside an error log.
"""
