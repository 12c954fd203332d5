"""
Scrapers Module
"""
from .base import BaseScraper
from .feed_parser import parse_feed, parse_item, extract_tag, extract_image_url
from .registry import DEFAULT_FEEDS
from .rss_scraper import RssFeedScraper

__all__ = [
    "BaseScraper",
    "RssFeedScraper",
    "DEFAULT_FEEDS",
    "parse_feed",
    "parse_item",
    "extract_tag",
    "extract_image_url",
]
