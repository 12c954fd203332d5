"""
Feed Registry
编译期固定的 RSS 源列表 (顺序即合并顺序)
"""
from typing import Tuple

from models import FeedSource


DEFAULT_FEEDS: Tuple[FeedSource, ...] = (
    FeedSource(
        name="The New York Times - U.S.",
        url="https://rss.nytimes.com/services/xml/rss/nyt/US.xml",
    ),
    FeedSource(
        name="The New York Times - Education",
        url="https://rss.nytimes.com/services/xml/rss/nyt/Education.xml",
    ),
    FeedSource(
        name="The New York Times - Politics",
        url="https://rss.nytimes.com/services/xml/rss/nyt/Politics.xml",
    ),
    FeedSource(
        name="The New York Times - Economy",
        url="https://rss.nytimes.com/services/xml/rss/nyt/Economy.xml",
    ),
    FeedSource(
        name="The New York Times - Energy & Environment",
        url="https://rss.nytimes.com/services/xml/rss/nyt/EnergyEnvironment.xml",
    ),
    FeedSource(
        name="The New York Times - Real Estate",
        url="https://rss.nytimes.com/services/xml/rss/nyt/RealEstate.xml",
    ),
    FeedSource(
        name="The New York Times - Jobs",
        url="https://rss.nytimes.com/services/xml/rss/nyt/Jobs.xml",
    ),
    FeedSource(
        name="Politico",
        url="https://www.politico.com/rss/politicopicks.xml",
    ),
)
