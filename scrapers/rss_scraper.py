"""
RSS Feed Scraper
抓取单个 RSS/Atom 源并解析为候选文章
"""
from typing import List, Optional
import logging

import httpx

from config import FeedSettings
from models import CandidateArticle, FeedSource
from utils.exceptions import FeedError

from .base import BaseScraper
from .feed_parser import parse_feed


logger = logging.getLogger(__name__)


class RssFeedScraper(BaseScraper[CandidateArticle]):
    """
    单个 feed 抓取器

    - 独立的超时与 Accept/User-Agent 请求头
    - 非 2xx 响应抛出 FeedError (由聚合器吸收)
    - 解析是尽力而为的, 无法识别的条目直接跳过
    """

    def __init__(
        self,
        source: FeedSource,
        settings: Optional[FeedSettings] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        super().__init__(settings=settings, client=client)
        self.source = source

    @property
    def name(self) -> str:
        return self.source.name

    @property
    def headers(self) -> dict:
        return {
            "User-Agent": self.settings.user_agent,
            "Accept": self.settings.accept,
        }

    async def fetch(self) -> List[CandidateArticle]:
        client = self._get_client()
        response = await client.get(
            self.source.url,
            headers=self.headers,
            timeout=self.settings.request_timeout,
        )
        if not response.is_success:
            raise FeedError(
                f"Feed responded with {response.status_code}",
                feed_url=self.source.url,
                status_code=response.status_code,
            )

        articles = parse_feed(
            response.text,
            self.source,
            summary_max_length=self.settings.summary_max_length,
        )
        self._log_fetch(len(articles))
        return articles
