"""
Feed Aggregator
并发抓取所有 RSS 源, 合并并按规范链接去重
"""
import asyncio
from typing import Callable, List, Optional, Sequence
import logging

import httpx

from config import FeedSettings, get_feed_settings
from models import CandidateArticle, FeedSource
from scrapers import DEFAULT_FEEDS, RssFeedScraper


logger = logging.getLogger(__name__)

ClientFactory = Callable[[], httpx.AsyncClient]


class FeedAggregator:
    """
    Feed 聚合器

    每个源独立抓取: 某个源失败 (超时 / 非 2xx / 解析异常) 只会让它贡献空列表,
    不影响其他源。合并顺序为注册表顺序, 与各源返回快慢无关; 相同规范链接
    只保留第一次出现的条目。
    """

    def __init__(
        self,
        sources: Sequence[FeedSource] = DEFAULT_FEEDS,
        settings: Optional[FeedSettings] = None,
        client_factory: Optional[ClientFactory] = None,
    ):
        self.sources = list(sources)
        self.settings = settings or get_feed_settings()
        self._client_factory = client_factory or self._default_client

    def _default_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.settings.request_timeout),
            follow_redirects=True,
        )

    async def _fetch_source(
        self,
        source: FeedSource,
        client: httpx.AsyncClient,
    ) -> List[CandidateArticle]:
        scraper = RssFeedScraper(source, settings=self.settings, client=client)
        try:
            return await scraper.fetch()
        except Exception as exc:
            logger.warning(f"Failed to read feed {source.url}: {exc}")
            return []

    async def collect(self) -> List[CandidateArticle]:
        """
        抓取全部源并返回去重后的候选文章

        Returns:
            按 (注册表顺序, 源内顺序) 排列的候选文章; 所有源都失败时为空列表
        """
        async with self._client_factory() as client:
            results = await asyncio.gather(
                *[self._fetch_source(source, client) for source in self.sources],
                return_exceptions=True,
            )

        per_source: List[List[CandidateArticle]] = []
        for source, result in zip(self.sources, results):
            if isinstance(result, BaseException):
                logger.warning(f"Feed {source.url} skipped: {result}")
                per_source.append([])
                continue
            per_source.append(result)

        merged = merge_unique(per_source)
        succeeded = sum(1 for articles in per_source if articles)
        logger.info(
            f"Collected {len(merged)} unique articles from {succeeded}/{len(self.sources)} feeds"
        )
        return merged


def merge_unique(groups: Sequence[Sequence[CandidateArticle]]) -> List[CandidateArticle]:
    """Flatten in order, keeping the first article seen for each canonical link."""
    aggregated: List[CandidateArticle] = []
    seen = set()
    for articles in groups:
        for article in articles:
            if article.id in seen:
                continue
            seen.add(article.id)
            aggregated.append(article)
    return aggregated
