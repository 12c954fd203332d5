"""
Insights Pipeline
议题文章流水线 (抓取 -> 排序 -> 摘要 -> 生成) 与指标深度分析流水线

每次调用都是请求级的: 没有缓存, 没有跨请求共享的可变状态。
依赖 (聚合器 / 排序器 / 生成客户端) 通过构造函数注入, 便于测试替换。
"""
from __future__ import annotations

from typing import Any, Dict, Optional
import logging

from aggregator import FeedAggregator
from config import Settings, get_settings
from models import ArticleSearchResult, DeepDiveCategory, DeepDiveResult, ExpandedMetrics
from processing import RelevanceRanker, build_metrics_overview
from utils.exceptions import NoCandidatesError

from .llm import BaseLLM, get_llm
from .structured import StructuredGenerationClient


logger = logging.getLogger(__name__)


class InsightsPipeline:
    """把聚合、排序和结构化生成串起来"""

    def __init__(
        self,
        aggregator: FeedAggregator,
        ranker: RelevanceRanker,
        generator: StructuredGenerationClient,
    ):
        self.aggregator = aggregator
        self.ranker = ranker
        self.generator = generator

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        llm: Optional[BaseLLM] = None,
        **aggregator_kwargs: Any,
    ) -> "InsightsPipeline":
        """按配置组装默认依赖"""
        settings = settings or get_settings()
        llm = llm or get_llm(settings.llm)
        return cls(
            aggregator=FeedAggregator(settings=settings.feeds, **aggregator_kwargs),
            ranker=RelevanceRanker(settings=settings.ranking),
            generator=StructuredGenerationClient(
                llm,
                retry_settings=settings.retry,
                ranking_settings=settings.ranking,
            ),
        )

    async def fetch_articles_for_issue(self, issue: str) -> ArticleSearchResult:
        """
        议题文章检索

        Args:
            issue: 非空议题字符串

        Returns:
            ArticleSearchResult (1-10 篇文章)

        Raises:
            ValueError: 议题为空
            NoCandidatesError: 所有 feed 都失败或没有条目
        """
        issue = str(issue or "").strip()
        if not issue:
            raise ValueError("issue must be a non-empty string")

        candidates = await self.aggregator.collect()
        if not candidates:
            raise NoCandidatesError("No articles available from news feeds.")

        shortlist = self.ranker.shortlist(issue, candidates)
        logger.info(f"Shortlisted {len(shortlist)}/{len(candidates)} candidates for '{issue}'")
        return await self.generator.select_articles(issue, shortlist)

    async def generate_deep_dive(
        self,
        metrics: ExpandedMetrics,
        category: DeepDiveCategory,
    ) -> DeepDiveResult:
        category = DeepDiveCategory(category)
        logger.info(
            f"Generating {category.value} deep dive from {len(metrics.donations)} donations, "
            f"{len(metrics.volunteer_counts_by_month)} volunteer months, {len(metrics.events)} events"
        )
        return await self.generator.generate_deep_dive(metrics, category)

    def summarize_metrics(self, metrics: ExpandedMetrics) -> Dict[str, object]:
        return build_metrics_overview(metrics)

    async def aclose(self) -> None:
        await self.generator.llm.aclose()


async def run_issue_articles(issue: str, settings: Optional[Settings] = None) -> ArticleSearchResult:
    """使用默认配置运行一次议题文章检索"""
    pipeline = InsightsPipeline.from_settings(settings)
    try:
        return await pipeline.fetch_articles_for_issue(issue)
    finally:
        await pipeline.aclose()


async def run_metrics_deep_dive(
    metrics: ExpandedMetrics,
    category: DeepDiveCategory,
    settings: Optional[Settings] = None,
) -> DeepDiveResult:
    """使用默认配置运行一次指标深度分析"""
    pipeline = InsightsPipeline.from_settings(settings)
    try:
        return await pipeline.generate_deep_dive(metrics, category)
    finally:
        await pipeline.aclose()
