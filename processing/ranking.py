"""
Relevance Ranker
关键词重叠 + 时效衰减的确定性打分
"""
from datetime import datetime, timezone
from typing import Callable, List, Optional, Sequence
import logging
import re

from config import RankingSettings, get_ranking_settings
from models import CandidateArticle, ScoredArticle

from .cleaner import parse_timestamp


logger = logging.getLogger(__name__)

_KEYWORD_SPLIT_RE = re.compile(r"[\s,/]+")
_SECONDS_PER_DAY = 60 * 60 * 24


def tokenize_topic(topic: str) -> List[str]:
    """小写后按空白 / 逗号 / 斜杠切分, 丢弃空片段"""
    return [
        word.strip()
        for word in _KEYWORD_SPLIT_RE.split(str(topic or "").lower())
        if word.strip()
    ]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RelevanceRanker:
    """
    相关性排序器

    打分规则 (常量见 RankingSettings):
    - 每个关键词出现在标题中 +title_weight
    - 每个关键词出现在 标题+摘要 中 +text_weight
    - 一个关键词都没命中时得分为 baseline_score
    - 有发布时间时加时效分: max(0, recency_window_days - 天龄) * recency_weight

    排序稳定: 同分保持原始顺序。
    """

    def __init__(
        self,
        settings: Optional[RankingSettings] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.settings = settings or get_ranking_settings()
        self._clock = clock

    def keyword_score(self, keywords: Sequence[str], article: CandidateArticle) -> float:
        title = article.title.lower()
        text = f"{article.title} {article.summary}".lower()
        score = 0.0
        for keyword in keywords:
            if keyword in title:
                score += self.settings.title_weight
            if keyword in text:
                score += self.settings.text_weight
        return score or self.settings.baseline_score

    def recency_bonus(self, article: CandidateArticle, now: datetime) -> float:
        published = parse_timestamp(article.published_at)
        if published is None:
            return 0.0
        age_days = max(0.0, (now - published).total_seconds() / _SECONDS_PER_DAY)
        return max(0.0, self.settings.recency_window_days - age_days) * self.settings.recency_weight

    def rank(self, topic: str, articles: Sequence[CandidateArticle]) -> List[ScoredArticle]:
        """
        为所有候选文章打分并按得分降序排列

        Args:
            topic: 议题字符串
            articles: 候选文章

        Returns:
            与输入等长的 ScoredArticle 列表
        """
        keywords = tokenize_topic(topic)
        now = self._clock()
        scored = [
            ScoredArticle(
                **article.model_dump(),
                score=self.keyword_score(keywords, article) + self.recency_bonus(article, now),
            )
            for article in articles
        ]
        # sorted() is stable, so ties keep arrival order
        return sorted(scored, key=lambda item: item.score, reverse=True)

    def shortlist(
        self,
        topic: str,
        articles: Sequence[CandidateArticle],
        size: Optional[int] = None,
    ) -> List[ScoredArticle]:
        limit = self.settings.shortlist_size if size is None else size
        ranked = self.rank(topic, articles)
        logger.debug(f"Ranked {len(ranked)} articles for '{topic}', keeping top {limit}")
        return ranked[:limit]
