"""
Aggregator Module
并发抓取并合并所有新闻源
"""
from .feed_aggregator import FeedAggregator, merge_unique

__all__ = ["FeedAggregator", "merge_unique"]
