"""
Processing Module
文本清洗、相关性排序、摘要文本构建、指标汇总
"""
from .cleaner import (
    clean_text,
    truncate,
    canonicalize_link,
    canonicalize_asset_link,
    parse_timestamp,
    normalize_date,
)
from .ranking import RelevanceRanker, tokenize_topic
from .digest import (
    MetricsCsvSections,
    build_articles_digest,
    build_metrics_csv,
    build_metrics_digest,
    escape_csv_value,
    to_csv,
)
from .metrics import MetricSummary, build_metric_summary, build_metrics_overview

__all__ = [
    "clean_text",
    "truncate",
    "canonicalize_link",
    "canonicalize_asset_link",
    "parse_timestamp",
    "normalize_date",
    "RelevanceRanker",
    "tokenize_topic",
    "MetricsCsvSections",
    "build_articles_digest",
    "build_metrics_csv",
    "build_metrics_digest",
    "escape_csv_value",
    "to_csv",
    "MetricSummary",
    "build_metric_summary",
    "build_metrics_overview",
]
