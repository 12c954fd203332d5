"""
Configuration Management Module
统一配置管理，显式注入到各个管线
"""
from .settings import (
    Settings,
    LLMSettings,
    FeedSettings,
    RetrySettings,
    RankingSettings,
    get_settings,
    get_llm_settings,
    get_feed_settings,
    get_retry_settings,
    get_ranking_settings,
)

__all__ = [
    "Settings",
    "LLMSettings",
    "FeedSettings",
    "RetrySettings",
    "RankingSettings",
    "get_settings",
    "get_llm_settings",
    "get_feed_settings",
    "get_retry_settings",
    "get_ranking_settings",
]
