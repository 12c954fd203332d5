"""
Settings Configuration
使用 Pydantic 进行配置验证和管理
"""
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings


class LLMSettings(BaseSettings):
    """生成模型配置 (OpenRouter, OpenAI 兼容接口)"""
    provider: str = Field(default="openrouter", description="LLM提供商")
    model_name: str = Field(
        default="google/gemini-2.5-flash-lite",
        validation_alias=AliasChoices("LLM_MODEL_NAME", "OPENROUTER_MODEL", "model_name"),
        description="模型名称",
    )
    api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("LLM_API_KEY", "OPENROUTER_API_KEY", "api_key"),
        description="OpenRouter API Key",
    )
    base_url: str = Field(default="https://openrouter.ai/api/v1", description="API 地址")
    app_url: str = Field(default="http://localhost:3000", description="HTTP-Referer 归因头")
    app_title: str = Field(default="Candidate", description="X-Title 归因头")
    temperature: float = Field(default=0.4, description="生成温度")
    max_tokens: int = Field(default=4096, description="最大生成token数")
    timeout: float = Field(default=60.0, description="请求超时时间(秒)")

    class Config:
        env_prefix = "LLM_"


class FeedSettings(BaseSettings):
    """RSS 抓取配置"""
    request_timeout: float = Field(default=10.0, description="单个 feed 请求超时(秒)")
    user_agent: str = Field(default="CandidateNewsBot/1.0 (+https://candidate.app)")
    accept: str = Field(default="application/rss+xml, application/xml;q=0.9, text/xml;q=0.8")
    summary_max_length: int = Field(default=420, description="摘要截断长度")

    class Config:
        env_prefix = "FEED_"


class RetrySettings(BaseSettings):
    """重试配置"""
    max_attempts: int = Field(default=3, ge=1, description="最大尝试次数")
    delay_seconds: float = Field(default=0.0, ge=0, description="重试间隔(秒)")
    backoff_factor: float = Field(default=0.0, ge=0, description="指数退避因子, 0 表示固定间隔")
    repair_attempts: int = Field(default=1, ge=1, description="修复生成的尝试次数")

    class Config:
        env_prefix = "RETRY_"

    def delay_for(self, attempt: int) -> float:
        """第 attempt 次失败之后的等待时间"""
        if not self.backoff_factor:
            return self.delay_seconds
        return self.delay_seconds * (self.backoff_factor ** max(0, attempt - 1))


class RankingSettings(BaseSettings):
    """相关性排序常量 (经验值, 可覆盖)"""
    title_weight: float = Field(default=5.0, ge=0)
    text_weight: float = Field(default=2.0, ge=0)
    baseline_score: float = Field(default=0.5, ge=0)
    recency_window_days: float = Field(default=6.0, ge=0)
    recency_weight: float = Field(default=0.3, ge=0)
    shortlist_size: int = Field(default=18, ge=1)
    # ArticleSearchResult accepts at most 10 articles
    max_selected: int = Field(default=10, ge=1, le=10)

    class Config:
        env_prefix = "RANKING_"


class Settings(BaseSettings):
    """主配置类 - 聚合所有子配置"""

    llm: LLMSettings = Field(default_factory=LLMSettings)
    feeds: FeedSettings = Field(default_factory=FeedSettings)
    retry: RetrySettings = Field(default_factory=RetrySettings)
    ranking: RankingSettings = Field(default_factory=RankingSettings)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @classmethod
    def load_from_env_file(cls, env_path: Optional[Path] = None) -> "Settings":
        """从指定的 .env 文件加载配置"""
        if env_path is None:
            env_path = Path(__file__).parent / ".env"

        if env_path.exists():
            from dotenv import load_dotenv
            load_dotenv(env_path)

        return cls(
            llm=LLMSettings(),
            feeds=FeedSettings(),
            retry=RetrySettings(),
            ranking=RankingSettings(),
        )


@lru_cache()
def get_settings() -> Settings:
    """获取全局配置单例"""
    return Settings.load_from_env_file()


def get_llm_settings() -> LLMSettings:
    return get_settings().llm


def get_feed_settings() -> FeedSettings:
    return get_settings().feeds


def get_retry_settings() -> RetrySettings:
    return get_settings().retry


def get_ranking_settings() -> RankingSettings:
    return get_settings().ranking
