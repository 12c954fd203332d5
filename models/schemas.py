"""
Data Models / Schemas
新闻候选、文章筛选结果与竞选指标输入的数据结构
"""
from datetime import datetime
from typing import List, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator


def is_http_url(value: str) -> bool:
    """是否为格式正确的 http(s) 绝对 URL"""
    try:
        parsed = urlparse(str(value or "").strip())
    except ValueError:
        return False
    return parsed.scheme in {"http", "https"} and bool(parsed.netloc)


class FeedSource(BaseModel):
    """RSS 源"""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="展示名称")
    url: str = Field(..., description="Feed 地址")


class CandidateArticle(BaseModel):
    """从单个 feed 条目构建的候选文章, 构建后不可变"""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="规范化链接, 兼作去重键")
    title: str
    link: str
    summary: str = Field(default="", description="去标签、截断后的摘要")
    published_at: Optional[str] = Field(None, description="ISO-8601 发布时间")
    source: str = Field(..., description="Feed 展示名称")
    feed_url: str
    image_url: Optional[str] = None


class ScoredArticle(CandidateArticle):
    """带相关性得分的候选文章"""
    score: float = Field(..., ge=0)


class IssueArticle(BaseModel):
    """模型为某个议题挑选出的文章"""
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., min_length=1)
    link: str
    source: str = Field(..., min_length=1)
    description: Optional[str] = None
    published_at: Optional[str] = Field(None, alias="publishedAt")
    image_url: Optional[str] = Field(None, alias="imageUrl")

    @field_validator("link")
    @classmethod
    def _well_formed_link(cls, value: str) -> str:
        text = str(value or "").strip()
        if not is_http_url(text):
            raise ValueError("must be a well-formed http(s) URL")
        return text

    @field_validator("image_url")
    @classmethod
    def _well_formed_image_url(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        text = str(value).strip()
        if not text:
            return None
        if not is_http_url(text):
            raise ValueError("must be a well-formed http(s) URL or null")
        return text

    @field_validator("published_at")
    @classmethod
    def _iso_timestamp(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        text = str(value).strip()
        if not text:
            return None
        try:
            datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            raise ValueError("must be an ISO-8601 timestamp or null")
        return text


class ArticleSearchResult(BaseModel):
    """议题文章检索结果 (入库路径的唯一产出)"""
    issue: str = Field(..., min_length=3, max_length=120)
    summary: str = Field(..., min_length=30)
    articles: List[IssueArticle] = Field(..., min_length=1, max_length=10)


class Donation(BaseModel):
    """单笔捐款记录"""
    model_config = ConfigDict(populate_by_name=True)

    name: str
    city: str
    state: str
    age: int
    amount_usd: float = Field(..., alias="amountUSD")
    date: str


class VolunteerByMonth(BaseModel):
    """月度志愿者人数"""
    month: str
    count: int


class CampaignEvent(BaseModel):
    """竞选活动"""
    date: str
    type: str
    city: str
    state: str
    attendees: int


class ExpandedMetrics(BaseModel):
    """竞选指标数据集 (深度分析路径的输入)"""
    model_config = ConfigDict(populate_by_name=True)

    donations: List[Donation] = Field(default_factory=list)
    volunteer_counts_by_month: List[VolunteerByMonth] = Field(
        default_factory=list, alias="volunteerCountsByMonth"
    )
    events: List[CampaignEvent] = Field(default_factory=list)
