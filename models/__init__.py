"""
Data Models
"""
from .schemas import (
    FeedSource,
    CandidateArticle,
    ScoredArticle,
    IssueArticle,
    ArticleSearchResult,
    Donation,
    VolunteerByMonth,
    CampaignEvent,
    ExpandedMetrics,
    is_http_url,
)
from .insights import (
    DeepDiveCategory,
    InsightBlock,
    DeepDiveInsights,
    AxisSingleChart,
    AxisMultiChart,
    ChartSeries,
    PieChart,
    PieSlice,
    ChartSpec,
    DeepDiveResult,
    chart_variant,
    describe_chart,
)

__all__ = [
    "FeedSource",
    "CandidateArticle",
    "ScoredArticle",
    "IssueArticle",
    "ArticleSearchResult",
    "Donation",
    "VolunteerByMonth",
    "CampaignEvent",
    "ExpandedMetrics",
    "is_http_url",
    "DeepDiveCategory",
    "InsightBlock",
    "DeepDiveInsights",
    "AxisSingleChart",
    "AxisMultiChart",
    "ChartSeries",
    "PieChart",
    "PieSlice",
    "ChartSpec",
    "DeepDiveResult",
    "chart_variant",
    "describe_chart",
]
