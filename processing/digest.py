"""
Digest Builder
把候选文章或指标表渲染为紧凑、确定性的纯文本 (作为生成模型的输入)
"""
from typing import Any, Dict, List, NamedTuple, Optional, Sequence

from models import ExpandedMetrics, ScoredArticle


DONATION_COLUMNS = ("name", "city", "state", "age", "amountUSD", "date")
VOLUNTEER_COLUMNS = ("month", "count")
EVENT_COLUMNS = ("date", "type", "city", "state", "attendees")

_CSV_SPECIAL_CHARS = (",", '"', "\n", "\r")


class MetricsCsvSections(NamedTuple):
    """三张指标表的 CSV 文本"""
    donations_csv: str
    volunteers_csv: str
    events_csv: str


def build_articles_digest(articles: Sequence[ScoredArticle]) -> str:
    """每篇文章一段, 按顺序编号, 段落之间空行分隔"""
    paragraphs: List[str] = []
    for index, article in enumerate(articles, start=1):
        lines: List[Optional[str]] = [
            f"Article {index}: {article.title}",
            f"Source: {article.source}",
            f"Published: {article.published_at or 'unknown'}",
            f"Link: {article.link}",
            f"ImageUrl: {article.image_url}" if article.image_url else None,
            f"Summary: {article.summary}",
            f"Score: {article.score:.2f}",
        ]
        paragraphs.append("\n".join(line for line in lines if line))
    return "\n\n".join(paragraphs)


def _format_cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def escape_csv_value(value: Any) -> str:
    """含逗号 / 引号 / 换行时用双引号包裹, 内部引号加倍"""
    text = _format_cell(value)
    if any(char in text for char in _CSV_SPECIAL_CHARS):
        return '"' + text.replace('"', '""') + '"'
    return text


def to_csv(rows: Sequence[Dict[str, Any]], columns: Sequence[str]) -> str:
    """表头一行 + 每条记录一行; 无记录时只有表头"""
    lines = [",".join(columns)]
    for row in rows:
        lines.append(",".join(escape_csv_value(row.get(column)) for column in columns))
    return "\n".join(lines)


def build_metrics_csv(metrics: ExpandedMetrics) -> MetricsCsvSections:
    """
    把指标数据转成三段 CSV

    与逐条 JSON 相比, 字段名只在表头出现一次, 显著减少 token 数。
    """
    donations = [d.model_dump(by_alias=True) for d in metrics.donations]
    volunteers = [v.model_dump(by_alias=True) for v in metrics.volunteer_counts_by_month]
    events = [e.model_dump(by_alias=True) for e in metrics.events]
    return MetricsCsvSections(
        donations_csv=to_csv(donations, DONATION_COLUMNS),
        volunteers_csv=to_csv(volunteers, VOLUNTEER_COLUMNS),
        events_csv=to_csv(events, EVENT_COLUMNS),
    )


def build_metrics_digest(metrics: ExpandedMetrics) -> str:
    """三张表拼成一个带标题的文本块"""
    sections = build_metrics_csv(metrics)
    return "\n".join(
        [
            "Donations CSV:",
            sections.donations_csv,
            "",
            "Volunteer Counts CSV:",
            sections.volunteers_csv,
            "",
            "Events CSV:",
            sections.events_csv,
        ]
    )
