"""Deep-dive insight contracts: insight blocks and the single-chart tagged union."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
    field_validator,
    model_validator,
)


class DeepDiveCategory(str, Enum):
    """The four fixed metric categories."""

    FUNDS_RAISED = "fundsRaised"
    DONORS = "donors"
    VOLUNTEERS = "volunteers"
    EVENTS = "events"


AXIS_KINDS = ("bar", "line", "area")
AxisKind = Literal["bar", "line", "area"]


class InsightBlock(BaseModel):
    headline: str = Field(..., min_length=3, max_length=140)
    summary: str = Field(..., min_length=10, max_length=600)
    bullets: List[Annotated[str, Field(min_length=3)]] = Field(..., min_length=3, max_length=8)
    caveats: Optional[List[Annotated[str, Field(min_length=3)]]] = Field(default=None, max_length=12)


class DeepDiveInsights(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    funds_raised: InsightBlock = Field(..., alias="fundsRaised")
    donors: InsightBlock
    volunteers: InsightBlock
    events: InsightBlock

    def for_category(self, category: DeepDiveCategory) -> InsightBlock:
        return {
            DeepDiveCategory.FUNDS_RAISED: self.funds_raised,
            DeepDiveCategory.DONORS: self.donors,
            DeepDiveCategory.VOLUNTEERS: self.volunteers,
            DeepDiveCategory.EVENTS: self.events,
        }[DeepDiveCategory(category)]


class _ChartBase(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., min_length=1)
    narrative: str = Field(..., min_length=20, max_length=600)
    for_category: Optional[DeepDiveCategory] = Field(default=None, alias="forCategory")


class AxisSingleChart(_ChartBase):
    """bar/line/area with one numeric series in `values`."""

    kind: AxisKind
    categories: List[str]
    values: List[float]
    y_axis_label: Optional[str] = Field(default=None, alias="yAxisLabel")

    @model_validator(mode="after")
    def _values_match_categories(self) -> "AxisSingleChart":
        if len(self.values) != len(self.categories):
            raise ValueError("categories and values must be same length")
        return self


class ChartSeries(BaseModel):
    label: str = Field(..., min_length=1)
    data: List[float]


class AxisMultiChart(_ChartBase):
    """bar/line/area comparing 2-5 labeled series."""

    kind: AxisKind
    categories: List[str]
    series: List[ChartSeries] = Field(..., min_length=2, max_length=5)
    y_axis_label: Optional[str] = Field(default=None, alias="yAxisLabel")

    @model_validator(mode="after")
    def _series_match_categories(self) -> "AxisMultiChart":
        mismatched = [
            s.label for s in self.series if len(s.data) != len(self.categories)
        ]
        if mismatched:
            raise ValueError(
                "each series.data length must match categories length "
                f"(mismatched: {', '.join(mismatched)})"
            )
        return self


class PieSlice(BaseModel):
    name: str
    value: float


class PieChart(_ChartBase):
    kind: Literal["pie"]
    slices: List[PieSlice]
    value_label: Optional[str] = Field(default=None, alias="valueLabel")


def _present(payload: dict, key: str) -> bool:
    return payload.get(key) is not None


def chart_variant(value: Any) -> Optional[str]:
    """Resolve the variant tag: pie by kind, axis charts by which data field they carry."""
    if isinstance(value, dict):
        kind = value.get("kind")
        has_series = _present(value, "series")
    else:
        kind = getattr(value, "kind", None)
        has_series = isinstance(value, AxisMultiChart)
    if kind == "pie":
        return "pie"
    if kind in AXIS_KINDS:
        return "multi" if has_series else "single"
    return None


ChartSpec = Annotated[
    Union[
        Annotated[AxisSingleChart, Tag("single")],
        Annotated[AxisMultiChart, Tag("multi")],
        Annotated[PieChart, Tag("pie")],
    ],
    Discriminator(
        chart_variant,
        custom_error_type="invalid_chart_kind",
        custom_error_message="chart.kind must be one of bar, line, area, pie",
    ),
]


class DeepDiveResult(BaseModel):
    insights: DeepDiveInsights
    chart: ChartSpec

    @field_validator("chart", mode="before")
    @classmethod
    def _values_or_series(cls, value: Any) -> Any:
        if isinstance(value, dict) and _present(value, "values") and _present(value, "series"):
            raise ValueError("chart must use either 'values' or 'series', never both")
        return value


def describe_chart(chart: Union[AxisSingleChart, AxisMultiChart, PieChart]) -> str:
    """One-line description of a chart, used for logs and CLI output."""
    if isinstance(chart, AxisSingleChart):
        return f"{chart.kind} chart '{chart.title}': {len(chart.categories)} points, single series"
    if isinstance(chart, AxisMultiChart):
        labels = ", ".join(s.label for s in chart.series)
        return f"{chart.kind} chart '{chart.title}': {len(chart.categories)} points, series [{labels}]"
    if isinstance(chart, PieChart):
        return f"pie chart '{chart.title}': {len(chart.slices)} slices"
    raise TypeError(f"Unknown chart variant: {type(chart).__name__}")
