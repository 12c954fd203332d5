"""Tests for deep-dive insight and chart contracts."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from models import (
    ArticleSearchResult,
    AxisMultiChart,
    AxisSingleChart,
    DeepDiveCategory,
    DeepDiveResult,
    PieChart,
    describe_chart,
)


NARRATIVE = "Fundraising accelerated sharply after the spring town halls."


def _block(name: str) -> dict:
    return {
        "headline": f"{name} headline",
        "summary": f"{name} grew steadily through the quarter.",
        "bullets": ["First point", "Second point", "Third point"],
        "caveats": None,
    }


def _insights() -> dict:
    return {category.value: _block(category.value) for category in DeepDiveCategory}


def _payload(chart: dict) -> dict:
    return {"insights": _insights(), "chart": chart}


def test_well_formed_single_series_passes() -> None:
    result = DeepDiveResult.model_validate(
        _payload(
            {
                "kind": "line",
                "title": "Monthly donations",
                "narrative": NARRATIVE,
                "forCategory": "fundsRaised",
                "categories": ["2024-01", "2024-02", "2024-03"],
                "values": [1200, 1850.5, 2400],
                "yAxisLabel": "USD",
            }
        )
    )

    assert isinstance(result.chart, AxisSingleChart)
    assert result.chart.for_category is DeepDiveCategory.FUNDS_RAISED
    assert result.insights.for_category(DeepDiveCategory.DONORS).headline == "donors headline"


def test_values_and_series_together_are_rejected() -> None:
    with pytest.raises(ValidationError) as excinfo:
        DeepDiveResult.model_validate(
            _payload(
                {
                    "kind": "bar",
                    "title": "Mixed",
                    "narrative": NARRATIVE,
                    "categories": ["a", "b"],
                    "values": [1, 2],
                    "series": [
                        {"label": "x", "data": [1, 2]},
                        {"label": "y", "data": [3, 4]},
                    ],
                }
            )
        )

    assert "'values' or 'series', never both" in str(excinfo.value)


def test_single_series_length_mismatch_is_rejected() -> None:
    with pytest.raises(ValidationError, match="categories and values must be same length"):
        DeepDiveResult.model_validate(
            _payload(
                {
                    "kind": "bar",
                    "title": "Short",
                    "narrative": NARRATIVE,
                    "categories": ["a", "b", "c"],
                    "values": [1, 2],
                }
            )
        )


def test_multi_series_length_mismatch_is_rejected() -> None:
    with pytest.raises(ValidationError, match="mismatched: volunteers"):
        DeepDiveResult.model_validate(
            _payload(
                {
                    "kind": "area",
                    "title": "Donations vs volunteers",
                    "narrative": NARRATIVE,
                    "categories": ["2024-01", "2024-02"],
                    "series": [
                        {"label": "donations", "data": [10, 20]},
                        {"label": "volunteers", "data": [1, 2, 3]},
                    ],
                }
            )
        )


def test_multi_series_needs_at_least_two_series() -> None:
    with pytest.raises(ValidationError):
        DeepDiveResult.model_validate(
            _payload(
                {
                    "kind": "line",
                    "title": "One series",
                    "narrative": NARRATIVE,
                    "categories": ["a"],
                    "series": [{"label": "only", "data": [1]}],
                }
            )
        )


def test_pie_chart_variant() -> None:
    result = DeepDiveResult.model_validate(
        _payload(
            {
                "kind": "pie",
                "title": "Attendance by event type",
                "narrative": NARRATIVE,
                "forCategory": "events",
                "slices": [
                    {"name": "Town hall", "value": 320},
                    {"name": "Rally", "value": 900},
                    {"name": "Canvass", "value": 75},
                ],
                "valueLabel": "Attendees",
            }
        )
    )

    assert isinstance(result.chart, PieChart)
    assert describe_chart(result.chart) == "pie chart 'Attendance by event type': 3 slices"


def test_unknown_chart_kind_is_rejected() -> None:
    with pytest.raises(ValidationError) as excinfo:
        DeepDiveResult.model_validate(
            _payload(
                {
                    "kind": "scatter",
                    "title": "Nope",
                    "narrative": NARRATIVE,
                    "categories": ["a"],
                    "values": [1],
                }
            )
        )

    assert excinfo.value.errors()[0]["type"] == "invalid_chart_kind"


def test_missing_category_block_is_rejected() -> None:
    insights = _insights()
    del insights["volunteers"]

    with pytest.raises(ValidationError, match="volunteers"):
        DeepDiveResult.model_validate(
            {
                "insights": insights,
                "chart": {
                    "kind": "bar",
                    "title": "t",
                    "narrative": NARRATIVE,
                    "categories": ["a"],
                    "values": [1],
                },
            }
        )


def test_insight_block_bullet_bounds() -> None:
    insights = _insights()
    insights["donors"]["bullets"] = ["only one"]

    with pytest.raises(ValidationError):
        DeepDiveResult.model_validate(
            {
                "insights": insights,
                "chart": {
                    "kind": "bar",
                    "title": "t",
                    "narrative": NARRATIVE,
                    "categories": ["a"],
                    "values": [1],
                },
            }
        )


def test_describe_chart_covers_every_variant() -> None:
    multi = AxisMultiChart.model_validate(
        {
            "kind": "bar",
            "title": "Compare",
            "narrative": NARRATIVE,
            "categories": ["a", "b"],
            "series": [{"label": "x", "data": [1, 2]}, {"label": "y", "data": [3, 4]}],
        }
    )

    assert describe_chart(multi) == "bar chart 'Compare': 2 points, series [x, y]"
    with pytest.raises(TypeError):
        describe_chart(object())


def test_chart_serializes_with_wire_names() -> None:
    chart = AxisSingleChart(
        kind="bar",
        title="t",
        narrative=NARRATIVE,
        for_category=DeepDiveCategory.VOLUNTEERS,
        categories=["a"],
        values=[1],
        y_axis_label="People",
    )

    dumped = chart.model_dump(mode="json", by_alias=True)

    assert dumped["forCategory"] == "volunteers"
    assert dumped["yAxisLabel"] == "People"


def _article(link: str = "https://news.example.com/1") -> dict:
    return {
        "title": "Headline",
        "link": link,
        "source": "Example",
        "description": None,
        "publishedAt": "2024-10-01T14:30:00.000Z",
        "imageUrl": None,
    }


def test_article_search_result_bounds() -> None:
    result = ArticleSearchResult.model_validate(
        {
            "issue": "Climate",
            "summary": "Coverage focused on the new climate bill and its costs.",
            "articles": [_article()],
        }
    )
    assert result.articles[0].published_at == "2024-10-01T14:30:00.000Z"

    with pytest.raises(ValidationError):
        ArticleSearchResult.model_validate(
            {"issue": "Climate", "summary": "Too short", "articles": [_article()]}
        )
    with pytest.raises(ValidationError):
        ArticleSearchResult.model_validate(
            {
                "issue": "Climate",
                "summary": "Coverage focused on the new climate bill and its costs.",
                "articles": [],
            }
        )
    with pytest.raises(ValidationError):
        ArticleSearchResult.model_validate(
            {
                "issue": "Climate",
                "summary": "Coverage focused on the new climate bill and its costs.",
                "articles": [_article(f"https://news.example.com/{i}") for i in range(11)],
            }
        )


def test_issue_article_rejects_malformed_urls_and_dates() -> None:
    base = {
        "issue": "Climate",
        "summary": "Coverage focused on the new climate bill and its costs.",
    }
    with pytest.raises(ValidationError, match="http"):
        ArticleSearchResult.model_validate({**base, "articles": [_article("not a url")]})

    bad_date = _article()
    bad_date["publishedAt"] = "yesterday"
    with pytest.raises(ValidationError, match="ISO-8601"):
        ArticleSearchResult.model_validate({**base, "articles": [bad_date]})
