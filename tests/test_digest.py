"""Tests for article and metrics digest rendering."""

from __future__ import annotations

import csv
import io

from models import Donation, ExpandedMetrics, ScoredArticle
from processing.digest import (
    build_articles_digest,
    build_metrics_csv,
    build_metrics_digest,
    escape_csv_value,
    to_csv,
)


def _scored(index: int, **overrides) -> ScoredArticle:
    link = f"https://news.example.com/{index}"
    fields = dict(
        id=link,
        title=f"Headline {index}",
        link=link,
        summary=f"Summary {index}",
        published_at=None,
        source="Example",
        feed_url="https://news.example.com/rss.xml",
        image_url=None,
        score=1.0,
    )
    fields.update(overrides)
    return ScoredArticle(**fields)


def _metrics() -> ExpandedMetrics:
    return ExpandedMetrics.model_validate(
        {
            "donations": [
                {
                    "name": 'Smith, "Jr"',
                    "city": "Austin",
                    "state": "TX",
                    "age": 41,
                    "amountUSD": 250.0,
                    "date": "2024-03-02",
                },
                {
                    "name": "Lee",
                    "city": "Reno",
                    "state": "NV",
                    "age": 29,
                    "amountUSD": 12.5,
                    "date": "2024-04-11",
                },
            ],
            "volunteerCountsByMonth": [{"month": "2024-03", "count": 14}],
            "events": [
                {
                    "date": "2024-03-20",
                    "type": "Town hall",
                    "city": "Austin",
                    "state": "TX",
                    "attendees": 320,
                }
            ],
        }
    )


def test_articles_digest_format() -> None:
    first = _scored(
        1,
        published_at="2024-10-01T14:30:00.000Z",
        image_url="https://img.example.com/1.jpg",
        score=7.5,
    )
    second = _scored(2, score=0.5)

    digest = build_articles_digest([first, second])

    assert digest == (
        "Article 1: Headline 1\n"
        "Source: Example\n"
        "Published: 2024-10-01T14:30:00.000Z\n"
        "Link: https://news.example.com/1\n"
        "ImageUrl: https://img.example.com/1.jpg\n"
        "Summary: Summary 1\n"
        "Score: 7.50\n"
        "\n"
        "Article 2: Headline 2\n"
        "Source: Example\n"
        "Published: unknown\n"
        "Link: https://news.example.com/2\n"
        "Summary: Summary 2\n"
        "Score: 0.50"
    )


def test_articles_digest_is_byte_identical_for_same_input() -> None:
    articles = [_scored(i, score=float(i)) for i in range(5)]

    assert build_articles_digest(articles) == build_articles_digest(list(articles))


def test_escaped_value_round_trips_through_csv_reader() -> None:
    sections = build_metrics_csv(_metrics())

    rows = list(csv.reader(io.StringIO(sections.donations_csv)))

    assert rows[0] == ["name", "city", "state", "age", "amountUSD", "date"]
    assert rows[1] == ['Smith, "Jr"', "Austin", "TX", "41", "250", "2024-03-02"]
    assert rows[2] == ["Lee", "Reno", "NV", "29", "12.5", "2024-04-11"]


def test_escape_csv_value_rules() -> None:
    assert escape_csv_value("plain") == "plain"
    assert escape_csv_value('say "hi"') == '"say ""hi"""'
    assert escape_csv_value("two\nlines") == '"two\nlines"'
    assert escape_csv_value(None) == ""
    assert escape_csv_value(3.0) == "3"


def test_empty_tables_render_header_only() -> None:
    sections = build_metrics_csv(ExpandedMetrics())

    assert sections.donations_csv == "name,city,state,age,amountUSD,date"
    assert sections.volunteers_csv == "month,count"
    assert sections.events_csv == "date,type,city,state,attendees"
    assert to_csv([], ("a", "b")) == "a,b"


def test_metrics_digest_sections() -> None:
    digest = build_metrics_digest(_metrics())

    assert digest.startswith("Donations CSV:\nname,city,state,age,amountUSD,date\n")
    assert "\n\nVolunteer Counts CSV:\nmonth,count\n2024-03,14\n" in digest
    assert digest.endswith("Events CSV:\ndate,type,city,state,attendees\n2024-03-20,Town hall,Austin,TX,320")
    assert build_metrics_digest(_metrics()) == digest


def test_donation_accepts_field_names() -> None:
    donation = Donation(name="A", city="B", state="C", age=30, amount_usd=5, date="2024-01-01")

    assert donation.model_dump(by_alias=True)["amountUSD"] == 5
