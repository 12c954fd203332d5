"""Campaign metric roll-ups (totals and per-month / per-city aggregates)."""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, List, Set

from pydantic import BaseModel

from models import ExpandedMetrics, VolunteerByMonth


class MetricSummary(BaseModel):
    total_raised_usd: float
    donors: int
    avg_donation_usd: int
    volunteers: int
    events: int


def _month_key(iso_date: str) -> str:
    return str(iso_date or "")[:7]


def build_metric_summary(metrics: ExpandedMetrics) -> MetricSummary:
    total = sum(d.amount_usd for d in metrics.donations)
    donors = len(metrics.donations)
    # round half up, matching how the site displays averages
    average = int(total / donors + 0.5) if donors else 0
    return MetricSummary(
        total_raised_usd=total,
        donors=donors,
        avg_donation_usd=average,
        volunteers=sum(v.count for v in metrics.volunteer_counts_by_month),
        events=len(metrics.events),
    )


def build_donations_by_month(metrics: ExpandedMetrics) -> List[Dict[str, object]]:
    totals: Dict[str, float] = defaultdict(float)
    for donation in metrics.donations:
        totals[_month_key(donation.date)] += donation.amount_usd
    return [{"month": month, "total": totals[month]} for month in sorted(totals)]


def build_donations_by_city(metrics: ExpandedMetrics) -> List[Dict[str, object]]:
    """Insertion order: first city seen comes first."""
    totals: Dict[str, float] = {}
    for donation in metrics.donations:
        label = f"{donation.city}, {donation.state}"
        totals[label] = totals.get(label, 0.0) + donation.amount_usd
    return [{"name": name, "value": value} for name, value in totals.items()]


def build_event_attendance_by_month(metrics: ExpandedMetrics) -> List[Dict[str, object]]:
    totals: Dict[str, int] = defaultdict(int)
    for event in metrics.events:
        totals[_month_key(event.date)] += event.attendees
    return [{"month": month, "attendees": totals[month]} for month in sorted(totals)]


def build_donors_by_month(metrics: ExpandedMetrics) -> List[Dict[str, object]]:
    donors: Dict[str, Set[str]] = defaultdict(set)
    for donation in metrics.donations:
        donors[_month_key(donation.date)].add(donation.name)
    return [{"month": month, "count": len(donors[month])} for month in sorted(donors)]


def build_events_held_by_month(metrics: ExpandedMetrics) -> List[Dict[str, object]]:
    counts: Dict[str, int] = defaultdict(int)
    for event in metrics.events:
        counts[_month_key(event.date)] += 1
    return [{"month": month, "count": counts[month]} for month in sorted(counts)]


def build_volunteer_counts_by_month(metrics: ExpandedMetrics) -> List[VolunteerByMonth]:
    return sorted(metrics.volunteer_counts_by_month, key=lambda v: v.month)


def build_metrics_overview(metrics: ExpandedMetrics) -> Dict[str, object]:
    """Everything above in one JSON-ready payload."""
    return {
        "summary": build_metric_summary(metrics).model_dump(),
        "donationsByMonth": build_donations_by_month(metrics),
        "donationsByCity": build_donations_by_city(metrics),
        "eventAttendanceByMonth": build_event_attendance_by_month(metrics),
        "donorsByMonth": build_donors_by_month(metrics),
        "eventsHeldByMonth": build_events_held_by_month(metrics),
        "volunteerCountsByMonth": [
            v.model_dump() for v in build_volunteer_counts_by_month(metrics)
        ],
    }
