"""
Aggregation of meal rows into a period summary.
"""

from dataclasses import dataclass

from line_health_agent.models import NUTRIENTS, DateRange, NutrientVector


@dataclass(frozen=True)
class MealSummary:
    date_range: DateRange
    totals: NutrientVector

    @property
    def days(self) -> int:
        return self.date_range.days

    def average(self, attr: str) -> float:
        return getattr(self.totals, attr) / self.days


def summarize_meals(entries: list, date_range: DateRange) -> MealSummary:
    """Sum the nutrients of `entries` over `date_range`.

    The range must already be concrete (the ALL sentinel replaced by the
    stored min/max dates) for the per-day averages to mean anything, and
    `entries` must not be empty; callers reply "no records" instead.
    """
    if not entries:
        raise ValueError("summarize_meals needs at least one entry")

    totals = NutrientVector()
    for entry in entries:
        totals = totals + entry.nutrients
    return MealSummary(date_range=date_range, totals=totals)


def format_summary(summary: MealSummary) -> str:
    lines = [f"{summary.date_range.label()} のサマリー"]
    for attr, label, unit in NUTRIENTS:
        total = getattr(summary.totals, attr)
        lines.append(
            f"{label}: {total:.1f} {unit}（平均 {summary.average(attr):.1f} {unit}/日）"
        )
    return "\n".join(lines)
