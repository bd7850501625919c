"""Chart transforms over a user's drinks.

Every function here is pure: it reads the drinks it is given, never mutates
them, and returns fresh chart data. Calendar-date buckets use the UTC date of
``created_at``; weekday buckets and hover times use the display timezone.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import UTC, tzinfo

from drink_tracker.domain.charts import (
    ChartData,
    ChartDataset,
    DistributionChart,
    SpendingDetail,
    SpendingOverTimeChart,
)
from drink_tracker.domain.drinks import Drink, DrinkStats
from drink_tracker.services.drinks import compute_stats

DAY_NAMES = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)
MIN_RATING = 1
MAX_RATING = 5


@dataclass(frozen=True)
class Dashboard:
    """Every chart plus summary stats for one user."""

    stats: DrinkStats
    spending_over_time: SpendingOverTimeChart
    drinks_by_series: DistributionChart
    rating_distribution: DistributionChart
    drinks_by_day_of_week: DistributionChart
    cumulative_total_cans: ChartData


def spending_over_time(
    drinks: Sequence[Drink], tz: tzinfo = UTC
) -> SpendingOverTimeChart:
    """Sum cost per calendar day, with the drinks behind each day."""
    daily_spending: dict[str, float] = {}
    hover_data: dict[str, list[SpendingDetail]] = {}
    for drink in drinks:
        day = _utc_date(drink)
        daily_spending[day] = daily_spending.get(day, 0) + drink.cost
        hover_data.setdefault(day, []).append(
            SpendingDetail(
                name=drink.name,
                cost=drink.cost,
                series=drink.series,
                time=drink.created_at.astimezone(tz).strftime("%I:%M %p"),
            )
        )

    labels = sorted(daily_spending)
    return SpendingOverTimeChart(
        labels=labels,
        datasets=[
            ChartDataset(
                label="Daily Spending",
                data=[daily_spending[day] for day in labels],
            )
        ],
        hover_data={day: hover_data[day] for day in labels},
    )


def drinks_by_series(drinks: Sequence[Drink]) -> DistributionChart:
    """Count drinks per series present in the input."""
    counts: dict[str, int] = {}
    for drink in drinks:
        counts[drink.series] = counts.get(drink.series, 0) + 1

    labels = sorted(counts)
    values = [counts[series] for series in labels]
    return DistributionChart(
        labels=labels,
        datasets=[ChartDataset(label="Drinks", data=values)],
        percentages=_percentages(values, len(drinks)),
    )


def rating_distribution(drinks: Sequence[Drink]) -> DistributionChart:
    """Histogram of ratings from one to five stars."""
    counts = [0] * MAX_RATING
    for drink in drinks:
        rating = max(MIN_RATING, min(MAX_RATING, drink.rating))
        counts[rating - 1] += 1

    return DistributionChart(
        labels=[f"{rating}★" for rating in range(MIN_RATING, MAX_RATING + 1)],
        datasets=[ChartDataset(label="Ratings", data=counts)],
        percentages=_percentages(counts, len(drinks)),
    )


def drinks_by_day_of_week(
    drinks: Sequence[Drink], tz: tzinfo = UTC
) -> DistributionChart:
    """Count drinks per weekday, Monday first."""
    counts = [0] * len(DAY_NAMES)
    for drink in drinks:
        counts[drink.created_at.astimezone(tz).weekday()] += 1

    return DistributionChart(
        labels=list(DAY_NAMES),
        datasets=[ChartDataset(label="Drinks", data=counts)],
        percentages=_percentages(counts, len(drinks)),
    )


def cumulative_total_cans(drinks: Sequence[Drink]) -> ChartData:
    """Running count of drinks through the end of each calendar day."""
    totals: dict[str, int] = {}
    running = 0
    for drink in sorted(drinks, key=lambda item: item.created_at):
        running += 1
        totals[_utc_date(drink)] = running

    labels = sorted(totals)
    return ChartData(
        labels=labels,
        datasets=[
            ChartDataset(label="Total Cans", data=[totals[day] for day in labels])
        ],
    )


def build_dashboard(drinks: Sequence[Drink], tz: tzinfo = UTC) -> Dashboard:
    """Compute stats and every chart for the same drinks."""
    return Dashboard(
        stats=compute_stats(drinks),
        spending_over_time=spending_over_time(drinks, tz),
        drinks_by_series=drinks_by_series(drinks),
        rating_distribution=rating_distribution(drinks),
        drinks_by_day_of_week=drinks_by_day_of_week(drinks, tz),
        cumulative_total_cans=cumulative_total_cans(drinks),
    )


def _utc_date(drink: Drink) -> str:
    return drink.created_at.astimezone(UTC).date().isoformat()


def _percentages(counts: list[int], total: int) -> list[float]:
    if total == 0:
        return [0.0 for _ in counts]
    return [count / total * 100 for count in counts]
