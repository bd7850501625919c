"""Chart-ready data shapes."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ChartDataset:
    """One series of values aligned with the chart labels."""

    label: str
    data: list[float]


@dataclass(frozen=True)
class ChartData:
    """Labels plus datasets for a single chart."""

    labels: list[str]
    datasets: list[ChartDataset]


@dataclass(frozen=True)
class DistributionChart(ChartData):
    """Bucketed counts with each bucket's share of the total."""

    percentages: list[float] = field(default_factory=list)


@dataclass(frozen=True)
class SpendingDetail:
    """Hover detail for a drink contributing to a spending bucket."""

    name: str
    cost: float
    series: str
    time: str


@dataclass(frozen=True)
class SpendingOverTimeChart(ChartData):
    """Daily spending with per-day drink details."""

    hover_data: dict[str, list[SpendingDetail]] = field(default_factory=dict)
