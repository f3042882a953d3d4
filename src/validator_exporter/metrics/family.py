"""
Metric series and families.

A `MetricSeries` is one value with its labels. Labels are kept in insertion
order and optional labels are simply not attached when their value is
missing, so an absent validator name never shows up as `validator_name=""`.

`build_family` turns the output of a commitment fan-out into a family,
tagging every series with the commitment level it was read at.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace
from typing import Literal, SupportsFloat

from prometheus_client.core import Metric

from validator_exporter.ledger import CommitmentLevel
from validator_exporter.types import Lamports

MetricType = Literal["counter", "gauge"]
"""Metric types the exporter emits."""

COMMITMENT_LABEL = "commitment"
"""Label carrying the commitment level a series was read at."""


@dataclass(frozen=True, slots=True)
class MetricSeries:
    """One sample: a numeric value and its ordered labels."""

    value: float
    """Sample value."""

    labels: tuple[tuple[str, str], ...] = ()
    """Label pairs in the order they were attached."""

    @classmethod
    def new(cls, value: SupportsFloat) -> MetricSeries:
        """A series holding an unscaled count, slot or flag."""
        return cls(value=float(value))

    @classmethod
    def new_sol(cls, amount: Lamports) -> MetricSeries:
        """A series holding a lamport amount, expressed in whole SOL."""
        return cls(value=amount.to_sol())

    def with_label(self, key: str, value: str) -> MetricSeries:
        """
        Attach a label.

        Raises:
            ValueError: If the label is already set on this series.
        """
        if any(existing == key for existing, _ in self.labels):
            raise ValueError(f"label {key!r} is already set")
        return replace(self, labels=self.labels + ((key, str(value)),))

    def with_optional_label(self, key: str, value: str | None) -> MetricSeries:
        """Attach a label only when a value is present."""
        if value is None:
            return self
        return self.with_label(key, value)

    def label_dict(self) -> dict[str, str]:
        """Labels as a dict, preserving attachment order."""
        return dict(self.labels)


@dataclass(frozen=True, slots=True)
class MetricFamily:
    """A named group of same-typed series sharing help text."""

    name: str
    """Metric name, without the `_total` suffix for counters."""

    help: str
    """Static help text."""

    type_: MetricType
    """Either `counter` or `gauge`."""

    series: tuple[MetricSeries, ...] = ()
    """Series in emission order."""

    def to_prometheus(self) -> Metric:
        """
        Convert to a prometheus_client metric for exposition.

        Counter samples carry the conventional `_total` suffix.
        """
        metric = Metric(self.name, self.help, self.type_)
        sample_name = f"{self.name}_total" if self.type_ == "counter" else self.name
        for series in self.series:
            metric.add_sample(sample_name, series.label_dict(), series.value)
        return metric


def build_family(
    name: str,
    help: str,
    type_: MetricType,
    per_level: Iterable[tuple[CommitmentLevel, MetricSeries]],
) -> MetricFamily:
    """
    Assemble a family from per-commitment results.

    Each series receives a trailing `commitment` label. Levels that produced
    no value are simply not present in `per_level`, so the family may hold
    fewer series than there are levels, including none.

    Args:
        name: Metric name.
        help: Help text.
        type_: Metric type.
        per_level: `(level, series)` pairs, typically the output of
            `CommitmentSnapshots.for_each_commitment`.

    Returns:
        The assembled family.
    """
    return MetricFamily(
        name=name,
        help=help,
        type_=type_,
        series=tuple(
            series.with_label(COMMITMENT_LABEL, level.value) for level, series in per_level
        ),
    )
