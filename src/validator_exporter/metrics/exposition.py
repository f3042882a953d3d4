"""
Rendering metric families to the Prometheus text format.

The line format itself (escaping, float formatting, label ordering) is
prometheus_client's. This module only adapts `MetricFamily` values to it and
writes the result family by family, so a failing sink stops the output at the
family that could not be written.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import IO

from prometheus_client import CollectorRegistry, generate_latest
from prometheus_client.core import Metric
from prometheus_client.registry import Collector

from .family import MetricFamily

CONTENT_TYPE = "text/plain; version=0.0.4; charset=utf-8"
"""Content type of the rendered output."""


class FamilyCollector(Collector):
    """Collector yielding a fixed set of pre-built families."""

    def __init__(self, families: Iterable[MetricFamily]) -> None:
        self._families = tuple(families)

    def collect(self) -> Iterable[Metric]:
        """Yield each family as a prometheus_client metric."""
        for family in self._families:
            yield family.to_prometheus()


def render(families: Iterable[MetricFamily]) -> bytes:
    """Render families to Prometheus text format."""
    registry = CollectorRegistry(auto_describe=False)
    registry.register(FamilyCollector(families))
    return generate_latest(registry)


def write_metric(out: IO[bytes], family: MetricFamily) -> None:
    """
    Render one family and write it to a binary sink.

    Raises:
        OSError: If the sink fails. Nothing is retried.
    """
    out.write(render([family]))
