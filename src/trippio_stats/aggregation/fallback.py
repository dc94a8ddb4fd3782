"""Fallback policies supplying the snapshot shown when live data is missing."""

from __future__ import annotations

from trippio_stats.domain.interfaces import IFallbackPolicy
from trippio_stats.domain.models import StatsSnapshot


DEMO_BASELINE = StatsSnapshot(
    total_users=1250,
    total_orders=342,
    total_revenue=125_000_000,
    total_hotels=45,
    total_bookings=189,
)


class FixedBaselinePolicy(IFallbackPolicy):
    """Always answers with the same canned snapshot, regardless of history."""

    def __init__(self, snapshot: StatsSnapshot = DEMO_BASELINE) -> None:
        self._snapshot = snapshot

    def baseline(self) -> StatsSnapshot:
        return self._snapshot
