"""Pure reducers that fold probe results into a statistics snapshot.

Every function here is side-effect free: given the same snapshot and results
it returns the same snapshot, which keeps each fallback decision testable
without a network.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence, Tuple

from trippio_stats.domain.interfaces import IFallbackPolicy
from trippio_stats.domain.models import ProbeResult, StatsSnapshot, UserRecord


def apply_revenue(
    snapshot: StatsSnapshot, result: ProbeResult[float]
) -> StatsSnapshot:
    if not result.ok or result.value is None:
        return snapshot
    return snapshot.model_copy(update={"total_revenue": result.value})


def apply_user_count(
    snapshot: StatsSnapshot, result: ProbeResult[int]
) -> StatsSnapshot:
    if not result.ok or result.value is None:
        return snapshot
    return snapshot.model_copy(update={"total_users": result.value})


def apply_hotel_list(
    snapshot: StatsSnapshot, result: ProbeResult[Sequence[Any]]
) -> StatsSnapshot:
    if not result.ok or result.value is None:
        return snapshot
    return snapshot.model_copy(update={"total_hotels": len(result.value)})


def select_user_sample(
    result: ProbeResult[Sequence[UserRecord]], cap: int
) -> Tuple[UserRecord, ...]:
    """First ``cap`` users of a fulfilled page; empty when the page is unusable."""

    if not result.ok or not result.value:
        return ()
    return tuple(result.value[:cap])


def sum_counts(results: Sequence[ProbeResult[int]]) -> Optional[int]:
    """Sum fulfilled counts; rejected ones add 0. None if nothing succeeded."""

    fulfilled = [result.value or 0 for result in results if result.ok]
    if not fulfilled:
        return None
    return sum(fulfilled)


def needs_global_fallback(results: Sequence[ProbeResult[int]]) -> bool:
    """True when the per-user path produced nothing usable for a field."""

    return sum_counts(results) is None


def resolve_count(
    per_user: Sequence[ProbeResult[int]],
    global_result: Optional[ProbeResult[int]] = None,
) -> Optional[int]:
    total = sum_counts(per_user)
    if total is not None:
        return total
    if global_result is not None and global_result.ok:
        return global_result.value
    return None


def apply_order_total(
    snapshot: StatsSnapshot, total: Optional[int]
) -> StatsSnapshot:
    if total is None:
        return snapshot
    return snapshot.model_copy(update={"total_orders": total})


def apply_booking_total(
    snapshot: StatsSnapshot, total: Optional[int]
) -> StatsSnapshot:
    if total is None:
        return snapshot
    return snapshot.model_copy(update={"total_bookings": total})


def needs_degradation(snapshot: StatsSnapshot) -> bool:
    return (
        snapshot.total_users == 0
        and snapshot.total_orders == 0
        and snapshot.total_hotels == 0
    )


def finalize_snapshot(
    snapshot: StatsSnapshot, policy: IFallbackPolicy
) -> StatsSnapshot:
    if needs_degradation(snapshot):
        return policy.baseline()
    return snapshot
