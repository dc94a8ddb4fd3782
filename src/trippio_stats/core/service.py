"""Dashboard statistics facade coordinating probes, fan-out and reducers."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, List, Optional, Sequence

from trippio_stats.aggregation import reducers
from trippio_stats.aggregation.fallback import FixedBaselinePolicy
from trippio_stats.aggregation.reporter import LoggingStageReporter
from trippio_stats.core.config import StatsConfig
from trippio_stats.domain.interfaces import (
    IFallbackPolicy,
    IStageReporter,
    IStatisticsService,
)
from trippio_stats.domain.models import (
    MonthlyStats,
    ProbeResult,
    Stage,
    StageOutcome,
    StageReport,
    StatsSnapshot,
    UserRecord,
)
from trippio_stats.fanout.executor import (
    BoundedFanOutExecutor,
    CancellationToken,
    ProbeTask,
)
from trippio_stats.probes.endpoints import EndpointProbes
from trippio_stats.utils.dates import local_now, month_window


logger = logging.getLogger(__name__)


class DashboardStatisticsService(IStatisticsService):
    """High-level API that assembles one statistics snapshot per call.

    The pipeline never raises. Stages that fail are skipped, and a result
    with no users, orders or hotels is replaced by the fallback policy's
    baseline.
    """

    def __init__(
        self,
        probes: EndpointProbes,
        executor: BoundedFanOutExecutor,
        *,
        config: Optional[StatsConfig] = None,
        fallback_policy: Optional[IFallbackPolicy] = None,
        reporter: Optional[IStageReporter] = None,
        clock: Callable[[], datetime] = local_now,
        on_close: Optional[Callable[[], Any]] = None,
    ) -> None:
        self._probes = probes
        self._executor = executor
        self._config = config or StatsConfig()
        self._fallback = fallback_policy or FixedBaselinePolicy()
        self._reporter = reporter or LoggingStageReporter()
        self._clock = clock
        self._on_close = on_close

    async def get_statistics(
        self, cancel_token: Optional[CancellationToken] = None
    ) -> StatsSnapshot:
        try:
            snapshot = await self._collect(cancel_token)
            final = reducers.finalize_snapshot(snapshot, self._fallback)
        except Exception:
            logger.exception("statistics_pipeline_failed")
            final = self._fallback.baseline()
            self._report(
                Stage.SNAPSHOT,
                StageOutcome.DEGRADED,
                reason="unexpected_error",
                snapshot=final,
            )
            return final

        if final is snapshot:
            self._report(Stage.SNAPSHOT, StageOutcome.RETURNED, snapshot=final)
        else:
            self._report(
                Stage.SNAPSHOT,
                StageOutcome.DEGRADED,
                reason="no_live_data",
                snapshot=final,
            )
        return final

    async def get_monthly_stats(
        self, year: Optional[int] = None
    ) -> List[MonthlyStats]:
        now = self._clock()
        target_year = year or now.year
        try:
            return await self._collect_monthly(target_year, now)
        except Exception:
            logger.exception("monthly_stats_failed", extra={"year": target_year})
            return [MonthlyStats(month=month) for month in range(1, 13)]

    def get_mock_stats(self) -> StatsSnapshot:
        return self._fallback.baseline()

    async def aclose(self) -> None:
        if self._on_close is not None:
            await self._on_close()

    async def __aenter__(self) -> "DashboardStatisticsService":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    async def _collect(
        self, cancel_token: Optional[CancellationToken]
    ) -> StatsSnapshot:
        snapshot = StatsSnapshot()
        now = self._clock()

        revenue, users, hotels = await self._executor.run(
            [
                ProbeTask(
                    "revenue", lambda: self._probes.fetch_month_to_date_revenue(now)
                ),
                ProbeTask("user_count", self._probes.fetch_user_count),
                ProbeTask("hotel_list", self._probes.fetch_hotel_list),
            ],
            cancel_token,
        )
        snapshot = reducers.apply_revenue(snapshot, revenue)
        self._report_probe(Stage.REVENUE, revenue, value=snapshot.total_revenue)
        snapshot = reducers.apply_user_count(snapshot, users)
        self._report_probe(Stage.USERS, users, value=snapshot.total_users)
        snapshot = reducers.apply_hotel_list(snapshot, hotels)
        self._report_probe(Stage.HOTELS, hotels, value=snapshot.total_hotels)

        if _is_cancelled(cancel_token):
            self._report(Stage.USER_SAMPLE, StageOutcome.CANCELLED)
            return snapshot
        return await self._collect_orders_and_bookings(snapshot, cancel_token)

    async def _collect_orders_and_bookings(
        self,
        snapshot: StatsSnapshot,
        cancel_token: Optional[CancellationToken],
    ) -> StatsSnapshot:
        page_size = self._config.user_page_size
        page = await self._executor.run_one(
            ProbeTask("user_page", lambda: self._probes.fetch_user_page(page_size)),
            cancel_token,
        )
        sample = reducers.select_user_sample(page, self._config.sample_cap)
        self._report_probe(
            Stage.USER_SAMPLE,
            page,
            page_length=len(page.value or []),
            sample_size=len(sample),
        )

        order_results: Sequence[ProbeResult[int]] = ()
        booking_results: Sequence[ProbeResult[int]] = ()
        if sample:
            order_results, booking_results = await self._fan_out_per_user(
                sample, cancel_token
            )
            self._report(
                Stage.PER_USER_FANOUT,
                StageOutcome.APPLIED,
                users=len(sample),
                orders=reducers.sum_counts(order_results),
                bookings=reducers.sum_counts(booking_results),
            )

        global_orders, global_bookings = await self._global_fallback(
            reducers.needs_global_fallback(order_results),
            reducers.needs_global_fallback(booking_results),
            cancel_token,
        )
        snapshot = reducers.apply_order_total(
            snapshot, reducers.resolve_count(order_results, global_orders)
        )
        snapshot = reducers.apply_booking_total(
            snapshot, reducers.resolve_count(booking_results, global_bookings)
        )
        return snapshot

    async def _fan_out_per_user(
        self,
        sample: Sequence[UserRecord],
        cancel_token: Optional[CancellationToken],
    ) -> tuple[List[ProbeResult[int]], List[ProbeResult[int]]]:
        tasks: List[ProbeTask[int]] = []
        for user in sample:
            tasks.append(
                ProbeTask(
                    f"orders:{user.id}",
                    _bind(self._probes.fetch_order_count_for_user, user.id),
                )
            )
        for user in sample:
            tasks.append(
                ProbeTask(
                    f"bookings:{user.id}",
                    _bind(self._probes.fetch_booking_count_for_user, user.id),
                )
            )
        results = await self._executor.run(tasks, cancel_token)
        return results[: len(sample)], results[len(sample) :]

    async def _global_fallback(
        self,
        orders_needed: bool,
        bookings_needed: bool,
        cancel_token: Optional[CancellationToken],
    ) -> tuple[Optional[ProbeResult[int]], Optional[ProbeResult[int]]]:
        tasks: List[ProbeTask[int]] = []
        if orders_needed:
            tasks.append(
                ProbeTask("global_orders", self._probes.fetch_global_order_count)
            )
        if bookings_needed:
            tasks.append(
                ProbeTask("global_bookings", self._probes.fetch_global_booking_count)
            )
        if not tasks:
            return None, None

        settled = await self._executor.run(tasks, cancel_token)
        results = iter(settled)
        global_orders = next(results) if orders_needed else None
        global_bookings = next(results) if bookings_needed else None
        if all(_was_cancelled(result) for result in settled):
            self._report(Stage.GLOBAL_FALLBACK, StageOutcome.CANCELLED)
        else:
            self._report(
                Stage.GLOBAL_FALLBACK,
                StageOutcome.APPLIED,
                orders=_value_or_none(global_orders),
                bookings=_value_or_none(global_bookings),
            )
        return global_orders, global_bookings

    async def _collect_monthly(self, year: int, now: datetime) -> List[MonthlyStats]:
        tasks: List[ProbeTask[Any]] = []
        for month in range(1, 13):
            start, end = month_window(year, month, now)
            tasks.append(
                ProbeTask(
                    f"revenue:{year}-{month:02d}",
                    _bind(self._probes.fetch_revenue, start, end),
                )
            )
            tasks.append(
                ProbeTask(
                    f"order_count:{year}-{month:02d}",
                    _bind(self._probes.fetch_order_count, start, end),
                )
            )
        results = await self._executor.run(tasks)

        months: List[MonthlyStats] = []
        for index, month in enumerate(range(1, 13)):
            revenue, orders = results[2 * index], results[2 * index + 1]
            months.append(
                MonthlyStats(
                    month=month,
                    revenue=revenue.value if revenue.ok and revenue.value else 0,
                    orders=orders.value if orders.ok and orders.value else 0,
                )
            )
        failed = sum(1 for result in results if not result.ok)
        self._report(
            Stage.MONTHLY, StageOutcome.APPLIED, year=year, failed_probes=failed
        )
        return months

    def _report_probe(
        self, stage: Stage, result: ProbeResult[Any], **detail: Any
    ) -> None:
        if result.ok:
            self._report(stage, StageOutcome.APPLIED, **detail)
        elif _was_cancelled(result):
            self._report(stage, StageOutcome.CANCELLED)
        else:
            reason = result.reason.model_dump() if result.reason else {}
            self._report(stage, StageOutcome.SKIPPED, reason=reason)

    def _report(self, stage: Stage, outcome: StageOutcome, **detail: Any) -> None:
        try:
            self._reporter.record(
                StageReport(stage=stage, outcome=outcome, detail=detail)
            )
        except Exception:
            logger.exception("stage_report_failed", extra={"stage": stage.value})


def _is_cancelled(cancel_token: Optional[CancellationToken]) -> bool:
    return cancel_token is not None and cancel_token.cancelled


def _was_cancelled(result: ProbeResult[Any]) -> bool:
    return result.reason is not None and result.reason.kind == "cancelled"


def _bind(func: Callable[..., Any], *args: Any) -> Callable[[], Any]:
    def call() -> Any:
        return func(*args)

    return call


def _value_or_none(result: Optional[ProbeResult[int]]) -> Optional[int]:
    if result is None or not result.ok:
        return None
    return result.value
