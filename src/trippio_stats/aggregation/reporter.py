"""Stage reporters: observability hooks for the aggregation pipeline."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from trippio_stats.domain.interfaces import IStageReporter
from trippio_stats.domain.models import StageOutcome, StageReport, StatsSnapshot


class LoggingStageReporter(IStageReporter):
    """Logs each stage outcome with a structured payload."""

    _LEVELS = {
        StageOutcome.APPLIED: logging.INFO,
        StageOutcome.RETURNED: logging.INFO,
        StageOutcome.SKIPPED: logging.WARNING,
        StageOutcome.CANCELLED: logging.WARNING,
        StageOutcome.DEGRADED: logging.WARNING,
    }

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger(__name__)

    def record(self, report: StageReport) -> None:
        self._logger.log(
            self._LEVELS[report.outcome],
            f"stage_{report.outcome.value}",
            extra={"stage": report.stage.value, "detail": report.detail},
        )


class InMemoryStageReporter(IStageReporter):
    """Keeps reports and the last returned snapshot for later inspection."""

    def __init__(self, delegate: Optional[IStageReporter] = None) -> None:
        self._delegate = delegate
        self._reports: List[StageReport] = []
        self.last_snapshot: Optional[StatsSnapshot] = None

    def record(self, report: StageReport) -> None:
        self._reports.append(report)
        if report.outcome in {StageOutcome.RETURNED, StageOutcome.DEGRADED}:
            snapshot = report.detail.get("snapshot")
            if isinstance(snapshot, StatsSnapshot):
                self.last_snapshot = snapshot
        if self._delegate is not None:
            self._delegate.record(report)

    @property
    def reports(self) -> Sequence[StageReport]:
        return tuple(self._reports)

    def outcomes(self) -> dict[str, str]:
        """Latest outcome per stage name."""

        return {report.stage.value: report.outcome.value for report in self._reports}

    def clear(self) -> None:
        self._reports.clear()
        self.last_snapshot = None
