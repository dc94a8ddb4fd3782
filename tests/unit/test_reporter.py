import logging

from trippio_stats.aggregation.reporter import (
    InMemoryStageReporter,
    LoggingStageReporter,
)
from trippio_stats.domain.models import Stage, StageOutcome, StageReport, StatsSnapshot


def test_logging_reporter_uses_outcome_level(caplog):
    reporter = LoggingStageReporter(logging.getLogger("trippio_stats.test"))

    with caplog.at_level(logging.INFO, logger="trippio_stats.test"):
        reporter.record(StageReport(stage=Stage.USERS, outcome=StageOutcome.APPLIED))
        reporter.record(
            StageReport(
                stage=Stage.HOTELS,
                outcome=StageOutcome.SKIPPED,
                detail={"reason": {"kind": "status"}},
            )
        )

    assert [record.getMessage() for record in caplog.records] == [
        "stage_applied",
        "stage_skipped",
    ]
    assert caplog.records[0].levelno == logging.INFO
    assert caplog.records[1].levelno == logging.WARNING
    assert caplog.records[1].stage == "hotels"


def test_in_memory_reporter_caches_last_snapshot_and_delegates():
    forwarded = []

    class _Delegate:
        def record(self, report):
            forwarded.append(report)

    reporter = InMemoryStageReporter(_Delegate())
    snapshot = StatsSnapshot(total_users=2)

    reporter.record(StageReport(stage=Stage.USERS, outcome=StageOutcome.APPLIED))
    reporter.record(
        StageReport(
            stage=Stage.SNAPSHOT,
            outcome=StageOutcome.RETURNED,
            detail={"snapshot": snapshot},
        )
    )

    assert reporter.last_snapshot is snapshot
    assert len(reporter.reports) == 2
    assert len(forwarded) == 2
    assert reporter.outcomes() == {"users": "applied", "snapshot": "returned"}

    reporter.clear()
    assert reporter.reports == ()
    assert reporter.last_snapshot is None
