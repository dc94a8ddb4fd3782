"""Domain-level interfaces defining contracts for aggregation collaborators."""

from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from .models import MonthlyStats, StageReport, StatsSnapshot


class ITokenProvider(Protocol):
    """Supplies the bearer token attached to each outbound request."""

    def access_token(self) -> Optional[str]:
        """Return the current access token, or None for anonymous calls."""


class IRemoteClient(Protocol):
    """Thin HTTP transport every probe calls through."""

    async def get_json(
        self, path: str, params: Optional[Mapping[str, Any]] = None
    ) -> Any:
        """Issue a GET against ``path`` and return the decoded JSON body."""

    async def aclose(self) -> None:
        """Release the underlying connection pool."""


class IFallbackPolicy(Protocol):
    """Supplies the snapshot shown when live data looks unavailable."""

    def baseline(self) -> StatsSnapshot:
        """Return the substitute snapshot."""


class IStageReporter(Protocol):
    """Observability hook receiving one event per pipeline stage."""

    def record(self, report: StageReport) -> None:
        """Handle a stage outcome."""


class IStatisticsService(Protocol):
    """Public contract consumed by the dashboard screen."""

    async def get_statistics(self) -> StatsSnapshot:
        """Assemble one snapshot; never raises."""

    async def get_monthly_stats(
        self, year: Optional[int] = None
    ) -> Sequence[MonthlyStats]:
        """Return twelve monthly revenue/order figures for ``year``."""
