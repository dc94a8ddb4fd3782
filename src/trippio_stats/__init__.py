"""Trippio dashboard statistics aggregator following Clean Architecture layering."""

from .core.config import StatsConfig
from .core.container import DIContainer, collect_statistics
from .core.service import DashboardStatisticsService
from .domain.models import StatsSnapshot
from .fanout.executor import CancellationToken

__all__ = [
    "CancellationToken",
    "DashboardStatisticsService",
    "DIContainer",
    "StatsConfig",
    "StatsSnapshot",
    "collect_statistics",
    "domain",
    "transport",
    "probes",
    "fanout",
    "aggregation",
    "core",
    "utils",
]
