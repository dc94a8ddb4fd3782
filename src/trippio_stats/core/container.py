"""Dependency injection container for building fully-wired statistics services."""

from __future__ import annotations

import asyncio
from typing import Optional

import httpx

from trippio_stats.aggregation.fallback import FixedBaselinePolicy
from trippio_stats.aggregation.reporter import LoggingStageReporter
from trippio_stats.core.config import StatsConfig
from trippio_stats.core.service import DashboardStatisticsService
from trippio_stats.domain.interfaces import (
    IFallbackPolicy,
    IStageReporter,
    ITokenProvider,
)
from trippio_stats.domain.models import StatsSnapshot
from trippio_stats.fanout.executor import BoundedFanOutExecutor
from trippio_stats.probes.endpoints import EndpointProbes
from trippio_stats.transport.client import ApiClient, StaticTokenProvider


class DIContainer:
    """Factory helpers that assemble a statistics service with default wiring."""

    @staticmethod
    def create_service(
        *,
        config: Optional[StatsConfig] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        token_provider: Optional[ITokenProvider] = None,
        fallback_policy: Optional[IFallbackPolicy] = None,
        reporter: Optional[IStageReporter] = None,
    ) -> DashboardStatisticsService:
        cfg = config or StatsConfig.from_env()
        client_config = cfg.client_config()
        owns_http = http_client is None
        http = http_client or httpx.AsyncClient(timeout=client_config.timeout)
        tokens = token_provider or StaticTokenProvider(cfg.access_token)

        api_client = ApiClient(http, client_config, token_provider=tokens)
        probes = EndpointProbes(api_client)
        executor = BoundedFanOutExecutor(cfg.fanout_width)

        return DashboardStatisticsService(
            probes,
            executor,
            config=cfg,
            fallback_policy=fallback_policy or FixedBaselinePolicy(),
            reporter=reporter or LoggingStageReporter(),
            on_close=api_client.aclose if owns_http else None,
        )


def collect_statistics(config: Optional[StatsConfig] = None) -> StatsSnapshot:
    """Blocking helper: build a service, fetch one snapshot, close the client."""

    async def _run() -> StatsSnapshot:
        async with DIContainer.create_service(config=config) as service:
            return await service.get_statistics()

    return asyncio.run(_run())
