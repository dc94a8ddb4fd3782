"""Bounded fan-out executor that settles every probe it launches."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, List, Optional, Sequence, TypeVar

from trippio_stats.domain.exceptions import ProbeCancelledError, ProbeError
from trippio_stats.domain.models import ProbeResult


T = TypeVar("T")

DEFAULT_WIDTH = 10


class CancellationToken:
    """Caller-owned flag that stops further probes from being launched."""

    def __init__(self) -> None:
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


@dataclass(frozen=True)
class ProbeTask(Generic[T]):
    """A named, not-yet-started remote query."""

    name: str
    call: Callable[[], Awaitable[T]]


class BoundedFanOutExecutor:
    """Runs probe tasks concurrently with at most ``width`` in flight.

    The batch is a barrier: ``run`` returns only once every task has settled,
    and results come back in input order. No batch-level timeout is applied;
    each request is bounded by the client's own timeout.
    """

    def __init__(
        self, width: int = DEFAULT_WIDTH, *, logger: Optional[logging.Logger] = None
    ) -> None:
        if width < 1:
            raise ValueError("width must be at least 1")
        self.width = width
        self.logger = logger or logging.getLogger(__name__)

    async def run(
        self,
        tasks: Sequence[ProbeTask[Any]],
        cancel_token: Optional[CancellationToken] = None,
    ) -> List[ProbeResult[Any]]:
        if not tasks:
            return []
        semaphore = asyncio.Semaphore(self.width)

        async def guarded(task: ProbeTask[Any]) -> ProbeResult[Any]:
            async with semaphore:
                if cancel_token is not None and cancel_token.cancelled:
                    return self._reject(
                        task, ProbeCancelledError(context={"probe": task.name})
                    )
                return await self.settle(task)

        return list(await asyncio.gather(*(guarded(task) for task in tasks)))

    async def run_one(
        self,
        task: ProbeTask[T],
        cancel_token: Optional[CancellationToken] = None,
    ) -> ProbeResult[T]:
        (result,) = await self.run([task], cancel_token)
        return result

    async def settle(self, task: ProbeTask[T]) -> ProbeResult[T]:
        """Await one task and convert any failure into a rejected result."""

        try:
            value = await task.call()
        except ProbeError as exc:
            return self._reject(task, exc)
        except Exception as exc:
            self.logger.exception("probe_crashed", extra={"probe": task.name})
            return self._reject(task, exc)
        self.logger.debug("probe_fulfilled", extra={"probe": task.name})
        return ProbeResult.fulfilled(task.name, value)

    def _reject(self, task: ProbeTask[Any], error: BaseException) -> ProbeResult[Any]:
        result = ProbeResult.rejected(task.name, error)
        self.logger.warning(
            "probe_rejected",
            extra={
                "probe": task.name,
                "kind": result.reason.kind if result.reason else None,
                "error": str(error),
            },
        )
        return result
