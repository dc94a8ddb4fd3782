"""Domain value objects for dashboard statistics aggregation."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from .exceptions import ProbeError


T = TypeVar("T")


class StatsSnapshot(BaseModel):
    """Immutable dashboard summary returned to callers.

    Revenue is expressed in minor currency units. The camelCase aliases match
    the payload the dashboard screen consumes.
    """

    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True
    )

    total_users: int = Field(default=0, ge=0)
    total_orders: int = Field(default=0, ge=0)
    total_revenue: float = Field(default=0, ge=0)
    total_hotels: int = Field(default=0, ge=0)
    total_bookings: int = Field(default=0, ge=0)


class MonthlyStats(BaseModel):
    """Revenue and order volume for one calendar month."""

    model_config = ConfigDict(frozen=True)

    month: int = Field(..., ge=1, le=12)
    revenue: float = Field(default=0, ge=0)
    orders: int = Field(default=0, ge=0)


class UserRecord(BaseModel):
    """Subset of the admin user listing needed for per-user fan-out."""

    model_config = ConfigDict(frozen=True, extra="allow")

    id: str | int


class UserPage(BaseModel):
    """Decoded ``/api/admin/user/paging`` payload."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    results: Optional[list[UserRecord]] = None
    row_count: Optional[int] = Field(default=None, alias="rowCount", ge=0)


class ProbeStatus(str, Enum):
    """Settlement state of a single probe."""

    FULFILLED = "fulfilled"
    REJECTED = "rejected"


class ErrorInfo(BaseModel):
    """Why a probe was rejected."""

    model_config = ConfigDict(frozen=True)

    probe: str
    kind: str
    message: str
    status_code: Optional[int] = None

    @classmethod
    def from_exception(cls, probe: str, error: BaseException) -> "ErrorInfo":
        if isinstance(error, ProbeError):
            return cls(
                probe=probe,
                kind=error.kind,
                message=error.message,
                status_code=error.context.get("status_code"),
            )
        return cls(probe=probe, kind="unexpected", message=str(error) or repr(error))


@dataclass(frozen=True)
class ProbeResult(Generic[T]):
    """Outcome of one settled probe: a value or the reason it failed."""

    probe: str
    status: ProbeStatus
    value: Optional[T] = None
    reason: Optional[ErrorInfo] = None

    def __post_init__(self) -> None:
        if self.status is ProbeStatus.FULFILLED and self.reason is not None:
            raise ValueError("fulfilled result cannot carry a reason")
        if self.status is ProbeStatus.REJECTED and self.reason is None:
            raise ValueError("rejected result requires a reason")

    @classmethod
    def fulfilled(cls, probe: str, value: T) -> "ProbeResult[T]":
        return cls(probe=probe, status=ProbeStatus.FULFILLED, value=value)

    @classmethod
    def rejected(cls, probe: str, error: BaseException) -> "ProbeResult[Any]":
        return cls(
            probe=probe,
            status=ProbeStatus.REJECTED,
            reason=ErrorInfo.from_exception(probe, error),
        )

    @property
    def ok(self) -> bool:
        return self.status is ProbeStatus.FULFILLED


class Stage(str, Enum):
    """Pipeline stages reported to observability hooks."""

    REVENUE = "revenue"
    USERS = "users"
    HOTELS = "hotels"
    USER_SAMPLE = "user_sample"
    PER_USER_FANOUT = "per_user_fanout"
    GLOBAL_FALLBACK = "global_fallback"
    MONTHLY = "monthly"
    SNAPSHOT = "snapshot"


class StageOutcome(str, Enum):
    """What happened to a stage's contribution to the snapshot."""

    APPLIED = "applied"
    SKIPPED = "skipped"
    CANCELLED = "cancelled"
    DEGRADED = "degraded"
    RETURNED = "returned"


class StageReport(BaseModel):
    """One observability event emitted while assembling a snapshot."""

    model_config = ConfigDict(frozen=True)

    stage: Stage
    outcome: StageOutcome
    detail: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def validate_detail(self) -> "StageReport":
        if self.outcome is StageOutcome.SKIPPED and "reason" not in self.detail:
            raise ValueError("skipped stages must carry a reason")
        return self
