"""Exception hierarchy for statistics aggregation failures."""

from __future__ import annotations

from typing import Any, Mapping


class TrippioStatsError(Exception):
    """Base class for all errors raised inside the statistics package."""

    default_message = "Statistics error occurred"

    def __init__(
        self, message: str | None = None, *, context: Mapping[str, Any] | None = None
    ):
        self.message = message or self.default_message
        self.context: Mapping[str, Any] = dict(context or {})
        formatted = self._format_message()
        super().__init__(formatted)

    def _format_message(self) -> str:
        if self.context:
            return f"{self.message} | context={self.context}"
        return self.message


class ProbeError(TrippioStatsError):
    """A single remote query could not produce its value."""

    default_message = "Probe failed"
    kind = "unexpected"


class ProbeTransportError(ProbeError):
    """Network unreachable, connection reset or similar transport failure."""

    default_message = "Transport failure"
    kind = "transport"


class ProbeTimeoutError(ProbeTransportError):
    """The request exceeded the client timeout."""

    default_message = "Request timed out"
    kind = "timeout"


class ProbeStatusError(ProbeError):
    """Endpoint answered with a non-2xx status (including missing endpoints)."""

    default_message = "Unexpected response status"
    kind = "status"

    @property
    def status_code(self) -> int | None:
        return self.context.get("status_code")


class ProbeShapeError(ProbeError):
    """Response body did not match the endpoint's expected schema."""

    default_message = "Malformed response body"
    kind = "shape"


class ProbeCancelledError(ProbeError):
    """The probe was never started because the caller cancelled the batch."""

    default_message = "Probe cancelled"
    kind = "cancelled"
