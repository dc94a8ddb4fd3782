"""Typed response decoders, one per endpoint shape.

Every decoder fails closed: a body that does not match raises
``ProbeShapeError`` instead of guessing at alternative keys.
"""

from __future__ import annotations

from typing import Annotated, Any, List, TypeVar

from pydantic import Field, TypeAdapter, ValidationError

from trippio_stats.domain.exceptions import ProbeShapeError
from trippio_stats.domain.models import UserPage


T = TypeVar("T")

_AMOUNT = TypeAdapter(Annotated[float, Field(ge=0, allow_inf_nan=False)])
_COUNT = TypeAdapter(Annotated[int, Field(ge=0)])
_RECORDS = TypeAdapter(List[Any])
_USER_PAGE = TypeAdapter(UserPage)


def _validate(adapter: TypeAdapter[T], payload: Any, endpoint: str) -> T:
    try:
        return adapter.validate_python(payload, strict=True)
    except ValidationError as exc:
        raise ProbeShapeError(
            f"Unexpected payload from {endpoint}",
            context={"endpoint": endpoint, "errors": exc.error_count()},
        ) from exc


def decode_amount(payload: Any, endpoint: str) -> float:
    """Non-negative number such as a revenue total."""

    return float(_validate(_AMOUNT, payload, endpoint))


def decode_count(payload: Any, endpoint: str) -> int:
    return _validate(_COUNT, payload, endpoint)


def decode_records(payload: Any, endpoint: str) -> List[Any]:
    """A JSON array of records; only its length matters to the aggregator."""

    return _validate(_RECORDS, payload, endpoint)


def decode_user_page(payload: Any, endpoint: str) -> UserPage:
    if not isinstance(payload, dict):
        raise ProbeShapeError(
            f"Unexpected payload from {endpoint}",
            context={"endpoint": endpoint, "type": type(payload).__name__},
        )
    return _validate(_USER_PAGE, payload, endpoint)
