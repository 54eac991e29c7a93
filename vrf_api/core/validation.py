"""Input validation for random number requests."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from vrf_api.core.errors import ValidationAppError

NOT_A_NUMBER = "min and max must be numbers"
NOT_INTEGER = "min and max must be whole numbers"
INVALID_RANGE = "min must be less than max"
NEGATIVE_VALUE = "min and max must be positive numbers"


@dataclass(frozen=True)
class Range:
    """Inclusive, validated range ``[min, max]`` with ``0 <= min < max``."""

    min: int
    max: int

    @property
    def size(self) -> int:
        return self.max - self.min + 1


def _is_number(value: Any) -> bool:
    # JSON true/false decode to bool, which subclasses int
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_whole(value: int | float) -> bool:
    if isinstance(value, int):
        return True
    return math.isfinite(value) and value.is_integer()


def validate_range(min_value: Any, max_value: Any) -> Range:
    """Check a candidate ``(min, max)`` pair and build a Range.

    Checks run in order and the first failure wins: numeric type, whole
    number, ``min < max``, non-negative. There is no upper bound.

    Args:
        min_value: Raw ``min`` from the request body (any JSON type or None).
        max_value: Raw ``max`` from the request body.

    Returns:
        Range: The validated range with integer bounds.

    Raises:
        ValidationAppError: ``not_a_number``, ``not_integer``,
            ``invalid_range`` or ``negative_value``.
    """
    if not (_is_number(min_value) and _is_number(max_value)):
        raise ValidationAppError(code="not_a_number", message=NOT_A_NUMBER)

    if not (_is_whole(min_value) and _is_whole(max_value)):
        raise ValidationAppError(code="not_integer", message=NOT_INTEGER)

    low, high = int(min_value), int(max_value)

    if low >= high:
        raise ValidationAppError(code="invalid_range", message=INVALID_RANGE)

    if low < 0 or high < 0:
        raise ValidationAppError(code="negative_value", message=NEGATIVE_VALUE)

    return Range(min=low, max=high)


def validate_payload(payload: Any) -> Range:
    """Validate a decoded JSON body.

    A body that is not a JSON object is treated like one without ``min`` and
    ``max``, which fails the numeric check.
    """
    if not isinstance(payload, dict):
        payload = {}
    return validate_range(payload.get("min"), payload.get("max"))
