"""Unit tests for request input validation."""

import math

import pytest

from vrf_api.core.errors import ValidationAppError
from vrf_api.core.validation import (
    INVALID_RANGE,
    NEGATIVE_VALUE,
    NOT_A_NUMBER,
    NOT_INTEGER,
    Range,
    validate_payload,
    validate_range,
)


def test_accepts_valid_range() -> None:
    assert validate_range(1, 100) == Range(min=1, max=100)


def test_whole_floats_become_ints() -> None:
    result = validate_range(5.0, 10.0)

    assert result == Range(min=5, max=10)
    assert isinstance(result.min, int)
    assert isinstance(result.max, int)


def test_range_size_is_inclusive() -> None:
    assert Range(min=1, max=100).size == 100


def test_no_upper_bound() -> None:
    result = validate_range(0, 2**200)
    assert result.max == 2**200


@pytest.mark.parametrize(
    ("min_value", "max_value"),
    [
        ("not-a-number", 100),
        (1, "100"),
        (None, 100),
        (1, None),
        (True, 100),
        (1, False),
        ([1], 100),
        ({"v": 1}, 100),
    ],
)
def test_non_numeric_values_fail_first(min_value, max_value) -> None:
    with pytest.raises(ValidationAppError) as exc_info:
        validate_range(min_value, max_value)

    assert exc_info.value.code == "not_a_number"
    assert exc_info.value.message == NOT_A_NUMBER


@pytest.mark.parametrize(
    ("min_value", "max_value"),
    [
        (1.5, 100),
        (1, 99.9),
        (math.nan, 100),
        (1, math.inf),
        # fractional beats range ordering
        (100.5, 10),
    ],
)
def test_fractional_values(min_value, max_value) -> None:
    with pytest.raises(ValidationAppError) as exc_info:
        validate_range(min_value, max_value)

    assert exc_info.value.code == "not_integer"
    assert exc_info.value.message == NOT_INTEGER


@pytest.mark.parametrize(
    ("min_value", "max_value"),
    [(100, 10), (10, 10), (-5, -10), (0, -1)],
)
def test_min_not_below_max_is_invalid_range(min_value, max_value) -> None:
    with pytest.raises(ValidationAppError) as exc_info:
        validate_range(min_value, max_value)

    assert exc_info.value.code == "invalid_range"
    assert exc_info.value.message == INVALID_RANGE


@pytest.mark.parametrize(("min_value", "max_value"), [(-10, 100), (-10, -5)])
def test_negative_values(min_value, max_value) -> None:
    with pytest.raises(ValidationAppError) as exc_info:
        validate_range(min_value, max_value)

    assert exc_info.value.code == "negative_value"
    assert exc_info.value.message == NEGATIVE_VALUE


@pytest.mark.parametrize("payload", [None, [], "text", 42, {"max": 100}, {}])
def test_malformed_payloads_are_not_numbers(payload) -> None:
    with pytest.raises(ValidationAppError) as exc_info:
        validate_payload(payload)

    assert exc_info.value.code == "not_a_number"


def test_payload_ignores_extra_keys() -> None:
    assert validate_payload({"min": 0, "max": 1, "extra": "x"}) == Range(min=0, max=1)
