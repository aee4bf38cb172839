from datetime import datetime, timedelta, timezone

import pytest

from critscore.legacy import (
    SINCE_DURATION,
    TooManyResultsError,
    round_to,
    time_delta,
)

BASE = datetime(2022, 1, 1, tzinfo=timezone.utc)


def test_time_delta_is_symmetric():
    later = BASE + timedelta(days=95)
    assert time_delta(BASE, later, SINCE_DURATION) == time_delta(later, BASE, SINCE_DURATION)


def test_time_delta_truncates_partial_units():
    later = BASE + SINCE_DURATION * 2 - timedelta(seconds=1)
    assert time_delta(BASE, later, SINCE_DURATION) == 1


def test_time_delta_exact_multiple():
    later = BASE + SINCE_DURATION * 4
    assert time_delta(later, BASE, SINCE_DURATION) == 4


def test_time_delta_same_time_is_zero():
    assert time_delta(BASE, BASE, timedelta(hours=1)) == 0


def test_round_half_goes_away_from_zero():
    assert round_to(0.125, 2) == 0.13
    assert round_to(-0.125, 2) == -0.13


def test_round_leaves_already_rounded_values():
    for value in (1.5, 2.25, -3.75, 0.0, 42.0):
        assert round_to(value, 2) == value


def test_round_zero_places_gives_whole_number():
    assert round_to(2.5, 0) == 3.0
    assert round_to(7.2, 0) == 7.0


@pytest.mark.parametrize("value", [1 / 3, 2 / 7, 10 / 52, 123.456789])
def test_round_is_close_to_value(value):
    rounded = round_to(value, 2)
    assert abs(rounded - value) <= 0.005 + 1e-12
    assert round_to(rounded, 2) == rounded


def test_too_many_results_error_message():
    error = TooManyResultsError()
    assert str(error) == "too many results"