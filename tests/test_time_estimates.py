import math

import pytest

from passguess.scoring import GUESSES_CEILING
from passguess.time_estimates import (
    ATTACKER_RATES,
    CENTURY,
    DAY,
    HOUR,
    MONTH,
    YEAR,
    display_time,
    estimate_attack_times,
    guesses_to_score,
    score_label,
)


@pytest.mark.parametrize("guesses, score", [
    (1, 0),
    (1000, 0),
    (1004, 0),
    (1005, 1),
    (10 ** 6 + 4, 1),
    (10 ** 6 + 5, 2),
    (10 ** 8 + 5, 3),
    (10 ** 10 + 4, 3),
    (10 ** 10 + 5, 4),
    (GUESSES_CEILING, 4),
])
def test_guesses_to_score(guesses, score):
    assert guesses_to_score(guesses) == score


@pytest.mark.parametrize("seconds, display", [
    (0.5, "less than a second"),
    (1, "1 second"),
    (59, "59 seconds"),
    (60, "1 minute"),
    (HOUR * 3, "3 hours"),
    (DAY, "1 day"),
    (MONTH * 2, "2 months"),
    (YEAR * 5, "5 years"),
    (CENTURY, "centuries"),
])
def test_display_time(seconds, display):
    assert display_time(seconds) == display


def test_estimate_attack_times():
    times = estimate_attack_times(10)
    assert set(times) == set(ATTACKER_RATES)
    assert times["online_no_throttling_10_per_second"].seconds == 1.0
    assert times["online_no_throttling_10_per_second"].display == "1 second"
    assert times["online_throttling_100_per_hour"].display == "6 minutes"
    assert times["offline_fast_hashing_1e10_per_second"].display == "less than a second"


def test_estimate_attack_times_stay_finite():
    times = estimate_attack_times(GUESSES_CEILING)
    assert all(math.isfinite(t.seconds) for t in times.values())
    assert all(t.display == "centuries" for t in times.values())


def test_score_label():
    assert score_label(0) == "too guessable"
    assert score_label(4) == "very unguessable"
