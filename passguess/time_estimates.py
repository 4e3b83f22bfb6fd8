"""
passguess.time_estimates

Turns a guesses count into the 0-4 score and into crack times for four
attacker models, each with a coarse human-readable bucket.
"""

import sys
from typing import Dict, Optional

from .models import CrackTime

# attacker throughput in guesses per second
ATTACKER_RATES: Dict[str, float] = {
    # online attack on a service that rate-limits authentication attempts
    "online_throttling_100_per_hour": 100.0 / 3600.0,
    # online attack on a service that doesn't rate-limit, or where an attacker
    # has outsmarted rate-limiting
    "online_no_throttling_10_per_second": 10.0,
    # offline attack, assumes multiple attackers, proper user-unique salting and
    # a slow hash function with a moderate work factor (bcrypt, scrypt, PBKDF2)
    "offline_slow_hashing_1e4_per_second": 1e4,
    # offline attack with a fast hash (SHA-1, SHA-256, MD5) and many machines
    "offline_fast_hashing_1e10_per_second": 1e10,
}

# guesses just past a threshold still land in the lower bucket
SCORE_DELTA = 5
SCORE_THRESHOLDS = (1e3, 1e6, 1e8, 1e10)
SCORE_LABELS = (
    "too guessable",
    "very guessable",
    "somewhat guessable",
    "safely unguessable",
    "very unguessable",
)

MINUTE = 60
HOUR = MINUTE * 60
DAY = HOUR * 24
MONTH = DAY * 31
YEAR = MONTH * 12
CENTURY = YEAR * 100


def estimate_attack_times(guesses: int) -> Dict[str, CrackTime]:
    crack_times = {}
    for scenario, rate in ATTACKER_RATES.items():
        # saturated guesses over a slow rate would overflow to inf
        seconds = min(float(guesses) / rate, sys.float_info.max)
        crack_times[scenario] = CrackTime(seconds=seconds, display=display_time(seconds))
    return crack_times


def guesses_to_score(guesses: float) -> int:
    """
    0: too guessable, risky password
    1: very guessable, protection from throttled online attacks
    2: somewhat guessable, protection from unthrottled online attacks
    3: safely unguessable, moderate protection from offline slow-hash attacks
    4: very unguessable, strong protection from offline slow-hash attacks
    """
    for score, threshold in enumerate(SCORE_THRESHOLDS):
        if guesses < threshold + SCORE_DELTA:
            return score
    return len(SCORE_THRESHOLDS)


def score_label(score: int) -> str:
    return SCORE_LABELS[score]


def display_time(seconds: float) -> str:
    display_num: Optional[int]
    if seconds < 1:
        display_num, display_str = None, "less than a second"
    elif seconds < MINUTE:
        display_num = round(seconds)
        display_str = f"{display_num} second"
    elif seconds < HOUR:
        display_num = round(seconds / MINUTE)
        display_str = f"{display_num} minute"
    elif seconds < DAY:
        display_num = round(seconds / HOUR)
        display_str = f"{display_num} hour"
    elif seconds < MONTH:
        display_num = round(seconds / DAY)
        display_str = f"{display_num} day"
    elif seconds < YEAR:
        display_num = round(seconds / MONTH)
        display_str = f"{display_num} month"
    elif seconds < CENTURY:
        display_num = round(seconds / YEAR)
        display_str = f"{display_num} year"
    else:
        display_num, display_str = None, "centuries"
    if display_num is not None and display_num != 1:
        display_str += "s"
    return display_str
