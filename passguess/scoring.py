"""
passguess.scoring

Guess estimation and the minimum-guesses search.

- estimate_guesses(match, password): guesses for one match, cached on it
- most_guessable_match_sequence(password, matches): the non-overlapping,
  full-coverage sequence of matches (bruteforce filling the gaps) that an
  attacker needs the fewest guesses to reach
"""

import math
import re
import sys
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List

from .errors import InvariantViolation
from .keyboards import KEYPAD, QWERTY, average_degree, build_graph
from .models import (
    BruteforceMatch,
    DateMatch,
    DictionaryMatch,
    Match,
    RegexMatch,
    RepeatMatch,
    SequenceMatch,
    SpatialMatch,
)

MIN_GUESSES_BEFORE_GROWING_SEQUENCE = 10000
MIN_SUBMATCH_GUESSES_SINGLE_CHAR = 10
MIN_SUBMATCH_GUESSES_MULTI_CHAR = 50

REFERENCE_YEAR = 2000
MIN_YEAR_SPACE = 20

# guesses are exact ints; past this they saturate so float conversions stay finite
GUESSES_CEILING = int(sys.float_info.max)

_QWERTY_GRAPH = build_graph(QWERTY, slanted=True)
_KEYPAD_GRAPH = build_graph(KEYPAD, slanted=False)
KEYBOARD_AVERAGE_DEGREE = average_degree(_QWERTY_GRAPH)
# slightly different for the mac keypad, but close enough
KEYPAD_AVERAGE_DEGREE = average_degree(_KEYPAD_GRAPH)
KEYBOARD_STARTING_POSITIONS = len(_QWERTY_GRAPH)
KEYPAD_STARTING_POSITIONS = len(_KEYPAD_GRAPH)


@dataclass
class GuessCalculation:
    password: str
    guesses: int
    guesses_log10: float
    sequence: List[Match]


def nCk(n: int, k: int) -> int:
    """Binomial coefficient, 0 when k > n."""
    if k > n:
        return 0
    return math.comb(n, k)


def saturate(guesses: int) -> int:
    return min(guesses, GUESSES_CEILING)


def log10(guesses: int) -> float:
    return math.log10(guesses) if guesses > 0 else 0.0


# ------------------------------------------------------------------------------
# search --- most guessable match sequence -------------------------------------
# ------------------------------------------------------------------------------

def most_guessable_match_sequence(
    password: str,
    matches: Iterable[Match],
    exclude_additive: bool = False,
) -> GuessCalculation:
    """
    Takes a sequence of overlapping matches, returns the non-overlapping
    sequence with minimum guesses. O(nm) for a length-n password with m
    candidate matches; l is the number of matches in a sequence, the
    minimised function is

        l! * Product(m.guesses for m in sequence) + D^(l - 1)

    where D = MIN_GUESSES_BEFORE_GROWING_SEQUENCE. The l! term charges the
    attacker for not knowing the order of the patterns; D^(l - 1) makes
    every extra pattern cost something so that long chains of cheap matches
    do not beat a single slightly more expensive one. With
    exclude_additive=True only the l! * product term is minimised.
    """
    n = len(password)

    # partition matches by ending index j
    matches_by_j: List[List[Match]] = [[] for _ in range(n)]
    for m in matches:
        if m.j >= n:
            raise InvariantViolation(f"{m.pattern} match [{m.i}, {m.j}] is out of bounds for length {n}")
        matches_by_j[m.j].append(m)
    # for deterministic output, sort each sublist by i
    for lst in matches_by_j:
        lst.sort(key=lambda m1: m1.i)

    # optimal_m[k][l]: last match of the best length-l sequence covering
    # password[0:k + 1]; absent when a shorter sequence does at least as well.
    # optimal_pi[k][l]: Product(m.guesses) of that sequence.
    # optimal_g[k][l]: the overall metric of that sequence.
    optimal_m: List[Dict[int, Match]] = [{} for _ in range(n)]
    optimal_pi: List[Dict[int, int]] = [{} for _ in range(n)]
    optimal_g: List[Dict[int, int]] = [{} for _ in range(n)]

    def update(m: Match, l: int) -> None:
        """Record m as the end of a length-l sequence if nothing as short does better."""
        k = m.j
        pi = estimate_guesses(m, password)
        if l > 1:
            # product of the length-(l-1) sequence ending just before m
            pi *= optimal_pi[m.i - 1][l - 1]
        g = math.factorial(l) * pi
        if not exclude_additive:
            g += MIN_GUESSES_BEFORE_GROWING_SEQUENCE ** (l - 1)

        for competing_l, competing_g in optimal_g[k].items():
            if competing_l > l:
                continue
            if competing_g <= g:
                return

        optimal_g[k][l] = g
        optimal_m[k][l] = m
        optimal_pi[k][l] = pi

    def bruteforce_update(k: int) -> None:
        # a single bruteforce match spanning the whole k-prefix
        update(make_bruteforce_match(0, k), 1)
        for i in range(1, k + 1):
            # bruteforce [i, k] appended to every sequence ending at i - 1
            m = make_bruteforce_match(i, k)
            for l, last_m in list(optimal_m[i - 1].items()):
                # two adjacent bruteforce matches are never optimal: one
                # spanning both has the same product with a lower length
                if isinstance(last_m, BruteforceMatch):
                    continue
                update(m, l + 1)

    def make_bruteforce_match(i: int, j: int) -> BruteforceMatch:
        return BruteforceMatch(i=i, j=j, token=password[i:j + 1])

    def unwind() -> List[Match]:
        sequence: List[Match] = []
        k = n - 1
        l = min(optimal_g[k], key=lambda candidate_l: optimal_g[k][candidate_l])
        while k >= 0:
            m = optimal_m[k][l]
            sequence.insert(0, m)
            k = m.i - 1
            l -= 1
        return sequence

    for k in range(n):
        for m in matches_by_j[k]:
            if m.i > 0:
                for l in list(optimal_m[m.i - 1]):
                    update(m, l + 1)
            else:
                update(m, 1)
        bruteforce_update(k)

    if n == 0:
        return GuessCalculation(password=password, guesses=1, guesses_log10=0.0, sequence=[])

    sequence = unwind()
    _check_coverage(password, sequence)
    guesses = saturate(optimal_g[n - 1][len(sequence)])
    return GuessCalculation(
        password=password,
        guesses=guesses,
        guesses_log10=log10(guesses),
        sequence=sequence,
    )


def _check_coverage(password: str, sequence: List[Match]) -> None:
    expected_i = 0
    for m in sequence:
        if m.i != expected_i:
            raise InvariantViolation(f"sequence gap or overlap at index {expected_i} (next match starts at {m.i})")
        expected_i = m.j + 1
    if expected_i != len(password):
        raise InvariantViolation(f"sequence covers {expected_i} of {len(password)} characters")


# ------------------------------------------------------------------------------
# guess estimation -- one function per match pattern ---------------------------
# ------------------------------------------------------------------------------

def estimate_guesses(match: Match, password: str) -> int:
    # a match's estimate never changes, cache it
    if match.guesses is not None:
        return match.guesses
    min_guesses = 1
    if len(match.token) < len(password):
        if len(match.token) == 1:
            min_guesses = MIN_SUBMATCH_GUESSES_SINGLE_CHAR
        else:
            min_guesses = MIN_SUBMATCH_GUESSES_MULTI_CHAR
    try:
        estimator = ESTIMATION_FUNCTIONS[type(match)]
    except KeyError:
        raise InvariantViolation(f"no guess estimator for {type(match).__name__}") from None
    guesses = saturate(max(estimator(match), min_guesses))
    match.guesses = guesses
    match.guesses_log10 = log10(guesses)
    return guesses


# bruteforce character classes, smallest first: (name, pattern, cardinality)
BRUTEFORCE_CLASSES = (
    ("digits", re.compile(r"^\d+$", re.ASCII), 10),
    ("lower", re.compile(r"^[a-z]+$"), 26),
    ("alpha", re.compile(r"^[a-zA-Z]+$"), 52),
)
BRUTEFORCE_PRINTABLE_CARDINALITY = 95


def bruteforce_cardinality(token: str) -> int:
    for _name, rx, cardinality in BRUTEFORCE_CLASSES:
        if rx.match(token):
            return cardinality
    return BRUTEFORCE_PRINTABLE_CARDINALITY


def bruteforce_guesses(match: BruteforceMatch) -> int:
    guesses = bruteforce_cardinality(match.token) ** len(match.token)
    # stay one guess above the smallest allowed submatch, so that a real
    # pattern over the same [i..j] always takes precedence
    if len(match.token) == 1:
        min_guesses = MIN_SUBMATCH_GUESSES_SINGLE_CHAR + 1
    else:
        min_guesses = MIN_SUBMATCH_GUESSES_MULTI_CHAR + 1
    return max(guesses, min_guesses)


def dictionary_guesses(match: DictionaryMatch) -> int:
    # kept on the match for display
    match.base_guesses = match.rank
    match.uppercase_variations = uppercase_variations(match)
    match.l33t_variations = l33t_variations(match)
    reversed_variations = 2 if match.reversed else 1
    return match.base_guesses * match.uppercase_variations * match.l33t_variations * reversed_variations


def repeat_guesses(match: RepeatMatch) -> int:
    return match.base_guesses * match.repeat_count


def sequence_guesses(match: SequenceMatch) -> int:
    first_chr = match.token[:1]
    # obvious starting points are cheaper
    if first_chr in ("a", "A", "z", "Z", "0", "1", "9"):
        base_guesses = 4
    elif first_chr.isdigit():
        base_guesses = 10
    else:
        # uppercase could get a higher base; 26 for both is more conservative
        base_guesses = 26
    if not match.ascending:
        # descending runs are tried after every ascending one
        base_guesses *= 2
    return base_guesses * len(match.token)


def regex_guesses(match: RegexMatch) -> int:
    if match.regex_name == "recent_year":
        # years close to the reference year get a floor of MIN_YEAR_SPACE
        year_space = abs(int(match.regex_match) - REFERENCE_YEAR)
        return max(year_space, MIN_YEAR_SPACE)
    raise InvariantViolation(f"no guess estimate for regex {match.regex_name!r}")


def date_guesses(match: DateMatch) -> int:
    year_space = max(abs(match.year - REFERENCE_YEAR), MIN_YEAR_SPACE)
    guesses = year_space * 365
    # one of ~4 common separators
    if match.separator:
        guesses *= 4
    return guesses


def spatial_guesses(match: SpatialMatch) -> int:
    if match.graph in ("qwerty", "dvorak"):
        s = KEYBOARD_STARTING_POSITIONS
        d = KEYBOARD_AVERAGE_DEGREE
    else:
        s = KEYPAD_STARTING_POSITIONS
        d = KEYPAD_AVERAGE_DEGREE
    guesses = 0
    length = len(match.token)
    t = match.turns
    # number of possible patterns of length L or less with t turns or less
    for i in range(2, length + 1):
        possible_turns = min(t, i - 1)
        for j in range(1, possible_turns + 1):
            guesses += nCk(i - 1, j - 1) * s * d ** j
    # shifted keys ('%' for '5', 'A' for 'a') are counted like l33t substitutions;
    # a walk typed all shifted or all unshifted doubles
    shifted = match.shifted_count
    unshifted = length - shifted
    if shifted == 0 or unshifted == 0:
        guesses *= 2
    else:
        guesses *= sum(nCk(shifted + unshifted, i) for i in range(1, min(shifted, unshifted) + 1))
    return saturate(guesses)


START_UPPER = re.compile(r"^[A-Z][^A-Z]+$")
END_UPPER = re.compile(r"^[^A-Z]+[A-Z]$")
ALL_UPPER = re.compile(r"^[^a-z]+$")
ALL_LOWER = re.compile(r"^[^A-Z]+$")


def uppercase_variations(match: DictionaryMatch) -> int:
    word = match.token
    if ALL_LOWER.match(word) or word.lower() == word:
        return 1
    # a capitalized word is the most common capitalization scheme, so it only
    # doubles the search space; all-caps and end-capitalized are common enough
    # to be treated the same way
    for regex in (START_UPPER, END_UPPER, ALL_UPPER):
        if regex.match(word):
            return 2
    # otherwise the number of ways to capitalize U+L letters with U uppercase
    # letters or less (or to lowercase them, when uppercase dominates)
    upper = sum(1 for c in word if c.isupper())
    lower = sum(1 for c in word if c.islower())
    return sum(nCk(upper + lower, i) for i in range(1, min(upper, lower) + 1))


def l33t_variations(match: DictionaryMatch) -> int:
    if not match.l33t:
        return 1
    variations = 1
    # capitalization should not affect the l33t count
    chrs = match.token.lower()
    for subbed, unsubbed in match.sub.items():
        s = chrs.count(subbed)
        u = chrs.count(unsubbed)
        if s == 0 or u == 0:
            # fully subbed (444) or fully unsubbed (aaa): the attacker tries
            # the fully subbed form on top of the plain one
            variations *= 2
        else:
            # like capitalization: with aa44a (U = 3, S = 2) try unsubbed,
            # one sub and two subs
            variations *= sum(nCk(u + s, i) for i in range(1, min(u, s) + 1))
    return variations


ESTIMATION_FUNCTIONS: Dict[type, Callable] = {
    BruteforceMatch: bruteforce_guesses,
    DictionaryMatch: dictionary_guesses,
    SpatialMatch: spatial_guesses,
    RepeatMatch: repeat_guesses,
    SequenceMatch: sequence_guesses,
    RegexMatch: regex_guesses,
    DateMatch: date_guesses,
}
