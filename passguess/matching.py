"""
passguess.matching

Pattern matchers. Each one scans the whole password and returns every
candidate it recognises, overlapping or not; the optimizer in
passguess.scoring picks the cheapest covering combination later.

- dictionary_match / reverse_dictionary_match / l33t_match: ranked word lists
- spatial_match: keyboard walks (qwerty, dvorak, keypads)
- repeat_match: 'aaa', 'abcabc'
- sequence_match: 'abcd', '9753'
- regex_match: recent years
- date_match: '13/05/1991', '130591', ...
- omnimatch: all of the above, sorted by (i, j)
"""

import dataclasses
import re
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from . import scoring
from .keyboards import Graph
from .models import (
    DateMatch,
    DictionaryMatch,
    Match,
    RegexMatch,
    RepeatMatch,
    SequenceMatch,
    SpatialMatch,
)
from .tables import L33T_TABLE, RankedDictionaries


def _by_span(match: Match) -> Tuple[int, int]:
    return match.i, match.j


def omnimatch(
    password: str,
    ranked_dictionaries: RankedDictionaries,
    graphs: Mapping[str, Graph],
    l33t_table: Mapping[str, Sequence[str]] = L33T_TABLE,
    _depth: int = 0,
) -> List[Match]:
    matches: List[Match] = []
    matches.extend(dictionary_match(password, ranked_dictionaries))
    matches.extend(reverse_dictionary_match(password, ranked_dictionaries))
    matches.extend(l33t_match(password, ranked_dictionaries, l33t_table))
    matches.extend(spatial_match(password, graphs))
    matches.extend(repeat_match(password, ranked_dictionaries, graphs, l33t_table, _depth=_depth))
    matches.extend(sequence_match(password))
    matches.extend(regex_match(password))
    matches.extend(date_match(password))
    return sorted(matches, key=_by_span)


# ------------------------------------------------------------------------------
# dictionary match (common passwords, english, last names, etc) ----------------
# ------------------------------------------------------------------------------

def dictionary_match(password: str, ranked_dictionaries: RankedDictionaries) -> List[DictionaryMatch]:
    matches: List[DictionaryMatch] = []
    length = len(password)
    password_lower = password.lower()
    for dictionary_name, ranked_dict in ranked_dictionaries.items():
        for i in range(length):
            for j in range(i, length):
                word = password_lower[i:j + 1]
                rank = ranked_dict.get(word)
                if rank is None:
                    continue
                matches.append(DictionaryMatch(
                    i=i,
                    j=j,
                    token=password[i:j + 1],
                    matched_word=word,
                    rank=rank,
                    dictionary_name=dictionary_name,
                ))
    return sorted(matches, key=_by_span)


def reverse_dictionary_match(password: str, ranked_dictionaries: RankedDictionaries) -> List[DictionaryMatch]:
    n = len(password)
    matches = []
    for match in dictionary_match(password[::-1], ranked_dictionaries):
        matches.append(dataclasses.replace(
            match,
            token=match.token[::-1],
            i=n - 1 - match.j,
            j=n - 1 - match.i,
            reversed=True,
        ))
    return sorted(matches, key=_by_span)


# ------------------------------------------------------------------------------
# dictionary match with common l33t substitutions ------------------------------
# ------------------------------------------------------------------------------

def relevant_l33t_subtable(password: str, table: Mapping[str, Sequence[str]]) -> Dict[str, List[str]]:
    """Prune the l33t table down to substitutions whose l33t char occurs in the password."""
    password_chars = set(password)
    subtable = {}
    for letter, subs in table.items():
        relevant = [sub for sub in subs if sub in password_chars]
        if relevant:
            subtable[letter] = relevant
    return subtable


def _dedup_subs(subs: List[List[Tuple[str, str]]]) -> List[List[Tuple[str, str]]]:
    deduped = []
    seen = set()
    for sub in subs:
        label = tuple(sorted((letter, l33t_chr) for l33t_chr, letter in sub))
        if label not in seen:
            seen.add(label)
            deduped.append(sub)
    return deduped


def enumerate_l33t_subs(table: Mapping[str, Sequence[str]]) -> List[Dict[str, str]]:
    """
    Every way of reading the l33t chars in table back as letters, as
    {l33t_char: letter} maps. A l33t char stands for one letter at a time, so
    '1' in {'i': ['1'], 'l': ['1']} yields both {'1': 'i'} and {'1': 'l'}.
    """
    subs: List[List[Tuple[str, str]]] = [[]]
    for letter, l33t_chars in table.items():
        next_subs = []
        for l33t_chr in l33t_chars:
            for sub in subs:
                dup_index = next((idx for idx, (c, _) in enumerate(sub) if c == l33t_chr), -1)
                if dup_index == -1:
                    next_subs.append(sub + [(l33t_chr, letter)])
                else:
                    alternative = sub[:dup_index] + sub[dup_index + 1:] + [(l33t_chr, letter)]
                    next_subs.append(sub)
                    next_subs.append(alternative)
        subs = _dedup_subs(next_subs)
    return [dict(sub) for sub in subs]


def translate(string: str, chr_map: Mapping[str, str]) -> str:
    return "".join(chr_map.get(char, char) for char in string)


def l33t_match(
    password: str,
    ranked_dictionaries: RankedDictionaries,
    l33t_table: Mapping[str, Sequence[str]] = L33T_TABLE,
) -> List[DictionaryMatch]:
    matches: List[DictionaryMatch] = []
    for sub in enumerate_l33t_subs(relevant_l33t_subtable(password, l33t_table)):
        if not sub:
            break
        subbed_password = translate(password, sub)
        for match in dictionary_match(subbed_password, ranked_dictionaries):
            token = password[match.i:match.j + 1]
            # only keep matches that contain an actual substitution
            if token.lower() == match.matched_word:
                continue
            match_sub = {subbed: char for subbed, char in sub.items() if subbed in token}
            matches.append(dataclasses.replace(
                match,
                token=token,
                l33t=True,
                sub=match_sub,
                sub_display=", ".join(f"{k} -> {v}" for k, v in match_sub.items()),
            ))
    # single-char l33t matches ('4' as 'a') are noise
    return sorted((m for m in matches if len(m.token) > 1), key=_by_span)


# ------------------------------------------------------------------------------
# spatial match (qwerty/dvorak/keypad) -----------------------------------------
# ------------------------------------------------------------------------------

SHIFTED_RX = re.compile(r'[~!@#$%^&*()_+QWERTYUIOP{}|ASDFGHJKL:"ZXCVBNM<>?]')
SHIFTABLE_GRAPHS = ("qwerty", "dvorak")
MIN_SPATIAL_LENGTH = 3


def spatial_match(password: str, graphs: Mapping[str, Graph]) -> List[SpatialMatch]:
    matches: List[SpatialMatch] = []
    for graph_name, graph in graphs.items():
        matches.extend(spatial_match_helper(password, graph, graph_name))
    return sorted(matches, key=_by_span)


def spatial_match_helper(password: str, graph: Graph, graph_name: str) -> List[SpatialMatch]:
    matches: List[SpatialMatch] = []
    i = 0
    while i < len(password) - 1:
        j = i + 1
        last_direction: Optional[int] = None
        turns = 0
        if graph_name in SHIFTABLE_GRAPHS and SHIFTED_RX.search(password[i]):
            shifted_count = 1
        else:
            shifted_count = 0
        while True:
            prev_char = password[j - 1]
            found = False
            adjacents = graph.get(prev_char) or ()
            # try to grow the run by one character
            if j < len(password):
                cur_char = password[j]
                for direction, adj in enumerate(adjacents):
                    if adj and cur_char in adj:
                        found = True
                        # index 1 in a key token is the shifted char: '2@', 'qQ'
                        if adj.index(cur_char) == 1:
                            shifted_count += 1
                        # the first step counts as a turn too
                        if last_direction != direction:
                            turns += 1
                            last_direction = direction
                        break
            if found:
                j += 1
            else:
                if j - i >= MIN_SPATIAL_LENGTH:
                    matches.append(SpatialMatch(
                        i=i,
                        j=j - 1,
                        token=password[i:j],
                        graph=graph_name,
                        turns=turns,
                        shifted_count=shifted_count,
                    ))
                i = j
                break
    return matches


# ------------------------------------------------------------------------------
# repeats (aaa, abcabc) --------------------------------------------------------
# ------------------------------------------------------------------------------

GREEDY_REPEAT = re.compile(r"(.+)\1+")
LAZY_REPEAT = re.compile(r"(.+?)\1+")
LAZY_ANCHORED_REPEAT = re.compile(r"^(.+?)\1+$")
# below this depth the base token is matched recursively, past it only bruteforced
MAX_REPEAT_DEPTH = 3


def repeat_match(
    password: str,
    ranked_dictionaries: RankedDictionaries,
    graphs: Mapping[str, Graph],
    l33t_table: Mapping[str, Sequence[str]] = L33T_TABLE,
    _depth: int = 0,
) -> List[RepeatMatch]:
    matches: List[RepeatMatch] = []
    last_index = 0
    while last_index < len(password):
        greedy = GREEDY_REPEAT.search(password, last_index)
        lazy = LAZY_REPEAT.search(password, last_index)
        if not greedy or not lazy:
            break
        if len(greedy.group(0)) > len(lazy.group(0)):
            # greedy beats lazy for 'aabaab' (greedy: aabaab/aab, lazy: aa/a), but
            # greedy's unit may itself repeat ('aabaab' in 'aabaabaabaab'), so
            # shrink it with an anchored lazy match
            rx_match = greedy
            base_token = LAZY_ANCHORED_REPEAT.match(rx_match.group(0)).group(1)
        else:
            rx_match = lazy
            base_token = rx_match.group(1)
        token = rx_match.group(0)
        i, j = rx_match.start(), rx_match.end() - 1

        if _depth < MAX_REPEAT_DEPTH:
            base_candidates = omnimatch(base_token, ranked_dictionaries, graphs, l33t_table, _depth=_depth + 1)
        else:
            base_candidates = []
        base_analysis = scoring.most_guessable_match_sequence(base_token, base_candidates)
        matches.append(RepeatMatch(
            i=i,
            j=j,
            token=token,
            base_token=base_token,
            base_guesses=base_analysis.guesses,
            base_matches=base_analysis.sequence,
            repeat_count=len(token) // len(base_token),
        ))
        last_index = j + 1
    return matches


# ------------------------------------------------------------------------------
# sequences (abcdef, 97531) ----------------------------------------------------
# ------------------------------------------------------------------------------

MAX_DELTA = 5
MIN_SEQUENCE_LENGTH = 3
SEQUENCE_CLASSES = (
    ("lower", re.compile(r"^[a-z]+$"), 26),
    ("upper", re.compile(r"^[A-Z]+$"), 26),
    ("digits", re.compile(r"^\d+$"), 10),
)


def sequence_match(password: str) -> List[SequenceMatch]:
    """
    Runs of a constant code point delta, which allows skips such as '9753'
    and also catches runs in other alphabets (Greek, Cyrillic).

    password: a   b   c   d   b    9   7   5   z   y
    delta:      1   1   1  -2  -41  -2  -2  69   1
    result:   (0, 3, +1), (5, 7, -2)
    """
    result: List[SequenceMatch] = []
    if len(password) < MIN_SEQUENCE_LENGTH:
        return result

    def update(i: int, j: int, delta: int) -> None:
        if j - i + 1 < MIN_SEQUENCE_LENGTH or not 0 < abs(delta) <= MAX_DELTA:
            return
        token = password[i:j + 1]
        sequence_name, sequence_space = "unicode", 26
        for name, rx, space in SEQUENCE_CLASSES:
            if rx.match(token):
                sequence_name, sequence_space = name, space
                break
        result.append(SequenceMatch(
            i=i,
            j=j,
            token=token,
            sequence_name=sequence_name,
            sequence_space=sequence_space,
            ascending=delta > 0,
        ))

    i = 0
    last_delta: Optional[int] = None
    for k in range(1, len(password)):
        delta = ord(password[k]) - ord(password[k - 1])
        if last_delta is None:
            last_delta = delta
        if delta == last_delta:
            continue
        j = k - 1
        update(i, j, last_delta)
        i = j
        last_delta = delta
    update(i, len(password) - 1, last_delta)
    return result


# ------------------------------------------------------------------------------
# regex matching ---------------------------------------------------------------
# ------------------------------------------------------------------------------

REGEXEN = {
    "recent_year": re.compile(r"19\d\d|200\d|201\d|202\d"),
}


def regex_match(password: str, regexen: Mapping[str, "re.Pattern[str]"] = REGEXEN) -> List[RegexMatch]:
    matches: List[RegexMatch] = []
    for name, regex in regexen.items():
        for rx_match in regex.finditer(password):
            matches.append(RegexMatch(
                i=rx_match.start(),
                j=rx_match.end() - 1,
                token=rx_match.group(0),
                regex_name=name,
                regex_match=rx_match.group(0),
            ))
    return sorted(matches, key=_by_span)


# ------------------------------------------------------------------------------
# date matching ----------------------------------------------------------------
# ------------------------------------------------------------------------------

DATE_MAX_YEAR = 2050
DATE_MIN_YEAR = 1000
# for each digit-run length, the (k, l) offsets where the 2nd and 3rd int start
DATE_SPLITS = {
    4: [(1, 2), (2, 3)],                    # 1 1 91, 91 1 1
    5: [(1, 3), (2, 3)],                    # 1 11 91, 11 1 91
    6: [(1, 2), (2, 4), (4, 5)],            # 1 1 1991, 11 11 91, 1991 1 1
    7: [(1, 3), (2, 3), (4, 5), (4, 6)],    # 1 11 1991, 11 1 1991, 1991 1 11, 1991 11 1
    8: [(2, 4), (4, 6)],                    # 11 11 1991, 1991 11 11
}
MAYBE_DATE_NO_SEPARATOR = re.compile(r"^\d{4,8}$")
MAYBE_DATE_WITH_SEPARATOR = re.compile(r"^(\d{1,4})([\s/\\_.-])(\d{1,2})\2(\d{1,4})$")


def date_match(password: str) -> List[DateMatch]:
    """
    Dates with or without separators, in day-month-year, month-day-year or
    year-month-day order, with two or four digit years.
    """
    matches: List[DateMatch] = []

    # without separators: between 4 ('1191') and 8 ('11111991') digits
    for i in range(len(password) - 3):
        for j in range(i + 3, i + 8):
            if j >= len(password):
                break
            token = password[i:j + 1]
            if not MAYBE_DATE_NO_SEPARATOR.match(token):
                continue
            candidates = []
            for k, l in DATE_SPLITS[len(token)]:
                dmy = map_ints_to_dmy((int(token[0:k]), int(token[k:l]), int(token[l:])))
                if dmy:
                    candidates.append(dmy)
            if not candidates:
                continue
            # several readings of the same digits: keep the one with the year
            # closest to the reference year, ie prefer 11-15-04 to 1-1-1504
            best = min(candidates, key=lambda c: abs(c[0] - scoring.REFERENCE_YEAR))
            year, month, day = best
            matches.append(DateMatch(
                i=i, j=j, token=token, separator="", year=year, month=month, day=day,
            ))

    # with separators: between 6 ('1/1/91') and 10 ('11/11/1991') chars
    for i in range(len(password) - 5):
        for j in range(i + 5, i + 10):
            if j >= len(password):
                break
            token = password[i:j + 1]
            rx_match = MAYBE_DATE_WITH_SEPARATOR.match(token)
            if not rx_match:
                continue
            dmy = map_ints_to_dmy((int(rx_match.group(1)), int(rx_match.group(3)), int(rx_match.group(4))))
            if not dmy:
                continue
            year, month, day = dmy
            matches.append(DateMatch(
                i=i, j=j, token=token, separator=rx_match.group(2), year=year, month=month, day=day,
            ))

    # '2015_06_04' also yields '15_06_04', '5_06_04', even '2015' (as 5/1/2020);
    # drop every date that is a strict sub-span of another date
    def is_submatch(match: DateMatch) -> bool:
        for other in matches:
            if other is match:
                continue
            if other.i <= match.i and other.j >= match.j:
                return True
        return False

    return sorted((m for m in matches if not is_submatch(m)), key=_by_span)


def map_ints_to_dmy(ints: Tuple[int, int, int]) -> Optional[Tuple[int, int, int]]:
    """
    Read three ints as (year, month, day), or None. Rejected when:
    - the middle int is over 31 or zero (years never sit in the middle)
    - any int is over the max year, or has 3 digits / is under the min year
    - two ints are over 31, two are zero, or all three are over 12
    """
    if ints[1] > 31 or ints[1] <= 0:
        return None
    over_12 = 0
    over_31 = 0
    under_1 = 0
    for value in ints:
        if 99 < value < DATE_MIN_YEAR or value > DATE_MAX_YEAR:
            return None
        if value > 31:
            over_31 += 1
        if value > 12:
            over_12 += 1
        if value <= 0:
            under_1 += 1
    if over_31 >= 2 or over_12 == 3 or under_1 >= 2:
        return None

    # four digit year first: yyyy + daymonth or daymonth + yyyy
    possible_year_splits = [
        (ints[2], ints[0:2]),  # year last
        (ints[0], ints[1:3]),  # year first
    ]
    for year, rest in possible_year_splits:
        if DATE_MIN_YEAR <= year <= DATE_MAX_YEAR:
            dm = map_ints_to_dm(rest)
            if dm:
                return year, dm[1], dm[0]
            # a four digit year whose remaining ints are no day/month is not a date
            return None

    # otherwise a two digit year, with the day-month on either side
    for year, rest in possible_year_splits:
        dm = map_ints_to_dm(rest)
        if dm:
            return two_to_four_digit_year(year), dm[1], dm[0]
    return None


def map_ints_to_dm(ints: Tuple[int, ...]) -> Optional[Tuple[int, int]]:
    """(day, month) from two ints in either order, or None."""
    for d, m in (ints, ints[::-1]):
        if 1 <= d <= 31 and 1 <= m <= 12:
            return d, m
    return None


def two_to_four_digit_year(year: int) -> int:
    if year > 99:
        return year
    if year > 50:
        # 87 -> 1987
        return year + 1900
    # 15 -> 2015
    return year + 2000
