import pytest

from passguess import matching
from passguess.keyboards import KEYPAD, QWERTY, build_graph
from passguess.tables import L33T_TABLE, get_tables

TEST_DICTS = {
    "d1": {"motherboard": 1, "mother": 2, "board": 3, "abcd": 4, "cdef": 5},
    "d2": {"z": 1, "8": 2, "99": 3, "$": 4, "asdf1234&*": 5},
}

QWERTY_ONLY = {"qwerty": build_graph(QWERTY, slanted=True)}
KEYPAD_ONLY = {"keypad": build_graph(KEYPAD, slanted=False)}


def spans(matches):
    return [(m.i, m.j) for m in matches]


def canonical(subs):
    return sorted(sorted(sub.items()) for sub in subs)


# ------------------------------------------------------------------------------
# dictionary
# ------------------------------------------------------------------------------

def test_dictionary_match_finds_overlapping_words():
    matches = matching.dictionary_match("motherboard", TEST_DICTS)
    assert [(m.token, m.rank) for m in matches] == [("mother", 2), ("motherboard", 1), ("board", 3)]
    assert spans(matches) == [(0, 5), (0, 10), (6, 10)]
    assert all(m.dictionary_name == "d1" for m in matches)


def test_dictionary_match_overlapping_words():
    matches = matching.dictionary_match("abcdef", TEST_DICTS)
    assert [(m.token, m.i, m.j) for m in matches] == [("abcd", 0, 3), ("cdef", 2, 5)]


def test_dictionary_match_ignores_case_but_keeps_token():
    matches = matching.dictionary_match("BoaRdZ", TEST_DICTS)
    assert [(m.token, m.matched_word, m.dictionary_name) for m in matches] == [
        ("BoaRd", "board", "d1"),
        ("Z", "z", "d2"),
    ]


def test_dictionary_match_with_user_inputs():
    ranked = get_tables().with_user_inputs(["Zorbulon", "xyzzy"])
    matches = matching.dictionary_match("my-zorbulon", ranked)
    user = [m for m in matches if m.dictionary_name == "user_inputs"]
    assert len(user) == 1
    assert (user[0].token, user[0].rank, user[0].i, user[0].j) == ("zorbulon", 1, 3, 10)


def test_reverse_dictionary_match():
    ranked = {"d1": {"123": 1, "321": 2, "456": 3, "654": 4}}
    matches = matching.reverse_dictionary_match("0123456789", ranked)
    assert [(m.token, m.matched_word, m.rank, m.i, m.j) for m in matches] == [
        ("123", "321", 2, 1, 3),
        ("456", "654", 4, 4, 6),
    ]
    assert all(m.reversed for m in matches)


# ------------------------------------------------------------------------------
# l33t
# ------------------------------------------------------------------------------

L33T_TEST_TABLE = {
    "a": ("4", "@"),
    "c": ("(", "{", "[", "<"),
    "g": ("6", "9"),
    "o": ("0",),
}
L33T_DICTS = {
    "words": {"aac": 1, "password": 3, "paassword": 4, "asdf0": 5},
    "words2": {"cgo": 1},
}


def test_relevant_l33t_subtable():
    assert matching.relevant_l33t_subtable("abcdefgo", L33T_TABLE) == {}
    assert matching.relevant_l33t_subtable("4@8({[</3", L33T_TABLE) == {
        "a": ["4", "@"],
        "b": ["8"],
        "c": ["(", "{", "[", "<"],
        "e": ["3"],
    }


@pytest.mark.parametrize("table, subs", [
    ({}, [{}]),
    ({"a": ["@"]}, [{"@": "a"}]),
    ({"a": ["@", "4"]}, [{"@": "a"}, {"4": "a"}]),
    ({"a": ["@", "4"], "c": ["("]}, [{"@": "a", "(": "c"}, {"4": "a", "(": "c"}]),
    ({"i": ["1"], "l": ["1"]}, [{"1": "i"}, {"1": "l"}]),
])
def test_enumerate_l33t_subs(table, subs):
    assert canonical(matching.enumerate_l33t_subs(table)) == canonical(subs)


def test_l33t_match_needs_a_substitution():
    assert matching.l33t_match("", L33T_DICTS, L33T_TEST_TABLE) == []
    assert matching.l33t_match("password", L33T_DICTS, L33T_TEST_TABLE) == []


def test_l33t_match_simple():
    matches = matching.l33t_match("p4ssword", L33T_DICTS, L33T_TEST_TABLE)
    assert len(matches) == 1
    m = matches[0]
    assert (m.token, m.matched_word, m.rank, m.i, m.j) == ("p4ssword", "password", 3, 0, 7)
    assert m.l33t
    assert m.sub == {"4": "a"}


def test_l33t_match_several_substitutions():
    matches = matching.l33t_match("p@ssw0rd", L33T_DICTS, L33T_TEST_TABLE)
    assert len(matches) == 1
    assert matches[0].sub == {"@": "a", "0": "o"}


def test_l33t_match_overlapping_patterns():
    matches = matching.l33t_match("@a(go{G0", L33T_DICTS, L33T_TEST_TABLE)
    assert [(m.token, m.matched_word, m.sub) for m in matches] == [
        ("@a(", "aac", {"@": "a", "(": "c"}),
        ("(go", "cgo", {"(": "c"}),
        ("{G0", "cgo", {"{": "c", "0": "o"}),
    ]
    assert spans(matches) == [(0, 2), (2, 4), (5, 7)]


def test_l33t_match_does_not_mix_readings():
    # '0' is always read as 'o' once present, so 'asdf0' is never found
    assert matching.l33t_match("4sdf0", L33T_DICTS, L33T_TEST_TABLE) == []


def test_l33t_match_drops_single_characters():
    assert matching.l33t_match("4", {"d": {"a": 1}}, L33T_TEST_TABLE) == []


# ------------------------------------------------------------------------------
# spatial
# ------------------------------------------------------------------------------

def test_spatial_match_too_short():
    assert matching.spatial_match("", QWERTY_ONLY) == []
    assert matching.spatial_match("qw", QWERTY_ONLY) == []


def test_spatial_match_straight_row():
    matches = matching.spatial_match("zxcvbn", QWERTY_ONLY)
    assert len(matches) == 1
    m = matches[0]
    assert (m.token, m.graph, m.turns, m.shifted_count) == ("zxcvbn", "qwerty", 1, 0)


def test_spatial_match_inside_other_text():
    matches = matching.spatial_match("rz!6tfGHJ%z", QWERTY_ONLY)
    assert [(m.token, m.turns, m.shifted_count) for m in matches] == [("6tfGHJ", 2, 3)]


def test_spatial_match_counts_shifts():
    matches = matching.spatial_match("QwErt", QWERTY_ONLY)
    assert [(m.token, m.shifted_count) for m in matches] == [("QwErt", 2)]


def test_spatial_match_counts_turns():
    matches = matching.spatial_match("qazxcv", QWERTY_ONLY)
    assert [(m.token, m.turns) for m in matches] == [("qazxcv", 2)]


def test_spatial_match_keypad():
    matches = matching.spatial_match("369", KEYPAD_ONLY)
    assert [(m.token, m.graph, m.turns, m.shifted_count) for m in matches] == [("369", "keypad", 1, 0)]


# ------------------------------------------------------------------------------
# repeat
# ------------------------------------------------------------------------------

def repeat(password):
    tables = get_tables()
    return matching.repeat_match(password, tables.ranked_dictionaries, tables.graphs)


def test_repeat_match_short_inputs():
    assert repeat("") == []
    assert repeat("#") == []


def test_repeat_match_single_character():
    matches = repeat("aaa")
    assert len(matches) == 1
    m = matches[0]
    assert (m.token, m.base_token, m.repeat_count, m.i, m.j) == ("aaa", "a", 3, 0, 2)
    assert m.base_guesses == 27


def test_doubled_key_breaks_a_spatial_run():
    # pressing the same key twice is not a step to a neighbour
    matches = matching.spatial_match("qwwerty", QWERTY_ONLY)
    assert [(m.token, m.i, m.j, m.turns) for m in matches] == [("werty", 2, 6, 1)]
    assert [(m.token, m.i, m.j) for m in repeat("qwwerty")] == [("ww", 1, 2)]


def test_repeat_match_finds_each_run():
    matches = repeat("12aaa3bbbb")
    assert [(m.token, m.base_token, m.i, m.j) for m in matches] == [("aaa", "a", 2, 4), ("bbbb", "b", 6, 9)]


def test_repeat_match_multi_character_base():
    matches = repeat("abcabc")
    assert len(matches) == 1
    m = matches[0]
    assert (m.base_token, m.repeat_count) == ("abc", 2)
    # 'abc' itself is a sequence
    assert [b.pattern for b in m.base_matches] == ["sequence"]
    assert m.base_guesses == 4 * 3 + 1


def test_repeat_match_prefers_longest_repeat_with_smallest_base():
    assert [(m.base_token, m.repeat_count) for m in repeat("aabaab")] == [("aab", 2)]
    assert [(m.base_token, m.repeat_count) for m in repeat("aabaabaabaab")] == [("aab", 4)]


# ------------------------------------------------------------------------------
# sequence
# ------------------------------------------------------------------------------

@pytest.mark.parametrize("password", ["", "a", "1", "ab", "aaa", "azr"])
def test_sequence_match_nothing(password):
    assert matching.sequence_match(password) == []


def test_sequence_match_direction_changes():
    matches = matching.sequence_match("abcbabc")
    assert [(m.token, m.i, m.j, m.ascending) for m in matches] == [
        ("abc", 0, 2, True),
        ("cba", 2, 4, False),
        ("abc", 4, 6, True),
    ]


@pytest.mark.parametrize("password, name, space, ascending", [
    ("jihg", "lower", 26, False),
    ("ABCD", "upper", 26, True),
    ("7531", "digits", 10, False),
    ("ace", "lower", 26, True),
    ("αβγ", "unicode", 26, True),
])
def test_sequence_match_classes(password, name, space, ascending):
    matches = matching.sequence_match(password)
    assert len(matches) == 1
    m = matches[0]
    assert (m.token, m.sequence_name, m.sequence_space, m.ascending) == (password, name, space, ascending)


def test_sequence_match_inside_other_text():
    matches = matching.sequence_match("!!xyz!!")
    assert [(m.token, m.i, m.j) for m in matches] == [("xyz", 2, 4)]


# ------------------------------------------------------------------------------
# regex
# ------------------------------------------------------------------------------

def test_regex_match_recent_years():
    matches = matching.regex_match("in 1987 and 2021, not 1899 or 2030")
    assert [(m.token, m.regex_name, m.i) for m in matches] == [("1987", "recent_year", 3), ("2021", "recent_year", 12)]


# ------------------------------------------------------------------------------
# date
# ------------------------------------------------------------------------------

@pytest.mark.parametrize("password, separator, year, month, day", [
    ("13/5/1991", "/", 1991, 5, 13),
    ("1991-05-13", "-", 1991, 5, 13),
    ("1/1/91", "/", 1991, 1, 1),
    ("13051991", "", 1991, 5, 13),
    ("20230401", "", 2023, 1, 4),
])
def test_date_match(password, separator, year, month, day):
    matches = matching.date_match(password)
    assert len(matches) == 1
    m = matches[0]
    assert (m.token, m.separator, m.year, m.month, m.day) == (password, separator, year, month, day)


def test_date_match_inside_other_text():
    matches = matching.date_match("abc13.05.91xyz")
    assert [(m.token, m.i, m.j, m.separator) for m in matches] == [("13.05.91", 3, 10, ".")]


def test_date_match_prefers_year_near_reference():
    matches = matching.date_match("111504")
    assert [(m.year, m.month, m.day) for m in matches] == [(2004, 11, 15)]


def test_date_match_needs_matching_separators():
    assert matching.date_match("13/05-91") == []


@pytest.mark.parametrize("ints, expected", [
    ((1, 1, 1991), (1991, 1, 1)),
    ((1991, 12, 31), (1991, 12, 31)),
    ((1, 32, 1991), None),
    ((13, 13, 13), None),
    ((0, 1, 0), None),
    ((1, 1, 150), None),
    ((1, 1, 2051), None),
])
def test_map_ints_to_dmy(ints, expected):
    assert matching.map_ints_to_dmy(ints) == expected


@pytest.mark.parametrize("year, expected", [(87, 1987), (15, 2015), (50, 2050), (51, 1951), (1999, 1999)])
def test_two_to_four_digit_year(year, expected):
    assert matching.two_to_four_digit_year(year) == expected


# ------------------------------------------------------------------------------
# omnimatch
# ------------------------------------------------------------------------------

def test_omnimatch_is_sorted_and_mixes_patterns():
    tables = get_tables()
    matches = matching.omnimatch("password1987qwerty", tables.ranked_dictionaries, tables.graphs)
    assert spans(matches) == sorted(spans(matches))
    patterns = {m.pattern for m in matches}
    assert {"dictionary", "regex", "spatial"} <= patterns


def test_omnimatch_empty_password():
    tables = get_tables()
    assert matching.omnimatch("", tables.ranked_dictionaries, tables.graphs) == []
