"""
passguess.feedback

Turn the optimal match sequence into a warning and a short list of concrete
suggestions. Only weak passwords (score 0-2) get feedback; the longest match
in the sequence is taken as the main weakness.
"""

from typing import List, Optional

from .models import (
    DateMatch,
    DictionaryMatch,
    Feedback,
    Match,
    RegexMatch,
    RepeatMatch,
    SequenceMatch,
    SpatialMatch,
)
from .scoring import ALL_UPPER, START_UPPER

DEFAULT_SUGGESTIONS = [
    "Use a few words, avoid common phrases.",
    "No need for symbols, digits, or uppercase letters.",
]
EXTRA_SUGGESTION = "Add another word or two. Uncommon words are better."
NAME_LISTS = ("surnames", "male_names", "female_names")


def get_feedback(score: int, sequence: List[Match]) -> Feedback:
    if not sequence:
        return Feedback(warning="", suggestions=list(DEFAULT_SUGGESTIONS))
    if score > 2:
        return Feedback()

    longest_match = sequence[0]
    for match in sequence[1:]:
        if len(match.token) > len(longest_match.token):
            longest_match = match

    feedback = get_match_feedback(longest_match, len(sequence) == 1)
    if feedback is None:
        return Feedback(warning="", suggestions=[EXTRA_SUGGESTION])
    feedback.suggestions.insert(0, EXTRA_SUGGESTION)
    return feedback


def get_match_feedback(match: Match, is_sole_match: bool) -> Optional[Feedback]:
    if isinstance(match, DictionaryMatch):
        return get_dictionary_match_feedback(match, is_sole_match)
    if isinstance(match, SpatialMatch):
        if match.turns == 1:
            warning = "Straight rows of keys are easy to guess."
        else:
            warning = "Short keyboard patterns are easy to guess."
        return Feedback(warning, ["Use a longer keyboard pattern with more turns."])
    if isinstance(match, RepeatMatch):
        if len(match.base_token) == 1:
            warning = 'Repeats like "aaa" are easy to guess.'
        else:
            warning = 'Repeats like "abcabcabc" are only slightly harder to guess than "abc".'
        return Feedback(warning, ["Avoid repeated words and characters."])
    if isinstance(match, SequenceMatch):
        return Feedback("Sequences like abc or 6543 are easy to guess.", ["Avoid sequences."])
    if isinstance(match, RegexMatch):
        if match.regex_name == "recent_year":
            return Feedback(
                "Recent years are easy to guess.",
                ["Avoid recent years.", "Avoid years that are associated with you."],
            )
        return None
    if isinstance(match, DateMatch):
        return Feedback("Dates are often easy to guess.", ["Avoid dates and years that are associated with you."])
    # bruteforce: nothing specific to say
    return None


def get_dictionary_match_feedback(match: DictionaryMatch, is_sole_match: bool) -> Feedback:
    warning = ""
    if match.dictionary_name == "passwords":
        if is_sole_match and not match.l33t and not match.reversed:
            if match.rank <= 10:
                warning = "This is a top-10 common password."
            elif match.rank <= 100:
                warning = "This is a top-100 common password."
            else:
                warning = "This is a very common password."
        elif match.guesses_log10 is not None and match.guesses_log10 <= 4:
            warning = "This is similar to a commonly used password."
    elif match.dictionary_name == "english_wikipedia":
        if is_sole_match:
            warning = "A word by itself is easy to guess."
    elif match.dictionary_name in NAME_LISTS:
        if is_sole_match:
            warning = "Names and surnames by themselves are easy to guess."
        else:
            warning = "Common names and surnames are easy to guess."

    suggestions = []
    word = match.token
    if START_UPPER.search(word):
        suggestions.append("Capitalization doesn't help very much.")
    elif ALL_UPPER.search(word) and word.lower() != word:
        suggestions.append("All-uppercase is almost as easy to guess as all-lowercase.")
    if match.reversed and len(match.token) >= 4:
        suggestions.append("Reversed words aren't much harder to guess.")
    if match.l33t:
        suggestions.append("Predictable substitutions like '@' instead of 'a' don't help very much.")
    return Feedback(warning, suggestions)
