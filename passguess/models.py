"""
passguess.models

Data types shared by the matchers, the scorer and the public API:
- Match and one subclass per pattern kind (dictionary, spatial, repeat,
  sequence, regex, date, bruteforce)
- CrackTime / Feedback records
- Result, the object returned by passguess.estimate()
"""

from dataclasses import dataclass, field
from typing import ClassVar, Dict, List, Optional

from .errors import InvariantViolation


@dataclass(kw_only=True)
class Match:
    """A candidate pattern occurrence covering password[i:j + 1] (inclusive indices)."""

    pattern: ClassVar[str] = ""

    i: int
    j: int
    token: str
    # filled in by scoring.estimate_guesses
    guesses: Optional[int] = None
    guesses_log10: Optional[float] = None

    def __post_init__(self) -> None:
        if self.i < 0 or self.j < self.i:
            raise InvariantViolation(
                f"{self.pattern or 'match'} has an invalid span [{self.i}, {self.j}]"
            )
        if len(self.token) != self.j - self.i + 1:
            raise InvariantViolation(
                f"{self.pattern or 'match'} token length {len(self.token)} "
                f"does not fit span [{self.i}, {self.j}]"
            )


@dataclass(kw_only=True)
class DictionaryMatch(Match):
    pattern: ClassVar[str] = "dictionary"

    matched_word: str
    rank: int
    dictionary_name: str
    reversed: bool = False
    l33t: bool = False
    # l33t character -> letter, only the substitutions present in the token
    sub: Dict[str, str] = field(default_factory=dict)
    sub_display: str = ""
    base_guesses: Optional[int] = None
    uppercase_variations: Optional[int] = None
    l33t_variations: Optional[int] = None


@dataclass(kw_only=True)
class SpatialMatch(Match):
    pattern: ClassVar[str] = "spatial"

    graph: str
    turns: int
    shifted_count: int


@dataclass(kw_only=True)
class RepeatMatch(Match):
    pattern: ClassVar[str] = "repeat"

    base_token: str
    base_guesses: int
    base_matches: List[Match] = field(default_factory=list)
    repeat_count: int = 2


@dataclass(kw_only=True)
class SequenceMatch(Match):
    pattern: ClassVar[str] = "sequence"

    sequence_name: str
    sequence_space: int
    ascending: bool


@dataclass(kw_only=True)
class RegexMatch(Match):
    pattern: ClassVar[str] = "regex"

    regex_name: str
    regex_match: str


@dataclass(kw_only=True)
class DateMatch(Match):
    pattern: ClassVar[str] = "date"

    separator: str
    year: int
    month: int
    day: int


@dataclass(kw_only=True)
class BruteforceMatch(Match):
    pattern: ClassVar[str] = "bruteforce"


MATCH_TYPES: Dict[str, type] = {
    cls.pattern: cls
    for cls in (
        DictionaryMatch,
        SpatialMatch,
        RepeatMatch,
        SequenceMatch,
        RegexMatch,
        DateMatch,
        BruteforceMatch,
    )
}


@dataclass(frozen=True)
class CrackTime:
    """Estimated time to exhaust the guesses under one attacker model."""

    seconds: float
    display: str


@dataclass
class Feedback:
    warning: str = ""
    suggestions: List[str] = field(default_factory=list)


@dataclass
class Result:
    """Outcome of a single estimate() call."""

    password: str
    guesses: int
    guesses_log10: float
    sequence: List[Match]
    score: int
    crack_times: Dict[str, CrackTime]
    feedback: Feedback = field(default_factory=Feedback)
    calc_time: float = 0.0

    @property
    def crack_times_seconds(self) -> Dict[str, float]:
        return {name: ct.seconds for name, ct in self.crack_times.items()}

    @property
    def crack_times_display(self) -> Dict[str, str]:
        return {name: ct.display for name, ct in self.crack_times.items()}
