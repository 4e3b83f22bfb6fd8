"""
passguess.serialization

JSON-friendly views of estimate() results, used by the CLI --json flag and
the web API. Guess counts stay exact ints (JSON has arbitrary-size integers).
"""

import dataclasses
from typing import Any, Dict

from .errors import InvariantViolation
from .models import MATCH_TYPES, CrackTime, Feedback, Match, RepeatMatch, Result
from .storage import dump_json_bytes, read_json_bytes


def match_to_dict(match: Match) -> Dict[str, Any]:
    out: Dict[str, Any] = {"pattern": match.pattern}
    for f in dataclasses.fields(match):
        value = getattr(match, f.name)
        if f.name == "base_matches":
            value = [match_to_dict(m) for m in value]
        elif isinstance(value, dict):
            value = dict(value)
        out[f.name] = value
    return out


def match_from_dict(data: Dict[str, Any]) -> Match:
    fields = dict(data)
    pattern = fields.pop("pattern", None)
    cls = MATCH_TYPES.get(pattern)
    if cls is None:
        raise InvariantViolation(f"unknown match pattern: {pattern!r}")
    if cls is RepeatMatch:
        fields["base_matches"] = [match_from_dict(m) for m in fields.get("base_matches", [])]
    return cls(**fields)


def result_to_dict(result: Result, include_password: bool = False) -> Dict[str, Any]:
    """The password itself is left out unless include_password is set."""
    out: Dict[str, Any] = {
        "guesses": result.guesses,
        "guesses_log10": result.guesses_log10,
        "score": result.score,
        "sequence": [match_to_dict(m) for m in result.sequence],
        "crack_times_seconds": result.crack_times_seconds,
        "crack_times_display": result.crack_times_display,
        "feedback": {
            "warning": result.feedback.warning,
            "suggestions": list(result.feedback.suggestions),
        },
        "calc_time": result.calc_time,
    }
    if include_password:
        out["password"] = result.password
    return out


def result_from_dict(data: Dict[str, Any]) -> Result:
    seconds = data.get("crack_times_seconds", {})
    display = data.get("crack_times_display", {})
    feedback = data.get("feedback") or {}
    return Result(
        password=data.get("password", ""),
        guesses=int(data["guesses"]),
        guesses_log10=float(data["guesses_log10"]),
        sequence=[match_from_dict(m) for m in data.get("sequence", [])],
        score=int(data["score"]),
        crack_times={
            name: CrackTime(seconds=float(secs), display=display.get(name, ""))
            for name, secs in seconds.items()
        },
        feedback=Feedback(
            warning=feedback.get("warning", ""),
            suggestions=list(feedback.get("suggestions", [])),
        ),
        calc_time=float(data.get("calc_time", 0.0)),
    )


def dumps(result: Result, include_password: bool = False, indent=None) -> bytes:
    return dump_json_bytes(result_to_dict(result, include_password), indent=indent)


def loads(raw: bytes) -> Result:
    return result_from_dict(read_json_bytes(raw))
