"""
passguess.evaluator

Public entry point:
- estimate(password, user_inputs=None, options=None, tables=None) -> Result

Runs every matcher over the password, picks the minimum-guesses covering
sequence, then derives the score, crack times and feedback. Each call builds
its own matches and result; only the read-only lookup tables are shared.
"""

import logging
import time
from typing import Iterable, Optional

from .config import EstimatorOptions, merged_user_inputs
from .errors import InvalidInput
from .feedback import get_feedback
from .matching import omnimatch
from .models import Result
from .scoring import most_guessable_match_sequence
from .tables import LookupTables, get_tables
from .time_estimates import estimate_attack_times, guesses_to_score

logger = logging.getLogger(__name__)


def apply_length_policy(password: str, options: EstimatorOptions) -> str:
    if len(password) < options.min_length:
        raise InvalidInput(f"password is shorter than the minimum length of {options.min_length}")
    if len(password) > options.max_length:
        if not options.truncate:
            raise InvalidInput(f"password is longer than the maximum length of {options.max_length}")
        logger.debug("truncating %d-char password to %d chars", len(password), options.max_length)
        return password[:options.max_length]
    return password


def estimate(
    password: str,
    user_inputs: Optional[Iterable[object]] = None,
    options: Optional[EstimatorOptions] = None,
    tables: Optional[LookupTables] = None,
) -> Result:
    """
    Estimate how many guesses an attacker needs for password.

    user_inputs are context strings (username, email, site name) matched as
    an extra dictionary ranked by position. An empty password is valid and
    scores 0 with 1 guess; InvalidInput is raised only for policy violations.
    """
    if not isinstance(password, str):
        raise InvalidInput(f"password must be a str, not {type(password).__name__}")
    options = options or EstimatorOptions()
    password = apply_length_policy(password, options)

    start = time.perf_counter()
    tables = tables or get_tables()
    ranked_dictionaries = tables.with_user_inputs(merged_user_inputs(options, user_inputs))
    matches = omnimatch(password, ranked_dictionaries, tables.graphs, tables.l33t_table)
    calculation = most_guessable_match_sequence(password, matches)

    score = guesses_to_score(calculation.guesses)
    result = Result(
        password=password,
        guesses=calculation.guesses,
        guesses_log10=calculation.guesses_log10,
        sequence=calculation.sequence,
        score=score,
        crack_times=estimate_attack_times(calculation.guesses),
        feedback=get_feedback(score, calculation.sequence),
    )
    result.calc_time = time.perf_counter() - start
    logger.debug(
        "estimated %d chars: %d candidates, %d in sequence, score %d in %.2f ms",
        len(password), len(matches), len(calculation.sequence), score, result.calc_time * 1000,
    )
    return result
