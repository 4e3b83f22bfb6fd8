"""
passguess.errors

Exception types raised by the estimator.
"""


class PassguessError(Exception):
    """Base class for every error raised by passguess."""


class InvalidInput(PassguessError, ValueError):
    """The password was rejected by the configured policy (too short, too long, not a string)."""


class InvariantViolation(PassguessError, RuntimeError):
    """
    An internal contract was broken: a malformed match, or an optimal sequence
    that does not cover the password. Indicates a bug, not bad input.
    """
