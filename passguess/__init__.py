"""
passguess: realistic password strength estimation.

    >>> from passguess import estimate
    >>> estimate("correcthorsebatterystaple").score
    4
"""

from .config import EstimatorOptions
from .errors import InvalidInput, InvariantViolation, PassguessError
from .evaluator import estimate
from .models import Feedback, Match, Result

__version__ = "0.1.0"

__all__ = [
    "estimate",
    "EstimatorOptions",
    "Result",
    "Match",
    "Feedback",
    "PassguessError",
    "InvalidInput",
    "InvariantViolation",
    "__version__",
]
