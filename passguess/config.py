# passguess/config.py
"""
Estimator options and settings persistence for passguess.

Settings are saved as JSON in %APPDATA%/PassGuess/config.json (Windows) or
~/.passguess/config.json (fallback); PASSGUESS_CONFIG points elsewhere.
"""

import dataclasses
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional, Tuple

from .storage import atomic_read_bytes, atomic_write_bytes, dump_json_bytes, read_json_bytes

logger = logging.getLogger(__name__)

# the matchers and the optimizer are quadratic in the password length,
# so every estimate is capped at MAX_LENGTH_LIMIT characters
DEFAULT_MAX_LENGTH = 100
MAX_LENGTH_LIMIT = 256

DEFAULTS: Dict[str, Any] = {
    "max_length": DEFAULT_MAX_LENGTH,
    "min_length": 0,
    "truncate": True,   # False rejects over-long passwords instead of cutting them
    "user_inputs": [],
    "frequency_lists": None,  # path to a custom frequency_lists.json, None = bundled lists
    "log_level": "WARNING",
}

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class EstimatorOptions:
    """
    Per-call policy for estimate(). Built fluently:

        EstimatorOptions().with_user_inputs("alice", "alice@example.com").with_min_length(8)
    """

    user_inputs: Tuple[str, ...] = ()
    min_length: int = 0
    max_length: int = DEFAULT_MAX_LENGTH
    truncate: bool = True

    def __post_init__(self) -> None:
        if self.min_length < 0:
            raise ValueError("min_length must be >= 0")
        if self.max_length is None or self.max_length > MAX_LENGTH_LIMIT:
            raise ValueError(f"max_length must be an integer no greater than {MAX_LENGTH_LIMIT}")
        if self.max_length < max(self.min_length, 1):
            raise ValueError("max_length must be >= 1 and >= min_length")

    def with_user_inputs(self, *inputs: object) -> "EstimatorOptions":
        return dataclasses.replace(self, user_inputs=self.user_inputs + tuple(str(i) for i in inputs))

    def with_min_length(self, min_length: int) -> "EstimatorOptions":
        return dataclasses.replace(self, min_length=min_length)

    def with_max_length(self, max_length: int, truncate: bool = True) -> "EstimatorOptions":
        return dataclasses.replace(self, max_length=max_length, truncate=truncate)


def options_from_config(cfg: Dict[str, Any]) -> EstimatorOptions:
    merged = DEFAULTS.copy()
    merged.update(cfg or {})
    return EstimatorOptions(
        user_inputs=tuple(str(i) for i in merged.get("user_inputs") or ()),
        min_length=int(merged["min_length"]),
        max_length=None if merged["max_length"] is None else int(merged["max_length"]),
        truncate=bool(merged["truncate"]),
    )


def _appdata_dir() -> str:
    appdata = os.getenv("APPDATA")
    if appdata:
        d = os.path.join(appdata, "PassGuess")
    else:
        d = os.path.join(os.path.expanduser("~"), ".passguess")
    return d


def config_path() -> str:
    return os.getenv("PASSGUESS_CONFIG") or os.path.join(_appdata_dir(), "config.json")


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    p = path or config_path()
    if not os.path.exists(p):
        return DEFAULTS.copy()
    try:
        data = read_json_bytes(atomic_read_bytes(p))
    except (OSError, ValueError):
        logger.exception("Failed to load config from %s, using defaults", p)
        return DEFAULTS.copy()
    # merge defaults
    out = DEFAULTS.copy()
    out.update(data or {})
    return out


def save_config(cfg: Dict[str, Any], path: Optional[str] = None) -> str:
    p = path or config_path()
    atomic_write_bytes(p, dump_json_bytes(cfg, indent=2))
    return p


def parse_config_value(key: str, raw: str) -> Any:
    """Coerce a command-line string to the type DEFAULTS uses for key."""
    if key not in DEFAULTS:
        raise KeyError(f"unknown config key: {key}")
    if key == "frequency_lists" and raw.lower() in ("none", "null", ""):
        return None
    if key in ("max_length", "min_length"):
        return int(raw)
    if key == "truncate":
        return raw.lower() in ("1", "true", "yes", "on")
    if key == "user_inputs":
        return [part.strip() for part in raw.split(",") if part.strip()]
    if key == "log_level":
        return raw.upper()
    return raw


def setup_logging(level: str = "WARNING", filename: Optional[str] = None) -> None:
    """Configure root logging once per process run."""
    logging.basicConfig(
        filename=filename,
        level=getattr(logging, str(level).upper(), logging.WARNING),
        format=LOG_FORMAT,
    )


def merged_user_inputs(options: EstimatorOptions, extra: Optional[Iterable[object]]) -> Tuple[str, ...]:
    if not extra:
        return options.user_inputs
    return options.user_inputs + tuple(str(i) for i in extra)
