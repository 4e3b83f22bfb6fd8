"""
passguess.storage

Byte-level file helpers shared by the settings file, the word-list loader
and the JSON serializer.
"""

import json
import os
from importlib import resources
from typing import Any, Optional

PACKAGE_DATA_DIR = "data"


def ensure_dir_exists(path: str) -> None:
    d = os.path.dirname(path)
    if d and not os.path.exists(d):
        os.makedirs(d, exist_ok=True)


def atomic_write_bytes(path: str, data: bytes) -> None:
    """
    Atomically write bytes to 'path' by writing to a temp file and renaming.
    """
    ensure_dir_exists(path)
    tmp = path + ".tmp"
    with open(tmp, "wb") as f:
        f.write(data)
        f.flush()
        os.fsync(f.fileno())
    os.replace(tmp, path)


def atomic_read_bytes(path: str) -> bytes:
    with open(path, "rb") as f:
        return f.read()


def read_package_bytes(name: str) -> bytes:
    """Read a file shipped inside passguess/data/."""
    return resources.files("passguess").joinpath(PACKAGE_DATA_DIR).joinpath(name).read_bytes()


def read_json_bytes(b: bytes) -> Any:
    return json.loads(b.decode("utf-8"))


def dump_json_bytes(obj: Any, indent: Optional[int] = None) -> bytes:
    return json.dumps(obj, ensure_ascii=False, indent=indent).encode("utf-8")
