"""I/O utilities for JSON and text file operations.

All JSON goes through orjson.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any

import orjson


def load_json(path: Path) -> Any:
    """Load JSON from a file."""
    return orjson.loads(path.read_bytes())


def save_json(obj: Any, path: Path, *, pretty: bool = True) -> None:
    """Save an object as JSON, creating parent directories as needed.

    Key order is preserved so that serialized datasets keep their
    ``version, lastUpdated, sections, index`` layout.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    opts = orjson.OPT_INDENT_2 if pretty else 0
    path.write_bytes(orjson.dumps(obj, option=opts))


def dumps_json(obj: Any, *, pretty: bool = True) -> bytes:
    """Serialize an object to JSON bytes with a trailing newline."""
    opts = orjson.OPT_INDENT_2 if pretty else 0
    return orjson.dumps(obj, option=opts | orjson.OPT_APPEND_NEWLINE)


def read_text(path: Path) -> str:
    """Read a UTF-8 text file, tolerating a leading byte-order mark."""
    return path.read_bytes().decode("utf-8-sig")
