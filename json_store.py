from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Any


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def _finite_float(text: str) -> float:
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"{text} is out of range for a JSON number")
    return value


def loads_strict(raw: str | bytes) -> Any:
    """json.loads that refuses NaN and the infinities, as JSON itself does."""
    return json.loads(raw, parse_constant=_reject_constant, parse_float=_finite_float)


def parse_document(raw: str | bytes) -> Any:
    """
    Parse a stored JSON document.

    Raises ValueError on malformed text; empty text is also an error since a
    persisted document always carries the collection keys.
    """
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8")
    if not raw.strip():
        raise ValueError("stored document is empty")
    return loads_strict(raw)


def dump_document(payload: Any, *, indent: int = 2) -> str:
    # Key order is meaningful to readers of the blob; never sort.
    return json.dumps(payload, indent=indent, ensure_ascii=False, allow_nan=False)


def read_text(path: Path) -> str | None:
    """Return file contents, or None when the file does not exist."""
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None


def atomic_write_text(path: Path, text: str) -> None:
    """
    Atomically write text to disk by writing to a temp file then replacing.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    with tmp_path.open("w", encoding="utf-8") as f:
        f.write(text)
        f.write("\n")
    tmp_path.replace(path)
