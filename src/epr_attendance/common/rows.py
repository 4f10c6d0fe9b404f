from __future__ import annotations

from typing import Any, Mapping, Optional


def pick(row: Mapping[str, Any], *names: str, default: Any = None) -> Any:
    """First present, non-empty value among ``names`` (English or ERP column)."""
    for name in names:
        if name in row:
            value = row[name]
            if value is not None and value != "":
                return value
    return default


def as_int(value: Any, default: int) -> int:
    """Coerce an ERP integer column; unparsable values become -1 (unrecognized code)."""
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return int(value)
    try:
        return int(str(value).strip())
    except ValueError:
        return -1


def as_flag(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value is None or value == "":
        return False
    text = str(value).strip().lower()
    if text in {"true", "yes", "da"}:
        return True
    try:
        return int(float(text)) == 1
    except ValueError:
        return False


def as_text(value: Any) -> str:
    return "" if value is None else str(value)


def as_optional_text(value: Any) -> Optional[str]:
    text = as_text(value).strip()
    return text or None
