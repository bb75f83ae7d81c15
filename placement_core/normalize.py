from __future__ import annotations


def normalize(value: object) -> str:
    """Canonical comparison form: non-strings become "", then strip and lower-case."""
    if not isinstance(value, str):
        return ""
    return value.strip().lower()
