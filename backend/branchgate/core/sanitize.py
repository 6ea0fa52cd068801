"""Input sanitization helpers for request payloads."""

from __future__ import annotations

import re
import unicodedata
from typing import Iterable

_WHITESPACE_RE = re.compile(r"\s+")


def _strip_control_chars(value: str) -> str:
    return "".join(ch for ch in value if unicodedata.category(ch) != "Cc")


def clean_single_line(value: str | None) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        value = str(value)
    value = _strip_control_chars(value.replace("\r", " ").replace("\n", " "))
    return _WHITESPACE_RE.sub(" ", value).strip()


def clean_optional(value: str | None) -> str | None:
    """Clean a patchable text field, keeping ``None`` (absent) apart from ``""`` (clear)."""
    if value is None:
        return None
    return clean_single_line(value)


def blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    return value or None


def clean_name_list(values: Iterable[str] | str | None, *, max_items: int, item_max_length: int) -> list[str]:
    """Clean names in order, dropping blanks and case-insensitive repeats."""
    if values is None:
        return []
    raw = [values] if isinstance(values, str) else list(values)
    names: dict[str, str] = {}
    for item in raw:
        name = clean_single_line(item)
        if len(name) > item_max_length:
            raise ValueError("name_too_long")
        if name:
            names.setdefault(name.casefold(), name)
    if len(names) > max_items:
        raise ValueError("too_many_names")
    return list(names.values())
