"""Flattening of file text into a single whitespace-collapsed line."""

from __future__ import annotations

import re

_LINE_BREAKS = re.compile(r"\r\n|\n")
# U+FEFF counts as whitespace so byte order marks are dropped.
_WHITESPACE = re.compile(r"[\s\ufeff]+")


def normalize_content(raw: str) -> str:
    """Return ``raw`` as one line with every whitespace run reduced to a space."""
    text = _LINE_BREAKS.sub(" ", raw)
    text = _WHITESPACE.sub(" ", text)
    return text.strip()


__all__ = ["normalize_content"]
