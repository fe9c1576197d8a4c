"""Utilities for deriving display fields from article content and wallet addresses."""
from __future__ import annotations

import math
import re
from typing import Any


_HTML_TAG_RE = re.compile(r"<[^>]*>")
_WHITESPACE_RE = re.compile(r"\s+")

PREVIEW_MAX_LENGTH = 300
WORDS_PER_MINUTE = 200


def strip_tags(value: Any) -> str:
    """Replace every ``<...>`` tag with a space. Non-string inputs return ``""``."""

    if not isinstance(value, str):
        return ""
    return _HTML_TAG_RE.sub(" ", value)


def format_address(address: Any) -> str:
    """Shorten a wallet address to ``0xEc11...6bF1`` form for log output.

    Addresses too short to elide (ten characters or fewer) are returned as-is.
    """

    if not isinstance(address, str):
        return ""
    if len(address) <= 10:
        return address
    return f"{address[:6]}...{address[-4:]}"


def generate_preview(content: Any, *, limit: int = PREVIEW_MAX_LENGTH) -> str:
    """Return a plain-text preview of HTML ``content`` at most ``limit`` characters long."""

    text = _WHITESPACE_RE.sub(" ", strip_tags(content)).strip()
    # The cut can land on a space.
    return text[: max(0, limit)].rstrip()


def calculate_read_time(content: Any, *, words_per_minute: int = WORDS_PER_MINUTE) -> str:
    """Estimate reading time as ``"<N> min read"`` with a floor of one minute."""

    word_count = len(strip_tags(content).split())
    minutes = max(1, math.ceil(word_count / max(1, words_per_minute)))
    return f"{minutes} min read"


__all__ = [
    "PREVIEW_MAX_LENGTH",
    "WORDS_PER_MINUTE",
    "calculate_read_time",
    "format_address",
    "generate_preview",
    "strip_tags",
]
