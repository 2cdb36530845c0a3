"""Text helpers for deriving index fields from page content."""

from __future__ import annotations

DEFAULT_TITLE_MAX_CHARS = 120


def is_blank(content: str | None) -> bool:
    return not content or not content.strip()


def extract_title(content: str, *, max_chars: int = DEFAULT_TITLE_MAX_CHARS) -> str:
    """Return the first non-empty line with leading ``#`` markers removed.

    Lines that are blank, or that hold nothing but heading markers, are
    skipped. The result is cut to ``max_chars`` characters.
    """
    for line in content.split("\n"):
        trimmed = line.strip()
        if not trimmed:
            continue
        title = trimmed.lstrip("#").strip()
        if not title:
            continue
        return title[:max_chars]
    return ""


def word_count(content: str) -> int:
    return len(content.split())


def char_count(content: str) -> int:
    return len(content)
