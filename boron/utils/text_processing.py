"""Text processing utilities for resume content."""

import re
from typing import List

_BULLET_MARKER = re.compile(r"^[•\-*]\s*")


def strip_bullet_marker(line: str) -> str:
    """Remove a leading bullet marker (•, -, *) and surrounding whitespace."""
    return _BULLET_MARKER.sub("", line.strip()).strip()


def split_bullet_lines(text: str | None) -> List[str]:
    """
    Split a multi-line description into bullet texts.

    Blank lines are dropped and leading bullet markers stripped.

    Example:
        >>> split_bullet_lines("• Built X\\n\\n- Led Y")
        ['Built X', 'Led Y']
    """
    if not text:
        return []
    bullets = []
    for line in str(text).splitlines():
        cleaned = strip_bullet_marker(line)
        if cleaned:
            bullets.append(cleaned)
    return bullets


def split_comma_list(text: str | None) -> List[str]:
    """Split a comma-separated string ("Python, SQL, ") into trimmed, non-empty items."""
    if not text:
        return []
    return [item.strip() for item in str(text).split(",") if item.strip()]


def set_max_consecutive_blank_lines(content: str, max_consecutive: int = 1) -> str:
    """
    Collapse runs of blank lines to at most max_consecutive.

    Args:
        content: Text to process
        max_consecutive: Maximum number of consecutive blank lines to keep

    Returns:
        Text with blank-line runs collapsed
    """
    lines = content.split("\n")
    result = []
    blank_count = 0

    for line in lines:
        if line.strip() == "":
            blank_count += 1
            if blank_count <= max_consecutive:
                result.append(line)
        else:
            blank_count = 0
            result.append(line)

    return "\n".join(result)


def truncate(text: str, limit: int = 80) -> str:
    """Shorten text for log lines."""
    text = " ".join(str(text).split())
    if len(text) <= limit:
        return text
    return text[: limit - 3] + "..."
