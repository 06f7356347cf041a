"""
Shared utilities for Boron.

Common functionality used across contexts:
- LaTeX escaping and date formatting
- LLM providers and response parsing
- Logging and pipeline event logging
- Error taxonomy
"""

from boron.utils.date_formatting import format_date, format_date_range
from boron.utils.latex_escaping import escape_url, normalize_url, sanitize
from boron.utils.timestamp import now, now_exact, today

__all__ = [
    "escape_url",
    "format_date",
    "format_date_range",
    "normalize_url",
    "now",
    "now_exact",
    "sanitize",
    "today",
]
