"""
LaTeX-safe text transformation.

Every user-supplied string that ends up in a resume passes through sanitize()
(or escape_url() for link targets) before it reaches a template.
"""

import re
from urllib.parse import urlparse

# Replacement for each LaTeX special character
LATEX_SPECIAL_CHARS = {
    "\\": r"\textbackslash{}",
    "&": r"\&",
    "%": r"\%",
    "$": r"\$",
    "#": r"\#",
    "_": r"\_",
    "{": r"\{",
    "}": r"\}",
    "~": r"\textasciitilde{}",
    "^": r"\textasciicircum{}",
    "<": r"\textless{}",
    ">": r"\textgreater{}",
}

# Characters that break \href targets
URL_SPECIAL_CHARS = {
    "%": r"\%",
    "#": r"\#",
    "&": r"\&",
    "_": r"\_",
}

# Backslash leads the alternation; each character is replaced exactly once
_LATEX_SPECIAL_PATTERN = re.compile("|".join(re.escape(c) for c in LATEX_SPECIAL_CHARS))
_URL_SPECIAL_PATTERN = re.compile("|".join(re.escape(c) for c in URL_SPECIAL_CHARS))
_MARKDOWN_BOLD_PATTERN = re.compile(r"\*\*(.+?)\*\*")
_SCHEME_PATTERN = re.compile(r"^(?:[a-zA-Z][a-zA-Z0-9+.\-]*://|mailto:)", re.IGNORECASE)


def sanitize(raw: str | None) -> str:
    """
    Escape LaTeX special characters in plain text.

    Escaping happens in a single pass, so the braces introduced by
    \\textbackslash{} are never escaped again. Not idempotent: sanitizing an
    already-sanitized string escapes its backslashes a second time.

    Examples:
        >>> sanitize("R&D 100%")
        'R\\\\&D 100\\\\%'
        >>> sanitize(None)
        ''
    """
    if not raw:
        return ""
    return _LATEX_SPECIAL_PATTERN.sub(lambda m: LATEX_SPECIAL_CHARS[m.group(0)], str(raw))


def escape_url(url: str | None) -> str:
    """Escape the characters that break \\href targets (%, #, &, _)."""
    if not url:
        return ""
    return _URL_SPECIAL_PATTERN.sub(lambda m: URL_SPECIAL_CHARS[m.group(0)], str(url).strip())


def normalize_url(url: str | None) -> str:
    """Prefix https:// when a URL has no scheme. Blank input gives ''."""
    if not url or not str(url).strip():
        return ""
    url = str(url).strip()
    if _SCHEME_PATTERN.match(url):
        return url
    return f"https://{url}"


def render_inline_markup(text: str | None) -> str:
    """
    Sanitize text, then turn markdown bold (**text**) into \\textbf{text}.

    Used for optimizer-written bullets, which often emphasize keywords.
    """
    escaped = sanitize(text)
    return _MARKDOWN_BOLD_PATTERN.sub(lambda m: r"\textbf{" + m.group(1) + "}", escaped)


def extract_username(url: str | None) -> str:
    """
    Last path segment of a profile URL, used as link text.

    Examples:
        >>> extract_username("https://linkedin.com/in/jdoe/")
        'jdoe'
        >>> extract_username("github.com/octocat")
        'octocat'
    """
    normalized = normalize_url(url)
    if not normalized:
        return ""
    parsed = urlparse(normalized)
    segments = [segment for segment in parsed.path.split("/") if segment]
    if segments:
        return segments[-1]
    return parsed.netloc or normalized
