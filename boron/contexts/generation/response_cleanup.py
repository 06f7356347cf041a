"""
Cleanup of free-text LLM completions.

Models add chatter around the requested content ("Here are some bullet
points:", "I hope this helps!") and markdown the resume cannot use. These
helpers reduce a completion to the bare content.
"""

import re
from typing import Dict, List

from boron.utils.llm import parse_json_array

# First line that announces the content: "Here are ..." or anything ending in a colon
_INTRO = re.compile(r"^(?:(?:here are|here's|here is)\b[^\n]*|[^\n]*:)[ \t]*\n", re.IGNORECASE)
_OUTRO = re.compile(
    r"\n[^\n]*(?:hope this helps|let me know|feel free)[^\n]*$", re.IGNORECASE
)

# Bullets and numbering ("1.", "2)") at line start; digits must be followed by . or )
_LINE_MARKER = re.compile(r"^(?:•\s*|[-*]\s+|\d+[.)]\s+)")

_MARKDOWN = [
    (re.compile(r"```(?:\w+\n)?(.*?)```", re.DOTALL), r"\1"),
    (re.compile(r"\*\*(.*?)\*\*"), r"\1"),
    (re.compile(r"\*(.*?)\*"), r"\1"),
    (re.compile(r"__(.*?)__"), r"\1"),
    (re.compile(r"~~(.*?)~~"), r"\1"),
    (re.compile(r"`(.*?)`"), r"\1"),
]

_DOMAIN_GROUP = re.compile(r"^([A-Za-z0-9&/ ]+):\s*(.+)$")
_SKILL_WITH_DOMAIN = re.compile(r"^([^()]+?)\s*\(([^()]+)\)\s*$")

DEFAULT_SKILL_DOMAIN = "Other"


def strip_markdown(text: str) -> str:
    """Remove bold, italic, underline, strikethrough and code markup."""
    for pattern, replacement in _MARKDOWN:
        text = pattern.sub(replacement, text)
    return text


def strip_chatter(text: str) -> str:
    """Drop an introductory first line and a closing pleasantry line."""
    text = _INTRO.sub("", text.strip() + "\n", count=1)
    return _OUTRO.sub("", text.rstrip())


def _content_lines(text: str) -> List[str]:
    lines = []
    for line in strip_chatter(text).splitlines():
        line = strip_markdown(_LINE_MARKER.sub("", line.strip())).strip()
        if line:
            lines.append(line)
    return lines


def clean_bullet_response(text: str) -> str:
    """
    Reduce a bullet-point completion to one bullet text per line.

    Example:
        >>> clean_bullet_response("Here are some points:\\n1. Built **X**\\n- Led Y")
        'Built X\\nLed Y'
    """
    return "\n".join(_content_lines(text))


def clean_about_response(text: str) -> str:
    """Strip chatter, markdown and wrapping quotes from an about-section completion."""
    text = strip_markdown(strip_chatter(text)).strip()
    if len(text) > 1 and text[0] == text[-1] == '"':
        text = text[1:-1].strip()
    return text


def _skills_from_json(items: list) -> List[Dict[str, str]]:
    skills = []
    for item in items:
        if not isinstance(item, dict):
            continue
        name = str(item.get("name") or item.get("skill") or "").strip()
        domain = str(item.get("domain") or item.get("category") or "").strip()
        if name and domain:
            skills.append({"name": name, "domain": domain})
    return skills


def parse_skills_response(text: str) -> List[Dict[str, str]]:
    """
    Parse suggested skills out of a completion.

    Accepted shapes, tried in order:
    - JSON array of {"name", "domain"} objects (also "skill"/"category")
    - "Domain: Skill1, Skill2" lines
    - "- Skill (Domain)" lines; a skill without a domain goes under "Other"

    Returns:
        List of {"name", "domain"} dicts, duplicates (by name) dropped
    """
    if not text or not text.strip():
        return []

    items = parse_json_array(text)
    if items is not None:
        return _dedupe(_skills_from_json(items))

    skills = []
    for line in _content_lines(text):
        group = _DOMAIN_GROUP.match(line)
        if group:
            domain = group.group(1).strip()
            skills.extend(
                {"name": name.strip(), "domain": domain}
                for name in group.group(2).split(",")
                if name.strip()
            )
            continue

        with_domain = _SKILL_WITH_DOMAIN.match(line)
        if with_domain:
            skills.append(
                {"name": with_domain.group(1).strip(), "domain": with_domain.group(2).strip()}
            )
        else:
            skills.append({"name": line, "domain": DEFAULT_SKILL_DOMAIN})

    return _dedupe(skills)


def _dedupe(skills: List[Dict[str, str]]) -> List[Dict[str, str]]:
    seen = set()
    unique = []
    for skill in skills:
        key = skill["name"].lower()
        if key not in seen:
            seen.add(key)
            unique.append(skill)
    return unique


_COVER_LETTER_PREAMBLE = re.compile(
    r"^(?:here is|here's|i've created|i have created|below is|attached is|this is) "
    r"(?:a|the|your) (?:(?:professional|personalized|tailored|customized) )?cover letter[^\n]*:\s*",
    re.IGNORECASE,
)
_COVER_LETTER_LABEL = re.compile(r"^cover letter[^\n]*:\s*", re.IGNORECASE)


def clean_cover_letter_response(text: str) -> str:
    """
    Strip an announcing first line ("Here is your tailored cover letter:")
    and markdown from a cover letter. Letter layout (line breaks) is kept.
    """
    text = _COVER_LETTER_PREAMBLE.sub("", text.strip(), count=1)
    text = _COVER_LETTER_LABEL.sub("", text, count=1)
    return strip_markdown(text).strip()
