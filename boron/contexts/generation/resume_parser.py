"""
Resume text to profile parsing.

Text extracted from an uploaded resume is tidied, sent to the LLM for
structured extraction, and normalized into a Profile whose entries are all
included in the resume. Extraction from PDF itself happens upstream; this
module starts from plain text.
"""

import re
import uuid
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from boron.contexts.generation.content_generator import provider_label
from boron.contexts.generation.logger import log_generation_fallback, log_generation_request
from boron.contexts.profile.profile_data_structure import Profile
from boron.utils.errors import InputValidationError, MalformedResponseError, UpstreamServiceError
from boron.utils.llm import LLMProvider, get_provider, parse_json_object

# Longer resumes are cut to stay inside the completion's context window
MAX_RESUME_TEXT_CHARS = 15000
PARSER_TEMPERATURE = 0.1
PARSER_MAX_TOKENS = 4000

DEFAULT_SKILL_DOMAIN = "General"

PARSER_SYSTEM_PROMPT = """You are a comprehensive resume parser. Extract ALL information from the
resume text and return it as a single valid JSON object with exactly these fields:

{
  "name": "Full name", "email": "Email address", "phone": "Phone number or null",
  "location": "City, State, Country or null", "title": "Current job title or null",
  "linkedinUrl": "LinkedIn URL or null", "githubUrl": "GitHub URL or null",
  "portfolioUrl": "Portfolio URL or null",
  "about": "Professional summary (from Summary, About, Objective or Profile sections)",
  "education": [{"school": "", "degree": "", "startDate": "", "endDate": "", "cgpa": ""}],
  "experiences": [{"company": "", "position": "", "location": "", "startDate": "",
                   "endDate": "Date or 'Present'", "description": "All bullet points, one per line"}],
  "skills": [{"name": "Skill name", "domain": "Frontend, Backend, Programming Language, Framework,
              Database, Cloud, DevOps, Machine Learning, AI, Soft Skills, ..."}],
  "projects": [{"title": "", "description": "", "technologies": "Comma-separated list",
                "startDate": "", "endDate": "", "githubUrl": "URL or null", "projectUrl": "URL or null"}]
}

Rules:
1. Return ONLY the JSON object - no markdown, no code blocks, no explanations
2. Extract EVERY education, experience, skill and project entry - do not skip any
3. Use "position" (not "title") for experiences and "title" (not "name") for projects
4. Use null for missing single fields and [] for missing arrays
5. Prefer 'MM/YYYY' or 'Month YYYY' for dates"""

# Cleanup of text extracted from PDFs: words glued to dates, stray spacing
_SPACE_BEFORE_PUNCTUATION = re.compile(r"[ \t]+([.,;:!?])")
_SPACES_AFTER_PUNCTUATION = re.compile(r"([.,;:!?])[ \t]{2,}")
_YEAR_THEN_WORD = re.compile(r"(\d{4})([A-Z][a-z])")
_MONTH_THEN_YEAR = re.compile(r"\b([A-Z][a-z]+)(\d{4})\b")
_RUNS_OF_SPACES = re.compile(r"[ \t]{2,}")
_TRAILING_SPACES = re.compile(r"[ \t]+\n")
_LEADING_SPACES = re.compile(r"\n[ \t]+")
_BLANK_LINE_RUNS = re.compile(r"\n{3,}")


def clean_extracted_text(text: str) -> str:
    """
    Tidy text extracted from a resume PDF.

    Example:
        >>> clean_extracted_text("Engineer ,  Acme   May2025Present")
        'Engineer, Acme May 2025 Present'
    """
    text = _SPACE_BEFORE_PUNCTUATION.sub(r"\1", text)
    text = _SPACES_AFTER_PUNCTUATION.sub(r"\1 ", text)
    text = _YEAR_THEN_WORD.sub(r"\1 \2", text)
    text = _MONTH_THEN_YEAR.sub(r"\1 \2", text)
    text = _RUNS_OF_SPACES.sub(" ", text)
    text = _TRAILING_SPACES.sub("\n", text)
    text = _LEADING_SPACES.sub("\n", text)
    return _BLANK_LINE_RUNS.sub("\n\n", text).strip()


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, list):
        return ", ".join(str(item) for item in value if item)
    return str(value).strip()


def _entries(data: Dict[str, Any], *keys: str) -> List[Dict[str, Any]]:
    for key in keys:
        value = data.get(key)
        if isinstance(value, list):
            return [item for item in value if isinstance(item, (dict, str))]
    return []


def _entry_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:8]}"


def normalize_parsed_resume(data: Dict[str, Any], uid: str = "") -> Profile:
    """
    Turn the parser's JSON into a Profile.

    Accepts the common variants models produce: "experience" for
    "experiences", "title" for an experience's position, "name" for a project
    title, technology lists, responsibility lists and plain-string skills.
    """
    experiences = []
    for exp in _entries(data, "experiences", "experience"):
        if not isinstance(exp, dict):
            continue
        description = exp.get("description") or exp.get("responsibilities") or ""
        experiences.append(
            {
                "id": _entry_id("exp"),
                "company": _text(exp.get("company")),
                "position": _text(exp.get("position") or exp.get("title")),
                "location": _text(exp.get("location")),
                "startDate": _text(exp.get("startDate")),
                "endDate": _text(exp.get("endDate")),
                "description": (
                    "\n".join(str(line) for line in description)
                    if isinstance(description, list)
                    else _text(description)
                ),
            }
        )

    education = [
        {
            "id": _entry_id("edu"),
            "school": _text(edu.get("school")),
            "degree": _text(edu.get("degree")),
            "startDate": _text(edu.get("startDate")),
            "endDate": _text(edu.get("endDate")),
            "cgpa": _text(edu.get("cgpa") or edu.get("gpa")),
        }
        for edu in _entries(data, "education")
        if isinstance(edu, dict)
    ]

    skills = []
    for skill in _entries(data, "skills"):
        if isinstance(skill, str):
            name, domain = skill, DEFAULT_SKILL_DOMAIN
        else:
            name, domain = _text(skill.get("name")), _text(skill.get("domain"))
        if name.strip():
            skills.append(
                {"id": _entry_id("skill"), "name": name.strip(), "domain": domain or DEFAULT_SKILL_DOMAIN}
            )

    projects = [
        {
            "id": _entry_id("proj"),
            "title": _text(proj.get("title") or proj.get("name")),
            "description": _text(proj.get("description")),
            "technologies": _text(proj.get("technologies")),
            "startDate": _text(proj.get("startDate")),
            "endDate": _text(proj.get("endDate")),
            "githubUrl": _text(proj.get("githubUrl")),
            "projectUrl": _text(proj.get("projectUrl")),
        }
        for proj in _entries(data, "projects")
        if isinstance(proj, dict)
    ]

    document = {
        key: _text(data.get(key))
        for key in (
            "name",
            "email",
            "phone",
            "location",
            "title",
            "linkedinUrl",
            "githubUrl",
            "portfolioUrl",
            "about",
        )
    }
    document.update(
        uid=uid, experiences=experiences, education=education, skills=skills, projects=projects
    )
    return Profile.from_dict(document)


@dataclass
class ParsedResume:
    """
    Cleaned resume text and the profile parsed from it.

    profile is None when the LLM could not parse the text; the cleaned text
    is still returned so the caller can show it for manual entry.
    """

    text: str
    profile: Optional[Profile] = None
    error: Optional[str] = None


async def parse_resume_text(
    text: str, uid: str = "", provider: Optional[LLMProvider] = None
) -> ParsedResume:
    """
    Parse resume text into a Profile.

    Raises:
        InputValidationError: Blank text
    """
    if not text or not text.strip():
        raise InputValidationError("Resume text is empty", field="text")
    cleaned = clean_extracted_text(text)
    log_generation_request("resume parse", "extract", provider_label(provider))

    try:
        provider = provider or get_provider()
        response = await provider.generate(
            PARSER_SYSTEM_PROMPT,
            f"Resume text content:\n{cleaned[:MAX_RESUME_TEXT_CHARS]}",
            json_mode=True,
            temperature=PARSER_TEMPERATURE,
            max_tokens=PARSER_MAX_TOKENS,
        )
        profile = normalize_parsed_resume(
            parse_json_object(response.content, stage="resume_parser"), uid=uid
        )
        if not (profile.name or profile.experiences or profile.education):
            raise MalformedResponseError(
                "Parsed resume has no name, experience or education", stage="resume_parser"
            )
        return ParsedResume(text=cleaned, profile=profile)
    except (UpstreamServiceError, ValueError) as e:
        log_generation_fallback("resume parse", e)
        return ParsedResume(text=cleaned, error=str(e))
