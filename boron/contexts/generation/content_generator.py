"""
Single-call AI content generation for profile fields.

Three generators, each one LLM call followed by response cleanup:
- generate_about: the profile's "About Me" paragraph
- generate_description: bullet points for an experience or project
- generate_skills: skill suggestions as {"name", "domain"} pairs

Invalid requests raise InputValidationError. Any failure after validation
(provider unavailable, upstream error, unusable completion) switches to the
local fallback generator; the result records which path produced it.
"""

import random
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from boron.contexts.generation.fallbacks import (
    generate_fallback_about,
    generate_fallback_description,
    generate_fallback_skills,
)
from boron.contexts.generation.logger import log_generation_fallback, log_generation_request
from boron.contexts.generation.response_cleanup import (
    clean_about_response,
    clean_bullet_response,
    parse_skills_response,
)
from boron.contexts.profile.profile_data_structure import Education, Experience, Profile, Project
from boron.utils.errors import InputValidationError, MalformedResponseError, UpstreamServiceError
from boron.utils.llm import LLMProvider, get_provider

GENERATION_TEMPERATURE = 0.7
GENERATION_MAX_TOKENS = 800

ABOUT_MODES = ("replace", "enhance")
DESCRIPTION_MODES = ("replace", "enhance")
DESCRIPTION_TYPES = ("experience", "project")
SKILLS_MODES = ("add", "suggest")

ABOUT_SYSTEM_PROMPT = """You are a professional resume writer who specializes in creating concise,
impactful "About Me" sections for professional profiles and resumes. Your writing should be:
- Professional but personable
- Concise (150-250 words)
- Highlight key strengths and career achievements
- Written in first person
- Conversational but polished

IMPORTANT:
- Return ONLY the "About Me" text with no additional commentary
- Do NOT include headers, labels, or meta-information
- Do NOT include phrases like "Here is your About Me section" or "I hope this helps"
- Do NOT use quotation marks around the text"""

DESCRIPTION_SYSTEM_PROMPT = """You are a professional resume writer who specializes in creating concise,
impactful bullet points for resumes. Your descriptions should be:
- Achievement-oriented with quantifiable results where possible
- Written in past tense using action verbs
- Focused on skills and accomplishments
- Each bullet point should be on a new line
- Between 3-5 bullet points total
- Each bullet point should be 1-2 lines maximum

IMPORTANT:
- Return ONLY the bullet points with no introductory or concluding text
- Do NOT include bullet markers, just the text for each point
- Do NOT include examples, headers, labels, or meta-information
- Just provide clean text, one bullet point per line"""

SKILLS_SYSTEM_PROMPT = """You are a professional career advisor who specializes in identifying technical
and professional skills from experience and project descriptions. Your task is to:
1. Analyze the provided experience and project information
2. Identify relevant technical skills (programming languages, frameworks, tools)
3. Identify soft skills and domain expertise
4. Organize skills into appropriate domains

IMPORTANT:
- Return a JSON array of objects, each with a "name" and a "domain"
- Example domains: "Frontend Development", "Backend Development", "Data Science", "Communication"
- Be specific with skill names (e.g., "React.js" not just "JavaScript frameworks")
- Do NOT include explanations, headers, labels, or meta-information"""

ENHANCE_INSTRUCTIONS = """Enhance them to be more achievement-oriented with quantifiable results where possible.
Don't completely change the points but improve their wording, impact, and professionalism."""


@dataclass
class AboutRequest:
    experiences: List[Experience] = field(default_factory=list)
    skills: List[str] = field(default_factory=list)
    education: List[Education] = field(default_factory=list)
    current_about: str = ""
    mode: str = "replace"

    @classmethod
    def from_profile(cls, profile: Profile, mode: str = "replace") -> "AboutRequest":
        return cls(
            experiences=list(profile.experiences),
            skills=[skill.name for skill in profile.skills if skill.name],
            education=list(profile.education),
            current_about=profile.about,
            mode=mode,
        )


@dataclass
class DescriptionRequest:
    type: str
    position: str = ""
    company: str = ""
    title: str = ""
    technologies: str = ""
    additional_context: str = ""
    current_description: str = ""
    mode: str = "replace"


@dataclass
class SkillsRequest:
    experiences: List[Experience] = field(default_factory=list)
    projects: List[Project] = field(default_factory=list)
    current_skills: List[Dict[str, str]] = field(default_factory=list)
    mode: str = "add"

    @classmethod
    def from_profile(cls, profile: Profile, mode: str = "add") -> "SkillsRequest":
        return cls(
            experiences=list(profile.experiences),
            projects=list(profile.projects),
            current_skills=[
                {"name": skill.name, "domain": skill.domain} for skill in profile.skills
            ],
            mode=mode,
        )


@dataclass
class GenerationResult:
    """
    Generated content and where it came from.

    Attributes:
        content: Text for about/description, list of {"name", "domain"} for skills
        source: "llm" or "fallback"
        error: Failure that triggered the fallback, if any
    """

    content: Any
    source: str = "llm"
    error: Optional[str] = None

    @property
    def used_fallback(self) -> bool:
        return self.source == "fallback"


def _check_mode(mode: str, allowed: tuple) -> None:
    if mode not in allowed:
        raise InputValidationError(
            f"Unknown mode '{mode}'. Use one of: {', '.join(allowed)}", field="mode"
        )


def _experience_lines(experiences: List[Experience], first_line_only: bool = False) -> str:
    if not experiences:
        return "No experience provided"
    lines = []
    for exp in experiences:
        description = exp.description.strip()
        if first_line_only:
            description = description.splitlines()[0] if description else ""
            lines.append(
                f"- {exp.position} at {exp.company}" + (f": {description}" if description else "")
            )
        else:
            lines.append(
                f"Position: {exp.position} at {exp.company}\n"
                f"Description: {description or 'Not provided'}"
            )
    return ("\n" if first_line_only else "\n\n").join(lines)


def build_about_prompt(request: AboutRequest) -> str:
    education = "\n".join(
        f"- {edu.degree} from {edu.school}" for edu in request.education
    ) or "No education provided"
    details = (
        f"Work Experience:\n{_experience_lines(request.experiences, first_line_only=True)}\n\n"
        f"Skills:\n{', '.join(request.skills) or 'No skills provided'}\n\n"
        f"Education:\n{education}"
    )

    if request.mode == "enhance" and request.current_about.strip():
        return (
            f'Please enhance this existing "About Me" section:\n\n"{request.current_about.strip()}"\n\n'
            "Make it more professional and impactful while maintaining the original tone and key points.\n"
            f"You can reference these additional details about me:\n\n{details}\n\n"
            "Improve the existing text, but don't completely change its essence."
        )
    return (
        f'Write a professional "About Me" section based on these details:\n\n{details}\n\n'
        "Make it sound professional yet conversational, written in first person."
    )


def build_description_prompt(request: DescriptionRequest) -> str:
    if request.type == "experience":
        subject = f"a {request.position} at {request.company}"
    else:
        subject = f'the project "{request.title}" using {request.technologies}'
    context = (
        f"\nAdditional context: {request.additional_context.strip()}"
        if request.additional_context.strip()
        else ""
    )

    if request.mode == "enhance" and request.current_description.strip():
        return (
            f"Improve these existing bullet points for {subject}:\n\n"
            f"{request.current_description.strip()}\n\n{ENHANCE_INSTRUCTIONS}{context}"
        )
    if request.type == "experience":
        return f"Write 3-5 professional bullet points describing work as {subject}.{context}"
    return (
        f'Write 3-5 professional bullet points describing the project "{request.title}" '
        f"that used these technologies: {request.technologies}.{context}"
    )


def build_skills_prompt(request: SkillsRequest) -> str:
    projects = "\n\n".join(
        f"Project: {proj.title}\nTechnologies: {proj.technologies}\n"
        f"Description: {proj.description.strip() or 'Not provided'}"
        for proj in request.projects
    ) or "No projects provided"
    current = ", ".join(
        f"{skill['name']} ({skill['domain']})" for skill in request.current_skills
    )
    details = f"Experience:\n{_experience_lines(request.experiences)}\n\nProjects:\n{projects}"

    if request.mode == "suggest" and request.current_skills:
        return (
            "Based on the following profile information, suggest additional skills that would "
            "complement their existing skills or fill any gaps in their skill set.\n\n"
            f"Current Skills:\n{current}\n\n{details}\n\n"
            "Focus on skills that are missing from their current skill set but implied by their "
            "experience and projects."
        )
    prompt = (
        "Based on the following profile information, identify and categorize all the technical "
        f"and professional skills this person likely possesses.\n\n{details}"
    )
    if current:
        prompt += f"\n\nCurrent Skills:\n{current}\n\nExpand on these with additional relevant skills."
    return prompt


async def _complete(provider: Optional[LLMProvider], system_prompt: str, user_prompt: str) -> str:
    provider = provider or get_provider()
    response = await provider.generate(
        system_prompt,
        user_prompt,
        temperature=GENERATION_TEMPERATURE,
        max_tokens=GENERATION_MAX_TOKENS,
    )
    return response.content


def provider_label(provider: Optional[LLMProvider]) -> str:
    return provider.name if provider is not None else "default provider"


async def generate_about(
    request: AboutRequest, provider: Optional[LLMProvider] = None
) -> GenerationResult:
    """
    Write (replace) or polish (enhance) the about section.

    Enhance mode without existing text behaves as replace.

    Raises:
        InputValidationError: Unknown mode
    """
    _check_mode(request.mode, ABOUT_MODES)
    log_generation_request("about", request.mode, provider_label(provider))

    try:
        completion = await _complete(provider, ABOUT_SYSTEM_PROMPT, build_about_prompt(request))
        about = clean_about_response(completion)
        if not about:
            raise MalformedResponseError("About completion was empty after cleanup")
        return GenerationResult(content=about)
    except (UpstreamServiceError, ValueError) as e:
        log_generation_fallback("about", e)
        content = generate_fallback_about(
            experiences=request.experiences,
            skills=request.skills,
            education=request.education,
            current_about=request.current_about,
            mode=request.mode,
        )
        return GenerationResult(content=content, source="fallback", error=str(e))


def validate_description_request(request: DescriptionRequest) -> None:
    """
    Raises:
        InputValidationError: Unknown type or mode, or missing required fields
    """
    if request.type not in DESCRIPTION_TYPES:
        raise InputValidationError(
            f"Unknown description type '{request.type}'. Use one of: {', '.join(DESCRIPTION_TYPES)}",
            field="type",
        )
    _check_mode(request.mode, DESCRIPTION_MODES)
    if request.type == "experience" and not (request.position.strip() and request.company.strip()):
        raise InputValidationError("Missing required fields: position and company")
    if request.type == "project" and not (request.title.strip() and request.technologies.strip()):
        raise InputValidationError("Missing required fields: title and technologies")


async def generate_description(
    request: DescriptionRequest,
    provider: Optional[LLMProvider] = None,
    rng: Optional[random.Random] = None,
) -> GenerationResult:
    """
    Write (replace) or improve (enhance) bullet points, one per line.

    Raises:
        InputValidationError: See validate_description_request()
    """
    validate_description_request(request)
    log_generation_request(f"{request.type} description", request.mode, provider_label(provider))

    try:
        completion = await _complete(
            provider, DESCRIPTION_SYSTEM_PROMPT, build_description_prompt(request)
        )
        bullets = clean_bullet_response(completion)
        if not bullets:
            raise MalformedResponseError("Description completion had no bullet points")
        return GenerationResult(content=bullets)
    except (UpstreamServiceError, ValueError) as e:
        log_generation_fallback("description", e)
        content = generate_fallback_description(
            request.type,
            position=request.position,
            company=request.company,
            title=request.title,
            technologies=request.technologies,
            current_description=request.current_description,
            mode=request.mode,
            rng=rng,
        )
        return GenerationResult(content=content, source="fallback", error=str(e))


async def generate_skills(
    request: SkillsRequest,
    provider: Optional[LLMProvider] = None,
    rng: Optional[random.Random] = None,
) -> GenerationResult:
    """
    Suggest skills for the profile as a list of {"name", "domain"} dicts.

    Skills the profile already lists (case-insensitive name match) are
    dropped from the suggestions.

    Raises:
        InputValidationError: Unknown mode
    """
    _check_mode(request.mode, SKILLS_MODES)
    log_generation_request("skills", request.mode, provider_label(provider))
    existing = {skill["name"].lower() for skill in request.current_skills}

    try:
        completion = await _complete(provider, SKILLS_SYSTEM_PROMPT, build_skills_prompt(request))
        skills = [
            skill
            for skill in parse_skills_response(completion)
            if skill["name"].lower() not in existing
        ]
        if not skills:
            raise MalformedResponseError("Skills completion had no new skills")
        return GenerationResult(content=skills)
    except (UpstreamServiceError, ValueError) as e:
        log_generation_fallback("skills", e)
        content = generate_fallback_skills(
            experiences=request.experiences,
            projects=request.projects,
            current_skills=request.current_skills,
            mode=request.mode,
            rng=rng,
        )
        return GenerationResult(content=content, source="fallback", error=str(e))
