"""
Job-targeted writing for a candidate profile.

- generate_cover_letter: a tailored letter for one job description
- generate_outreach_email: an email to a recruiter (application, follow-up, ...)
- generate_tailored_summary: a 2-3 sentence professional summary for one job

Same contract as content_generator: invalid requests raise
InputValidationError, and any failure after validation switches to a local
template so the candidate always gets an editable draft.
"""

import re
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from boron.contexts.generation.content_generator import GenerationResult, provider_label
from boron.contexts.generation.fallbacks import (
    generate_fallback_cover_letter,
    generate_fallback_email,
    generate_fallback_summary,
)
from boron.contexts.generation.logger import log_generation_fallback, log_generation_request
from boron.contexts.generation.response_cleanup import (
    clean_about_response,
    clean_cover_letter_response,
)
from boron.contexts.profile.profile_data_structure import Profile
from boron.utils.errors import InputValidationError, MalformedResponseError, UpstreamServiceError
from boron.utils.llm import LLMProvider, get_provider, parse_json_object

COVER_LETTER_TEMPERATURE = 0.7
COVER_LETTER_MAX_TOKENS = 1500
EMAIL_TEMPERATURE = 0.8
EMAIL_MAX_TOKENS = 2000
SUMMARY_TEMPERATURE = 0.5
SUMMARY_MAX_TOKENS = 400

EMAIL_TYPES = ("application", "follow-up", "thank-you", "inquiry", "withdrawal")
EMAIL_TONES = ("professional", "friendly", "casual")

_WHITESPACE = re.compile(r"\s+")

COVER_LETTER_INSTRUCTIONS = """INSTRUCTIONS FOR COVER LETTER CREATION:
1. Format and Content:
   - Include the date at the top ({letter_date})
   - Include the candidate's name and contact information at the top
   - Use proper business letter formatting with appropriate salutation and closing
   - Length should be approximately 350-450 words in 3-4 paragraphs
   - Do not include the recipient's address
   - Use "Hiring Manager" or "Hiring Team" for the salutation if no specific name is provided

2. Structure:
   - Opening paragraph: introduce the candidate, state the position, and open with a compelling hook
   - Body paragraphs: highlight 2-3 specific achievements and skills from the profile that match the job
   - Closing paragraph: reiterate interest, thank the reader, and ask for an interview

3. Writing Style:
   - Professional but conversational; specific and results-oriented, using metrics from the profile
   - Avoid cliches and generic statements; use active voice and strong action verbs

4. Truthfulness:
   - Include only information present in the candidate's profile
   - Do not fabricate experience, skills, or achievements
   - Emphasize transferable skills if the candidate is changing careers

Return only the cover letter."""

EMAIL_SYSTEM_PROMPT = """You are an expert career advisor and professional email writer who crafts
personalized, compelling job-search emails that feel like genuine human conversations.

Follow the AIDA framework: Attention (personal hook, not "Dear Sir/Madam"), Interest (a brief story
from the candidate's background), Desire (2-3 concrete qualifications tied to the role), Action (a
clear, confident next step).

NEVER use: "I am writing to express my interest", "I hope this email finds you well",
"I would like to apply for", "Please find my resume attached".

Always respond with a JSON object containing:
- subject: attention-grabbing subject line (avoid "Application for...")
- body: the complete email body, with \\n for line breaks
- suggestedActions: array of 3 strategic follow-up actions"""

EMAIL_TYPE_INSTRUCTIONS = {
    "application": "Open with what caught the candidate's attention about the role, connect 2-3 "
    "relevant achievements, and close by asking for a quick chat.",
    "follow-up": "Reference the earlier application, add one new piece of value, and ask politely "
    "about the timeline.",
    "thank-you": "Thank the recruiter for the conversation, reinforce 1-2 points that match the "
    "team's needs, and ask about next steps.",
    "inquiry": "Explain why this company specifically interests the candidate and ask about current "
    "or future opportunities.",
    "withdrawal": "Withdraw graciously, thank the recruiter, and keep the door open.",
}

TONE_GUIDELINES = {
    "professional": "Confident and articulate without being stiff; warm but competent.",
    "friendly": "Warm and approachable; contractions and natural speech are fine.",
    "casual": "Like talking to a colleague in the industry; direct and authentic.",
}

SUMMARY_SYSTEM_PROMPT = """You are a Summary Optimization Agent. Write a compelling 2-3 sentence
professional summary for a resume, tailored to the job description.

IMPORTANT:
- Use only facts present in the candidate profile
- Lead with the candidate's strongest qualification for this role
- Include the job's most important keywords where the profile supports them
- Return ONLY the summary text, with no quotes, labels, or commentary"""


def format_profile_for_prompt(profile: Profile) -> str:
    """Plain-text rendering of a profile for writing prompts."""
    lines = [f"Name: {profile.name}"]
    for label, value in (
        ("Title", profile.title),
        ("Location", profile.location),
        ("Email", profile.email),
        ("Phone", profile.phone),
        ("LinkedIn", profile.linkedin_url),
        ("Summary", profile.about),
    ):
        if value:
            lines.append(f"{label}: {value}")

    lines.append("\nEducation:")
    lines.extend(
        f"- {edu.degree} from {edu.school} ({edu.start_date}-{edu.end_date or 'Present'})"
        for edu in profile.education
    )
    lines.append("\nExperience:")
    lines.extend(
        f"- {exp.position} at {exp.company} ({exp.start_date} - {exp.end_date or 'Present'}):\n"
        f"  * {exp.description}"
        for exp in profile.experiences
    )
    lines.append(f"\nSkills: {', '.join(skill.name for skill in profile.skills if skill.name)}")
    lines.append("\nProjects:")
    lines.extend(
        f"- {proj.title}:\n  * {proj.description}\n  * Technologies: {proj.technologies}"
        for proj in profile.projects
    )
    return "\n".join(lines)


def _require_job_description(job_description: str) -> None:
    if not job_description or not job_description.strip():
        raise InputValidationError("Job description is required", field="job_description")


@dataclass
class CoverLetterRequest:
    profile: Profile
    job_description: str
    job_title: str = ""
    company_name: str = ""


def build_cover_letter_system_prompt(request: CoverLetterRequest, letter_date: str) -> str:
    job_description = _WHITESPACE.sub(" ", request.job_description).strip()
    return (
        "You are a professional cover letter writer. Create a tailored, compelling cover letter "
        "based on the job description and candidate profile provided.\n\n"
        f"CANDIDATE PROFILE:\n{format_profile_for_prompt(request.profile)}\n\n"
        f"JOB DESCRIPTION:\n{job_description}\n\n"
        + COVER_LETTER_INSTRUCTIONS.format(letter_date=letter_date)
    )


async def generate_cover_letter(
    request: CoverLetterRequest,
    provider: Optional[LLMProvider] = None,
    letter_date: Optional[date] = None,
) -> GenerationResult:
    """
    Write a cover letter for the profile and job description.

    Args:
        request: Profile, job description and (for the fallback) job title/company
        provider: LLM provider (default: get_provider())
        letter_date: Date printed on the letter (default: today)

    Raises:
        InputValidationError: Missing profile or blank job description
    """
    if request.profile is None:
        raise InputValidationError("Profile is required", field="profile")
    _require_job_description(request.job_description)
    dated = (letter_date or date.today()).strftime("%B %d, %Y")
    log_generation_request("cover letter", "replace", provider_label(provider))

    try:
        provider = provider or get_provider()
        response = await provider.generate(
            build_cover_letter_system_prompt(request, dated),
            "Please generate a professional cover letter for me based on my profile and this "
            f'job description: "{request.job_description.strip()[:100]}..."',
            temperature=COVER_LETTER_TEMPERATURE,
            max_tokens=COVER_LETTER_MAX_TOKENS,
        )
        letter = clean_cover_letter_response(response.content)
        if not letter:
            raise MalformedResponseError("Cover letter completion was empty after cleanup")
        return GenerationResult(content=letter)
    except (UpstreamServiceError, ValueError) as e:
        log_generation_fallback("cover letter", e)
        content = generate_fallback_cover_letter(
            request.profile,
            job_title=request.job_title,
            company_name=request.company_name,
            letter_date=dated,
        )
        return GenerationResult(content=content, source="fallback", error=str(e))


@dataclass
class OutreachEmailRequest:
    job_title: str
    company_name: str
    recruiter_name: str
    email_type: str = "application"
    tone: str = "professional"
    job_description: str = ""
    additional_context: str = ""
    profile: Optional[Profile] = None


@dataclass
class OutreachEmail:
    subject: str
    body: str
    suggested_actions: List[str] = field(default_factory=list)


def validate_email_request(request: OutreachEmailRequest) -> None:
    """
    Raises:
        InputValidationError: Missing job title, company or recruiter; unknown type or tone
    """
    missing = [
        name
        for name in ("job_title", "company_name", "recruiter_name")
        if not getattr(request, name).strip()
    ]
    if missing:
        raise InputValidationError(f"Missing required fields: {', '.join(missing)}", field=missing[0])
    if request.email_type not in EMAIL_TYPES:
        raise InputValidationError(
            f"Unknown email type '{request.email_type}'. Use one of: {', '.join(EMAIL_TYPES)}",
            field="email_type",
        )
    if request.tone not in EMAIL_TONES:
        raise InputValidationError(
            f"Unknown tone '{request.tone}'. Use one of: {', '.join(EMAIL_TONES)}", field="tone"
        )


def build_email_prompt(request: OutreachEmailRequest) -> str:
    profile = (
        format_profile_for_prompt(request.profile)
        if request.profile is not None
        else "Limited profile information available"
    )
    return (
        f"Create a {request.tone} {request.email_type} email.\n\n"
        f"JOB OPPORTUNITY:\n- Position: {request.job_title}\n- Company: {request.company_name}\n"
        f"- Recruiter: {request.recruiter_name}\n"
        f"- Job Description: {request.job_description.strip() or 'Not provided'}\n\n"
        f"CANDIDATE PROFILE:\n{profile}\n\n"
        f"EMAIL TYPE: {EMAIL_TYPE_INSTRUCTIONS[request.email_type]}\n"
        f"TONE: {TONE_GUIDELINES[request.tone]}\n"
        f"Additional Context: {request.additional_context.strip() or 'None provided'}\n\n"
        f"Start with \"Hi {request.recruiter_name},\" and respond only with the JSON object."
    )


def parse_email_response(text: str) -> OutreachEmail:
    """
    Raises:
        MalformedResponseError: Not JSON, or subject/body/suggestedActions missing
    """
    data = parse_json_object(text, stage="email")
    subject = str(data.get("subject") or "").strip()
    body = str(data.get("body") or "").strip()
    actions = data.get("suggestedActions")
    if not subject or not body or actions is None:
        raise MalformedResponseError(
            "Email response needs subject, body and suggestedActions",
            stage="email",
            response_text=text,
        )
    if not isinstance(actions, list):
        actions = []
    return OutreachEmail(
        subject=subject,
        body=body,
        suggested_actions=[str(action) for action in actions if str(action).strip()],
    )


async def generate_outreach_email(
    request: OutreachEmailRequest, provider: Optional[LLMProvider] = None
) -> GenerationResult:
    """
    Draft a recruiter email; content is an OutreachEmail.

    Raises:
        InputValidationError: See validate_email_request()
    """
    validate_email_request(request)
    log_generation_request(f"{request.email_type} email", request.tone, provider_label(provider))

    try:
        provider = provider or get_provider()
        response = await provider.generate(
            EMAIL_SYSTEM_PROMPT,
            build_email_prompt(request),
            json_mode=True,
            temperature=EMAIL_TEMPERATURE,
            max_tokens=EMAIL_MAX_TOKENS,
        )
        return GenerationResult(content=parse_email_response(response.content))
    except (UpstreamServiceError, ValueError) as e:
        log_generation_fallback("email", e)
        fallback = generate_fallback_email(
            request.email_type,
            request.job_title,
            request.company_name,
            request.recruiter_name,
            profile=request.profile,
        )
        return GenerationResult(
            content=OutreachEmail(**fallback), source="fallback", error=str(e)
        )


@dataclass
class SummaryRequest:
    profile: Profile
    job_description: str


async def generate_tailored_summary(
    request: SummaryRequest, provider: Optional[LLMProvider] = None
) -> GenerationResult:
    """
    Rewrite the profile summary for one job description.

    Falls back to the profile's own about text.

    Raises:
        InputValidationError: Blank job description
    """
    _require_job_description(request.job_description)
    log_generation_request("tailored summary", "replace", provider_label(provider))

    try:
        provider = provider or get_provider()
        response = await provider.generate(
            SUMMARY_SYSTEM_PROMPT,
            f"CANDIDATE PROFILE:\n{format_profile_for_prompt(request.profile)}\n\n"
            f"JOB DESCRIPTION:\n{request.job_description.strip()}",
            temperature=SUMMARY_TEMPERATURE,
            max_tokens=SUMMARY_MAX_TOKENS,
        )
        summary = clean_about_response(response.content)
        if not summary:
            raise MalformedResponseError("Summary completion was empty after cleanup")
        return GenerationResult(content=summary)
    except (UpstreamServiceError, ValueError) as e:
        log_generation_fallback("summary", e)
        return GenerationResult(
            content=generate_fallback_summary(request.profile), source="fallback", error=str(e)
        )
