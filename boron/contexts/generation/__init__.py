"""
Generation Context

Responsibilities:
- Writes about sections, bullet points and skill suggestions with the LLM
- Writes job-targeted cover letters, recruiter emails and tailored summaries
- Parses uploaded resume text into a profile
- Falls back to local template generators when the LLM is unavailable
- Runs the resume chat assistant that hands job descriptions to targeting

Owns: Generation prompts, response cleanup, fallback generators, chat replies
Never: Persists profiles or runs the optimization pipeline itself
"""

from boron.contexts.generation.application_documents import (
    CoverLetterRequest,
    OutreachEmail,
    OutreachEmailRequest,
    SummaryRequest,
    generate_cover_letter,
    generate_outreach_email,
    generate_tailored_summary,
)
from boron.contexts.generation.chat import ChatMessage, ChatReply, respond_to_chat
from boron.contexts.generation.content_generator import (
    AboutRequest,
    DescriptionRequest,
    GenerationResult,
    SkillsRequest,
    generate_about,
    generate_description,
    generate_skills,
)
from boron.contexts.generation.resume_parser import ParsedResume, parse_resume_text

__all__ = [
    # Content generation
    "AboutRequest",
    "DescriptionRequest",
    "SkillsRequest",
    "GenerationResult",
    "generate_about",
    "generate_description",
    "generate_skills",
    # Application documents
    "CoverLetterRequest",
    "OutreachEmailRequest",
    "OutreachEmail",
    "SummaryRequest",
    "generate_cover_letter",
    "generate_outreach_email",
    "generate_tailored_summary",
    # Resume parsing
    "ParsedResume",
    "parse_resume_text",
    # Chat
    "ChatMessage",
    "ChatReply",
    "respond_to_chat",
]
