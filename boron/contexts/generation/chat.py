"""
Resume chat assistant.

A conversational front end for resume tailoring: the assistant answers
questions about the process and, once the user has supplied a substantial
job description, hands off to resume generation. Each turn is one JSON-mode
LLM call whose reply carries a "kind" discriminator:

    {"kind": "chat", "message": "..."}
    {"kind": "trigger_generation", "message": "...", "jobDescription": "..."}
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence

from boron.contexts.generation.logger import log_chat_reply
from boron.contexts.profile.profile_data_structure import Profile
from boron.utils.errors import InputValidationError, MalformedResponseError
from boron.utils.llm import LLMProvider, parse_json_object

CHAT_TEMPERATURE = 0.7
CHAT_MAX_TOKENS = 2000

CHAT_ROLES = ("user", "assistant")
REPLY_KINDS = ("chat", "trigger_generation")

GENERATION_ACKNOWLEDGEMENT = (
    "Perfect! I'll analyze this job description and create a tailored resume for you. "
    "Give me a moment to process this..."
)

CHAT_SYSTEM_PROMPT = """You are a professional resume assistant specializing in helping users create tailored resumes. You have access to the user's profile information and can help them understand what information you need to create the perfect resume.

USER'S PROFILE SUMMARY:
{profile_summary}

Your role is to:
1. Help users provide job descriptions for resume tailoring
2. Ask clarifying questions about the position they're applying for
3. Guide them through the resume creation process
4. Provide helpful advice about resume optimization

Be friendly, professional and concise. Ask specific questions when you need more information.

When the user provides a substantial job description (usually 100+ characters with job-specific terms like "requirements", "responsibilities" or "qualifications"), acknowledge it and trigger resume generation.

Always respond with a single JSON object:
- To keep chatting: {{"kind": "chat", "message": "<your reply>"}}
- To generate the resume: {{"kind": "trigger_generation", "message": "<short acknowledgement>", "jobDescription": "<the full job description>"}}"""


@dataclass
class ChatMessage:
    role: str
    content: str


@dataclass
class ChatReply:
    """
    One assistant turn.

    kind is "chat" (message only) or "trigger_generation" (job_description
    set; the caller should start the optimization pipeline with it).
    """

    kind: str
    message: str
    job_description: Optional[str] = None

    @property
    def triggers_generation(self) -> bool:
        return self.kind == "trigger_generation"


def summarize_profile_for_chat(profile: Profile) -> str:
    experience = "\n".join(
        f"- {exp.position} at {exp.company} ({exp.start_date} - {exp.end_date or 'Present'})"
        for exp in profile.experiences
    ) or "No experience listed"
    skills = ", ".join(skill.name for skill in profile.skills if skill.name) or "No skills listed"
    education = "\n".join(
        f"- {edu.degree} from {edu.school} ({edu.start_date} - {edu.end_date or 'Present'})"
        for edu in profile.education
    ) or "No education listed"
    return (
        f"Name: {profile.name}\n"
        f"Title: {profile.title or 'Not specified'}\n"
        f"Email: {profile.email}\n\n"
        f"Experience:\n{experience}\n\n"
        f"Skills: {skills}\n\n"
        f"Education:\n{education}"
    )


def format_transcript(messages: Sequence[ChatMessage]) -> str:
    """Render the conversation for a single-prompt completion, newest message last."""
    return "\n\n".join(f"{message.role.upper()}: {message.content.strip()}" for message in messages)


def _validate_messages(messages: Sequence[ChatMessage]) -> None:
    if not messages:
        raise InputValidationError("At least one chat message is required", field="messages")
    for message in messages:
        if message.role not in CHAT_ROLES:
            raise InputValidationError(
                f"Unknown chat role '{message.role}'. Use one of: {', '.join(CHAT_ROLES)}",
                field="messages",
            )
    if messages[-1].role != "user":
        raise InputValidationError(
            "The last chat message must come from the user", field="messages"
        )


def parse_chat_reply(text: str) -> ChatReply:
    """
    Interpret a chat completion.

    A completion that is not a JSON object is taken as a plain chat message.

    Raises:
        MalformedResponseError: Unknown kind, or a generation trigger without
            a job description
    """
    try:
        data = parse_json_object(text, stage="chat")
    except MalformedResponseError:
        return ChatReply(kind="chat", message=text.strip())

    kind = data.get("kind", "chat")
    if kind not in REPLY_KINDS:
        raise MalformedResponseError(
            f"Unknown chat reply kind: {kind}", stage="chat", response_text=text
        )

    message = str(data.get("message") or "").strip()
    if kind == "chat":
        if not message:
            raise MalformedResponseError(
                "Chat reply has no message", stage="chat", response_text=text
            )
        return ChatReply(kind="chat", message=message)

    job_description = str(data.get("jobDescription") or data.get("job_description") or "").strip()
    if not job_description:
        raise MalformedResponseError(
            "Generation trigger has no job description", stage="chat", response_text=text
        )
    return ChatReply(
        kind="trigger_generation",
        message=message or GENERATION_ACKNOWLEDGEMENT,
        job_description=job_description,
    )


async def respond_to_chat(
    messages: List[ChatMessage], profile: Profile, provider: LLMProvider
) -> ChatReply:
    """
    Produce the assistant's next turn.

    Raises:
        InputValidationError: Missing profile, no messages, bad roles
        UpstreamServiceError: LLM call failed (not retried here)
        MalformedResponseError: Reply could not be interpreted
    """
    if profile is None:
        raise InputValidationError("Profile is required", field="profile")
    _validate_messages(messages)

    system_prompt = CHAT_SYSTEM_PROMPT.format(profile_summary=summarize_profile_for_chat(profile))
    response = await provider.generate(
        system_prompt,
        format_transcript(messages),
        json_mode=True,
        temperature=CHAT_TEMPERATURE,
        max_tokens=CHAT_MAX_TOKENS,
    )
    reply = parse_chat_reply(response.content)
    log_chat_reply(reply.kind, reply.message)
    return reply
