"""
Error taxonomy shared across contexts.

- InputValidationError: a caller supplied missing or invalid arguments
- UpstreamServiceError: an external service (LLM, document store) failed
  - MalformedResponseError: the service answered but the payload was unusable
  - StageTimeoutError: a pipeline stage exceeded its time budget
- NotFoundError: a keyed lookup found nothing
  - ProfileNotFoundError, SessionNotFoundError
"""

from typing import Optional


class BoronError(Exception):
    """Base class for all Boron errors."""


class InputValidationError(BoronError, ValueError):
    """Raised when required input is missing or invalid."""

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        self.message = message
        if field:
            message = f"{message} (field: {field})"
        super().__init__(message)


class UpstreamServiceError(BoronError):
    """Raised when an LLM or document store call fails."""

    def __init__(self, message: str, service: Optional[str] = None, stage: Optional[str] = None):
        self.service = service
        self.stage = stage
        self.message = message

        parts = [message]
        if service:
            parts.append(f"service: {service}")
        if stage:
            parts.append(f"stage: {stage}")
        super().__init__(" | ".join(parts))


class MalformedResponseError(UpstreamServiceError):
    """Raised when a service response cannot be parsed or fails schema validation."""

    def __init__(
        self,
        message: str,
        service: Optional[str] = None,
        stage: Optional[str] = None,
        response_text: Optional[str] = None,
    ):
        self.response_text = response_text
        if response_text:
            snippet = response_text.strip().replace("\n", " ")
            if len(snippet) > 120:
                snippet = snippet[:117] + "..."
            message = f"{message} (response: {snippet!r})"
        super().__init__(message, service=service, stage=stage)


class StageTimeoutError(UpstreamServiceError):
    """Raised when a pipeline stage exceeds its timeout."""

    def __init__(self, stage: str, timeout_s: float):
        self.timeout_s = timeout_s
        super().__init__(f"Stage timed out after {timeout_s:g}s", stage=stage)


class NotFoundError(BoronError, LookupError):
    """Raised when a keyed lookup finds nothing."""

    def __init__(self, kind: str, key: str):
        self.kind = kind
        self.key = key
        super().__init__(f"{kind} not found: {key}")


class ProfileNotFoundError(NotFoundError):
    """Raised when no profile exists for a user id."""

    def __init__(self, uid: str):
        super().__init__("Profile", uid)


class SessionNotFoundError(NotFoundError, KeyError):
    """Raised when a LaTeX session is absent or expired."""

    def __init__(self, session_id: str):
        super().__init__("LaTeX session", session_id)

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return f"{self.kind} not found: {self.key}"
