"""
Generation context logger.

Provides logging interface for generation context with automatic [generate] prefix.
All generation modules should import from this module, not from utils.logger directly.
"""

from loguru import logger

from boron.utils.text_processing import truncate

CONTEXT_PREFIX = "[generate]"


def _log_info(message: str) -> None:
    """Log info message with [generate] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [generate] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [generate] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level generation-specific logging helpers


def log_generation_request(kind: str, mode: str, provider_name: str) -> None:
    """Log an outgoing generation request."""
    _log_info(f"Generating {kind} (mode={mode}) with {provider_name}")


def log_generation_fallback(kind: str, error: Exception) -> None:
    """Log a switch to the local fallback generator."""
    _log_warning(f"{kind} generation failed, using fallback: {type(error).__name__}: {error}")


def log_chat_reply(kind: str, message: str) -> None:
    """Log the kind and start of a chat reply."""
    _log_debug(f"Chat reply ({kind}): {truncate(message)}")
