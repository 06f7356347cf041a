"""
Templating context logger.

Provides logging interface for templating context with automatic [template] prefix.
"""

from loguru import logger

CONTEXT_PREFIX = "[template]"


def _log_info(message: str) -> None:
    """Log info message with [template] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [template] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_assembly_start(uid: str, template_name: str) -> None:
    """Log start of resume assembly."""
    _log_debug(f"Assembling resume for {uid or '<no uid>'} with '{template_name}' template")


def log_assembly_result(section_names: list, length: int) -> None:
    """Log emitted sections and document size."""
    sections = ", ".join(section_names) if section_names else "none"
    _log_debug(f"  Sections: {sections} ({length} chars)")
