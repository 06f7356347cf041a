"""
Targeting context logger.

Provides logging interface for targeting context with automatic [target] prefix.
All targeting modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path

from loguru import logger

from boron.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[target]"


def setup_targeting_logger(log_dir: Path, provider_name: str = None) -> Path:
    """
    Setup logger for targeting context.

    Args:
        log_dir: Directory for this optimization session
        provider_name: LLM provider/model, recorded in the provenance header

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="target",
        log_dir=log_dir,
        extra_provenance={"LLM provider": provider_name} if provider_name else None,
    )


# Wrapper functions with automatic [target] prefix


def _log_info(message: str) -> None:
    """Log info message with [target] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [target] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [target] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [target] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [target] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level targeting-specific logging helpers


def log_pipeline_start(run_id: str, uid: str, job_chars: int) -> None:
    """Log start of an optimization run."""
    _log_info(f"Starting optimization run {run_id} for {uid}")
    _log_debug(f"  Job description: {job_chars} chars")


def log_stage_call(stage: str, provider_name: str, prompt_chars: int) -> None:
    """Log an outgoing stage call."""
    _log_debug(f"  {stage}: calling {provider_name} ({prompt_chars} chars)")


def log_stage_result(outcome) -> None:
    """
    Log a stage outcome.

    Args:
        outcome: StageOutcome from the pipeline
    """
    if outcome.success:
        _log_success(f"{outcome.stage} succeeded ({outcome.elapsed_s:.2f}s)")
    else:
        _log_warning(f"{outcome.stage} failed ({outcome.elapsed_s:.2f}s): {outcome.error}")


def log_section_fallback(section: str) -> None:
    """Log that a section keeps its original content."""
    _log_warning(f"{section}: optimizer failed, keeping original content")


def log_pipeline_result(result) -> None:
    """
    Log the terminal state of a run.

    Args:
        result: PipelineResult from the pipeline
    """
    if result.succeeded:
        fallbacks = [name for name, source in result.section_sources.items() if source == "original"]
        _log_success(f"Run {result.run_id} done")
        if fallbacks:
            _log_info(f"  Sections kept original content: {', '.join(fallbacks)}")
    elif result.state.value == "cancelled":
        _log_warning(f"Run {result.run_id} cancelled")
    else:
        _log_error(f"Run {result.run_id} failed at {result.failed_stage}: {result.error}")
