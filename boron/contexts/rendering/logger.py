"""
Rendering context logger.

[render]-prefixed logging for LaTeX compilation and the session store.
"""

from pathlib import Path

from loguru import logger

from boron.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[render]"

# Diagnostics shown per compilation; the rest stay in CompilationResult
MAX_LOGGED_ERRORS = 5
MAX_LOGGED_WARNINGS = 3


def setup_rendering_logger(log_dir: Path, compiler: str) -> Path:
    """Log rendering to {log_dir}/render.log and the console."""
    return _setup_logger(
        context_name="render",
        log_dir=log_dir,
        extra_provenance={"LaTeX compiler": compiler},
    )


def _log_info(message: str) -> None:
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_compilation_start(name: str, tex_file: Path, num_passes: int) -> None:
    _log_info(f"Compiling {name} ({num_passes} passes)")
    _log_debug(f"  Source: {tex_file}")


def log_compilation_result(name: str, result, elapsed_s: float) -> None:
    """Summarize a CompilationResult: outcome, page count, first few diagnostics."""
    if result.success:
        pages = f", {result.page_count} pages" if result.page_count else ""
        _log_success(f"{name}: PDF written{pages} ({elapsed_s:.2f}s)")
    else:
        _log_error(f"{name}: compilation failed ({elapsed_s:.2f}s)")
        for error in result.errors[:MAX_LOGGED_ERRORS]:
            _log_error(f"  {error}")
        hidden = len(result.errors) - MAX_LOGGED_ERRORS
        if hidden > 0:
            _log_error(f"  ... {hidden} more")

    for warning in result.warnings[:MAX_LOGGED_WARNINGS]:
        _log_debug(f"  warning: {warning}")


def log_session_stored(session_id: str, size: int) -> None:
    _log_debug(f"Stored LaTeX session {session_id} ({size} chars)")


def log_sweep(removed: int, remaining: int) -> None:
    if removed:
        _log_debug(f"Swept {removed} expired LaTeX sessions ({remaining} remaining)")
