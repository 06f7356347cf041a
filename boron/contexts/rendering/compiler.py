"""
LaTeX Compilation Module

Compiles assembled resume markup to PDF with the external LaTeX compiler
(LATEX_COMPILER, default pdflatex). Compilation problems are reported on the
CompilationResult rather than raised.
"""

import os
import re
import shutil
import subprocess
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from boron.contexts.rendering.logger import log_compilation_result, log_compilation_start

load_dotenv()

LATEX_COMPILER = os.getenv("LATEX_COMPILER", "pdflatex")
KEEP_LATEX_ARTIFACTS = os.getenv("KEEP_LATEX_ARTIFACTS", "false").lower() == "true"
COMPILE_TIMEOUT_S = float(os.getenv("LATEX_COMPILE_TIMEOUT_S", "120"))

# LaTeX intermediate files created during compilation
LATEX_ARTIFACTS = [".aux", ".log", ".out", ".toc"]

_PAGE_COUNT_PATTERN = re.compile(r"Output written on .*?\((\d+) pages?", re.DOTALL)


@dataclass
class CompilationResult:
    """
    Result of LaTeX compilation.

    Attributes:
        success: Whether compilation succeeded
        pdf_path: Path to generated PDF (None if failed)
        stdout: Standard output from the compiler
        stderr: Standard error from the compiler
        errors: List of parsed LaTeX errors
        warnings: List of parsed LaTeX warnings
        page_count: Number of pages reported by the compiler (None if not available)
    """

    success: bool
    pdf_path: Optional[Path] = None
    stdout: str = ""
    stderr: str = ""
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    page_count: Optional[int] = None


def parse_latex_log(log_content: str) -> tuple[List[str], List[str]]:
    """
    Parse LaTeX log output for errors and warnings.

    Args:
        log_content: Content of the .log file

    Returns:
        Tuple of (errors, warnings)
    """
    errors = []
    warnings = []

    # LaTeX error pattern: "! Error message"
    for match in re.finditer(r"^! (.+)$", log_content, re.MULTILINE):
        errors.append(match.group(1).strip())

    # -file-line-error style: "./resume.tex:12: Undefined control sequence."
    for match in re.finditer(r"^\S+\.tex:\d+: (.+)$", log_content, re.MULTILINE):
        message = match.group(1).strip()
        if message not in errors:
            errors.append(message)

    warning_patterns = [
        r"LaTeX Warning: (.+)",
        r"Package \w+ Warning: (.+)",
        r"Overfull \\hbox \((.+)\)",
        r"Underfull \\hbox \((.+)\)",
    ]
    for pattern in warning_patterns:
        for match in re.finditer(pattern, log_content, re.MULTILINE):
            warnings.append(match.group(1).strip())

    return errors, warnings


def parse_page_count(output: str) -> Optional[int]:
    """Page count from the compiler's "Output written on ..." line."""
    match = _PAGE_COUNT_PATTERN.search(output)
    return int(match.group(1)) if match else None


def _remove_artifacts(tex_path: Path) -> None:
    base_path = tex_path.parent / tex_path.stem
    for ext in LATEX_ARTIFACTS:
        artifact_path = base_path.with_suffix(ext)
        if artifact_path.exists():
            artifact_path.unlink()


def compile_latex(
    latex: str,
    output_dir: Path,
    name: str = "resume",
    num_passes: int = 2,
    keep_artifacts: bool = KEEP_LATEX_ARTIFACTS,
    compiler: Optional[str] = None,
) -> CompilationResult:
    """
    Compile a LaTeX document to PDF.

    Writes {name}.tex into output_dir and runs the compiler there.

    Args:
        latex: Complete LaTeX document
        output_dir: Directory for the .tex, .pdf and (optionally) artifacts
        name: Output file stem
        num_passes: Compiler passes (default: 2 for cross-references)
        keep_artifacts: Keep intermediate files (default: from KEEP_LATEX_ARTIFACTS env)
        compiler: Compiler executable (default: from LATEX_COMPILER env)

    Returns:
        CompilationResult with success status and diagnostic information
    """
    compiler = compiler or LATEX_COMPILER
    if shutil.which(compiler) is None:
        result = CompilationResult(success=False, errors=[f"LaTeX compiler not found: {compiler}"])
        log_compilation_result(name, result, 0.0)
        return result

    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    tex_file = output_dir / f"{name}.tex"
    tex_file.write_text(latex, encoding="utf-8")

    # Missing PDF afterwards then unambiguously means failure
    for ext in [".pdf"] + LATEX_ARTIFACTS:
        old_file = output_dir / f"{name}{ext}"
        if old_file.exists():
            old_file.unlink()

    log_compilation_start(name, tex_file, num_passes)
    start = time.perf_counter()

    all_stdout = []
    all_stderr = []
    success = True
    errors: List[str] = []

    for _ in range(num_passes):
        cmd = [compiler, "-interaction=nonstopmode", "-file-line-error", tex_file.name]
        try:
            completed = subprocess.run(
                cmd,
                cwd=output_dir,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=COMPILE_TIMEOUT_S,
            )
        except subprocess.TimeoutExpired:
            success = False
            errors.append(f"{compiler} timed out after {COMPILE_TIMEOUT_S:g}s")
            break

        all_stdout.append(completed.stdout)
        all_stderr.append(completed.stderr)
        if completed.returncode != 0:
            success = False
            break

    combined_stdout = "\n".join(all_stdout)
    warnings: List[str] = []

    log_file = output_dir / f"{name}.log"
    if log_file.exists():
        # LaTeX writes logs in latin-1 (font metadata is not UTF-8)
        log_errors, warnings = parse_latex_log(log_file.read_text(encoding="latin-1"))
        errors.extend(error for error in log_errors if error not in errors)

    pdf_path = output_dir / f"{name}.pdf"
    if not pdf_path.exists():
        success = False
        if not errors:
            errors.append("PDF file was not generated")
    elif not errors:
        # A PDF with no logged errors counts as success even on a non-zero exit
        success = True

    if not keep_artifacts:
        _remove_artifacts(tex_file)

    result = CompilationResult(
        success=success,
        pdf_path=pdf_path if pdf_path.exists() else None,
        stdout=combined_stdout,
        stderr="\n".join(all_stderr),
        errors=errors,
        warnings=warnings,
        page_count=parse_page_count(combined_stdout),
    )
    log_compilation_result(name, result, time.perf_counter() - start)
    return result
