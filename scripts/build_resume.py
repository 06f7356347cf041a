#!/usr/bin/env python3
"""
Resume Builder CLI

Builds LaTeX resumes from profile documents (YAML or JSON, camelCase keys as
stored in the document store) and optionally tailors them to a job posting.

Commands:
    assemble  - Render a profile to LaTeX with no LLM involvement
    optimize  - Run the optimization pipeline for a job description
    analyze   - Run only the job-description analyzer
    compile   - Compile a .tex file to PDF

Examples:\n

    build_resume.py assemble profile.yaml -o resume.tex            # Plain resume

    build_resume.py assemble profile.yaml -t modern                # Other template

    build_resume.py optimize profile.yaml job.txt -o tailored.tex  # Tailored resume

    build_resume.py analyze job.txt                                # Inspect requirements

    build_resume.py compile tailored.tex                           # PDF next to the source
"""

import asyncio
import json
import os
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from omegaconf import OmegaConf
from typing_extensions import Annotated

from boron.contexts.profile import Profile
from boron.contexts.rendering import compile_latex
from boron.contexts.rendering.compiler import LATEX_COMPILER
from boron.contexts.rendering.logger import setup_rendering_logger
from boron.contexts.targeting import PipelineState, run_optimization_pipeline
from boron.contexts.targeting.agents import analyze_job_description
from boron.contexts.targeting.logger import setup_targeting_logger
from boron.contexts.templating import TemplateRegistry, assemble_resume
from boron.utils.errors import BoronError
from boron.utils.llm import get_provider
from boron.utils.timestamp import today

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))

app = typer.Typer(
    help="Build LaTeX resumes from profiles and tailor them to job descriptions",
    add_completion=False,
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def load_profile(path: Path) -> Profile:
    """Load a profile document from YAML or JSON."""
    data = OmegaConf.to_container(OmegaConf.load(path), resolve=True)
    return Profile.from_dict(data)


def write_output(latex: str, output: Optional[Path]) -> None:
    if output is None:
        typer.echo(latex)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(latex, encoding="utf-8")
    typer.secho(f"✓ Wrote {output}", fg=typer.colors.GREEN)


def check_template(template: str) -> None:
    available = TemplateRegistry().list_templates()
    if template not in available:
        typer.secho(
            f"Unknown template '{template}'. Available: {', '.join(available)}",
            fg=typer.colors.RED,
            err=True,
        )
        raise typer.Exit(code=1)


ProfileArgument = Annotated[
    Path,
    typer.Argument(help="Profile document (.yaml or .json)", exists=True, dir_okay=False),
]
OutputOption = Annotated[
    Optional[Path],
    typer.Option("--output", "-o", help="Write LaTeX to file (prints to stdout if not specified)"),
]


@app.command("assemble")
def assemble_command(
    profile_path: ProfileArgument,
    template: Annotated[
        str, typer.Option("--template", "-t", help="Template family (classic, modern)")
    ] = "classic",
    output: OutputOption = None,
):
    """
    Render a profile to LaTeX.

    Only entries marked for inclusion appear; empty sections are omitted.
    """
    check_template(template)
    try:
        latex = assemble_resume(load_profile(profile_path), template_name=template)
    except BoronError as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    write_output(latex, output)


@app.command("optimize")
def optimize_command(
    profile_path: ProfileArgument,
    job_path: Annotated[
        Path,
        typer.Argument(help="Job description text file", exists=True, dir_okay=False),
    ],
    output: OutputOption = None,
    template: Annotated[
        Optional[str],
        typer.Option("--template", "-t", help="Template family (default: from pipeline config)"),
    ] = None,
    timeout: Annotated[
        Optional[float],
        typer.Option("--timeout", help="Seconds per stage (default: from pipeline config)", min=1),
    ] = None,
    provider_name: Annotated[
        Optional[str],
        typer.Option("--provider", "-p", help="groq, openai or anthropic (default: LLM_PROVIDER)"),
    ] = None,
):
    """
    Tailor a resume to a job description with the LLM pipeline.

    Sections whose optimizer fails keep the profile's content; the run only
    fails if the analyzer or matcher fails.
    """
    if template:
        check_template(template)

    try:
        provider = get_provider(provider_name)
    except ValueError as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    log_file = setup_targeting_logger(LOGS_PATH / f"optimize_{today()}", provider.name)
    typer.secho(f"\nOptimizing with {provider.name}", fg=typer.colors.BLUE, bold=True)
    typer.echo(f"Log: {log_file}\n")

    try:
        result = asyncio.run(
            run_optimization_pipeline(
                load_profile(profile_path),
                job_path.read_text(encoding="utf-8"),
                provider,
                stage_timeout=timeout,
                template_name=template,
            )
        )
    except BoronError as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    if result.state != PipelineState.DONE:
        typer.secho(
            f"✗ Pipeline {result.state.value} at {result.failed_stage}: {result.error}",
            fg=typer.colors.RED,
            err=True,
        )
        raise typer.Exit(code=1)

    typer.secho(f"✓ Match score: {result.match.match_score:g}", fg=typer.colors.GREEN, bold=True)
    for section, source in result.section_sources.items():
        color = typer.colors.GREEN if source == "optimized" else typer.colors.YELLOW
        typer.secho(f"  {section:<12} {source}", fg=color)
    typer.echo("")
    write_output(result.latex, output)


@app.command("analyze")
def analyze_command(
    job_path: Annotated[
        Path,
        typer.Argument(help="Job description text file", exists=True, dir_okay=False),
    ],
    provider_name: Annotated[
        Optional[str],
        typer.Option("--provider", "-p", help="groq, openai or anthropic (default: LLM_PROVIDER)"),
    ] = None,
):
    """Print the structured requirements extracted from a job description as JSON."""
    try:
        provider = get_provider(provider_name)
        analysis = asyncio.run(
            analyze_job_description(provider, job_path.read_text(encoding="utf-8"))
        )
    except (BoronError, ValueError) as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    typer.echo(json.dumps(analysis.raw, indent=2))


@app.command("compile")
def compile_command(
    tex_path: Annotated[
        Path, typer.Argument(help="LaTeX file to compile", exists=True, dir_okay=False)
    ],
    num_passes: Annotated[
        int, typer.Option("--passes", help="Number of compiler passes", min=1, max=5)
    ] = 2,
    keep_artifacts: Annotated[
        bool, typer.Option("--keep-artifacts", "-k", help="Keep .aux, .log and .out files")
    ] = False,
):
    """Compile a LaTeX resume to PDF in the same directory."""
    setup_rendering_logger(LOGS_PATH / f"compile_{today()}", LATEX_COMPILER)
    result = compile_latex(
        tex_path.read_text(encoding="utf-8"),
        tex_path.parent,
        name=tex_path.stem,
        num_passes=num_passes,
        keep_artifacts=keep_artifacts,
    )
    if not result.success:
        typer.secho("✗ Compilation failed", fg=typer.colors.RED, bold=True, err=True)
        for error in result.errors[:5]:
            typer.echo(f"  - {error}", err=True)
        raise typer.Exit(code=1)

    pages = f" ({result.page_count} pages)" if result.page_count else ""
    typer.secho(f"✓ {result.pdf_path}{pages}", fg=typer.colors.GREEN, bold=True)


if __name__ == "__main__":
    app()
