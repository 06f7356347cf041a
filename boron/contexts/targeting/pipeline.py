"""
Resume optimization pipeline.

Sequences the LLM stages for one (profile, job description) pair:

    ANALYZING -> MATCHING -> OPTIMIZING -> ASSEMBLING -> DONE
                                  \\-> FAILED(stage) | CANCELLED

- Analyzer and matcher are strictly sequential; either failing ends the run
  in FAILED with that stage named.
- The three section optimizers (experience, skills, projects) run
  concurrently. Each failure is recorded on its own and that section keeps
  the profile's original content (experience and projects ordered by
  keyword relevance to the job).
- Assembly merges the profile with whatever optimizations succeeded and
  renders LaTeX.

Every stage runs under a timeout, and no stage failure propagates as an
exception: failures become StageOutcome records on the PipelineResult.
Cancellation is cooperative: the cancel event is checked at each state
boundary, and results of calls that were in flight are discarded.
"""

import asyncio
import time
import uuid
from dataclasses import dataclass, field, replace
from enum import Enum
from functools import partial
from typing import Any, Awaitable, Callable, Dict, List, Optional

from jinja2 import TemplateError
from omegaconf import DictConfig

from boron.contexts.profile.profile_data_structure import Experience, Profile, Project
from boron.contexts.targeting.agents import (
    analyze_job_description,
    match_profile,
    optimize_experience,
    optimize_projects,
    optimize_skills,
)
from boron.contexts.targeting.config_resolver import (
    StageSettings,
    get_stage_settings,
    load_pipeline_config,
)
from boron.contexts.targeting.logger import (
    _log_error,
    log_pipeline_result,
    log_pipeline_start,
    log_section_fallback,
    log_stage_result,
)
from boron.contexts.targeting.relevance import (
    order_by_relevance,
    score_experience_relevance,
    score_project_relevance,
)
from boron.contexts.targeting.stage_schemas import (
    JobAnalysis,
    MatchAnalysis,
    OptimizedExperience,
    OptimizedProjects,
    OptimizedSkills,
)
from boron.contexts.templating.resume_assembler import ResumeAssembler, build_resume_data
from boron.contexts.templating.resume_data_structure import (
    ExperienceEntry,
    ProjectEntry,
    ResumeData,
)
from boron.utils.date_formatting import format_date_range
from boron.utils.errors import InputValidationError, StageTimeoutError, UpstreamServiceError
from boron.utils.event_logging import log_pipeline_event
from boron.utils.llm import LLMProvider, get_provider
from boron.utils.text_processing import split_comma_list

OPTIMIZER_STAGES = ("experience", "skills", "projects")
EVENT_SOURCE = "targeting"


class PipelineState(str, Enum):
    ANALYZING = "analyzing"
    MATCHING = "matching"
    OPTIMIZING = "optimizing"
    ASSEMBLING = "assembling"
    DONE = "done"
    FAILED = "failed"
    CANCELLED = "cancelled"


class PipelineInputError(InputValidationError):
    """Raised before any stage runs when the pipeline inputs are unusable."""


@dataclass
class StageOutcome:
    """Result of one stage: its value on success, its error message on failure."""

    stage: str
    success: bool
    value: Any = None
    error: Optional[str] = None
    error_type: Optional[str] = None
    elapsed_s: float = 0.0


@dataclass
class PipelineResult:
    """
    Terminal result of a pipeline run.

    Attributes:
        run_id: Identifier used in logs and pipeline events
        state: DONE, FAILED or CANCELLED
        failed_stage: Stage that ended the run (FAILED only)
        error: Error message for the failed stage
        analysis: Analyzer output, when it succeeded
        match: Matcher output, when it succeeded
        stage_outcomes: Outcome per stage that ran, keyed by stage name
        candidate: Merged, render-ready resume (DONE only)
        latex: Rendered LaTeX document (DONE only)
    """

    run_id: str
    state: PipelineState
    failed_stage: Optional[str] = None
    error: Optional[str] = None
    analysis: Optional[JobAnalysis] = None
    match: Optional[MatchAnalysis] = None
    stage_outcomes: Dict[str, StageOutcome] = field(default_factory=dict)
    candidate: Optional[ResumeData] = None
    latex: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.state == PipelineState.DONE

    @property
    def section_sources(self) -> Dict[str, str]:
        """'optimized' or 'original' for each optimizer stage that ran."""
        return {
            stage: "optimized" if self.stage_outcomes[stage].success else "original"
            for stage in OPTIMIZER_STAGES
            if stage in self.stage_outcomes
        }


# --- Merging ---


def _normalized(value: str) -> str:
    return " ".join((value or "").lower().split())


def _find_experience(originals: List[Experience], title: str, company: str) -> Optional[Experience]:
    company_matches = [exp for exp in originals if _normalized(exp.company) == _normalized(company)]
    for exp in company_matches:
        if _normalized(exp.position) == _normalized(title):
            return exp
    return company_matches[0] if company_matches else None


def _find_project(originals: List[Project], title: str) -> Optional[Project]:
    for proj in originals:
        if _normalized(proj.title) == _normalized(title):
            return proj
    return None


def _experience_entries(
    optimized: OptimizedExperience, originals: List[Experience]
) -> List[ExperienceEntry]:
    entries = []
    for item in optimized.entries:
        # Fill anything the optimizer dropped from the matching original entry
        original = _find_experience(originals, item.title, item.company) or Experience()
        start = item.start_date or original.start_date
        end = item.end_date or original.end_date
        entries.append(
            ExperienceEntry(
                title=item.title,
                company=item.company,
                location=item.location or original.location,
                dates=format_date_range(start, end),
                highlights=list(item.highlights),
            )
        )
    return entries


def _project_entries(optimized: OptimizedProjects, originals: List[Project]) -> List[ProjectEntry]:
    entries = []
    for item in optimized.entries:
        original = _find_project(originals, item.title) or Project()
        entries.append(
            ProjectEntry(
                title=item.title,
                dates=format_date_range(
                    item.start_date or original.start_date, item.end_date or original.end_date
                ),
                technologies=item.key_technologies or split_comma_list(original.technologies),
                project_url=item.project_url or original.project_url,
                github_url=item.github_url or original.github_url,
                highlights=list(item.highlights),
            )
        )
    return entries


def merge_optimizations(
    profile: Profile,
    analysis: Optional[JobAnalysis] = None,
    experience: Optional[OptimizedExperience] = None,
    skills: Optional[OptimizedSkills] = None,
    projects: Optional[OptimizedProjects] = None,
) -> ResumeData:
    """
    Merge a profile with the optimizations that succeeded.

    Sections without an optimization keep the profile's content; with an
    analysis available, their experience and project entries are ordered by
    keyword relevance. Entries excluded from the resume never appear.
    """
    view = profile.resume_view()

    if analysis is not None and experience is None:
        view = replace(
            view,
            experiences=order_by_relevance(
                view.experiences, lambda exp: score_experience_relevance(exp, analysis)
            ),
        )
    if analysis is not None and projects is None:
        view = replace(
            view,
            projects=order_by_relevance(
                view.projects, lambda proj: score_project_relevance(proj, analysis)
            ),
        )

    resume = build_resume_data(view)

    if experience is not None:
        resume.experience = _experience_entries(experience, view.experiences)
    if skills is not None:
        resume.skills = {domain: list(names) for domain, names in skills.categories.items()}
    if projects is not None:
        resume.projects = _project_entries(projects, view.projects)

    return resume


# --- Orchestration ---


def validate_pipeline_inputs(profile: Optional[Profile], job_description: Optional[str]) -> None:
    """Raise PipelineInputError unless there is a profile id and job text."""
    if profile is None or not (profile.uid or "").strip():
        raise PipelineInputError("Profile id is required", field="uid")
    if not job_description or not job_description.strip():
        raise PipelineInputError("Job description is required", field="job_description")


def _is_set(cancel_event: Optional[asyncio.Event]) -> bool:
    return cancel_event is not None and cancel_event.is_set()


class OptimizationPipeline:
    """
    Runs the optimization stages against an injected LLM provider.

    Args:
        provider: LLM provider used for every stage
        assembler: Renders the merged resume (default: classic template)
        config: Pipeline config (default: load_pipeline_config())
        stage_timeout: Seconds per stage, overriding the config
    """

    def __init__(
        self,
        provider: LLMProvider,
        assembler: Optional[ResumeAssembler] = None,
        config: Optional[DictConfig] = None,
        stage_timeout: Optional[float] = None,
    ):
        self.provider = provider
        self.config = config if config is not None else load_pipeline_config()
        self.assembler = assembler or ResumeAssembler(
            template_name=self.config.get("default_template", "classic")
        )
        self.stage_timeout = stage_timeout

    def _settings(self, stage: str) -> StageSettings:
        return get_stage_settings(stage, self.config, timeout_override=self.stage_timeout)

    async def _run_stage(
        self,
        run_id: str,
        stage: str,
        operation: Callable[..., Awaitable[Any]],
    ) -> StageOutcome:
        settings = self._settings(stage)
        log_pipeline_event("stage_started", run_id, EVENT_SOURCE, stage=stage)
        start = time.perf_counter()

        error: Optional[Exception] = None
        value = None
        try:
            if settings.timeout_s:
                value = await asyncio.wait_for(
                    operation(settings=settings), timeout=settings.timeout_s
                )
            else:
                value = await operation(settings=settings)
        except asyncio.TimeoutError:
            error = StageTimeoutError(stage, settings.timeout_s)
        except UpstreamServiceError as e:
            error = e
        except Exception as e:
            # Stage boundary: no exception escapes a stage
            _log_error(f"{stage}: unexpected {type(e).__name__}: {e}")
            error = e

        elapsed = time.perf_counter() - start
        if error is None:
            outcome = StageOutcome(stage=stage, success=True, value=value, elapsed_s=elapsed)
            log_pipeline_event(
                "stage_succeeded", run_id, EVENT_SOURCE, stage=stage, elapsed_s=round(elapsed, 3)
            )
        else:
            outcome = StageOutcome(
                stage=stage,
                success=False,
                error=str(error),
                error_type=type(error).__name__,
                elapsed_s=elapsed,
            )
            log_pipeline_event(
                "stage_failed",
                run_id,
                EVENT_SOURCE,
                stage=stage,
                error=outcome.error,
                error_type=outcome.error_type,
                elapsed_s=round(elapsed, 3),
            )
        log_stage_result(outcome)
        return outcome

    def _finish(
        self,
        result: PipelineResult,
        state: PipelineState,
        failed_stage: Optional[str] = None,
        error: Optional[str] = None,
    ) -> PipelineResult:
        result.state = state
        result.failed_stage = failed_stage
        result.error = error
        log_pipeline_event(
            "pipeline_finished",
            result.run_id,
            EVENT_SOURCE,
            state=state.value,
            failed_stage=failed_stage,
            section_sources=result.section_sources,
        )
        log_pipeline_result(result)
        return result

    async def run(
        self,
        profile: Profile,
        job_description: str,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> PipelineResult:
        """
        Run the pipeline to a terminal state.

        Raises:
            PipelineInputError: Blank job description or missing profile uid
        """
        validate_pipeline_inputs(profile, job_description)

        run_id = uuid.uuid4().hex[:12]
        view = profile.resume_view()
        result = PipelineResult(run_id=run_id, state=PipelineState.ANALYZING)

        log_pipeline_start(run_id, profile.uid, len(job_description))
        log_pipeline_event(
            "pipeline_started", run_id, EVENT_SOURCE, uid=profile.uid, provider=self.provider.name
        )

        # ANALYZING
        if _is_set(cancel_event):
            return self._finish(result, PipelineState.CANCELLED)
        outcome = await self._run_stage(
            run_id, "analyzer", partial(analyze_job_description, self.provider, job_description)
        )
        result.stage_outcomes["analyzer"] = outcome
        if _is_set(cancel_event):
            return self._finish(result, PipelineState.CANCELLED)
        if not outcome.success:
            return self._finish(result, PipelineState.FAILED, "analyzer", outcome.error)
        result.analysis = outcome.value

        # MATCHING
        result.state = PipelineState.MATCHING
        outcome = await self._run_stage(
            run_id, "matcher", partial(match_profile, self.provider, view, result.analysis)
        )
        result.stage_outcomes["matcher"] = outcome
        if _is_set(cancel_event):
            return self._finish(result, PipelineState.CANCELLED)
        if not outcome.success:
            return self._finish(result, PipelineState.FAILED, "matcher", outcome.error)
        result.match = outcome.value

        # OPTIMIZING
        result.state = PipelineState.OPTIMIZING
        optimizers = {
            "experience": optimize_experience,
            "skills": optimize_skills,
            "projects": optimize_projects,
        }
        outcomes = await asyncio.gather(
            *(
                self._run_stage(
                    run_id,
                    stage,
                    partial(optimizers[stage], self.provider, view, result.analysis, result.match),
                )
                for stage in OPTIMIZER_STAGES
            )
        )
        for outcome in outcomes:
            result.stage_outcomes[outcome.stage] = outcome
            if not outcome.success:
                log_section_fallback(outcome.stage)
        if _is_set(cancel_event):
            return self._finish(result, PipelineState.CANCELLED)

        # ASSEMBLING
        result.state = PipelineState.ASSEMBLING

        def optimized(stage: str):
            stage_outcome = result.stage_outcomes[stage]
            return stage_outcome.value if stage_outcome.success else None

        candidate = merge_optimizations(
            view,
            result.analysis,
            experience=optimized("experience"),
            skills=optimized("skills"),
            projects=optimized("projects"),
        )
        try:
            latex = self.assembler.assemble_candidate(candidate)
        except TemplateError as e:
            return self._finish(result, PipelineState.FAILED, "assembler", str(e))

        result.candidate = candidate
        result.latex = latex
        return self._finish(result, PipelineState.DONE)


async def run_optimization_pipeline(
    profile: Profile,
    job_description: str,
    provider: Optional[LLMProvider] = None,
    *,
    cancel_event: Optional[asyncio.Event] = None,
    stage_timeout: Optional[float] = None,
    template_name: Optional[str] = None,
) -> PipelineResult:
    """
    Optimize a profile's resume for a job description.

    Args:
        profile: Profile snapshot
        job_description: Job posting text
        provider: LLM provider (default: get_provider())
        cancel_event: Set to cancel the run at the next state boundary
        stage_timeout: Seconds per stage (default: from pipeline config)
        template_name: LaTeX template family (default: from pipeline config)

    Returns:
        PipelineResult in state DONE, FAILED or CANCELLED

    Raises:
        PipelineInputError: Blank job description or missing profile uid
    """
    validate_pipeline_inputs(profile, job_description)

    config = load_pipeline_config()
    assembler = ResumeAssembler(
        template_name=template_name or config.get("default_template", "classic")
    )
    pipeline = OptimizationPipeline(
        provider or get_provider(),
        assembler=assembler,
        config=config,
        stage_timeout=stage_timeout,
    )
    return await pipeline.run(profile, job_description, cancel_event=cancel_event)
