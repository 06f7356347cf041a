"""
Pipeline stage agents.

Each agent is one LLM call: stage system prompt + JSON-serialized inputs,
response parsed as a single JSON object and validated against the stage
schema. Agents raise on failure (UpstreamServiceError and subclasses); the
pipeline turns those into stage outcomes.
"""

from typing import Optional, Type, TypeVar

from boron.contexts.profile.profile_data_structure import Profile
from boron.contexts.targeting.config_resolver import StageSettings, get_stage_settings
from boron.contexts.targeting.logger import log_stage_call
from boron.contexts.targeting.prompts import (
    STAGE_SYSTEM_PROMPTS,
    build_analyzer_prompt,
    build_experience_prompt,
    build_matcher_prompt,
    build_projects_prompt,
    build_skills_prompt,
)
from boron.contexts.targeting.stage_schemas import (
    JobAnalysis,
    MatchAnalysis,
    OptimizedExperience,
    OptimizedProjects,
    OptimizedSkills,
)
from boron.utils.errors import UpstreamServiceError
from boron.utils.llm import LLMProvider, parse_json_object

S = TypeVar("S")


async def run_llm_stage(
    provider: LLMProvider,
    stage: str,
    user_prompt: str,
    schema: Type[S],
    settings: Optional[StageSettings] = None,
) -> S:
    """
    Run one stage call and validate the result.

    Raises:
        UpstreamServiceError: LLM call failed (stage attribute set)
        MalformedResponseError: Response not JSON or failed schema validation
    """
    settings = settings or get_stage_settings(stage)
    log_stage_call(stage, provider.name, len(user_prompt))

    try:
        response = await provider.generate(
            STAGE_SYSTEM_PROMPTS[stage],
            user_prompt,
            json_mode=True,
            temperature=settings.temperature,
            max_tokens=settings.max_tokens,
        )
        data = parse_json_object(response.content, stage=stage)
        return schema.from_response(data)
    except UpstreamServiceError as e:
        if e.stage is None:
            e.stage = stage
        raise


async def analyze_job_description(
    provider: LLMProvider, job_description: str, settings: Optional[StageSettings] = None
) -> JobAnalysis:
    """Extract structured requirements from a job description."""
    return await run_llm_stage(
        provider, "analyzer", build_analyzer_prompt(job_description), JobAnalysis, settings
    )


async def match_profile(
    provider: LLMProvider,
    profile: Profile,
    analysis: JobAnalysis,
    settings: Optional[StageSettings] = None,
) -> MatchAnalysis:
    """Score a profile against an analyzed job."""
    return await run_llm_stage(
        provider, "matcher", build_matcher_prompt(profile, analysis), MatchAnalysis, settings
    )


async def optimize_experience(
    provider: LLMProvider,
    profile: Profile,
    analysis: JobAnalysis,
    match: MatchAnalysis,
    settings: Optional[StageSettings] = None,
) -> OptimizedExperience:
    """Rewrite experience bullets for the job."""
    return await run_llm_stage(
        provider,
        "experience",
        build_experience_prompt(profile, analysis, match),
        OptimizedExperience,
        settings,
    )


async def optimize_skills(
    provider: LLMProvider,
    profile: Profile,
    analysis: JobAnalysis,
    match: MatchAnalysis,
    settings: Optional[StageSettings] = None,
) -> OptimizedSkills:
    """Regroup and prioritize skills for the job."""
    return await run_llm_stage(
        provider, "skills", build_skills_prompt(profile, analysis, match), OptimizedSkills, settings
    )


async def optimize_projects(
    provider: LLMProvider,
    profile: Profile,
    analysis: JobAnalysis,
    match: MatchAnalysis,
    settings: Optional[StageSettings] = None,
) -> OptimizedProjects:
    """Select and rewrite projects for the job."""
    return await run_llm_stage(
        provider,
        "projects",
        build_projects_prompt(profile, analysis, match),
        OptimizedProjects,
        settings,
    )
