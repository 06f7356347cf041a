"""
Targeting Context

Responsibilities:
- Analyzes job descriptions into structured requirements
- Scores a profile against those requirements
- Optimizes experience, skills and projects for the job (concurrently)
- Merges successful optimizations with the profile and renders the result

Owns: Pipeline stages and their schemas, prompts, relevance scoring
Never: Persists profiles or renders PDFs
"""

from boron.contexts.targeting.config_resolver import (
    StageSettings,
    get_stage_settings,
    load_pipeline_config,
)
from boron.contexts.targeting.pipeline import (
    OptimizationPipeline,
    PipelineInputError,
    PipelineResult,
    PipelineState,
    StageOutcome,
    merge_optimizations,
    run_optimization_pipeline,
)
from boron.contexts.targeting.stage_schemas import (
    JobAnalysis,
    MatchAnalysis,
    OptimizedExperience,
    OptimizedProjects,
    OptimizedSkills,
)

__all__ = [
    # Orchestration
    "OptimizationPipeline",
    "run_optimization_pipeline",
    "merge_optimizations",
    "PipelineResult",
    "PipelineState",
    "PipelineInputError",
    "StageOutcome",
    # Stage schemas
    "JobAnalysis",
    "MatchAnalysis",
    "OptimizedExperience",
    "OptimizedSkills",
    "OptimizedProjects",
    # Configuration
    "StageSettings",
    "get_stage_settings",
    "load_pipeline_config",
]
