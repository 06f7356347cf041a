"""
Stage schemas for the resume optimization pipeline.

Each LLM stage returns a single JSON object. The dataclasses here are the
explicit contracts for those objects: from_response() validates the parsed
JSON and raises MalformedResponseError when a required key is missing or has
the wrong shape, or when an optimizer returns an empty section. Optional keys
default to empty values. The parsed JSON is kept in `raw` so later stages can
be prompted with exactly what earlier stages produced.

JSON keys are camelCase (matching the prompts); attributes are snake_case.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from boron.utils.errors import MalformedResponseError


# --- Validation helpers ---


def _require(data: Dict[str, Any], key: str, expected: type | tuple, stage: str) -> Any:
    if key not in data or data[key] is None:
        raise MalformedResponseError(f"Missing required key '{key}'", stage=stage)
    value = data[key]
    if not isinstance(value, expected):
        raise MalformedResponseError(
            f"Key '{key}' has type {type(value).__name__}", stage=stage
        )
    return value


def _require_entries(entries, key: str, stage: str) -> None:
    # Empty optimizer output fails the stage, so the section keeps its original content
    if not entries:
        raise MalformedResponseError(f"Key '{key}' has no entries", stage=stage)


def _optional_dict(data: Dict[str, Any], key: str, stage: str) -> Dict[str, Any]:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise MalformedResponseError(f"Key '{key}' must be an object", stage=stage)
    return value


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, dict):
        # Models sometimes wrap list items as {"skill": "..."} or {"name": "..."}
        for candidate in ("name", "skill", "title", "text", "value"):
            if isinstance(value.get(candidate), str):
                return value[candidate].strip()
        return ""
    return str(value).strip()


def _string_list(value: Any, key: str, stage: str) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value.strip()] if value.strip() else []
    if not isinstance(value, list):
        raise MalformedResponseError(f"Key '{key}' must be a list", stage=stage)
    return [text for text in (_text(item) for item in value) if text]


def _score(value: Any, key: str, stage: str, required: bool = False) -> Optional[float]:
    """
    Parse a 0-100 score.

    Required scores raise on anything unusable; optional (metadata) scores
    degrade to None instead of failing the stage.
    """
    if value is None or value == "":
        if required:
            raise MalformedResponseError(f"Missing required key '{key}'", stage=stage)
        return None

    score = None
    if not isinstance(value, bool):
        try:
            score = float(value)
        except (TypeError, ValueError):
            score = None

    if score is None or not 0 <= score <= 100:
        if required:
            raise MalformedResponseError(
                f"Key '{key}' must be a number between 0 and 100, got {value!r}", stage=stage
            )
        return None
    return score


# --- Analyzer ---


@dataclass
class TechnicalSkills:
    required: List[str] = field(default_factory=list)
    preferred: List[str] = field(default_factory=list)
    nice_to_have: List[str] = field(default_factory=list)


@dataclass
class ExperienceLevel:
    years: str = ""
    level: str = ""
    specific_requirements: List[str] = field(default_factory=list)


@dataclass
class Priority:
    must_have: List[str] = field(default_factory=list)
    should_have: List[str] = field(default_factory=list)
    could_have: List[str] = field(default_factory=list)


@dataclass
class JobAnalysis:
    """Structured requirements extracted from a job description."""

    STAGE = "analyzer"

    technical_skills: TechnicalSkills
    soft_skills: List[str] = field(default_factory=list)
    experience_level: ExperienceLevel = field(default_factory=ExperienceLevel)
    key_responsibilities: List[str] = field(default_factory=list)
    industry_terms: List[str] = field(default_factory=list)
    project_types: List[str] = field(default_factory=list)
    methodologies: List[str] = field(default_factory=list)
    ats_keywords: List[str] = field(default_factory=list)
    priority: Priority = field(default_factory=Priority)
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_response(cls, data: Dict[str, Any]) -> "JobAnalysis":
        stage = cls.STAGE
        skills = _require(data, "technicalSkills", dict, stage)
        level = _optional_dict(data, "experienceLevel", stage)
        priority = _optional_dict(data, "priority", stage)

        return cls(
            technical_skills=TechnicalSkills(
                required=_string_list(skills.get("required"), "technicalSkills.required", stage),
                preferred=_string_list(skills.get("preferred"), "technicalSkills.preferred", stage),
                nice_to_have=_string_list(
                    skills.get("niceToHave"), "technicalSkills.niceToHave", stage
                ),
            ),
            soft_skills=_string_list(data.get("softSkills"), "softSkills", stage),
            experience_level=ExperienceLevel(
                years=_text(level.get("years")),
                level=_text(level.get("level")),
                specific_requirements=_string_list(
                    level.get("specificRequirements"), "experienceLevel.specificRequirements", stage
                ),
            ),
            key_responsibilities=_string_list(
                data.get("keyResponsibilities"), "keyResponsibilities", stage
            ),
            industry_terms=_string_list(data.get("industryTerms"), "industryTerms", stage),
            project_types=_string_list(data.get("projectTypes"), "projectTypes", stage),
            methodologies=_string_list(data.get("methodologies"), "methodologies", stage),
            ats_keywords=_string_list(data.get("atsKeywords"), "atsKeywords", stage),
            priority=Priority(
                must_have=_string_list(priority.get("mustHave"), "priority.mustHave", stage),
                should_have=_string_list(priority.get("shouldHave"), "priority.shouldHave", stage),
                could_have=_string_list(priority.get("couldHave"), "priority.couldHave", stage),
            ),
            raw=data,
        )


# --- Matcher ---


@dataclass
class MatchAnalysis:
    """How a profile lines up against a JobAnalysis."""

    STAGE = "matcher"

    match_score: float
    strengths: Dict[str, Any] = field(default_factory=dict)
    gaps: Dict[str, Any] = field(default_factory=dict)
    hidden_strengths: List[str] = field(default_factory=list)
    optimization_opportunities: Dict[str, Any] = field(default_factory=dict)
    competitive_advantages: List[str] = field(default_factory=list)
    recommendations: Dict[str, Any] = field(default_factory=dict)
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_response(cls, data: Dict[str, Any]) -> "MatchAnalysis":
        stage = cls.STAGE
        return cls(
            match_score=_score(data.get("matchScore"), "matchScore", stage, required=True),
            strengths=_require(data, "strengths", dict, stage),
            gaps=_require(data, "gaps", dict, stage),
            hidden_strengths=_string_list(data.get("hiddenStrengths"), "hiddenStrengths", stage),
            optimization_opportunities=_optional_dict(data, "optimizationOpportunities", stage),
            competitive_advantages=_string_list(
                data.get("competitiveAdvantages"), "competitiveAdvantages", stage
            ),
            recommendations=_optional_dict(data, "recommendations", stage),
            raw=data,
        )


# --- Section optimizers ---


@dataclass
class OptimizedExperienceEntry:
    title: str
    company: str
    highlights: List[str]
    location: str = ""
    start_date: str = ""
    end_date: str = ""
    keywords_added: List[str] = field(default_factory=list)
    relevance_score: Optional[float] = None


@dataclass
class OptimizedExperience:
    """Rewritten experience section."""

    STAGE = "experience"

    entries: List[OptimizedExperienceEntry]
    overall_strategy: str = ""
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_response(cls, data: Dict[str, Any]) -> "OptimizedExperience":
        stage = cls.STAGE
        entries = []
        for index, item in enumerate(_require(data, "optimizedExperience", list, stage)):
            if not isinstance(item, dict):
                raise MalformedResponseError(f"optimizedExperience[{index}] must be an object", stage=stage)
            notes = _optional_dict(item, "optimizationNotes", stage)
            entries.append(
                OptimizedExperienceEntry(
                    title=_text(_require(item, "title", str, stage)),
                    company=_text(_require(item, "company", str, stage)),
                    highlights=_string_list(
                        _require(item, "highlights", list, stage), "highlights", stage
                    ),
                    location=_text(item.get("location")),
                    start_date=_text(item.get("startDate")),
                    end_date=_text(item.get("endDate")),
                    keywords_added=_string_list(notes.get("keywordsAdded"), "keywordsAdded", stage),
                    relevance_score=_score(notes.get("relevanceScore"), "relevanceScore", stage),
                )
            )
        _require_entries(entries, "optimizedExperience", stage)
        return cls(entries=entries, overall_strategy=_text(data.get("overallStrategy")), raw=data)

    @property
    def keywords_added(self) -> List[str]:
        return [keyword for entry in self.entries for keyword in entry.keywords_added]


@dataclass
class OptimizedSkills:
    """Re-grouped, job-prioritized skills."""

    STAGE = "skills"

    categories: Dict[str, List[str]]
    prioritized_skills: List[str] = field(default_factory=list)
    keywords_added: List[str] = field(default_factory=list)
    removed_irrelevant: List[str] = field(default_factory=list)
    relevance_score: Optional[float] = None
    recommendations: List[str] = field(default_factory=list)
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_response(cls, data: Dict[str, Any]) -> "OptimizedSkills":
        stage = cls.STAGE
        categories = {}
        for domain, names in _require(data, "optimizedSkills", dict, stage).items():
            skills = _string_list(names, f"optimizedSkills.{domain}", stage)
            if skills:
                categories[str(domain)] = skills
        _require_entries(categories, "optimizedSkills", stage)
        notes = _optional_dict(data, "optimizationNotes", stage)
        return cls(
            categories=categories,
            prioritized_skills=_string_list(notes.get("prioritizedSkills"), "prioritizedSkills", stage),
            keywords_added=_string_list(notes.get("addedKeywords"), "addedKeywords", stage),
            removed_irrelevant=_string_list(notes.get("removedIrrelevant"), "removedIrrelevant", stage),
            relevance_score=_score(notes.get("relevanceScore"), "relevanceScore", stage),
            recommendations=_string_list(data.get("recommendations"), "recommendations", stage),
            raw=data,
        )


@dataclass
class OptimizedProjectEntry:
    title: str
    highlights: List[str]
    start_date: str = ""
    end_date: str = ""
    project_url: str = ""
    github_url: str = ""
    key_technologies: List[str] = field(default_factory=list)
    relevance_score: Optional[float] = None


@dataclass
class OptimizedProjects:
    """Rewritten (and possibly filtered) projects section."""

    STAGE = "projects"

    entries: List[OptimizedProjectEntry]
    keywords_added: List[str] = field(default_factory=list)
    overall_relevance: Optional[float] = None
    recommendations: List[str] = field(default_factory=list)
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_response(cls, data: Dict[str, Any]) -> "OptimizedProjects":
        stage = cls.STAGE
        entries = []
        for index, item in enumerate(_require(data, "optimizedProjects", list, stage)):
            if not isinstance(item, dict):
                raise MalformedResponseError(f"optimizedProjects[{index}] must be an object", stage=stage)
            entries.append(
                OptimizedProjectEntry(
                    title=_text(_require(item, "title", str, stage)),
                    highlights=_string_list(
                        _require(item, "highlights", list, stage), "highlights", stage
                    ),
                    start_date=_text(item.get("startDate")),
                    end_date=_text(item.get("endDate")),
                    project_url=_text(item.get("projectUrl")),
                    github_url=_text(item.get("githubUrl")),
                    key_technologies=_string_list(item.get("keyTechnologies"), "keyTechnologies", stage),
                    relevance_score=_score(item.get("relevanceScore"), "relevanceScore", stage),
                )
            )
        _require_entries(entries, "optimizedProjects", stage)
        notes = _optional_dict(data, "optimizationNotes", stage)
        return cls(
            entries=entries,
            keywords_added=_string_list(notes.get("keywordsAdded"), "keywordsAdded", stage),
            overall_relevance=_score(notes.get("overallRelevance"), "overallRelevance", stage),
            recommendations=_string_list(data.get("recommendations"), "recommendations", stage),
            raw=data,
        )


STAGE_SCHEMAS = {
    JobAnalysis.STAGE: JobAnalysis,
    MatchAnalysis.STAGE: MatchAnalysis,
    OptimizedExperience.STAGE: OptimizedExperience,
    OptimizedSkills.STAGE: OptimizedSkills,
    OptimizedProjects.STAGE: OptimizedProjects,
}
