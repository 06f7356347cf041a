"""
Keyword relevance scoring.

Used to order experience and project entries when their optimizer stage
fails: the original entries are kept, most relevant first. Scores are
weighted keyword overlap against the job analysis, 0-100.
"""

from typing import Callable, Iterable, List, Sequence, Tuple, TypeVar

from boron.contexts.profile.profile_data_structure import Experience, Project
from boron.contexts.targeting.stage_schemas import JobAnalysis

T = TypeVar("T")

# Weight per keyword group; each table sums to 100
EXPERIENCE_WEIGHTS = {
    "required": 40,
    "preferred": 25,
    "responsibilities": 20,
    "industry": 15,
}

PROJECT_WEIGHTS = {
    "required": 45,
    "preferred": 30,
    "project_types": 25,
}


def _overlap(text: str, terms: Sequence[str]) -> float:
    """Fraction of terms found (case-insensitive substring) in text."""
    if not terms:
        return 0.0
    hits = sum(1 for term in terms if term and term.lower() in text)
    return hits / max(len(terms), 1)


def _weighted_score(text: str, weighted_terms: Iterable[Tuple[int, Sequence[str]]]) -> float:
    text = text.lower()
    score = sum(weight * _overlap(text, terms) for weight, terms in weighted_terms)
    return min(round(score, 2), 100.0)


def score_experience_relevance(experience: Experience, analysis: JobAnalysis) -> float:
    """Score one experience against the job (0-100)."""
    text = " ".join([experience.position, experience.company, experience.description])
    return _weighted_score(
        text,
        [
            (EXPERIENCE_WEIGHTS["required"], analysis.technical_skills.required),
            (EXPERIENCE_WEIGHTS["preferred"], analysis.technical_skills.preferred),
            (EXPERIENCE_WEIGHTS["responsibilities"], analysis.key_responsibilities),
            (EXPERIENCE_WEIGHTS["industry"], analysis.industry_terms),
        ],
    )


def score_project_relevance(project: Project, analysis: JobAnalysis) -> float:
    """Score one project against the job (0-100)."""
    text = " ".join([project.title, project.technologies, project.description])
    return _weighted_score(
        text,
        [
            (PROJECT_WEIGHTS["required"], analysis.technical_skills.required),
            (PROJECT_WEIGHTS["preferred"], analysis.technical_skills.preferred),
            (PROJECT_WEIGHTS["project_types"], analysis.project_types),
        ],
    )


def order_by_relevance(items: List[T], scorer: Callable[[T], float]) -> List[T]:
    """Stable sort, highest score first; ties keep their original order."""
    return sorted(items, key=scorer, reverse=True)
