"""Unit tests for pipeline stage schemas and relevance scoring."""

import pytest

from boron.contexts.profile.profile_data_structure import Experience, Project
from boron.contexts.targeting.relevance import (
    order_by_relevance,
    score_experience_relevance,
    score_project_relevance,
)
from boron.contexts.targeting.stage_schemas import (
    STAGE_SCHEMAS,
    JobAnalysis,
    MatchAnalysis,
    OptimizedExperience,
    OptimizedProjects,
    OptimizedSkills,
)
from boron.utils.errors import MalformedResponseError

from conftest import (
    ANALYZER_RESPONSE,
    EXPERIENCE_RESPONSE,
    MATCHER_RESPONSE,
    PROJECTS_RESPONSE,
    SKILLS_RESPONSE,
)


@pytest.mark.unit
class TestJobAnalysis:
    def test_valid_response(self):
        analysis = JobAnalysis.from_response(ANALYZER_RESPONSE)

        assert analysis.technical_skills.required == ["Python", "PostgreSQL"]
        assert analysis.technical_skills.nice_to_have == ["Go"]
        assert analysis.experience_level.level == "mid"
        assert analysis.priority.must_have == ["Python"]
        assert analysis.raw is ANALYZER_RESPONSE

    def test_missing_technical_skills(self):
        with pytest.raises(MalformedResponseError) as exc_info:
            JobAnalysis.from_response({"softSkills": []})
        assert exc_info.value.stage == "analyzer"

    def test_wrapped_list_items(self):
        """List items wrapped as objects are unwrapped to their text."""
        analysis = JobAnalysis.from_response(
            {"technicalSkills": {"required": [{"skill": "Rust"}, "  ", None]}}
        )
        assert analysis.technical_skills.required == ["Rust"]

    def test_wrong_list_type(self):
        with pytest.raises(MalformedResponseError):
            JobAnalysis.from_response({"technicalSkills": {"required": 5}})


@pytest.mark.unit
class TestMatchAnalysis:
    def test_valid_response(self):
        match = MatchAnalysis.from_response(MATCHER_RESPONSE)
        assert match.match_score == 78
        assert match.gaps["preferredMissing"] == ["Kubernetes"]

    def test_score_as_string(self):
        match = MatchAnalysis.from_response({**MATCHER_RESPONSE, "matchScore": "64.5"})
        assert match.match_score == 64.5

    @pytest.mark.parametrize("score", [None, "high", 120, -1, True])
    def test_invalid_score(self, score):
        with pytest.raises(MalformedResponseError):
            MatchAnalysis.from_response({**MATCHER_RESPONSE, "matchScore": score})

    def test_missing_gaps(self):
        data = {key: value for key, value in MATCHER_RESPONSE.items() if key != "gaps"}
        with pytest.raises(MalformedResponseError):
            MatchAnalysis.from_response(data)


@pytest.mark.unit
class TestSectionSchemas:
    def test_optimized_experience(self):
        experience = OptimizedExperience.from_response(EXPERIENCE_RESPONSE)

        entry = experience.entries[0]
        assert entry.company == "Acme"
        assert len(entry.highlights) == 2
        assert entry.relevance_score == 90
        assert experience.keywords_added == ["Python", "PostgreSQL"]

    def test_experience_entry_needs_highlights(self):
        with pytest.raises(MalformedResponseError):
            OptimizedExperience.from_response(
                {"optimizedExperience": [{"title": "Engineer", "company": "Acme"}]}
            )

    def test_bad_optional_score_is_dropped(self):
        """Metadata scores that are not numbers do not fail the stage."""
        data = {
            "optimizedExperience": [
                {
                    "title": "Engineer",
                    "company": "Acme",
                    "highlights": ["Did things"],
                    "optimizationNotes": {"relevanceScore": "very"},
                }
            ]
        }
        assert OptimizedExperience.from_response(data).entries[0].relevance_score is None

    def test_optimized_skills_drops_empty_categories(self):
        skills = OptimizedSkills.from_response(
            {"optimizedSkills": {**SKILLS_RESPONSE["optimizedSkills"], "Empty": []}}
        )
        assert skills.categories == {"Languages": ["Python", "SQL"], "Infrastructure": ["Docker"]}

    @pytest.mark.parametrize(
        "schema, data",
        [
            (OptimizedExperience, {"optimizedExperience": []}),
            (OptimizedSkills, {"optimizedSkills": {}}),
            (OptimizedSkills, {"optimizedSkills": {"Languages": []}}),
            (OptimizedProjects, {"optimizedProjects": []}),
        ],
    )
    def test_empty_section_is_malformed(self, schema, data):
        """An optimizer may not empty a section."""
        with pytest.raises(MalformedResponseError, match="no entries"):
            schema.from_response(data)

    def test_optimized_skills_requires_object(self):
        with pytest.raises(MalformedResponseError):
            OptimizedSkills.from_response({"optimizedSkills": ["Python"]})

    def test_optimized_projects(self):
        projects = OptimizedProjects.from_response(PROJECTS_RESPONSE)
        assert projects.entries[0].title == "Ledger"
        assert projects.entries[0].key_technologies == ["Python", "PostgreSQL"]

    def test_stage_schema_table(self):
        assert STAGE_SCHEMAS["analyzer"] is JobAnalysis
        assert set(STAGE_SCHEMAS) == {"analyzer", "matcher", "experience", "skills", "projects"}


@pytest.mark.unit
class TestRelevance:
    def test_experience_scores(self):
        analysis = JobAnalysis.from_response(ANALYZER_RESPONSE)
        relevant = Experience(position="Engineer", description="Python services on PostgreSQL")
        unrelated = Experience(position="Barista", description="Coffee")

        assert score_experience_relevance(relevant, analysis) == 40.0
        assert score_experience_relevance(unrelated, analysis) == 0.0

    def test_project_score_capped(self):
        analysis = JobAnalysis.from_response(ANALYZER_RESPONSE)
        project = Project(
            title="Data pipeline",
            technologies="Python, PostgreSQL, Kubernetes",
        )
        assert score_project_relevance(project, analysis) == 100.0

    def test_order_is_stable(self):
        items = ["a", "bb", "c", "dd"]
        assert order_by_relevance(items, len) == ["bb", "dd", "a", "c"]
