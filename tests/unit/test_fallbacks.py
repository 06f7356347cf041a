"""Unit tests for the local fallback generators."""

import random

import pytest

from boron.contexts.generation.fallbacks import (
    ABOUT_ENHANCEMENT,
    ACTION_WORDS,
    FALLBACK_BULLET_COUNT,
    GENERIC_SKILLS,
    generate_fallback_about,
    generate_fallback_description,
    generate_fallback_skills,
)
from boron.contexts.profile.profile_data_structure import Education, Experience, Project


@pytest.mark.unit
class TestFallbackAbout:
    def test_enhance_appends_sentence(self):
        about = generate_fallback_about(current_about="I write code.  ", mode="enhance")
        assert about == f"I write code.\n\n{ABOUT_ENHANCEMENT}"

    def test_replace_uses_first_entries(self):
        about = generate_fallback_about(
            experiences=[Experience(position="Data Engineer", company="Acme")],
            skills=["Python", "SQL"],
            education=[Education(school="MIT", degree="BSc Physics")],
        )

        assert about.startswith("I am a seasoned Data Engineer with experience at Acme in the industry.")
        assert "My expertise in Python" in about
        assert "I hold a BSc Physics from MIT." in about

    def test_enhance_without_text_behaves_as_replace(self):
        about = generate_fallback_about(mode="enhance")
        assert about.startswith("I am a seasoned professional with experience at leading companies")


@pytest.mark.unit
class TestFallbackDescription:
    def test_enhance_prefixes_action_words(self):
        description = generate_fallback_description(
            "experience",
            current_description="Built APIs\n\n• Successfully shipped v2",
            mode="enhance",
            rng=random.Random(3),
        )

        first, second = description.split("\n")
        word, rest = first.split(" ", 1)
        assert word in ACTION_WORDS
        assert rest == "built APIs"
        assert second == "Successfully shipped v2"

    @pytest.mark.parametrize("description_type", ["experience", "project"])
    def test_replace_samples_distinct_bullets(self, description_type):
        kwargs = dict(position="Engineer", company="Acme", title="Ledger", technologies="Python, SQL")

        first = generate_fallback_description(description_type, rng=random.Random(7), **kwargs)
        second = generate_fallback_description(description_type, rng=random.Random(7), **kwargs)

        lines = first.split("\n")
        assert len(lines) == FALLBACK_BULLET_COUNT
        assert len(set(lines)) == FALLBACK_BULLET_COUNT
        assert first == second


@pytest.mark.unit
class TestFallbackSkills:
    def test_suggest_complements_existing_domains(self):
        current = [
            {"name": "React", "domain": "Frontend Development"},
            {"name": "Docker", "domain": "DevOps"},
        ]

        skills = generate_fallback_skills(current_skills=current, mode="suggest")

        assert [skill["name"] for skill in skills] == [
            "Next.js",
            "Tailwind CSS",
            "AWS",
            "Unit Testing",
            "Jest",
        ]

    def test_add_from_position_and_project(self):
        skills = generate_fallback_skills(
            experiences=[Experience(position="Senior Backend Engineer")],
            projects=[Project(technologies="React, Kubernetes, Figma")],
            current_skills=[{"name": "sql", "domain": "Databases"}],
        )

        assert skills == [
            {"name": "Node.js", "domain": "Backend Development"},
            {"name": "Express", "domain": "Backend Development"},
            {"name": "Team Leadership", "domain": "Leadership"},
            {"name": "Project Management", "domain": "Management"},
            {"name": "React", "domain": "Frontend Development"},
            {"name": "Kubernetes", "domain": "DevOps"},
            {"name": "Figma", "domain": "Other"},
        ]

    def test_generic_when_nothing_to_go_on(self):
        skills = generate_fallback_skills(rng=random.Random(0))

        assert sorted(skill["name"] for skill in skills) == sorted(name for name, _ in GENERIC_SKILLS)
