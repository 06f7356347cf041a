"""Shared fixtures: a scripted LLM provider and sample profiles."""

import asyncio
import json

import pytest

from boron.contexts.profile.profile_data_structure import (
    Certificate,
    Education,
    Experience,
    Profile,
    Project,
    Skill,
)
from boron.contexts.targeting.prompts import STAGE_SYSTEM_PROMPTS
from boron.utils import event_logging
from boron.utils.llm import LLMProvider, LLMResponse

STAGE_BY_SYSTEM_PROMPT = {prompt: stage for stage, prompt in STAGE_SYSTEM_PROMPTS.items()}


class ScriptedProvider(LLMProvider):
    """
    LLM provider answering from a script instead of an API.

    responses maps a pipeline stage name (identified by its system prompt) to
    the completion text, or to an exception to raise. Calls that are not a
    pipeline stage use `default`. Every call is recorded in `calls`.
    """

    _provider_prefix = "scripted"

    def __init__(self, responses=None, default=None, delays=None):
        self.responses = responses or {}
        self.default = default
        self.delays = delays or {}
        self.calls = []
        self.update_model("test-model")

    def stage_calls(self, stage):
        return [call for call in self.calls if call["stage"] == stage]

    async def _call_api(self, system_prompt, user_prompt, json_mode, temperature, max_tokens):
        stage = STAGE_BY_SYSTEM_PROMPT.get(system_prompt, "other")
        self.calls.append(
            {
                "stage": stage,
                "system_prompt": system_prompt,
                "user_prompt": user_prompt,
                "json_mode": json_mode,
                "temperature": temperature,
                "max_tokens": max_tokens,
            }
        )
        if self.delays.get(stage):
            await asyncio.sleep(self.delays[stage])

        response = self.responses.get(stage, self.default)
        if isinstance(response, Exception):
            raise response
        if response is None:
            raise AssertionError(f"No scripted response for stage '{stage}'")
        return LLMResponse(content=response, model=self.model)


@pytest.fixture(autouse=True)
def isolated_event_log(tmp_path, monkeypatch):
    """Send pipeline events to a per-test file."""
    events_file = tmp_path / "pipeline_events.log"
    monkeypatch.setattr(event_logging, "PIPELINE_EVENTS_FILE", events_file)
    return events_file


@pytest.fixture
def scripted_provider():
    """Factory for ScriptedProvider instances."""
    return ScriptedProvider


ANALYZER_RESPONSE = {
    "technicalSkills": {
        "required": ["Python", "PostgreSQL"],
        "preferred": ["Kubernetes"],
        "niceToHave": ["Go"],
    },
    "softSkills": ["communication"],
    "experienceLevel": {"years": "3+", "level": "mid", "specificRequirements": []},
    "keyResponsibilities": ["build APIs", "own services"],
    "industryTerms": ["fintech"],
    "projectTypes": ["data pipeline"],
    "atsKeywords": ["Python", "APIs"],
    "priority": {"mustHave": ["Python"], "shouldHave": ["Kubernetes"], "couldHave": []},
}

MATCHER_RESPONSE = {
    "matchScore": 78,
    "strengths": {"directMatches": ["Python"]},
    "gaps": {"criticalMissing": [], "preferredMissing": ["Kubernetes"]},
    "hiddenStrengths": ["data modeling"],
    "recommendations": {"priorityFocus": ["APIs"]},
}

EXPERIENCE_RESPONSE = {
    "optimizedExperience": [
        {
            "title": "Backend Engineer",
            "company": "Acme",
            "highlights": [
                "Built **Python** APIs serving 2M requests per day",
                "Cut PostgreSQL query latency by 40%",
            ],
            "optimizationNotes": {"keywordsAdded": ["Python", "PostgreSQL"], "relevanceScore": 90},
        }
    ],
    "overallStrategy": "Lead with API work",
}

SKILLS_RESPONSE = {
    "optimizedSkills": {
        "Languages": ["Python", "SQL"],
        "Infrastructure": ["Docker"],
    },
    "optimizationNotes": {"prioritizedSkills": ["Python"], "relevanceScore": 85},
}

PROJECTS_RESPONSE = {
    "optimizedProjects": [
        {
            "title": "Ledger",
            "highlights": ["Designed a double-entry ledger in Python"],
            "keyTechnologies": ["Python", "PostgreSQL"],
            "relevanceScore": 80,
        }
    ],
}


@pytest.fixture
def stage_responses():
    """Valid JSON completions for every pipeline stage."""
    return {
        "analyzer": json.dumps(ANALYZER_RESPONSE),
        "matcher": json.dumps(MATCHER_RESPONSE),
        "experience": json.dumps(EXPERIENCE_RESPONSE),
        "skills": json.dumps(SKILLS_RESPONSE),
        "projects": json.dumps(PROJECTS_RESPONSE),
    }


@pytest.fixture
def sample_profile():
    """A filled-in profile with one excluded entry per collection."""
    return Profile(
        uid="user-1",
        name="Ada Lovelace",
        email="ada@example.com",
        title="Backend Engineer",
        phone="+1 555 0100",
        location="London, UK",
        linkedin_url="linkedin.com/in/ada",
        github_url="https://github.com/ada",
        about="Engineer focused on **reliable** data systems.",
        experiences=[
            Experience(
                position="Backend Engineer",
                company="Acme",
                location="Remote",
                start_date="2021-03",
                end_date="",
                description="Built Python APIs\nMaintained PostgreSQL schemas",
                id="exp-1",
            ),
            Experience(
                position="Intern",
                company="Initech",
                start_date="2019-06",
                end_date="2019-09",
                description="Wrote reports",
                include_in_resume=False,
                id="exp-2",
            ),
            Experience(
                position="Support Engineer",
                company="Globex",
                start_date="2019-10",
                end_date="2021-02",
                description="Answered tickets",
                id="exp-3",
            ),
        ],
        education=[
            Education(
                school="University of London",
                degree="BSc Mathematics",
                start_date="2015-09",
                end_date="2019-06",
                gpa="3.8",
                id="edu-1",
            )
        ],
        skills=[
            Skill(name="Python", domain="Languages", id="s-1"),
            Skill(name="SQL", domain="Languages", id="s-2"),
            Skill(name="Docker", domain="Infrastructure", id="s-3"),
            Skill(name="COBOL", domain="Languages", include_in_resume=False, id="s-4"),
        ],
        projects=[
            Project(
                title="Recipe App",
                description="Meal planner",
                technologies="React, Firebase",
                start_date="2020-01",
                end_date="2020-05",
                id="p-1",
            ),
            Project(
                title="Ledger",
                description="Double-entry ledger on PostgreSQL",
                technologies="Python, PostgreSQL",
                start_date="2022-01",
                end_date="2022-06",
                github_url="github.com/ada/ledger",
                id="p-2",
            ),
        ],
        certificates=[
            Certificate(
                name="AWS Certified Developer",
                issuer="Amazon",
                issue_date="2022-05",
                credential_url="https://aws.example.com/cert?id=1&v=2",
                id="c-1",
            )
        ],
    )
