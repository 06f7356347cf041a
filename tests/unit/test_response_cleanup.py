"""Unit tests for LLM completion cleanup."""

import pytest

from boron.contexts.generation.response_cleanup import (
    clean_about_response,
    clean_bullet_response,
    parse_skills_response,
    strip_chatter,
    strip_markdown,
)


@pytest.mark.unit
class TestBulletCleanup:
    def test_intro_outro_and_markers(self):
        text = "Here are some bullet points:\n1. Built **REST** APIs\n- Led a team of 4\n\nI hope this helps!"
        assert clean_bullet_response(text) == "Built REST APIs\nLed a team of 4"

    def test_content_first_line_is_kept(self):
        """A first bullet is not mistaken for an introduction."""
        text = "The payments service was rebuilt in Go\nProfessional mentoring for 3 interns"
        assert clean_bullet_response(text) == text

    def test_leading_numbers_are_not_markers(self):
        text = "20% faster builds after caching\n2) Cut costs"
        assert clean_bullet_response(text) == "20% faster builds after caching\nCut costs"

    def test_colon_inside_line_is_content(self):
        text = "Migration: moved 40 services to Kubernetes\n• Wrote runbooks"
        assert clean_bullet_response(text) == (
            "Migration: moved 40 services to Kubernetes\nWrote runbooks"
        )

    def test_only_chatter(self):
        assert clean_bullet_response("Sure! Here are your bullets:\n") == ""


@pytest.mark.unit
def test_strip_markdown():
    text = "**bold** and *italic* and `code` and ~~old~~ and __under__"
    assert strip_markdown(text) == "bold and italic and code and old and under"


@pytest.mark.unit
def test_strip_chatter_closing_line():
    assert strip_chatter("Shipped v2\nLet me know if you need changes.") == "Shipped v2"


@pytest.mark.unit
@pytest.mark.parametrize(
    "text, expected",
    [
        ('"I build reliable data systems."', "I build reliable data systems."),
        (
            'Here is your About Me section:\n\n"I build *reliable* systems."',
            "I build reliable systems.",
        ),
        ("I build systems.\n\nFeel free to tweak it!", "I build systems."),
    ],
)
def test_clean_about_response(text, expected):
    assert clean_about_response(text) == expected


@pytest.mark.unit
class TestSkillsParsing:
    def test_json_array(self):
        text = (
            '[{"name": "Go", "domain": "Backend"}, {"skill": "Figma", "category": "Design"}, '
            '{"name": "go", "domain": "Languages"}, {"name": "NoDomain"}]'
        )
        assert parse_skills_response(text) == [
            {"name": "Go", "domain": "Backend"},
            {"name": "Figma", "domain": "Design"},
        ]

    def test_text_lines(self):
        text = "Languages: Python, Go\n- Docker (DevOps)\n- Communication\n* **Python**"
        assert parse_skills_response(text) == [
            {"name": "Python", "domain": "Languages"},
            {"name": "Go", "domain": "Languages"},
            {"name": "Docker", "domain": "DevOps"},
            {"name": "Communication", "domain": "Other"},
        ]

    def test_empty(self):
        assert parse_skills_response("   ") == []
