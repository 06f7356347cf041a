"""Unit tests for resume assembly."""

import re

import pytest

from boron.contexts.profile.profile_data_structure import Education, Experience, Profile, Skill
from boron.contexts.templating.resume_assembler import (
    ResumeAssembler,
    assemble_resume,
    build_resume_data,
    filter_included,
    group_skills_by_domain,
)
from boron.utils.errors import InputValidationError

ITEM_PATTERN = re.compile(r"\\item\b")


@pytest.mark.unit
class TestResumeData:
    """Test the render-ready view built from a profile."""

    def test_filter_included(self):
        """Only entries explicitly excluded are dropped."""
        items = [Skill(name="a"), Skill(name="b", include_in_resume=False), Skill(name="c")]
        assert [s.name for s in filter_included(items)] == ["a", "c"]

    def test_group_skills_by_domain_literal(self):
        """Domains are grouped by exact string; first-seen order is kept."""
        skills = [
            Skill(name="Python", domain="Backend"),
            Skill(name="React", domain="Frontend"),
            Skill(name="Go", domain="backend "),
            Skill(name="SQL", domain="Backend"),
            Skill(name="  ", domain="Backend"),
        ]
        assert group_skills_by_domain(skills) == {
            "Backend": ["Python", "SQL"],
            "Frontend": ["React"],
            "backend ": ["Go"],
        }

    def test_build_resume_data_excludes_and_formats(self, sample_profile):
        """Excluded entries vanish; dates and bullets are formatted."""
        resume = build_resume_data(sample_profile)

        assert [job.company for job in resume.experience] == ["Acme", "Globex"]
        acme = resume.experience[0]
        assert acme.dates == "Mar 2021 -- Present"
        assert acme.highlights == ["Built Python APIs", "Maintained PostgreSQL schemas"]

        assert resume.skills == {"Languages": ["Python", "SQL"], "Infrastructure": ["Docker"]}
        assert resume.education[0].graduation == "Jun 2019"
        assert resume.projects[1].technologies == ["Python", "PostgreSQL"]
        assert resume.certificates[0].date == "May 2022"

    def test_education_dates_hidden(self):
        """show_dates_in_resume=False leaves the graduation date blank."""
        profile = Profile(
            uid="u",
            education=[Education(school="MIT", degree="BS", end_date="2020-05", show_dates_in_resume=False)],
        )
        assert build_resume_data(profile).education[0].graduation == ""


@pytest.mark.unit
class TestAssembly:
    """Test LaTeX output."""

    def test_assembly_is_deterministic(self, sample_profile):
        """Same profile, same template: byte-identical output."""
        assert assemble_resume(sample_profile) == assemble_resume(sample_profile)

    def test_contains_escaped_content(self, sample_profile):
        """User text is escaped and markdown bold becomes \\textbf."""
        latex = assemble_resume(sample_profile)

        assert r"\textbf{Ada Lovelace}" in latex
        assert r"\textbf{reliable}" in latex
        assert r"https://aws.example.com/cert?id=1\&v=2" in latex
        assert r"\href{https://linkedin.com/in/ada}" in latex
        assert r"\href{mailto:ada@example.com}{ada@example.com}" in latex

    def test_excluded_entries_absent(self, sample_profile):
        latex = assemble_resume(sample_profile)

        assert "Initech" not in latex
        assert "COBOL" not in latex

    def test_reincluded_entry_reappears(self):
        """Toggling include_in_resume back on brings the entry (and its section) back."""
        profile = Profile(
            uid="u",
            name="Sam",
            experiences=[
                Experience(
                    position="Engineer",
                    company="Acme",
                    start_date="2023-01",
                    description="Shipped v2\nLed migration",
                    include_in_resume=False,
                )
            ],
        )

        hidden = assemble_resume(profile)
        assert "Acme" not in hidden
        assert r"\header{Experience}" not in hidden

        profile.experiences[0].include_in_resume = True
        shown = assemble_resume(profile)

        assert "Acme" in shown
        assert r"\header{Experience}" in shown
        assert len(ITEM_PATTERN.findall(shown)) == 2

    def test_sections_in_fixed_order(self, sample_profile):
        latex = assemble_resume(sample_profile)
        positions = [
            latex.index(r"\header{" + title + "}")
            for title in ["Summary", "Education", "Experience", "Skills", "Projects", "Certifications"]
        ]
        assert positions == sorted(positions)

    def test_empty_sections_omitted(self):
        """A profile with only a name renders a document with no section headers."""
        latex = assemble_resume(Profile(uid="u", name="Solo"))

        assert r"\header{" not in latex.split(r"\begin{document}")[1]
        assert r"\end{document}" in latex
        assert ITEM_PATTERN.search(latex) is None

    def test_skill_lines(self, sample_profile):
        latex = assemble_resume(sample_profile)

        assert r"\item \textbf{Languages:} Python, SQL" in latex
        assert r"\item \textbf{Infrastructure:} Docker" in latex

    def test_experience_bullets(self):
        """One \\item per non-blank description line."""
        profile = Profile(
            uid="u",
            name="Sam",
            experiences=[
                Experience(
                    position="Engineer",
                    company="Acme",
                    start_date="2023-01",
                    description="• Shipped v2\n\n- Led migration\n",
                )
            ],
        )
        latex = assemble_resume(profile)

        assert len(ITEM_PATTERN.findall(latex)) == 2
        assert r"\item Shipped v2" in latex
        assert r"\item Led migration" in latex
        assert "Jan 2023 -- Present" in latex

    def test_no_blank_line_runs(self, sample_profile):
        """At most one blank line in a row."""
        assert "\n\n\n" not in assemble_resume(sample_profile)

    def test_modern_template(self, sample_profile):
        """The modern family uses its own section titles and heading macro."""
        latex = assemble_resume(sample_profile, template_name="modern")

        assert r"\heading{Professional Experience}" in latex
        assert r"\heading{Technical Skills}" in latex
        assert r"\header{" not in latex
        assert "Acme" in latex

    def test_unknown_template(self):
        with pytest.raises(InputValidationError):
            ResumeAssembler(template_name="baroque")
