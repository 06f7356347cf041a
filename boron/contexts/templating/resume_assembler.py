"""
Resume document assembler.

Turns a Profile into a complete LaTeX document:

1. Filter every collection to entries included in the resume
2. Group skills by domain (literal string equality, first-seen order)
3. Format dates and split descriptions into bullets
4. Render each non-empty section, in fixed order, through the chosen
   template family, then wrap them in the document template

Assembly is a pure function of the profile snapshot and template: the same
input always yields byte-identical output.
"""

from typing import Dict, Iterable, List, Optional

from boron.contexts.profile.profile_data_structure import Profile, Skill
from boron.contexts.templating.defaults import DEFAULT_TEMPLATE, SECTION_ORDER, SECTION_TITLES
from boron.contexts.templating.logger import log_assembly_result, log_assembly_start
from boron.contexts.templating.resume_data_structure import (
    CertificateEntry,
    ContactInfo,
    EducationEntry,
    ExperienceEntry,
    ProjectEntry,
    ResumeData,
    ResumeHeader,
)
from boron.contexts.templating.template_registry import TemplateRegistry
from boron.utils.date_formatting import format_date, format_date_range
from boron.utils.errors import InputValidationError
from boron.utils.text_processing import (
    set_max_consecutive_blank_lines,
    split_bullet_lines,
    split_comma_list,
)


def filter_included(items: Iterable) -> List:
    """Keep entries whose include_in_resume flag is not explicitly False."""
    return [item for item in items if getattr(item, "include_in_resume", True) is not False]


def group_skills_by_domain(skills: Iterable[Skill]) -> Dict[str, List[str]]:
    """
    Group skill names by domain.

    Domains are compared literally: "Backend" and "backend " are different
    groups. Groups keep the order in which their domain first appears.
    """
    grouped: Dict[str, List[str]] = {}
    for skill in skills:
        name = (skill.name or "").strip()
        if not name:
            continue
        grouped.setdefault(skill.domain or "", []).append(name)
    return grouped


def build_resume_data(profile: Profile) -> ResumeData:
    """Build the render-ready view of a profile (filtering, grouping, date formatting)."""
    header = ResumeHeader(
        name=profile.name,
        title=profile.title,
        location=profile.location,
        contact=ContactInfo(
            email=profile.email,
            phone=profile.phone,
            linkedin=profile.linkedin_url,
            github=profile.github_url,
            portfolio=profile.portfolio_url,
        ),
    )

    education = [
        EducationEntry(
            school=edu.school,
            degree=edu.degree,
            graduation=(
                format_date(edu.end_date, is_ongoing=not edu.end_date)
                if edu.show_dates_in_resume is not False
                else ""
            ),
            gpa=str(edu.gpa or ""),
        )
        for edu in filter_included(profile.education)
    ]

    experience = [
        ExperienceEntry(
            title=exp.position,
            company=exp.company,
            location=exp.location,
            dates=format_date_range(exp.start_date, exp.end_date),
            highlights=split_bullet_lines(exp.description),
        )
        for exp in filter_included(profile.experiences)
    ]

    projects = [
        ProjectEntry(
            title=proj.title,
            dates=format_date_range(proj.start_date, proj.end_date),
            technologies=split_comma_list(proj.technologies),
            project_url=proj.project_url or "",
            github_url=proj.github_url or "",
            highlights=split_bullet_lines(proj.description),
        )
        for proj in filter_included(profile.projects)
    ]

    certificates = [
        CertificateEntry(
            name=cert.name,
            issuer=cert.issuer,
            date=format_date(cert.issue_date),
            credential_url=cert.credential_url or "",
        )
        for cert in filter_included(profile.certificates)
    ]

    return ResumeData(
        header=header,
        summary=(profile.about or "").strip(),
        education=education,
        experience=experience,
        skills=group_skills_by_domain(filter_included(profile.skills)),
        projects=projects,
        certificates=certificates,
    )


class ResumeAssembler:
    """
    Renders profiles (or pre-built ResumeData) to LaTeX.

    Args:
        template_registry: Registry to load templates from (default: shipped templates)
        template_name: Template family, 'classic' or 'modern'
    """

    def __init__(
        self,
        template_registry: Optional[TemplateRegistry] = None,
        template_name: str = DEFAULT_TEMPLATE,
    ):
        self.registry = template_registry or TemplateRegistry()
        if template_name not in SECTION_TITLES or not self.registry.has_template(template_name):
            raise InputValidationError(
                f"Unknown template '{template_name}'. "
                f"Available: {', '.join(self.registry.list_templates())}",
                field="template",
            )
        self.template_name = template_name

    def assemble(self, profile: Profile) -> str:
        """Assemble a complete LaTeX document from a profile snapshot."""
        log_assembly_start(profile.uid, self.template_name)
        latex = self.assemble_candidate(build_resume_data(profile))
        return latex

    def assemble_candidate(self, resume: ResumeData) -> str:
        """Render already-built ResumeData (e.g., pipeline output) to LaTeX."""
        titles = SECTION_TITLES[self.template_name]
        sections = []
        for name in SECTION_ORDER:
            if not resume.has_section(name):
                continue
            body = self.registry.get_template(self.template_name, name).render(resume=resume)
            sections.append({"name": name, "title": titles[name], "body": body.strip("\n")})

        document = self.registry.get_template(self.template_name, "document").render(
            header=resume.header,
            sections=sections,
        )
        latex = set_max_consecutive_blank_lines(document.lstrip(), max_consecutive=1)
        log_assembly_result([s["name"] for s in sections], len(latex))
        return latex


def assemble_resume(profile: Profile, template_name: str = DEFAULT_TEMPLATE) -> str:
    """
    Assemble a LaTeX resume for a profile.

    Args:
        profile: Profile snapshot
        template_name: 'classic' (default) or 'modern'

    Returns:
        Complete LaTeX document
    """
    return ResumeAssembler(template_name=template_name).assemble(profile)
