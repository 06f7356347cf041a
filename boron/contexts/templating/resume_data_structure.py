"""
Resume data structure.

ResumeData is the render-ready view of a resume: sections already filtered,
dates already formatted, descriptions already split into bullets. Text is
still plain (unescaped); templates escape every field on the way out.

Built from a Profile by the assembler, or by the targeting pipeline from a
Profile merged with optimized sections.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List


@dataclass
class ContactInfo:
    email: str = ""
    phone: str = ""
    linkedin: str = ""
    github: str = ""
    portfolio: str = ""


@dataclass
class ResumeHeader:
    name: str = ""
    title: str = ""
    location: str = ""
    contact: ContactInfo = field(default_factory=ContactInfo)


@dataclass
class EducationEntry:
    school: str = ""
    degree: str = ""
    # Formatted end date, blank when the entry hides its dates
    graduation: str = ""
    gpa: str = ""


@dataclass
class ExperienceEntry:
    title: str = ""
    company: str = ""
    location: str = ""
    dates: str = ""
    highlights: List[str] = field(default_factory=list)


@dataclass
class ProjectEntry:
    title: str = ""
    dates: str = ""
    technologies: List[str] = field(default_factory=list)
    project_url: str = ""
    github_url: str = ""
    highlights: List[str] = field(default_factory=list)


@dataclass
class CertificateEntry:
    name: str = ""
    issuer: str = ""
    date: str = ""
    credential_url: str = ""


@dataclass
class ResumeData:
    """
    Render-ready resume.

    Attributes:
        header: Name, title, location and contact links
        summary: Free-text summary (profile "about")
        education/experience/projects/certificates: Ordered entries
        skills: Domain -> skill names, in first-seen domain order
    """

    header: ResumeHeader = field(default_factory=ResumeHeader)
    summary: str = ""
    education: List[EducationEntry] = field(default_factory=list)
    experience: List[ExperienceEntry] = field(default_factory=list)
    skills: Dict[str, List[str]] = field(default_factory=dict)
    projects: List[ProjectEntry] = field(default_factory=list)
    certificates: List[CertificateEntry] = field(default_factory=list)

    def has_section(self, name: str) -> bool:
        """Whether a section has content and should be emitted."""
        value = getattr(self, name)
        if isinstance(value, str):
            return bool(value.strip())
        return bool(value)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
