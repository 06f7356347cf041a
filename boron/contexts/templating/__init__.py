"""
Templating Context

Responsibilities:
- Builds the render-ready resume view from a profile (filtering, skill
  grouping, date formatting, bullet splitting)
- Manages the LaTeX template families (classic, modern)
- Renders resumes with LaTeX-safe escaping of every user field

Owns: ResumeData structure, template system, section order
Never: Decides content (that is the targeting and generation contexts' job)
"""

from boron.contexts.templating.resume_assembler import (
    ResumeAssembler,
    assemble_resume,
    build_resume_data,
    filter_included,
    group_skills_by_domain,
)
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

__all__ = [
    # Assembly
    "ResumeAssembler",
    "assemble_resume",
    "build_resume_data",
    "filter_included",
    "group_skills_by_domain",
    "TemplateRegistry",
    # Data structure classes
    "ResumeData",
    "ResumeHeader",
    "ContactInfo",
    "EducationEntry",
    "ExperienceEntry",
    "ProjectEntry",
    "CertificateEntry",
]
