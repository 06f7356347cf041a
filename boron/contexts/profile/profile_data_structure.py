"""
Profile data structures.

Dataclasses mirroring the stored profile documents. Documents use camelCase
keys (includeInResume, startDate, linkedinUrl, ...); the dataclasses use
snake_case attributes and convert in from_dict()/to_dict().

Unknown document keys are ignored on load and missing keys take defaults,
so a partially filled profile always loads.
"""

from dataclasses import dataclass, field, fields, replace
from datetime import datetime
from typing import Any, Dict, List, Optional, Type, TypeVar

T = TypeVar("T", bound="_Document")


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


class _Document:
    """Mixin giving dataclasses camelCase dict conversion."""

    # snake_case attribute -> stored key, where the stored key isn't plain camelCase
    _key_overrides: Dict[str, str] = {}
    # attribute -> element type for nested document lists
    _list_types: Dict[str, type] = {}

    @classmethod
    def _key_for(cls, attr: str) -> str:
        return cls._key_overrides.get(attr, _camel(attr))

    @classmethod
    def from_dict(cls: Type[T], data: Optional[Dict[str, Any]]) -> T:
        data = data or {}
        kwargs = {}
        for f in fields(cls):
            key = cls._key_for(f.name)
            if key not in data:
                continue
            value = data[key]
            if f.name in cls._list_types:
                element_type = cls._list_types[f.name]
                value = [
                    item if isinstance(item, element_type) else element_type.from_dict(item)
                    for item in (value or [])
                ]
            elif value is None and f.type in ("str", str):
                value = ""
            kwargs[f.name] = value
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        result = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, list):
                value = [item.to_dict() if isinstance(item, _Document) else item for item in value]
            result[self._key_for(f.name)] = value
        return result


@dataclass
class Experience(_Document):
    position: str = ""
    company: str = ""
    location: str = ""
    start_date: str = ""
    end_date: str = ""
    description: str = ""
    include_in_resume: bool = True
    id: str = ""


@dataclass
class Education(_Document):
    school: str = ""
    degree: str = ""
    start_date: str = ""
    end_date: str = ""
    gpa: str = ""
    show_dates_in_resume: bool = True
    include_in_resume: bool = True
    id: str = ""

    _key_overrides = {"gpa": "cgpa"}


@dataclass
class Skill(_Document):
    name: str = ""
    domain: str = ""
    include_in_resume: bool = True
    id: str = ""


@dataclass
class Project(_Document):
    title: str = ""
    description: str = ""
    technologies: str = ""
    start_date: str = ""
    end_date: str = ""
    project_url: str = ""
    github_url: str = ""
    include_in_resume: bool = True
    id: str = ""


@dataclass
class Certificate(_Document):
    name: str = ""
    issuer: str = ""
    issue_date: str = ""
    expiry_date: str = ""
    credential_url: str = ""
    include_in_resume: bool = True
    id: str = ""


# Profile array fields and their element types
ARRAY_FIELDS: Dict[str, type] = {
    "experiences": Experience,
    "education": Education,
    "skills": Skill,
    "projects": Project,
    "certificates": Certificate,
}


@dataclass
class Profile(_Document):
    """A user's profile, addressed by uid."""

    uid: str = ""
    name: str = ""
    email: str = ""
    title: str = ""
    phone: str = ""
    location: str = ""
    linkedin_url: str = ""
    github_url: str = ""
    portfolio_url: str = ""
    about: str = ""
    experiences: List[Experience] = field(default_factory=list)
    education: List[Education] = field(default_factory=list)
    skills: List[Skill] = field(default_factory=list)
    projects: List[Project] = field(default_factory=list)
    certificates: List[Certificate] = field(default_factory=list)

    _list_types = ARRAY_FIELDS

    def resume_view(self) -> "Profile":
        """Copy of the profile keeping only entries included in the resume."""
        return replace(
            self,
            **{
                name: [item for item in getattr(self, name) if item.include_in_resume is not False]
                for name in ARRAY_FIELDS
            },
        )


@dataclass
class JobPosting(_Document):
    """A recruiter's job posting."""

    uid: str = ""
    recruiter_name: str = ""
    email: str = ""
    phone_number: str = ""
    company_name: str = ""
    job_title: str = ""
    job_description: str = ""
    recruiter_title: str = ""
    recruiter_location: str = ""
    status: str = "pending"
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    id: str = ""
