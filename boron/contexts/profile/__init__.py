"""
Profile Context

Responsibilities:
- Represents user profiles and their resume sections (experience, education,
  skills, projects, certificates)
- Persists profiles and recruiter job postings in a document store

Owns: Profile and JobPosting data structures, document store contracts
Never: Generates resume content or LaTeX
"""

from boron.contexts.profile.job_postings import (
    InMemoryJobPostingStore,
    JobPostingStore,
    MongoJobPostingStore,
    post_job,
)
from boron.contexts.profile.profile_data_structure import (
    ARRAY_FIELDS,
    Certificate,
    Education,
    Experience,
    JobPosting,
    Profile,
    Project,
    Skill,
)
from boron.contexts.profile.profile_store import (
    InMemoryProfileStore,
    MongoProfileStore,
    ProfileStore,
)

__all__ = [
    # Data structures
    "ARRAY_FIELDS",
    "Certificate",
    "Education",
    "Experience",
    "JobPosting",
    "Profile",
    "Project",
    "Skill",
    # Stores
    "ProfileStore",
    "InMemoryProfileStore",
    "MongoProfileStore",
    "JobPostingStore",
    "InMemoryJobPostingStore",
    "MongoJobPostingStore",
    "post_job",
]
