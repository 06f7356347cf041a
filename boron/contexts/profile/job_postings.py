"""
Recruiter job postings.

A recruiter posts a job from their own profile: the posting records the
recruiter's contact fields and copies the poster's profile title and
location onto the posting. Listings hide completed postings by default and
return newest first.
"""

import copy
import uuid
from abc import ABC, abstractmethod
from dataclasses import replace
from typing import Any, Dict, List, Optional

from boron.contexts.profile.logger import log_store_write
from boron.contexts.profile.profile_data_structure import JobPosting
from boron.contexts.profile.profile_store import (
    JOB_POSTINGS_COLLECTION,
    ProfileStore,
    get_database,
)
from boron.utils.errors import InputValidationError, NotFoundError, UpstreamServiceError
from boron.utils.timestamp import utc_now

JOB_STATUSES = ("pending", "active", "completed", "closed")
DEFAULT_HIDDEN_STATUS = "completed"

REQUIRED_POSTING_FIELDS = (
    "recruiter_name",
    "email",
    "company_name",
    "job_title",
    "job_description",
)


def _validate_posting(posting: JobPosting) -> None:
    if not posting.uid or not posting.uid.strip():
        raise InputValidationError("User id is required", field="uid")
    for name in REQUIRED_POSTING_FIELDS:
        value = getattr(posting, name)
        if not value or not str(value).strip():
            raise InputValidationError("Job posting field is required", field=name)
    if posting.status not in JOB_STATUSES:
        raise InputValidationError(
            f"Unknown status '{posting.status}'. Expected one of: {', '.join(JOB_STATUSES)}",
            field="status",
        )


def _visible(posting: JobPosting, uid: Optional[str], status: Optional[str]) -> bool:
    if uid is not None and posting.uid != uid:
        return False
    if status is not None:
        return posting.status == status
    return posting.status != DEFAULT_HIDDEN_STATUS


def _newest_first(postings: List[JobPosting]) -> List[JobPosting]:
    return sorted(
        postings,
        key=lambda p: p.created_at.timestamp() if p.created_at else 0.0,
        reverse=True,
    )


class JobPostingStore(ABC):
    """Async persistence contract for job postings."""

    @abstractmethod
    async def create(self, posting: JobPosting) -> JobPosting:
        """Validate, timestamp and store a new posting."""

    @abstractmethod
    async def list(self, uid: Optional[str] = None, status: Optional[str] = None) -> List[JobPosting]:
        """
        List postings, newest first.

        Without a status filter, completed postings are hidden.
        """

    @abstractmethod
    async def update_status(self, posting_id: str, status: str) -> JobPosting:
        """Set a posting's status and bump updated_at."""


class InMemoryJobPostingStore(JobPostingStore):
    """List-backed job posting store."""

    def __init__(self):
        self._postings: Dict[str, JobPosting] = {}

    async def create(self, posting: JobPosting) -> JobPosting:
        _validate_posting(posting)
        created = utc_now()
        posting = replace(
            posting, id=posting.id or uuid.uuid4().hex, created_at=created, updated_at=created
        )
        self._postings[posting.id] = posting
        log_store_write("create job posting", posting.uid)
        return copy.deepcopy(posting)

    async def list(self, uid: Optional[str] = None, status: Optional[str] = None) -> List[JobPosting]:
        # Ties on created_at resolve newest-inserted first
        matches = [
            copy.deepcopy(p) for p in reversed(list(self._postings.values())) if _visible(p, uid, status)
        ]
        return _newest_first(matches)

    async def update_status(self, posting_id: str, status: str) -> JobPosting:
        if status not in JOB_STATUSES:
            raise InputValidationError(f"Unknown status '{status}'", field="status")
        posting = self._postings.get(posting_id)
        if posting is None:
            raise NotFoundError("Job posting", posting_id)
        posting = replace(posting, status=status, updated_at=utc_now())
        self._postings[posting_id] = posting
        log_store_write(f"status -> {status}", posting.uid)
        return copy.deepcopy(posting)


class MongoJobPostingStore(JobPostingStore):
    """Job posting store over the jobPostings collection."""

    def __init__(self, collection: Any):
        self.collection = collection

    @classmethod
    def from_uri(
        cls, uri: str = None, database: str = None, collection: str = JOB_POSTINGS_COLLECTION
    ) -> "MongoJobPostingStore":
        return cls(get_database(uri, database)[collection])

    async def create(self, posting: JobPosting) -> JobPosting:
        _validate_posting(posting)
        created = utc_now()
        posting = replace(
            posting, id=posting.id or uuid.uuid4().hex, created_at=created, updated_at=created
        )
        await self._call("insert_one", posting.to_dict())
        log_store_write("create job posting", posting.uid)
        return posting

    async def list(self, uid: Optional[str] = None, status: Optional[str] = None) -> List[JobPosting]:
        query: Dict[str, Any] = {}
        if uid is not None:
            query["uid"] = uid
        query["status"] = status if status is not None else {"$ne": DEFAULT_HIDDEN_STATUS}

        from pymongo.errors import PyMongoError

        cursor = self.collection.find(query).sort("createdAt", -1)
        try:
            documents = await cursor.to_list(length=None)
        except PyMongoError as e:
            raise UpstreamServiceError(f"Document store find failed: {e}", service="mongodb") from e
        return [JobPosting.from_dict(document) for document in documents]

    async def update_status(self, posting_id: str, status: str) -> JobPosting:
        if status not in JOB_STATUSES:
            raise InputValidationError(f"Unknown status '{status}'", field="status")
        await self._call(
            "update_one", {"id": posting_id}, {"$set": {"status": status, "updatedAt": utc_now()}}
        )
        document = await self._call("find_one", {"id": posting_id})
        if document is None:
            raise NotFoundError("Job posting", posting_id)
        return JobPosting.from_dict(document)

    async def _call(self, method: str, *args, **kwargs):
        from pymongo.errors import PyMongoError

        try:
            return await getattr(self.collection, method)(*args, **kwargs)
        except PyMongoError as e:
            raise UpstreamServiceError(f"Document store {method} failed: {e}", service="mongodb") from e


async def post_job(
    postings: JobPostingStore, profiles: ProfileStore, posting: JobPosting
) -> JobPosting:
    """
    Create a posting on behalf of a recruiter.

    The recruiter's profile must exist; its title and location are copied
    onto the posting.

    Raises:
        InputValidationError: Missing uid or required posting fields
        ProfileNotFoundError: The recruiter has no profile
    """
    _validate_posting(posting)
    recruiter = await profiles.get(posting.uid)
    posting = replace(
        posting,
        recruiter_title=recruiter.title,
        recruiter_location=recruiter.location,
    )
    return await postings.create(posting)
