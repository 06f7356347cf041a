"""
Profile document stores.

ProfileStore is the persistence contract for user profiles: whole-document
upsert, keyed lookup, and single-element append to one of the profile's
array fields. No locking is done; concurrent writers get last-write-wins.

Two implementations:
- InMemoryProfileStore: dict-backed, for tests and local runs
- MongoProfileStore: pymongo async client over the userProfiles collection
"""

import copy
import os
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from boron.contexts.profile.logger import log_store_write
from boron.contexts.profile.profile_data_structure import ARRAY_FIELDS, Profile
from boron.utils.errors import InputValidationError, ProfileNotFoundError, UpstreamServiceError

load_dotenv()
MONGODB_URI = os.getenv("MONGODB_URI", "mongodb://localhost:27017")
MONGODB_DATABASE = os.getenv("MONGODB_DATABASE", "boron_app")

PROFILES_COLLECTION = "userProfiles"
JOB_POSTINGS_COLLECTION = "jobPostings"


def _require_uid(uid: Optional[str]) -> str:
    if not uid or not str(uid).strip():
        raise InputValidationError("User id is required", field="uid")
    return str(uid)


def _element_to_document(field_name: str, element: Any) -> Dict[str, Any]:
    if field_name not in ARRAY_FIELDS:
        raise InputValidationError(
            f"Unknown profile array field '{field_name}'. "
            f"Expected one of: {', '.join(ARRAY_FIELDS)}",
            field="field",
        )
    element_type = ARRAY_FIELDS[field_name]
    if isinstance(element, element_type):
        return element.to_dict()
    if isinstance(element, dict):
        # Round-trip through the dataclass to drop unknown keys and fill defaults
        return element_type.from_dict(element).to_dict()
    raise InputValidationError(
        f"Expected {element_type.__name__} or dict for '{field_name}', "
        f"got {type(element).__name__}",
        field=field_name,
    )


class ProfileStore(ABC):
    """Async persistence contract for profiles."""

    @abstractmethod
    async def find_one(self, uid: str) -> Optional[Profile]:
        """Return the profile for uid, or None."""

    @abstractmethod
    async def upsert(self, profile: Profile) -> Profile:
        """Create or replace the whole profile document."""

    @abstractmethod
    async def append_to_array(self, uid: str, field_name: str, element: Any) -> Profile:
        """Append one element to an array field, creating the profile if needed."""

    async def get(self, uid: str) -> Profile:
        """
        Return the profile for uid.

        Raises:
            InputValidationError: uid is blank
            ProfileNotFoundError: no profile stored for uid
        """
        uid = _require_uid(uid)
        profile = await self.find_one(uid)
        if profile is None:
            raise ProfileNotFoundError(uid)
        return profile


class InMemoryProfileStore(ProfileStore):
    """Dict-backed profile store. Documents are copied in and out."""

    def __init__(self):
        self._documents: Dict[str, Dict[str, Any]] = {}

    async def find_one(self, uid: str) -> Optional[Profile]:
        document = self._documents.get(_require_uid(uid))
        return Profile.from_dict(copy.deepcopy(document)) if document is not None else None

    async def upsert(self, profile: Profile) -> Profile:
        uid = _require_uid(profile.uid)
        self._documents[uid] = profile.to_dict()
        log_store_write("upsert", uid)
        return Profile.from_dict(copy.deepcopy(self._documents[uid]))

    async def append_to_array(self, uid: str, field_name: str, element: Any) -> Profile:
        uid = _require_uid(uid)
        element_document = _element_to_document(field_name, element)
        document = self._documents.setdefault(uid, Profile(uid=uid).to_dict())
        document.setdefault(field_name, []).append(element_document)
        log_store_write(f"append {field_name}", uid)
        return Profile.from_dict(copy.deepcopy(document))


class MongoProfileStore(ProfileStore):
    """
    Profile store over a MongoDB collection.

    Takes any collection object exposing the async find_one/update_one API of
    pymongo's AsyncCollection, so tests can inject a fake.
    """

    def __init__(self, collection: Any):
        self.collection = collection

    @classmethod
    def from_uri(
        cls, uri: str = None, database: str = None, collection: str = PROFILES_COLLECTION
    ) -> "MongoProfileStore":
        return cls(get_database(uri, database)[collection])

    async def find_one(self, uid: str) -> Optional[Profile]:
        uid = _require_uid(uid)
        document = await self._call("find_one", {"uid": uid})
        return Profile.from_dict(document) if document is not None else None

    async def upsert(self, profile: Profile) -> Profile:
        uid = _require_uid(profile.uid)
        await self._call("update_one", {"uid": uid}, {"$set": profile.to_dict()}, upsert=True)
        log_store_write("upsert", uid)
        return profile

    async def append_to_array(self, uid: str, field_name: str, element: Any) -> Profile:
        uid = _require_uid(uid)
        element_document = _element_to_document(field_name, element)
        await self._call(
            "update_one",
            {"uid": uid},
            {"$push": {field_name: element_document}, "$setOnInsert": {"uid": uid}},
            upsert=True,
        )
        log_store_write(f"append {field_name}", uid)
        return await self.get(uid)

    async def _call(self, method: str, *args, **kwargs):
        # pymongo raises PyMongoError subclasses; anything from the driver is upstream
        try:
            from pymongo.errors import PyMongoError
        except ImportError:
            raise ImportError("pymongo package required. Install with: pip install pymongo")

        try:
            return await getattr(self.collection, method)(*args, **kwargs)
        except PyMongoError as e:
            raise UpstreamServiceError(f"Document store {method} failed: {e}", service="mongodb") from e


def get_database(uri: str = None, database: str = None):
    """
    Open the application database with pymongo's async client.

    Args:
        uri: Connection string (default: MONGODB_URI env var)
        database: Database name (default: MONGODB_DATABASE env var, then boron_app)
    """
    # Lazy import - the driver is only needed for the Mongo-backed stores
    try:
        from pymongo import AsyncMongoClient
    except ImportError:
        raise ImportError("pymongo>=4.13 required. Install with: pip install pymongo")

    client = AsyncMongoClient(uri or MONGODB_URI)
    return client[database or MONGODB_DATABASE]
