"""Unit tests for profile documents and the profile/job posting stores."""

import pytest
from pymongo.errors import ServerSelectionTimeoutError

from boron.contexts.profile.job_postings import (
    InMemoryJobPostingStore,
    MongoJobPostingStore,
    post_job,
)
from boron.contexts.profile.profile_data_structure import (
    Education,
    Experience,
    JobPosting,
    Profile,
    Skill,
)
from boron.contexts.profile.profile_store import InMemoryProfileStore, MongoProfileStore
from boron.utils.errors import (
    InputValidationError,
    NotFoundError,
    ProfileNotFoundError,
    UpstreamServiceError,
)


@pytest.mark.unit
class TestProfileDocuments:
    """Test camelCase document conversion."""

    def test_from_dict_camel_case(self):
        profile = Profile.from_dict(
            {
                "uid": "u1",
                "name": "Ada",
                "linkedinUrl": "linkedin.com/in/ada",
                "experiences": [
                    {"position": "Engineer", "company": "Acme", "startDate": "2023-01", "includeInResume": False}
                ],
                "education": [{"school": "MIT", "cgpa": "3.9", "showDatesInResume": False}],
                "unknownKey": "ignored",
            }
        )

        assert profile.linkedin_url == "linkedin.com/in/ada"
        assert profile.experiences[0].start_date == "2023-01"
        assert profile.experiences[0].include_in_resume is False
        assert profile.education[0].gpa == "3.9"
        assert profile.education[0].show_dates_in_resume is False

    def test_none_strings_load_as_empty(self):
        profile = Profile.from_dict({"uid": "u1", "title": None})
        assert profile.title == ""

    def test_to_dict_uses_stored_keys(self):
        document = Profile(uid="u1", education=[Education(school="MIT", gpa="4.0")]).to_dict()

        assert document["linkedinUrl"] == ""
        assert document["education"][0]["cgpa"] == "4.0"
        assert "gpa" not in document["education"][0]

    def test_resume_view(self):
        profile = Profile(
            uid="u1",
            skills=[Skill(name="Go"), Skill(name="Perl", include_in_resume=False)],
        )
        assert [s.name for s in profile.resume_view().skills] == ["Go"]
        assert len(profile.skills) == 2


@pytest.mark.unit
class TestInMemoryProfileStore:
    """Test the dict-backed profile store."""

    @pytest.mark.asyncio
    async def test_upsert_and_get(self, sample_profile):
        store = InMemoryProfileStore()
        await store.upsert(sample_profile)

        loaded = await store.get("user-1")
        assert loaded == sample_profile
        assert loaded is not sample_profile

    @pytest.mark.asyncio
    async def test_get_missing_raises(self):
        store = InMemoryProfileStore()
        assert await store.find_one("nobody") is None
        with pytest.raises(ProfileNotFoundError):
            await store.get("nobody")

    @pytest.mark.asyncio
    async def test_blank_uid_rejected(self):
        store = InMemoryProfileStore()
        with pytest.raises(InputValidationError):
            await store.upsert(Profile(uid=" "))

    @pytest.mark.asyncio
    async def test_append_creates_profile(self):
        """Appending to a missing profile creates it."""
        store = InMemoryProfileStore()
        profile = await store.append_to_array(
            "u2", "experiences", Experience(position="Engineer", company="Acme")
        )

        assert profile.uid == "u2"
        assert profile.experiences[0].company == "Acme"

    @pytest.mark.asyncio
    async def test_append_dict_element(self, sample_profile):
        store = InMemoryProfileStore()
        await store.upsert(sample_profile)
        profile = await store.append_to_array("user-1", "skills", {"name": "Rust", "domain": "Languages"})

        assert profile.skills[-1].name == "Rust"
        assert len(profile.skills) == len(sample_profile.skills) + 1

    @pytest.mark.asyncio
    async def test_append_unknown_field(self):
        store = InMemoryProfileStore()
        with pytest.raises(InputValidationError):
            await store.append_to_array("u1", "hobbies", {"name": "chess"})


class FailingCollection:
    """Collection stand-in whose driver calls fail."""

    async def find_one(self, *args, **kwargs):
        raise ServerSelectionTimeoutError("no servers")

    async def update_one(self, *args, **kwargs):
        raise ServerSelectionTimeoutError("no servers")


class RecordingCollection:
    """Collection stand-in that records update_one calls."""

    def __init__(self, document=None):
        self.document = document
        self.updates = []

    async def find_one(self, query):
        return self.document

    async def update_one(self, query, update, upsert=False):
        self.updates.append((query, update, upsert))


@pytest.mark.unit
class TestMongoProfileStore:
    """Test the Mongo store against collection stand-ins."""

    @pytest.mark.asyncio
    async def test_driver_errors_become_upstream_errors(self):
        store = MongoProfileStore(FailingCollection())
        with pytest.raises(UpstreamServiceError):
            await store.find_one("u1")

    @pytest.mark.asyncio
    async def test_append_uses_push_with_upsert(self):
        collection = RecordingCollection(document={"uid": "u1", "skills": [{"name": "Go"}]})
        store = MongoProfileStore(collection)

        profile = await store.append_to_array("u1", "skills", Skill(name="Go"))

        query, update, upsert = collection.updates[0]
        assert query == {"uid": "u1"}
        assert update["$push"]["skills"]["name"] == "Go"
        assert update["$setOnInsert"] == {"uid": "u1"}
        assert upsert is True
        assert profile.skills[0].name == "Go"

    @pytest.mark.asyncio
    async def test_from_uri_collections(self):
        """Stores opened from a URI address their own collections (no connection is made)."""
        profiles = MongoProfileStore.from_uri("mongodb://localhost:27017", "boron_test")
        postings = MongoJobPostingStore.from_uri("mongodb://localhost:27017", "boron_test")

        assert profiles.collection.name == "userProfiles"
        assert postings.collection.name == "jobPostings"
        assert profiles.collection.database.name == "boron_test"

        await profiles.collection.database.client.close()
        await postings.collection.database.client.close()


def _posting(**overrides):
    fields = dict(
        uid="recruiter-1",
        recruiter_name="Rita",
        email="rita@example.com",
        company_name="Acme",
        job_title="Backend Engineer",
        job_description="Build APIs",
    )
    fields.update(overrides)
    return JobPosting(**fields)


@pytest.mark.unit
class TestJobPostings:
    """Test recruiter job postings."""

    @pytest.mark.asyncio
    async def test_post_job_copies_recruiter_profile(self):
        profiles = InMemoryProfileStore()
        await profiles.upsert(Profile(uid="recruiter-1", title="Talent Lead", location="Berlin"))
        postings = InMemoryJobPostingStore()

        posting = await post_job(postings, profiles, _posting())

        assert posting.recruiter_title == "Talent Lead"
        assert posting.recruiter_location == "Berlin"
        assert posting.status == "pending"
        assert posting.id
        assert posting.created_at is not None

    @pytest.mark.asyncio
    async def test_post_job_requires_recruiter_profile(self):
        with pytest.raises(ProfileNotFoundError):
            await post_job(InMemoryJobPostingStore(), InMemoryProfileStore(), _posting())

    @pytest.mark.asyncio
    async def test_missing_required_field(self):
        with pytest.raises(InputValidationError) as exc_info:
            await InMemoryJobPostingStore().create(_posting(job_title=""))
        assert exc_info.value.field == "job_title"

    @pytest.mark.asyncio
    async def test_list_hides_completed_newest_first(self):
        store = InMemoryJobPostingStore()
        first = await store.create(_posting(job_title="First"))
        second = await store.create(_posting(job_title="Second"))
        await store.update_status(first.id, "completed")

        visible = await store.list()
        assert [p.job_title for p in visible] == ["Second"]

        completed = await store.list(status="completed")
        assert [p.id for p in completed] == [first.id]

        await store.create(_posting(job_title="Third"))
        titles = [p.job_title for p in await store.list(uid="recruiter-1")]
        assert titles == ["Third", "Second"]
        assert second.id in [p.id for p in await store.list()]

    @pytest.mark.asyncio
    async def test_update_status_validation(self):
        store = InMemoryJobPostingStore()
        posting = await store.create(_posting())

        with pytest.raises(InputValidationError):
            await store.update_status(posting.id, "archived")
        with pytest.raises(NotFoundError):
            await store.update_status("missing", "active")
