"""Unit tests for the ephemeral LaTeX session store."""

import asyncio

import pytest
from omegaconf import OmegaConf

from boron.contexts.rendering.session_store import (
    DEFAULT_TTL_S,
    LatexSessionStore,
    normalize_session_id,
)
from boron.contexts.targeting import config_resolver
from boron.utils.errors import InputValidationError, SessionNotFoundError


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.mark.unit
class TestSessionStore:
    def test_put_and_get(self, clock):
        store = LatexSessionStore(ttl=60, clock=clock)
        store.put("abc", r"\documentclass{article}")

        assert store.get("abc") == r"\documentclass{article}"
        assert "abc" in store
        assert len(store) == 1

    def test_from_config(self, clock):
        """TTL and sweep interval come from the session_store config block."""
        config = OmegaConf.create({"session_store": {"ttl_s": 5, "sweep_interval_s": 2}})
        store = LatexSessionStore.from_config(config, clock=clock)

        assert store.ttl == 5.0
        assert store.sweep_interval == 2.0

        store.put("abc", "x")
        clock.advance(6)
        assert "abc" not in store

    def test_from_default_pipeline_config(self, monkeypatch):
        monkeypatch.setattr(config_resolver, "PIPELINE_CONFIG_PATH", None)
        store = LatexSessionStore.from_config(config_resolver.load_pipeline_config())

        assert store.ttl == 3600.0
        assert store.sweep_interval == 60.0

    def test_from_config_without_block(self):
        store = LatexSessionStore.from_config(OmegaConf.create({}))
        assert store.ttl == DEFAULT_TTL_S

    def test_tex_suffix_is_ignored(self, clock):
        store = LatexSessionStore(ttl=60, clock=clock)
        store.put("resume_42.tex", "body")

        assert store.get("resume_42") == "body"
        assert store.get(" resume_42.tex ") == "body"

    def test_entry_readable_until_ttl(self, clock):
        """An entry exactly ttl seconds old is still live; older is gone."""
        store = LatexSessionStore(ttl=60, clock=clock)
        store.put("abc", "body")

        clock.advance(60)
        assert store.get("abc") == "body"

        clock.advance(0.5)
        with pytest.raises(SessionNotFoundError):
            store.get("abc")
        assert "abc" not in store

    def test_put_resets_expiry(self, clock):
        store = LatexSessionStore(ttl=60, clock=clock)
        store.put("abc", "old")
        clock.advance(50)
        store.put("abc", "new")
        clock.advance(50)

        assert store.get("abc") == "new"

    def test_missing_session(self, clock):
        with pytest.raises(SessionNotFoundError):
            LatexSessionStore(clock=clock).get("nope")

    @pytest.mark.parametrize("session_id", ["", "   ", ".tex"])
    def test_blank_session_id(self, clock, session_id):
        with pytest.raises(InputValidationError):
            LatexSessionStore(clock=clock).put(session_id, "body")

    def test_delete(self, clock):
        store = LatexSessionStore(clock=clock)
        store.put("abc", "body")

        assert store.delete("abc.tex") is True
        assert store.delete("abc") is False
        assert len(store) == 0

    def test_sweep_removes_only_expired(self, clock):
        store = LatexSessionStore(ttl=60, clock=clock)
        store.put("old", "a")
        clock.advance(45)
        store.put("new", "b")
        clock.advance(30)

        assert store.sweep() == 1
        assert len(store) == 1
        assert store.get("new") == "b"


@pytest.mark.unit
class TestSweepTask:
    """Test the background sweep lifecycle."""

    @pytest.mark.asyncio
    async def test_start_and_stop(self, clock):
        store = LatexSessionStore(ttl=60, sweep_interval=0.01, clock=clock)
        store.put("abc", "body")
        clock.advance(120)

        await store.start()
        assert store.running
        await asyncio.sleep(0.05)
        await store.stop()

        assert not store.running
        assert len(store) == 0

    @pytest.mark.asyncio
    async def test_start_is_idempotent(self, clock):
        store = LatexSessionStore(sweep_interval=10, clock=clock)
        await store.start()
        task = store._sweep_task
        await store.start()

        assert store._sweep_task is task
        await store.stop()
        await store.stop()

    @pytest.mark.asyncio
    async def test_async_context_manager(self, clock):
        async with LatexSessionStore(sweep_interval=10, clock=clock) as store:
            assert store.running
        assert not store.running


@pytest.mark.unit
def test_normalize_session_id():
    assert normalize_session_id("a.tex") == "a"
    assert normalize_session_id("a.txt") == "a.txt"
    assert normalize_session_id(None) == ""
