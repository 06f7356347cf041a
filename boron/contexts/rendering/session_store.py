"""
Ephemeral LaTeX session store.

Holds assembled LaTeX documents under a session key for a limited time so a
client can fetch the markup after a chat-driven generation. Entries expire
after `ttl` seconds; expired entries are never returned, and a background
sweep (started with start(), stopped with stop()) deletes them every
`sweep_interval` seconds. Between sweeps the store can grow without bound.

The store is a plain dict touched only from the event loop thread, so no
lock is used. Instances are injected where needed; there is no module-level
store.
"""

import asyncio
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from boron.contexts.rendering.logger import log_session_stored, log_sweep
from boron.utils.errors import InputValidationError, SessionNotFoundError

DEFAULT_TTL_S = 3600.0
DEFAULT_SWEEP_INTERVAL_S = 60.0


@dataclass
class SessionEntry:
    content: str
    created_at: float


def normalize_session_id(session_id: str) -> str:
    """Session ids may arrive as file names; a trailing .tex is dropped."""
    session_id = (session_id or "").strip()
    if session_id.endswith(".tex"):
        session_id = session_id[: -len(".tex")]
    return session_id


class LatexSessionStore:
    """
    TTL cache of LaTeX documents keyed by session id.

    Args:
        ttl: Seconds an entry stays readable
        sweep_interval: Seconds between background sweeps
        clock: Monotonic time source (injectable for tests)
    """

    def __init__(
        self,
        ttl: float = DEFAULT_TTL_S,
        sweep_interval: float = DEFAULT_SWEEP_INTERVAL_S,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl = ttl
        self.sweep_interval = sweep_interval
        self._clock = clock
        self._entries: Dict[str, SessionEntry] = {}
        self._sweep_task: Optional[asyncio.Task] = None

    @classmethod
    def from_config(
        cls, config, clock: Callable[[], float] = time.monotonic
    ) -> "LatexSessionStore":
        """
        Build a store from the session_store block (ttl_s, sweep_interval_s)
        of the pipeline config. Missing keys take the module defaults.
        """
        settings = config.get("session_store") or {}
        return cls(
            ttl=float(settings.get("ttl_s", DEFAULT_TTL_S)),
            sweep_interval=float(settings.get("sweep_interval_s", DEFAULT_SWEEP_INTERVAL_S)),
            clock=clock,
        )

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, session_id: str) -> bool:
        return self._live_entry(normalize_session_id(session_id)) is not None

    def _is_expired(self, entry: SessionEntry, now: float) -> bool:
        return now - entry.created_at > self.ttl

    def _live_entry(self, session_id: str) -> Optional[SessionEntry]:
        entry = self._entries.get(session_id)
        if entry is None or self._is_expired(entry, self._clock()):
            return None
        return entry

    def put(self, session_id: str, content: str) -> None:
        """Store content under session_id, replacing and re-timing any existing entry."""
        session_id = normalize_session_id(session_id)
        if not session_id:
            raise InputValidationError("Session id is required", field="session_id")
        self._entries[session_id] = SessionEntry(content=content, created_at=self._clock())
        log_session_stored(session_id, len(content))

    def get(self, session_id: str) -> str:
        """
        Return the content stored under session_id.

        Raises:
            SessionNotFoundError: No entry, or the entry has expired
        """
        session_id = normalize_session_id(session_id)
        entry = self._live_entry(session_id)
        if entry is None:
            raise SessionNotFoundError(session_id)
        return entry.content

    def delete(self, session_id: str) -> bool:
        """Remove an entry. Returns whether one was present."""
        return self._entries.pop(normalize_session_id(session_id), None) is not None

    def sweep(self) -> int:
        """Delete expired entries. Returns how many were removed."""
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if self._is_expired(entry, now)]
        for key in expired:
            del self._entries[key]
        log_sweep(len(expired), len(self._entries))
        return len(expired)

    async def _sweep_forever(self) -> None:
        while True:
            await asyncio.sleep(self.sweep_interval)
            self.sweep()

    async def start(self) -> None:
        """Start the periodic sweep on the running event loop. Idempotent."""
        if self._sweep_task is None or self._sweep_task.done():
            self._sweep_task = asyncio.get_running_loop().create_task(self._sweep_forever())

    async def stop(self) -> None:
        """Stop the periodic sweep and wait for it to finish."""
        task, self._sweep_task = self._sweep_task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    @property
    def running(self) -> bool:
        return self._sweep_task is not None and not self._sweep_task.done()

    async def __aenter__(self) -> "LatexSessionStore":
        await self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.stop()
