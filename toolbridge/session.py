"""Per-user conversation state with a bounded LRU + idle-TTL store."""
import asyncio
import logging
import time
from collections import OrderedDict
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, AsyncIterator, Dict, List, Optional, Union

logger = logging.getLogger(__name__)

TOOL_RESULT_PREFIX = "Tool result: "


class Role(str, Enum):
    USER = "user"
    MODEL = "model"


@dataclass(frozen=True)
class TextContent:
    text: str


@dataclass(frozen=True)
class ToolCallContent:
    """The model asking for a named tool to be run with these arguments."""
    name: str
    args: Dict[str, Any]
    call_id: str = ""


@dataclass(frozen=True)
class ToolResultContent:
    """Result text of a tool run, replayed to the model as a user-role turn."""
    name: str
    text: str
    call_id: str = ""

    @property
    def display_text(self) -> str:
        return TOOL_RESULT_PREFIX + self.text


Content = Union[TextContent, ToolCallContent, ToolResultContent]


@dataclass(frozen=True)
class Message:
    role: Role
    content: Content

    @classmethod
    def user_text(cls, text: str) -> "Message":
        return cls(Role.USER, TextContent(text))

    @classmethod
    def model_text(cls, text: str) -> "Message":
        return cls(Role.MODEL, TextContent(text))

    @classmethod
    def tool_call(cls, name: str, args: Dict[str, Any], call_id: str = "") -> "Message":
        return cls(Role.MODEL, ToolCallContent(name, dict(args), call_id))

    @classmethod
    def tool_result(cls, name: str, text: str, call_id: str = "") -> "Message":
        return cls(Role.USER, ToolResultContent(name, text, call_id))


class Session:
    """One user's ordered conversation history."""

    def __init__(self, user_id: str):
        self.user_id = user_id
        self.turns: List[Message] = []
        self.lock = asyncio.Lock()
        self._holders = 0

        now = time.monotonic()
        self.created_time = now
        self.last_activity_time = now

    def append(self, message: Message):
        self.turns.append(message)
        self.touch()

    def touch(self):
        """Update last activity timestamp."""
        self.last_activity_time = time.monotonic()

    def idle_seconds(self) -> float:
        """Seconds since last activity."""
        return time.monotonic() - self.last_activity_time

    @property
    def in_use(self) -> bool:
        return self._holders > 0 or self.lock.locked()


class SessionStore:
    """Sessions keyed by user id.

    Capacity-bounded (least recently used first) and idle sessions expire
    after ``ttl_seconds``. Sessions with a turn in flight are never evicted.
    """

    def __init__(self, max_sessions: int = 1000, ttl_seconds: float = 3600.0):
        self.max_sessions = max_sessions
        self.ttl_seconds = ttl_seconds
        self._sessions: "OrderedDict[str, Session]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, user_id: str) -> bool:
        return user_id in self._sessions

    def get(self, user_id: str) -> Optional[Session]:
        return self._sessions.get(user_id)

    def get_or_create(self, user_id: str) -> Session:
        self._evict_expired()
        session = self._sessions.get(user_id)
        if session is None:
            session = Session(user_id)
            self._sessions[user_id] = session
            logger.info(f"[{user_id}] New session ({len(self._sessions)} active)")
            self._evict_overflow(keep=user_id)
        self._sessions.move_to_end(user_id)
        session.touch()
        return session

    @asynccontextmanager
    async def acquire(self, user_id: str) -> AsyncIterator[Session]:
        """Hold the user's session exclusively for the duration of one turn."""
        session = self.get_or_create(user_id)
        session._holders += 1
        try:
            async with session.lock:
                yield session
        finally:
            session._holders -= 1
            session.touch()

    def _evict_expired(self):
        if self.ttl_seconds <= 0:
            return
        expired = [
            uid for uid, s in self._sessions.items()
            if not s.in_use and s.idle_seconds() > self.ttl_seconds
        ]
        for uid in expired:
            del self._sessions[uid]
            logger.info(f"[{uid}] Session expired after {self.ttl_seconds:.0f}s idle")

    def _evict_overflow(self, keep: str = ""):
        while len(self._sessions) > self.max_sessions:
            victim = next(
                (uid for uid, s in self._sessions.items() if uid != keep and not s.in_use), None)
            if victim is None:
                logger.warning(f"Session store over capacity ({len(self._sessions)}), all sessions busy")
                return
            del self._sessions[victim]
            logger.info(f"[{victim}] Session evicted (LRU, cap={self.max_sessions})")
