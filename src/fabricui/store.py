"""Concrete implementations for session stores.

Sessions live in a single client-local record: the browser's
``localStorage`` entry behind a ``dcc.Store(storage_type="local")``. The
store reads that record, applies upserts and hands a freshly serialized
record back for the browser to keep.
"""

import json
import logging
import uuid
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from pydantic import TypeAdapter, ValidationError

from .exceptions import PersistenceCorrupt
from .models import ChatSession

logger = logging.getLogger(__name__)

STORAGE_KEY = "fabricui-chat-sessions"

_SESSIONS = TypeAdapter(List[ChatSession])


def new_session_id(existing: Iterable[str] = ()) -> str:
    """Generates a random session ID not present in ``existing``."""
    taken = set(existing)
    while True:
        candidate = uuid.uuid4().hex
        if candidate not in taken:
            return candidate


def parse_record(record: Optional[str]) -> List[ChatSession]:
    """Parses a persisted record, raising PersistenceCorrupt on bad data."""
    if not record:
        return []
    if not isinstance(record, (str, bytes)):
        raise PersistenceCorrupt(f"Expected a JSON string, got {type(record).__name__}")
    try:
        return _SESSIONS.validate_json(record)
    except ValidationError as exc:
        raise PersistenceCorrupt(f"Stored sessions are malformed: {exc}") from exc


def serialize_sessions(sessions: List[ChatSession]) -> str:
    """Serializes sessions into the compact JSON kept in the browser."""
    data = [session.model_dump(mode="json", exclude_none=True) for session in sessions]
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False)


class Store(ABC):
    """Interface for loading and saving the ordered collection of sessions."""

    #: Serialized collection as last loaded or saved.
    record: Optional[str] = None

    @abstractmethod
    def load(self) -> List[ChatSession]:
        """Returns every persisted session in order; [] when none are usable."""
        pass

    @abstractmethod
    def save(self, session: ChatSession) -> None:
        """Upserts a session and persists the whole collection."""
        pass

    def get(self, session_id: Optional[str]) -> Optional[ChatSession]:
        """Returns the session with the given ID, if it is persisted."""
        if not session_id:
            return None
        return next((s for s in self.load() if s.id == session_id), None)

    def new_session_id(self) -> str:
        """Generates an ID unique within the persisted collection."""
        return new_session_id(s.id for s in self.load())


class LocalStorage(Store):
    """Sessions kept in the browser's local storage.

    Parameters
    ----------
    record : str, optional
        The raw JSON string currently held by the browser. After ``save``,
        ``record`` holds the value the browser should store.
    """

    def __init__(self, record: Optional[str] = None):
        self.record = record

    def load(self) -> List[ChatSession]:
        try:
            return parse_record(self.record)
        except PersistenceCorrupt as exc:
            logger.warning("Ignoring stored sessions: %s", exc)
            return []

    def save(self, session: ChatSession) -> None:
        sessions = self.load()
        for index, existing in enumerate(sessions):
            if existing.id == session.id:
                sessions[index] = session
                break
        else:
            sessions.append(session)

        # Swap in the complete record in one assignment.
        self.record = serialize_sessions(sessions)
