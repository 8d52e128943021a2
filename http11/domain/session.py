"""Server-side sessions keyed by the JSESSIONID cookie."""

import threading
import uuid
from typing import Any, Optional

from http11.domain.request_context import get_logger

SESSION_LOGGER = get_logger("domain.session")


def new_session_id() -> str:
    """Generate a collision-resistant session identifier (uuid4)."""
    return str(uuid.uuid4())


class Session:
    """Attributes attached to one client between requests."""

    def __init__(self, session_id: Optional[str] = None) -> None:
        self._id = session_id or new_session_id()
        self._lock = threading.Lock()
        self._attributes: dict[str, Any] = {}

    @property
    def id(self) -> str:  # pylint: disable=invalid-name
        return self._id

    def get_attribute(self, name: str) -> Any:
        with self._lock:
            return self._attributes.get(name)

    def set_attribute(self, name: str, value: Any) -> None:
        with self._lock:
            self._attributes[name] = value

    def remove_attribute(self, name: str) -> None:
        with self._lock:
            self._attributes.pop(name, None)

    @property
    def attributes(self) -> dict[str, Any]:
        """Snapshot of the current attributes."""
        with self._lock:
            return dict(self._attributes)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Session):
            return NotImplemented
        return self._id == other.id and self.attributes == other.attributes

    def __hash__(self) -> int:
        return hash(self._id)

    def __repr__(self) -> str:
        return f"Session(id={self._id!r}, attributes={sorted(self.attributes)!r})"


class SessionStore:
    """Thread-safe registry of live sessions.

    Sessions never expire on their own; ``remove`` is the only way out.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._sessions: dict[str, Session] = {}

    def create(self) -> str:
        """Register a new empty session and return its id."""
        session = Session()
        with self._lock:
            while session.id in self._sessions:
                session = Session()
            self._sessions[session.id] = session
        SESSION_LOGGER.debug(
            "Session created",
            extra={"event": "session_created", "session_id": session.id},
        )
        return session.id

    def add(self, session: Session) -> None:
        """Register a session under its id, replacing any previous holder."""
        with self._lock:
            self._sessions[session.id] = session
        SESSION_LOGGER.debug(
            "Session added",
            extra={"event": "session_added", "session_id": session.id},
        )

    def find(self, session_id: Optional[str]) -> Optional[Session]:
        """Return the session for the id, or None when it is unknown."""
        if not session_id:
            return None
        with self._lock:
            return self._sessions.get(session_id)

    def remove(self, session_id: str) -> Optional[Session]:
        """Forget a session and return it, if it existed."""
        with self._lock:
            return self._sessions.pop(session_id, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        with self._lock:
            return session_id in self._sessions
