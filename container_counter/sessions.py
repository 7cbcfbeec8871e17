import secrets
import threading
from dataclasses import dataclass, field

from container_counter.dictation.session import DEFAULT_CONTAINER_LABEL, StreamingSession
from container_counter.store import ContainerStore, NotFoundError


class StoreBackend:
    """Forwards dictation session actions to a ContainerStore."""

    def __init__(self, store: ContainerStore):
        self.store = store

    def create_container(self, label: str) -> str:
        return self.store.create_container(label).id

    def add_line(self, container_ref: str, item_label: str, quantity: int | float) -> None:
        self.store.add_line(container_ref, item_label, quantity)


@dataclass
class SessionEntry:
    session_id: str
    session: StreamingSession
    # Serializes drains of one session across worker threads
    lock: threading.Lock = field(default_factory=threading.Lock)


class SessionRegistry:
    """Live dictation sessions of one application, by id."""

    def __init__(self):
        self._entries: dict[str, SessionEntry] = {}
        self._lock = threading.Lock()

    def create(self, store: ContainerStore, container_id: str | None = None) -> SessionEntry:
        lines = []
        label = DEFAULT_CONTAINER_LABEL
        if container_id is not None:
            container = store.get_container(container_id)
            if container is None:
                raise NotFoundError("Container not found")
            lines = container.lines
            label = container.label

        session = StreamingSession(
            backend=StoreBackend(store),
            container_ref=container_id,
            container_label=label,
            lines=lines,
        )
        entry = SessionEntry(session_id=secrets.token_urlsafe(12), session=session)
        with self._lock:
            self._entries[entry.session_id] = entry
        return entry

    def get(self, session_id: str) -> SessionEntry | None:
        with self._lock:
            return self._entries.get(session_id)

    def remove(self, session_id: str) -> None:
        with self._lock:
            self._entries.pop(session_id, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
