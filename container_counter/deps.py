from fastapi import HTTPException, Request

from container_counter.models import Container
from container_counter.sessions import SessionEntry, SessionRegistry
from container_counter.store import ContainerStore


def get_store(request: Request) -> ContainerStore:
    return request.app.state.store


def get_sessions(request: Request) -> SessionRegistry:
    return request.app.state.sessions


def get_container_or_404(container_id: str, store: ContainerStore) -> Container:
    container = store.get_container(container_id)
    if not container:
        raise HTTPException(status_code=404, detail="Container not found")
    return container


def get_session_or_404(session_id: str, sessions: SessionRegistry) -> SessionEntry:
    entry = sessions.get(session_id)
    if not entry:
        raise HTTPException(status_code=404, detail="Session not found")
    return entry
