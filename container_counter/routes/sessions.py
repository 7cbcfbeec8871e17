import logging

from fastapi import APIRouter, Depends, HTTPException, WebSocket, WebSocketDisconnect
from starlette.concurrency import run_in_threadpool

from container_counter.deps import get_session_or_404, get_sessions, get_store
from container_counter.schemas import CreateSessionIn, TranscriptIn
from container_counter.serializers import serialize_session
from container_counter.sessions import SessionEntry, SessionRegistry
from container_counter.store import ContainerStore, NotFoundError

logger = logging.getLogger("container_counter")

router = APIRouter()


def _ingest(entry: SessionEntry, text: str) -> dict:
    with entry.lock:
        actions = entry.session.ingest(text)
        return serialize_session(entry, actions)


@router.post("/sessions", status_code=201)
def create_session(
    data: CreateSessionIn | None = None,
    store: ContainerStore = Depends(get_store),
    sessions: SessionRegistry = Depends(get_sessions),
):
    container_id = data.container_id if data else None
    try:
        entry = sessions.create(store, container_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    logger.info(
        "Dictation session created",
        extra={"extra_data": {"session_id": entry.session_id, "container_id": container_id}},
    )
    return serialize_session(entry)


@router.get("/sessions/{session_id}")
def get_session(session_id: str, sessions: SessionRegistry = Depends(get_sessions)):
    entry = get_session_or_404(session_id, sessions)
    with entry.lock:
        return serialize_session(entry)


@router.post("/sessions/{session_id}/transcript")
def ingest_transcript(
    session_id: str,
    data: TranscriptIn,
    sessions: SessionRegistry = Depends(get_sessions),
):
    entry = get_session_or_404(session_id, sessions)
    return _ingest(entry, data.text)


@router.post("/sessions/{session_id}/reset")
def reset_session(session_id: str, sessions: SessionRegistry = Depends(get_sessions)):
    entry = get_session_or_404(session_id, sessions)
    with entry.lock:
        entry.session.reset()
        return serialize_session(entry)


@router.delete("/sessions/{session_id}", status_code=204)
def delete_session(session_id: str, sessions: SessionRegistry = Depends(get_sessions)):
    get_session_or_404(session_id, sessions)
    sessions.remove(session_id)
    logger.info("Dictation session closed", extra={"extra_data": {"session_id": session_id}})
    return None


@router.websocket("/sessions/{session_id}/ws")
async def session_stream(ws: WebSocket, session_id: str):
    entry = ws.app.state.sessions.get(session_id)
    if entry is None:
        await ws.close(code=4404)
        return

    await ws.accept()
    try:
        while True:
            text = await ws.receive_text()
            await ws.send_json(await run_in_threadpool(_ingest, entry, text))
    except WebSocketDisconnect:
        # The stream owns its session; stored lines stay in the container
        ws.app.state.sessions.remove(session_id)
        logger.info("Transcript stream closed", extra={"extra_data": {"session_id": session_id}})
