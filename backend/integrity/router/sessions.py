from __future__ import annotations
from fastapi import APIRouter, Depends, HTTPException, Response, status

from integrity.container import AppContainer
from integrity.core.exceptions import SessionNotFound
from integrity.models.schemas import SessionCreated
from integrity.router.deps import get_container

router = APIRouter(prefix="/sessions", tags=["sessions"])


@router.post("", response_model=SessionCreated, status_code=status.HTTP_201_CREATED)
def create_session(container: AppContainer = Depends(get_container)):
    session = container.sessions.create()
    return SessionCreated(session_id=session.session_id, created_at=session.created_at)


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def discard_session(session_id: str, container: AppContainer = Depends(get_container)):
    try:
        container.sessions.discard(session_id)
    except SessionNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
