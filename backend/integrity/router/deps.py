from __future__ import annotations
from fastapi import HTTPException, Request, status

from integrity.container import AppContainer
from integrity.core.exceptions import SessionNotFound
from integrity.core.session import SessionContext


def get_container(request: Request) -> AppContainer:
    container = getattr(request.app.state, "container", None)
    if container is None:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Service not ready")
    return container


def get_session(session_id: str, request: Request) -> SessionContext:
    """FastAPI dependency resolving the `{session_id}` path parameter."""
    try:
        return get_container(request).sessions.get(session_id)
    except SessionNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
