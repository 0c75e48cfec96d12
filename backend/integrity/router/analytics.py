from __future__ import annotations
from fastapi import APIRouter, Depends

from integrity.container import AppContainer
from integrity.core.session import SessionContext
from integrity.models.schemas import AnalyticsOut, DashboardOut
from integrity.router.deps import get_container, get_session

router = APIRouter(prefix="/sessions/{session_id}", tags=["analytics"])


@router.get("/analytics", response_model=AnalyticsOut)
def portfolio_analytics(
    session: SessionContext = Depends(get_session),
    container: AppContainer = Depends(get_container),
):
    return AnalyticsOut.model_validate(container.analytics.portfolio(session.history.history))


@router.get("/dashboard", response_model=DashboardOut)
def dashboard(
    session: SessionContext = Depends(get_session),
    container: AppContainer = Depends(get_container),
):
    return DashboardOut.model_validate(container.analytics.dashboard(session.history.history))
