# session router: identity context and the role-specific home view

from fastapi import APIRouter, Depends

from steadylog.models.session import SessionContext, ViewModel
from steadylog.services.db import Database, get_db
from steadylog.services.view_model import build_view_model
from steadylog.dependencies import get_session

router = APIRouter(prefix="/session", tags=["session"])


@router.get("/me", response_model=SessionContext)
async def get_me(session: SessionContext = Depends(get_session)):
    """the caller's identity as the api sees it"""
    return session


@router.get("/view", response_model=ViewModel)
async def get_view(
    session: SessionContext = Depends(get_session),
    db: Database = Depends(get_db),
):
    """home screen view model: family or professional variant"""
    return await build_view_model(session, db)
