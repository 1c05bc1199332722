# profile router: the family account's connection code

from fastapi import APIRouter, Depends, status

from steadylog.models.patient import ConnectionCodeResponse
from steadylog.models.session import SessionContext
from steadylog.services.connection_codes import assign_connection_code
from steadylog.services.db import Database, get_db
from steadylog.dependencies import require_role

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("/connection-code", response_model=ConnectionCodeResponse)
async def get_connection_code(
    session: SessionContext = Depends(require_role("family")),
    db: Database = Depends(get_db),
):
    """current code, issuing one if the account has none yet"""
    code = session.connection_code or await assign_connection_code(db, session.user_id)
    return ConnectionCodeResponse(connectionCode=code)


@router.post("/connection-code", response_model=ConnectionCodeResponse, status_code=status.HTTP_201_CREATED)
async def regenerate_connection_code(
    session: SessionContext = Depends(require_role("family")),
    db: Database = Depends(get_db),
):
    """replace the code; the old one stops resolving. existing links are kept"""
    code = await assign_connection_code(db, session.user_id)
    return ConnectionCodeResponse(connectionCode=code)
