# fastapi dependency injection
# resolves the caller into an explicit SessionContext and guards roles

import logging
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from steadylog.models.session import SessionContext
from steadylog.services.auth_service import decode_token
from steadylog.services.db import Database, get_db

logger = logging.getLogger(__name__)

security = HTTPBearer()


async def get_session(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Database = Depends(get_db),
) -> SessionContext:
    """verify the bearer token and load the caller's profile"""
    payload = decode_token(credentials.credentials)

    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )

    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token missing subject",
        )

    profile = await db.profiles.find_one({"_id": user_id})
    if not profile:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Profile not found",
        )

    role = profile.get("role")
    if role not in ("family", "professional"):
        logger.warning(f"Profile {user_id} has unknown role {role!r}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account role not recognised",
        )

    return SessionContext(
        userId=user_id,
        role=role,
        name=profile.get("name", ""),
        email=profile.get("email", ""),
        connectionCode=profile.get("connection_code"),
    )


def require_role(role: str):
    """factory for role-based access control dependency"""

    async def role_checker(session: SessionContext = Depends(get_session)) -> SessionContext:
        if session.role != role:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied. Required role: {role}",
            )
        return session

    return role_checker
