# connection codes: short tokens a family account shares with a professional
# a code identifies at most one account, regenerating replaces the old one

import logging
import secrets
import string

from fastapi import HTTPException, status
from pymongo.errors import DuplicateKeyError

from steadylog.config import settings
from steadylog.services.db import Database

logger = logging.getLogger(__name__)

CODE_ALPHABET = string.ascii_uppercase + string.digits
MAX_ATTEMPTS = 10


def generate_code(length: int = 6) -> str:
    """random code like '#K3Q9ZD'"""
    return "#" + "".join(secrets.choice(CODE_ALPHABET) for _ in range(length))


async def assign_connection_code(db: Database, user_id: str) -> str:
    """give a family profile a fresh unique code (retry on collision)"""
    for _ in range(MAX_ATTEMPTS):
        code = generate_code(settings.CONNECTION_CODE_LENGTH)
        if await db.profiles.find_one({"connection_code": code}):
            continue
        try:
            await db.profiles.update_one({"_id": user_id}, {"$set": {"connection_code": code}})
        except DuplicateKeyError:
            # claimed by a concurrent request between the check and the write
            logger.warning(f"Connection code collision for user {user_id}, retrying")
            continue
        logger.info(f"Connection code regenerated for user {user_id}")
        return code

    raise HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Failed to generate unique connection code",
    )
