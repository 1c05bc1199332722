# auth service: verifies bearer tokens issued by the identity provider
# sign-up, login, and password storage live with the provider, not here

import logging
from typing import Optional

from jose import JWTError, jwt
from steadylog.config import settings

logger = logging.getLogger(__name__)


def decode_token(token: str) -> Optional[dict]:
    """decode and validate a jwt token, returns payload or none"""
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            audience=settings.JWT_AUDIENCE,
        )
        return payload
    except JWTError as e:
        logger.warning(f"Token decode failed: {e}")
        return None
