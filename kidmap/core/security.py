"""
Bearer token verification for identities issued by the identity provider
"""

import hashlib
import logging
import time
from typing import Any, Dict, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from kidmap.config import settings
from kidmap.core.exceptions import AuthenticationError
from kidmap.core.redis import get_redis
from kidmap.models.base import ID_LENGTH

logger = logging.getLogger(__name__)

# Missing credentials are reported by get_token_claims as a 401
bearer_scheme = HTTPBearer(auto_error=False)


class SecurityManager:
    """
    Verification and revocation of identity provider tokens
    """

    @staticmethod
    def revocation_key(token: str, payload: Optional[Dict[str, Any]] = None) -> str:
        jti = (payload or {}).get("jti")
        if jti:
            return f"revoked:{jti}"
        return "revoked:" + hashlib.sha256(token.encode("utf-8")).hexdigest()

    @staticmethod
    async def is_token_revoked(redis_client, token: str, payload: Dict[str, Any]) -> bool:
        """
        Check the revocation list. Fails open when Redis is unavailable.
        """
        if redis_client is None:
            return False
        try:
            value = await redis_client.get(SecurityManager.revocation_key(token, payload))
            return value is not None
        except Exception as e:
            logger.error(f"Error checking token revocation: {e}")
            return False

    @staticmethod
    async def revoke_token(redis_client, token: str, payload: Dict[str, Any]) -> bool:
        """
        Revoke a token until it expires. Returns False if it could not be stored.
        """
        if redis_client is None:
            logger.warning("Token revocation skipped: Redis is not configured")
            return False

        expires_at = payload.get("exp")
        ttl = max(1, int(expires_at - time.time())) if expires_at else 3600
        try:
            await redis_client.setex(SecurityManager.revocation_key(token, payload), ttl, "1")
            return True
        except Exception as e:
            logger.error(f"Error revoking token: {e}")
            return False

    @staticmethod
    def decode_token(token: str) -> Dict[str, Any]:
        """
        Verify signature, expiry and the optional audience/issuer
        """
        options = {"verify_aud": settings.JWT_AUDIENCE is not None}
        try:
            return jwt.decode(
                token,
                settings.JWT_SECRET_KEY,
                algorithms=[settings.JWT_ALGORITHM],
                audience=settings.JWT_AUDIENCE,
                issuer=settings.JWT_ISSUER,
                options=options
            )
        except JWTError as e:
            logger.info(f"JWT decode error: {e}")
            raise AuthenticationError("Could not validate credentials")


# Create global security manager
security_manager = SecurityManager()


async def get_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)
) -> str:
    if credentials is None or not credentials.credentials:
        raise AuthenticationError()
    return credentials.credentials


async def get_token_claims(
    token: str = Depends(get_bearer_token),
    redis_client=Depends(get_redis)
) -> Dict[str, Any]:
    """
    Verified claims of the bearer token on the current request
    """
    payload = security_manager.decode_token(token)

    subject = payload.get("sub")
    if not subject or len(str(subject)) > ID_LENGTH:
        raise AuthenticationError("Could not validate credentials")

    if await security_manager.is_token_revoked(redis_client, token, payload):
        raise AuthenticationError("Token has been revoked")

    return payload


async def get_current_user_id(claims: Dict[str, Any] = Depends(get_token_claims)) -> str:
    """
    Stable id of the authenticated user
    """
    return str(claims["sub"])

