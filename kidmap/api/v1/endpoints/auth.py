"""
Authentication endpoints
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from kidmap.api.deps import get_current_user
from kidmap.core.redis import get_redis
from kidmap.core.security import get_bearer_token, get_token_claims, security_manager
from kidmap.models.user import User
from kidmap.schemas.response import MessageResponse
from kidmap.schemas.user import UserResponse

router = APIRouter()


@router.get("/user", response_model=UserResponse)
async def get_current_user_info(
    current_user: User = Depends(get_current_user)
) -> Any:
    """
    Get current user information
    """
    return current_user


@router.post("/logout", response_model=MessageResponse)
async def logout(
    token: str = Depends(get_bearer_token),
    claims: Dict[str, Any] = Depends(get_token_claims),
    redis_client=Depends(get_redis)
) -> Any:
    """
    Revoke the presented token until it expires
    """
    revoked = await security_manager.revoke_token(redis_client, token, claims)
    if not revoked:
        return MessageResponse(message="Logged out; token revocation is unavailable")
    return MessageResponse(message="Successfully logged out")
