"""
User profile sync from identity provider claims
"""

import logging
from typing import Any, Dict

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from kidmap.models.user import User

logger = logging.getLogger(__name__)

PROFILE_CLAIMS = ("email", "first_name", "last_name", "profile_image_url")


class UserService:

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def upsert(self, user_id: str, claims: Dict[str, Any]) -> User:
        """
        Insert the user or refresh profile fields present in the claims
        """
        profile = {key: claims[key] for key in PROFILE_CLAIMS if claims.get(key) is not None}

        async with self.session_factory() as session:
            user = await session.get(User, user_id)
            if user is None:
                user = User(id=user_id, **profile)
                session.add(user)
                try:
                    await session.commit()
                except IntegrityError:
                    # Another request created the row first
                    await session.rollback()
                    user = await session.get(User, user_id)
                    if user is None:
                        raise
                    return user
                logger.info(f"Created user {user_id}")
            else:
                changed = {k: v for k, v in profile.items() if getattr(user, k) != v}
                if not changed:
                    return user
                for key, value in changed.items():
                    setattr(user, key, value)
                await session.commit()

            await session.refresh(user)
            return user
