"""
Per-user favorite and visited venue relations
"""

import asyncio
import logging
from typing import Generic, List, Optional, Type, TypeVar

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from kidmap.domain.categories import VenueCategory
from kidmap.models.relation import UserFavorite, UserVisited
from kidmap.schemas.relation import VenueSnapshot

logger = logging.getLogger(__name__)

RelationT = TypeVar("RelationT", UserFavorite, UserVisited)


class RelationStore(Generic[RelationT]):
    """
    Set of (user, venue) pairs for one relation kind.

    Every pair is either absent or present. ``add`` and ``remove`` are
    idempotent; the table's unique constraint on (user_id, venue_id) keeps
    concurrent adds from producing duplicate rows. Each call uses its own
    session, so independent lookups may run concurrently.
    """

    kind = "relation"

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        model: Type[RelationT],
        timestamp_column: str
    ):
        self.session_factory = session_factory
        self.model = model
        self.timestamp = getattr(model, timestamp_column)

    async def _find(self, session: AsyncSession, user_id: str, venue_id: str) -> Optional[RelationT]:
        stmt = (
            select(self.model)
            .where(self.model.user_id == user_id, self.model.venue_id == venue_id)
            .limit(1)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def list(self, user_id: str) -> List[RelationT]:
        async with self.session_factory() as session:
            stmt = (
                select(self.model)
                .where(self.model.user_id == user_id)
                .order_by(self.timestamp.desc())
            )
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def add(self, user_id: str, snapshot: VenueSnapshot) -> RelationT:
        """
        Record the relation, returning the existing row when already present
        """
        async with self.session_factory() as session:
            existing = await self._find(session, user_id, snapshot.venue_id)
            if existing is not None:
                return existing

            row = self.model(
                user_id=user_id,
                venue_id=snapshot.venue_id,
                venue_name=snapshot.venue_name,
                venue_type=VenueCategory(snapshot.venue_type).value,
                venue_lat=snapshot.venue_lat,
                venue_lng=snapshot.venue_lng,
            )
            session.add(row)
            try:
                await session.commit()
            except IntegrityError:
                # Lost a race against a concurrent add for the same pair
                await session.rollback()
                existing = await self._find(session, user_id, snapshot.venue_id)
                if existing is None:
                    raise
                logger.info(
                    f"Concurrent {self.kind} add for venue {snapshot.venue_id} resolved to existing row"
                )
                return existing

            await session.refresh(row)
            logger.debug(f"Added {self.kind} {snapshot.venue_id} for user {user_id}")
            return row

    async def remove(self, user_id: str, venue_id: str) -> None:
        """Delete the relation; absent pairs are not an error"""
        async with self.session_factory() as session:
            stmt = delete(self.model).where(
                self.model.user_id == user_id,
                self.model.venue_id == venue_id
            )
            await session.execute(stmt)
            await session.commit()

    async def exists(self, user_id: str, venue_id: str) -> bool:
        async with self.session_factory() as session:
            stmt = (
                select(self.model.id)
                .where(self.model.user_id == user_id, self.model.venue_id == venue_id)
                .limit(1)
            )
            result = await session.execute(stmt)
            return result.scalar_one_or_none() is not None


class FavoriteStore(RelationStore[UserFavorite]):
    kind = "favorite"

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        super().__init__(session_factory, UserFavorite, "created_at")


class VisitedStore(RelationStore[UserVisited]):
    kind = "visited"

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        super().__init__(session_factory, UserVisited, "visited_at")


class VenueStatusService:
    """Combined favorite/visited state of one venue for one user"""

    def __init__(self, favorites: FavoriteStore, visited: VisitedStore):
        self.favorites = favorites
        self.visited = visited

    async def status(self, user_id: str, venue_id: str) -> dict:
        is_favorite, is_visited = await asyncio.gather(
            self.favorites.exists(user_id, venue_id),
            self.visited.exists(user_id, venue_id),
        )
        return {"is_favorite": is_favorite, "is_visited": is_visited}
