# knight_service/db/repository.py
"""
Persistence gateway for the ``knights`` table.

The repository owns no connection state of its own: it is handed an
``AsyncEngine`` by the application lifespan and opens one connection per
call. Rows come back as plain dicts keyed by column name.
"""

import logging
import uuid
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine

from knight_service.db.schema import knights
from knight_service.errors import KnightNotFoundError, NicknameInUseError

logger = logging.getLogger(__name__)


class KnightRepository:
    def __init__(self, engine: AsyncEngine):
        self.engine = engine

    async def find_many(self, heroes_only: bool = False) -> List[dict]:
        stmt = select(knights)
        if heroes_only:
            stmt = stmt.where(knights.c.is_hero.is_(True))

        async with self.engine.connect() as conn:
            result = await conn.execute(stmt)
            rows = result.mappings().all()

        return [dict(row) for row in rows]

    async def find_by_id(self, knight_id: str) -> Optional[dict]:
        async with self.engine.connect() as conn:
            return await self._fetch_one(conn, knights.c.id == knight_id)

    async def find_by_nickname(self, nickname: str) -> Optional[dict]:
        async with self.engine.connect() as conn:
            return await self._fetch_one(conn, knights.c.nickname == nickname)

    async def create(self, values: dict) -> dict:
        """
        Insert a new knight and return the stored row.

        ``id`` is generated here and ``is_hero`` is always False, whatever
        the caller passed. A nickname collision caught by the unique
        constraint is raised as NicknameInUseError.
        """
        row = dict(values)
        row["id"] = str(uuid.uuid4())
        row["is_hero"] = False

        try:
            async with self.engine.begin() as conn:
                await conn.execute(knights.insert().values(**row))
                created = await self._fetch_one(conn, knights.c.id == row["id"])
        except IntegrityError as exc:
            if _is_nickname_violation(exc):
                raise NicknameInUseError(row["nickname"]) from exc
            raise

        return created

    async def update(self, knight_id: str, values: dict) -> dict:
        """
        Apply ``values`` to one knight and return the updated row.
        Raises KnightNotFoundError when no knight has that id.
        """
        try:
            async with self.engine.begin() as conn:
                result = await conn.execute(
                    update(knights).where(knights.c.id == knight_id).values(**values)
                )
                if result.rowcount == 0:
                    raise KnightNotFoundError(knight_id)
                return await self._fetch_one(conn, knights.c.id == knight_id)
        except IntegrityError as exc:
            if "nickname" in values and _is_nickname_violation(exc):
                raise NicknameInUseError(values["nickname"]) from exc
            raise

    async def _fetch_one(self, conn: AsyncConnection, where) -> Optional[dict]:
        result = await conn.execute(select(knights).where(where))
        row = result.mappings().first()
        return dict(row) if row is not None else None


def _is_nickname_violation(exc: IntegrityError) -> bool:
    # SQLite: "UNIQUE constraint failed: knights.nickname"
    # PostgreSQL: 'duplicate key value violates unique constraint "knights_nickname_key"'
    message = str(exc.orig).lower()
    return "nickname" in message and "unique" in message
