# knight_service/api/knights.py

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request

from knight_service.db.repository import KnightRepository
from knight_service.errors import KnightNotFoundError, NicknameInUseError
from knight_service.models.knights import KnightCreate, KnightOut, NicknameUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/knights", tags=["knights"])

HEROES_FILTER = "heroes"


def get_repository(request: Request) -> KnightRepository:
    return request.app.state.repository


@router.get("", response_model=List[KnightOut], summary="List knights")
async def list_knights(
    filter: Optional[str] = Query(
        default=None,
        description="Pass 'heroes' to list only knights promoted to hero",
        json_schema_extra={"enum": [HEROES_FILTER]},
    ),
    repo: KnightRepository = Depends(get_repository),
) -> List[KnightOut]:
    """
    Return every knight, or only heroes when filter=heroes.
    Any other filter value is ignored.
    """
    rows = await repo.find_many(heroes_only=filter == HEROES_FILTER)
    return [KnightOut.model_validate(row) for row in rows]


@router.get("/{knight_id}", response_model=KnightOut, summary="Get a knight by id")
async def get_knight(
    knight_id: str,
    repo: KnightRepository = Depends(get_repository),
) -> KnightOut:
    row = await repo.find_by_id(knight_id)
    if row is None:
        raise KnightNotFoundError(knight_id)

    return KnightOut.model_validate(row)


@router.post("", response_model=KnightOut, status_code=201, summary="Create a knight")
async def create_knight(
    body: KnightCreate,
    repo: KnightRepository = Depends(get_repository),
) -> KnightOut:
    """
    Create a knight. The new knight is never a hero, whatever the body says.
    Fails with 409 when the nickname is taken.
    """
    if await repo.find_by_nickname(body.nickname) is not None:
        raise NicknameInUseError(body.nickname)

    # A concurrent create that slips past the lookup above is still
    # rejected by the unique constraint inside repo.create.
    row = await repo.create(body.model_dump())

    logger.info("Created knight %s (%s)", row["id"], row["nickname"])
    return KnightOut.model_validate(row)


@router.patch("/{knight_id}/nickname", response_model=KnightOut, summary="Update a knight's nickname")
async def update_nickname(
    knight_id: str,
    body: NicknameUpdate,
    repo: KnightRepository = Depends(get_repository),
) -> KnightOut:
    knight = await repo.find_by_id(knight_id)
    if knight is None:
        raise KnightNotFoundError(knight_id)

    owner = await repo.find_by_nickname(body.nickname)
    if owner is not None and owner["id"] != knight_id:
        raise NicknameInUseError(body.nickname)

    row = await repo.update(knight_id, {"nickname": body.nickname})

    logger.info("Knight %s nickname %r -> %r", knight_id, knight["nickname"], body.nickname)
    return KnightOut.model_validate(row)


@router.delete("/{knight_id}", response_model=KnightOut, summary="Promote a knight to hero")
async def promote_knight(
    knight_id: str,
    repo: KnightRepository = Depends(get_repository),
) -> KnightOut:
    """
    Promote a knight to hero. Despite the DELETE verb nothing is removed;
    promoting a knight that is already a hero succeeds and changes nothing.
    """
    row = await repo.update(knight_id, {"is_hero": True})

    logger.info("Knight %s promoted to hero", knight_id)
    return KnightOut.model_validate(row)
