# knight_service/db/engine.py

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from knight_service.config import get_settings


def get_engine(db_url: Optional[str] = None) -> AsyncEngine:
    if db_url is None:
        db_url = get_settings().database_url
    # echo=True if you want to see SQL printed in the terminal
    return create_async_engine(db_url, future=True)
