# knight_service/main.py

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from knight_service.api.knights import router as knights_router
from knight_service.config import get_settings
from knight_service.db.engine import get_engine
from knight_service.db.repository import KnightRepository
from knight_service.db.schema import metadata
from knight_service.errors import KnightNotFoundError, NicknameInUseError

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    engine = get_engine(settings.database_url)

    if settings.create_schema_on_startup:
        async with engine.begin() as conn:
            await conn.run_sync(metadata.create_all)

    app.state.repository = KnightRepository(engine)
    logger.info("Connected to %s", engine.url.render_as_string(hide_password=True))
    try:
        yield
    finally:
        await engine.dispose()
        logger.info("Database engine disposed")


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = [
        {
            # drop the leading "body" / "query" / "path" segment
            "field": ".".join(str(part) for part in err["loc"][1:]) or str(err["loc"][0]),
            "message": err["msg"],
        }
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content={"detail": "Validation failed", "errors": errors},
    )


async def knight_not_found_handler(request: Request, exc: KnightNotFoundError):
    logger.warning("Knight %s not found", exc.knight_id)
    return JSONResponse(status_code=404, content={"detail": "Knight not found"})


async def nickname_in_use_handler(request: Request, exc: NicknameInUseError):
    logger.warning("Nickname %r already in use", exc.nickname)
    return JSONResponse(
        status_code=409,
        content={"detail": "This nickname already belongs to a knight"},
    )


async def persistence_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.error(
        "Persistence error on %s %s", request.method, request.url.path, exc_info=exc
    )
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal persistence error"},
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(
        "Unhandled error on %s %s", request.method, request.url.path, exc_info=exc
    )
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Knights API",
        version="0.1.0",
        lifespan=lifespan,
    )

    @app.get("/health")
    def health_check():
        return {"status": "ok"}

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(KnightNotFoundError, knight_not_found_handler)
    app.add_exception_handler(NicknameInUseError, nickname_in_use_handler)
    app.add_exception_handler(SQLAlchemyError, persistence_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
    app.include_router(knights_router)
    return app


app = create_app()
