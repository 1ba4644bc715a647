import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import InterfaceError, OperationalError, SQLAlchemyError

from pos_api.config import Settings, get_settings
from pos_api.core.logging import setup_logging
from pos_api.database import Base, engine, ensure_sqlite_schema
from pos_api.database.url import mask_database_url
from pos_api.models import import_all_models
from pos_api.routers import (
    categories_router,
    checkout_router,
    health_router,
    products_router,
    reports_router,
)

setup_logging()
settings: Settings = get_settings()
logger = logging.getLogger(__name__)

import_all_models()


def init_database() -> bool:
    logger.info("Connecting to database %s", mask_database_url(engine.url))
    try:
        Base.metadata.create_all(bind=engine)
        ensure_sqlite_schema()
    except SQLAlchemyError:
        logger.warning(
            "Database unavailable at startup; requests will fail until it is reachable",
            exc_info=True,
        )
        return False
    logger.info("Database connected")
    return True


@asynccontextmanager
async def lifespan(_app: FastAPI):
    init_database()
    try:
        yield
    finally:
        engine.dispose()


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error("Database error on %s %s", request.method, request.url.path, exc_info=exc)
    if isinstance(exc, (OperationalError, InterfaceError)):
        return JSONResponse(status_code=503, content={"detail": "Database not connected"})
    return JSONResponse(status_code=500, content={"detail": "Database error"})


app.include_router(health_router)
app.include_router(products_router)
app.include_router(categories_router)
app.include_router(checkout_router)
app.include_router(reports_router)


def run() -> None:
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_config=None)


if __name__ == "__main__":
    run()


__all__ = ["app", "init_database", "run"]
