# app/main.py
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.engine import Engine

from app.api import api_router
from app.api.errors import register_error_handlers
from app.data.database import Base, engine
from app.data.seed import seed
from app.utils.logging import configure_logging, get_logger
from app.utils.retry import db_retry
from app.utils.settings import API_PREFIX, CORS_ORIGINS, SEED_ON_STARTUP

# register every model in Base.metadata before create_all
from app.data import models  # noqa: F401

logger = get_logger(__name__)


@db_retry()
def init_db(bind: Engine = engine) -> None:
    logger.info(f"Initializing database, tables: {list(Base.metadata.tables.keys())}")
    Base.metadata.create_all(bind=bind)
    logger.info("Database tables ready")


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    init_db()

    if SEED_ON_STARTUP:
        seed()

    yield


def create_app() -> FastAPI:
    app = FastAPI(
        title="UaiFood Orders",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials="*" not in CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)
    app.include_router(api_router, prefix=API_PREFIX)

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
