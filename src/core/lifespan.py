from contextlib import asynccontextmanager

from fastapi import FastAPI
from loguru import logger

from core.config import settings
from model.database import create_db_and_tables
from service.workspace import WorkspaceState
from utility.logger import setup_logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    # === 시작 ===
    setup_logger(settings.DEBUG, settings.LOG_FILE)
    logger.info(f"{settings.APP_NAME} v{settings.APP_VERSION}")

    create_db_and_tables()
    logger.info(f"Database ready ({settings.DATABASE_URL})")

    app.state.settings = settings
    # 캐시는 첫 요청에서 저장소를 읽어 채운다
    app.state.workspace = WorkspaceState()

    yield

    # === 종료 ===
    logger.info("Shutting down")
