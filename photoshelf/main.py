"""Photoshelf - FastAPI Entry Point."""
import logging
import sqlite3
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .database import init_db
from .exceptions import PhotoshelfError, photoshelf_exception_handler, storage_exception_handler
from .logging_config import configure_logging
from .middleware import AuthMiddleware
from .routes import router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup: runs before the application starts accepting requests
    configure_logging()
    init_db()
    logger.info("Photoshelf started")
    yield


app = FastAPI(title="Photoshelf", lifespan=lifespan)

app.add_middleware(AuthMiddleware)

app.add_exception_handler(PhotoshelfError, photoshelf_exception_handler)
app.add_exception_handler(sqlite3.Error, storage_exception_handler)

app.include_router(router)
