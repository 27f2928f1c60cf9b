"""FastAPI application entrypoint for the program quote desk."""
from __future__ import annotations

import logging.config
import os

from fastapi import FastAPI

from . import models  # noqa: F401 - registers tables on Base.metadata
from .api import router as api_router
from .api.deps import get_db
from .constants import APP_NAME, APP_VERSION
from .database import Base, engine

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

logging.config.dictConfig(
    {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {"format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"},
        },
        "handlers": {
            "default": {
                "formatter": "default",
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": {
            "quotedesk": {"handlers": ["default"], "level": LOG_LEVEL},
            "sqlalchemy": {"handlers": ["default"], "level": "WARNING"},
        },
    }
)

Base.metadata.create_all(bind=engine)


def create_application() -> FastAPI:
    app = FastAPI(title=f"{APP_NAME} API", version=APP_VERSION)
    app.include_router(api_router)

    @app.get("/health", tags=["health"], summary="Service healthcheck")
    def healthcheck() -> dict[str, str]:
        return {"status": "ok", "message": f"{APP_NAME} API is running"}

    return app


app = create_application()

__all__ = ["app", "create_application", "get_db"]
