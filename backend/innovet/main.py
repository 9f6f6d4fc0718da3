"""Module: main."""

import logging

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from innovet.api.v1.api import api_router
from innovet.core.config import settings
from innovet.core.errors import register_error_handlers
from innovet.core.logging import configure_logging
from innovet.db.init_db import init_db
from innovet.db.session import engine

configure_logging(settings.log_level)
LOGGER = logging.getLogger(__name__)

app = FastAPI(title="Innovet API", version="0.1.0")

app.include_router(api_router, prefix="/api/v1")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Schema changes beyond new tables are applied by hand; the appointment store
# copes with older table shapes at runtime.
init_db(engine)
LOGGER.info("Innovet API ready")


def run() -> None:
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
