"""Module: errors.

Domain failures raised below the HTTP layer. Routes let them propagate and
the handlers registered in ``main`` turn each one into a JSON response.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

LOGGER = logging.getLogger(__name__)


class InnovetError(Exception):
    status_code = 500
    default_message = "Unexpected error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class StoreUnavailable(InnovetError):
    status_code = 503
    default_message = "Could not reach the database. Please try again."


class SchemaMismatch(InnovetError):
    status_code = 503
    default_message = "Appointments database setup pending. Please configure table/policies."


class InvalidTransitionError(InnovetError):
    status_code = 409
    default_message = "This appointment can no longer be changed that way."


class ForbiddenError(InnovetError):
    status_code = 403
    default_message = "You are not allowed to act on this appointment."


class NotFound(InnovetError):
    status_code = 404
    default_message = "Not found"


async def _innovet_error_handler(request: Request, exc: InnovetError) -> JSONResponse:
    if exc.status_code >= 500:
        LOGGER.error("%s on %s: %s", type(exc).__name__, request.url.path, exc.message)
    else:
        LOGGER.info("%s on %s: %s", type(exc).__name__, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(InnovetError, _innovet_error_handler)
