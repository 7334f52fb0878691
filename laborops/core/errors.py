"""Error kinds raised by the scheduling core.

Each kind carries the HTTP status the API layer answers with, so route
handlers never translate errors by hand. ``register_error_handlers`` wires
them into the FastAPI app with the same ``{"detail": ...}`` body that
``HTTPException`` produces.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

log = logging.getLogger(__name__)


class SchedulingError(Exception):
    status_code = 500

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class InvalidInputError(SchedulingError):
    status_code = 400


class NotFoundError(SchedulingError):
    status_code = 404

    @classmethod
    def for_id(cls, kind: str, object_id) -> "NotFoundError":
        return cls(f"{kind} {object_id} not found")


class ConflictError(SchedulingError):
    status_code = 409


class OperationFailedError(SchedulingError):
    status_code = 500


async def scheduling_error_handler(request: Request, exc: SchedulingError):
    if exc.status_code >= 500:
        log.error("request failed: path=%s detail=%s", request.url.path, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(SchedulingError, scheduling_error_handler)
