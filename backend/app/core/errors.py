"""Domain errors raised by services and translated to HTTP responses."""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse


class RenewalTrackerError(Exception):
    """Base class for errors raised by the renewal tracker services."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(RenewalTrackerError):
    """A field is missing or malformed (bad enum, date, interval...)."""


class NotFoundError(RenewalTrackerError):
    """A referenced renewal, customer or user does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


async def _handle_tracker_error(request: Request, exc: RenewalTrackerError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RenewalTrackerError, _handle_tracker_error)
