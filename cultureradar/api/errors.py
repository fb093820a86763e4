"""Translation of domain and database errors to HTTP responses."""

import logging

from fastapi import FastAPI, Request, Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..db import DatabaseError
from ..errors import Conflict, Forbidden, NotFound, Unauthorized, ValidationFailed

logger = logging.getLogger(__name__)


async def not_found_handler(request: Request, exc: NotFound):
    return Response(status_code=status.HTTP_404_NOT_FOUND)


async def bad_request_handler(request: Request, exc: Exception):
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})


async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )


async def unauthorized_handler(request: Request, exc: Unauthorized):
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={"detail": str(exc) or "Could not validate credentials"},
        headers={"WWW-Authenticate": "Bearer"},
    )


async def forbidden_handler(request: Request, exc: Forbidden):
    return JSONResponse(status_code=status.HTTP_403_FORBIDDEN, content={"detail": str(exc)})


async def database_error_handler(request: Request, exc: DatabaseError):
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Database error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(NotFound, not_found_handler)
    app.add_exception_handler(ValidationFailed, bad_request_handler)
    app.add_exception_handler(Conflict, bad_request_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Unauthorized, unauthorized_handler)
    app.add_exception_handler(Forbidden, forbidden_handler)
    app.add_exception_handler(DatabaseError, database_error_handler)
