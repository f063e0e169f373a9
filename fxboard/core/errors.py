from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging

logger = logging.getLogger("fxboard.errors")

_ERROR_CODES = {
    status.HTTP_404_NOT_FOUND: "not_found",
    status.HTTP_405_METHOD_NOT_ALLOWED: "method_not_allowed",
}


def http_error_handler(request: Request, exc: StarletteHTTPException):  # type: ignore
    detail = exc.detail
    if exc.status_code == status.HTTP_404_NOT_FOUND and detail == "Not Found":
        detail = f"No route for {request.method} {request.url.path}"
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": _ERROR_CODES.get(exc.status_code, "http_error"),
            "detail": detail,
        },
    )


def validation_error_handler(request: Request, exc: RequestValidationError):  # type: ignore
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "validation_error",
            "detail": jsonable_errors(exc),
        },
    )


def jsonable_errors(exc: RequestValidationError):
    # ctx may hold the raw ValueError raised by a validator
    return [
        {k: v for k, v in err.items() if k in ("loc", "msg", "type")}
        for err in exc.errors()
    ]


def server_error_handler(request: Request, exc: Exception):  # type: ignore
    logger.exception("unhandled exception")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "internal_error",
            "detail": "An unexpected error occurred.",
        },
    )
