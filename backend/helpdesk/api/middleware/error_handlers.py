"""
Error Handlers

Map engine errors to the JSON error envelope:
{"error": {"code": ..., "message": ..., "details": {...}}}
"""

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from ...domain.errors import DomainError
from ...utils.logger import get_logger, get_correlation_id

logger = get_logger(__name__)


def _headers() -> dict:
    return {"X-Correlation-Id": get_correlation_id() or ""}


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    """
    Expected engine errors: validation, invalid state, duplicate decisions,
    schema and transport failures. Informational ones log at INFO.
    """
    log = logger.info if exc.informational else logger.warning
    log(
        f"{exc.error_code} on {request.method} {request.url.path}: {exc.message}",
        extra={"error_code": exc.error_code}
    )
    return JSONResponse(
        status_code=exc.http_status,
        content=jsonable_encoder(exc.to_dict()),
        headers=_headers()
    )


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed request bodies"""
    logger.warning(
        f"Request validation failed on {request.method} {request.url.path}: {exc.errors()}",
        extra={"error_code": "VALIDATION_ERROR"}
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": {
                "code": "VALIDATION_ERROR",
                "message": "Request validation failed",
                "details": {"errors": jsonable_encoder(exc.errors())}
            }
        },
        headers=_headers()
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Anything unexpected; the stack trace goes to the error log"""
    logger.error(f"Unexpected error: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred",
                "details": {"hint": "Check server logs for details"}
            }
        },
        headers=_headers()
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, general_exception_handler)
