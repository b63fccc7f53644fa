"""Maps ledger and request failures onto structured HTTP responses."""
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from shared.core import get_logger
from app.application.errors import LedgerError

logger = get_logger(__name__)

HTTP_ERROR_CODES = {
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
}

def _failure(status_code: int, error: dict) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": error})

async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
    return _failure(exc.status_code, exc.to_dict())

async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = []
    for err in exc.errors():
        # loc is ("body", "quantity") or ("query", "page")
        field = str(err["loc"][-1]) if len(err["loc"]) > 1 else str(err["loc"][0])
        errors.append({"field": field, "message": f"{field}: {err['msg']}"})
    return _failure(400, {
        "code": "VALIDATION_ERROR",
        "message": ", ".join(e["message"] for e in errors),
        "details": {"errors": errors},
    })

async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _failure(exc.status_code, {
        "code": HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR"),
        "message": exc.detail,
    })

async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
    return _failure(500, {"code": "INTERNAL_ERROR", "message": "Internal server error"})

def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(LedgerError, ledger_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
