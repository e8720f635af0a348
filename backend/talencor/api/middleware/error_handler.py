"""
Global exception handlers. Map domain exceptions to HTTP responses.
"""
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from talencor.services.llm.base import LLMServiceError
from talencor.utils.logger import get_logger

logger = get_logger(__name__)


def _clean_errors(errors: list[dict]) -> list[dict]:
    """Keep the parts of pydantic error entries that are safe to echo back."""
    cleaned = []
    for err in errors:
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        cleaned.append(
            {
                "field": ".".join(loc),
                "message": err.get("msg", "Invalid value"),
                "type": err.get("type", "value_error"),
            }
        )
    return cleaned


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        errors = _clean_errors(exc.errors())
        logger.info(
            "Invalid form data",
            extra={"path": request.url.path, "fields": [e["field"] for e in errors]},
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": "Invalid form data", "errors": errors},
        )

    @app.exception_handler(ValidationError)
    async def validation_exception_handler(
        request: Request, exc: ValidationError
    ) -> JSONResponse:
        errors = _clean_errors(exc.errors())
        logger.debug("Validation error", extra={"fields": [e["field"] for e in errors]})
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": "Invalid form data", "errors": errors},
        )

    @app.exception_handler(LLMServiceError)
    async def llm_error_handler(request: Request, exc: LLMServiceError) -> JSONResponse:
        logger.error("AI service failure", extra={"path": request.url.path, "error": str(exc)})
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": "AI service is temporarily unavailable. Please try again later."},
        )

    @app.exception_handler(404)
    async def not_found_handler(request: Request, exc: Exception) -> JSONResponse:
        detail = getattr(exc, "detail", None)
        if not detail or detail == "Not Found":
            detail = "Resource not found"
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": detail},
        )

    @app.exception_handler(Exception)
    async def server_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled exception", extra={"path": request.url.path})
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "An unexpected error occurred"},
        )
