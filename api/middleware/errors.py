"""
Error responses.

Every failure is rendered as {"error": {"code", "message", "details"},
"request_id"}. CSV problems come in two kinds:

- document-level (INVALID_CSV, 400): the file could not be read as a base at
  all, nothing was imported; details carry the missing columns if any.
- row-level (PARTIAL_IMPORT, 409): some lines were skipped and the caller
  asked for a complete import; details carry the skipped-line report.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from inventario.models.inventory import ImportReport
from inventario.services.csv_service import CsvImportError, MissingColumnsError
from inventario.services.inventory_service import IncompleteImportError, SheetFetchError

logger = logging.getLogger("inventario.api")


class APIError(Exception):
    """Raised by route handlers; subclasses fix the code and HTTP status."""

    code = "BAD_REQUEST"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class NotFoundError(APIError):
    """Unknown base or item."""

    code = "NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, resource: str, identifier: str):
        super().__init__(
            f"{resource} not found: {identifier}",
            {"resource": resource, "identifier": identifier},
        )


class ValidationError(APIError):
    """Rejected upload or request body."""

    code = "VALIDATION_ERROR"


def csv_error_details(exc: CsvImportError) -> Dict[str, Any]:
    if isinstance(exc, MissingColumnsError):
        return {"missing_columns": exc.missing}
    return {}


def skipped_line_details(report: ImportReport) -> Dict[str, Any]:
    return {
        "total_lines": report.total_lines,
        "items_count": report.imported_count,
        "skipped_lines": [line.model_dump() for line in report.skipped_lines],
    }


def build_error_response(
    request: Request,
    status_code: int,
    code: str,
    message: str,
    details: Optional[Dict[str, Any]] = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": {"code": code, "message": message, "details": details or {}},
            "request_id": getattr(request.state, "request_id", None),
        },
    )


def setup_exception_handlers(app: FastAPI):
    """Register the handlers that turn errors into the envelope above."""

    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
        logger.warning(f"{exc.code}: {exc.message}")
        return build_error_response(request, exc.status_code, exc.code, exc.message, exc.details)

    @app.exception_handler(CsvImportError)
    async def invalid_csv_handler(request: Request, exc: CsvImportError) -> JSONResponse:
        logger.warning(f"CSV rejected: {exc}")
        return build_error_response(
            request,
            status.HTTP_400_BAD_REQUEST,
            "INVALID_CSV",
            str(exc),
            csv_error_details(exc),
        )

    @app.exception_handler(IncompleteImportError)
    async def partial_import_handler(request: Request, exc: IncompleteImportError) -> JSONResponse:
        logger.info(f"Partial import refused: {exc}")
        return build_error_response(
            request,
            status.HTTP_409_CONFLICT,
            "PARTIAL_IMPORT",
            str(exc),
            skipped_line_details(exc.report),
        )

    @app.exception_handler(SheetFetchError)
    async def sheet_error_handler(request: Request, exc: SheetFetchError) -> JSONResponse:
        return build_error_response(
            request,
            status.HTTP_502_BAD_GATEWAY,
            "SHEET_UNAVAILABLE",
            str(exc),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        errors = [
            {"field": ".".join(str(loc) for loc in error["loc"]), "message": error["msg"]}
            for error in exc.errors()
        ]
        logger.warning(f"Invalid request: {errors}")
        return build_error_response(
            request,
            status.HTTP_400_BAD_REQUEST,
            "VALIDATION_ERROR",
            "Request validation failed",
            {"errors": errors},
        )

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unexpected error: {exc}")
        return build_error_response(
            request,
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "INTERNAL_ERROR",
            "An unexpected error occurred",
            {"type": type(exc).__name__},
        )
