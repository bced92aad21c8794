"""Error hierarchy and FastAPI error handling."""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException


class AppError(Exception):
    """Base error carrying a stable code and the HTTP status it maps to."""

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> Dict[str, Any]:
        response: Dict[str, Any] = {
            "code": self.code,
            "message": self.message,
        }
        if self.details:
            response["details"] = self.details
        return response


class ReshapeError(AppError):
    """The input could not be reshaped; nothing was produced."""

    def __init__(self, message: str, code: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            code=code,
            status_code=422,
            details=details,
        )


class HeaderNotFound(ReshapeError):
    def __init__(self, lines_scanned: int = 0):
        super().__init__(
            message="No encontré los encabezados",
            code="HEADER_NOT_FOUND",
            details={"lines_scanned": lines_scanned},
        )


class NoOperatorColumns(ReshapeError):
    def __init__(self, header_index: int, header: list[str]):
        super().__init__(
            message="No encontré los operadores",
            code="NO_OPERATOR_COLUMNS",
            details={"header_row": header_index + 1, "header": header},
        )


class UnsupportedFile(AppError):
    def __init__(self, filename: Optional[str], allowed: list[str]):
        super().__init__(
            message=f"Only {', '.join(allowed)} files are supported",
            code="UNSUPPORTED_FILE",
            status_code=422,
            details={"filename": filename},
        )


class EmptyFile(AppError):
    def __init__(self, filename: Optional[str]):
        super().__init__(
            message="Uploaded file is empty",
            code="EMPTY_FILE",
            status_code=422,
            details={"filename": filename},
        )


class FileTooLarge(AppError):
    def __init__(self, size: int, limit: int):
        super().__init__(
            message=f"Uploaded file exceeds {limit} bytes",
            code="FILE_TOO_LARGE",
            status_code=413,
            details={"size": size, "limit": limit},
        )


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_response())


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Routing and framework HTTP errors (404, 405) in the same envelope."""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "code": "HTTP_ERROR",
            "message": exc.detail,
        },
        headers=exc.headers,
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed requests (e.g. no `file` part) use the same envelope as AppError."""
    fields = [".".join(str(part) for part in error["loc"]) for error in exc.errors()]
    return JSONResponse(
        status_code=422,
        content={
            "code": "VALIDATION_ERROR",
            "message": f"Invalid request: {', '.join(fields)}",
            "details": {"fields": fields},
        },
    )
