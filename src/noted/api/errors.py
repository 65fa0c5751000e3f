"""
Exception handlers mapping domain errors onto JSON responses.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from ..core.exceptions import (
    AuthenticationError,
    FileRejectedError,
    FileRemovalError,
    NotFoundError,
    NoteValidationError,
    StorageError,
)
from ..core.schemas.common import ErrorResponse, FieldErrorResponse

logger = logging.getLogger("noted.errors")


def _json(status_code: int, body: ErrorResponse) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json", exclude_none=True))


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(NoteValidationError)
    async def _validation_handler(request: Request, exc: NoteValidationError):
        return _json(
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            ErrorResponse(
                error="ValidationError",
                message="Validation failed",
                errors=[FieldErrorResponse(**e.to_dict()) for e in exc.errors],
            ),
        )

    @app.exception_handler(NotFoundError)
    async def _not_found_handler(request: Request, exc: NotFoundError):
        return _json(
            status.HTTP_404_NOT_FOUND,
            ErrorResponse(error="NotFound", message=f"{exc.resource} not found"),
        )

    @app.exception_handler(FileRejectedError)
    async def _rejected_handler(request: Request, exc: FileRejectedError):
        return _json(
            status.HTTP_400_BAD_REQUEST, ErrorResponse(error="FileRejected", message=str(exc))
        )

    @app.exception_handler(AuthenticationError)
    async def _auth_handler(request: Request, exc: AuthenticationError):
        return _json(
            status.HTTP_401_UNAUTHORIZED,
            ErrorResponse(error="AuthenticationFailed", message=str(exc)),
        )

    @app.exception_handler(StorageError)
    @app.exception_handler(FileRemovalError)
    async def _operation_failed_handler(request: Request, exc: Exception):
        logger.error(
            "Operation failed",
            extra={"path": request.url.path, "exception_type": type(exc).__name__, "detail": str(exc)},
        )
        return _json(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            ErrorResponse(error="OperationFailed", message="operation failed"),
        )
