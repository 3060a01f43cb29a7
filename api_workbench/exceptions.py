"""
Exception classes and error handling for API Workbench.

Two families live here:

- ``ProjectStoreError`` and its subclasses are raised by the persistence
  engine itself and carry no HTTP knowledge.
- ``APIException`` and its subclasses are raised by the HTTP routers.

Both are translated into the same ``{"detail", "error_code"}`` response
shape by the handlers registered in ``register_exception_handlers``.
"""

from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response format."""
    detail: str
    error_code: str | None = None


# Persistence engine errors

class ProjectStoreError(Exception):
    """Base exception for project persistence failures."""

    error_code = "PROJECT_STORE_ERROR"

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(detail)


class InvalidProjectError(ProjectStoreError):
    """Raised when a location does not hold a loadable project."""

    error_code = "INVALID_PROJECT"

    def __init__(self, path: Any, artifact: str, reason: str = "missing"):
        self.path = str(path)
        self.artifact = artifact
        super().__init__(
            f"Invalid project at {self.path}: {artifact} {reason}"
        )


class EntityNotFoundError(ProjectStoreError):
    """Raised when an entity cannot be located in a project tree."""

    error_code = "ENTITY_NOT_FOUND"

    def __init__(self, kind: str, target: Any):
        self.kind = kind
        self.target = target
        super().__init__(f"{kind} '{target}' not found")


class WorkspaceError(ProjectStoreError):
    """Raised when the workspace document itself cannot be read."""

    error_code = "INVALID_WORKSPACE"

    def __init__(self, path: Any, reason: str):
        self.path = str(path)
        super().__init__(f"Invalid workspace at {self.path}: {reason}")


class LockReentryError(ProjectStoreError):
    """Raised when a thread tries to lock a location it already holds."""

    error_code = "LOCK_REENTRY"

    def __init__(self, path: Any):
        self.path = str(path)
        super().__init__(f"Location {self.path} is already locked by this thread")


# HTTP layer errors

class APIException(Exception):
    """Base exception for API errors."""

    def __init__(
        self,
        detail: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_code: str | None = None
    ):
        self.detail = detail
        self.status_code = status_code
        self.error_code = error_code
        super().__init__(detail)


class ResourceNotFoundError(APIException):
    """Exception raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: Any):
        super().__init__(
            detail=f"{resource_type} {resource_id} not found",
            status_code=status.HTTP_404_NOT_FOUND,
            error_code="RESOURCE_NOT_FOUND"
        )


class BadRequestError(APIException):
    """Exception raised for invalid request data."""

    def __init__(self, detail: str):
        super().__init__(
            detail=detail,
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code="BAD_REQUEST"
        )


_STORE_ERROR_STATUS = {
    InvalidProjectError: status.HTTP_400_BAD_REQUEST,
    WorkspaceError: status.HTTP_400_BAD_REQUEST,
    EntityNotFoundError: status.HTTP_404_NOT_FOUND,
    LockReentryError: status.HTTP_409_CONFLICT,
}


async def api_exception_handler(request: Request, exc: APIException) -> JSONResponse:
    """Handler for custom API exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "error_code": exc.error_code}
    )


async def project_store_exception_handler(
    request: Request, exc: ProjectStoreError
) -> JSONResponse:
    """Handler for persistence engine errors."""
    status_code = _STORE_ERROR_STATUS.get(
        type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR
    )
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.detail, "error_code": exc.error_code}
    )


async def os_error_handler(request: Request, exc: OSError) -> JSONResponse:
    """Handler for filesystem failures surfaced by save and load."""
    if isinstance(exc, FileNotFoundError):
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": f"Path not found: {exc.filename}", "error_code": "PATH_NOT_FOUND"}
        )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": str(exc), "error_code": "STORAGE_IO_ERROR"}
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handler for Pydantic validation errors."""
    error_messages = []
    for error in exc.errors():
        loc = " -> ".join(str(part) for part in error["loc"])
        error_messages.append(f"{loc}: {error['msg']}")

    detail = "; ".join(error_messages) if error_messages else "Validation error"

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": detail, "error_code": "VALIDATION_ERROR"}
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI application."""
    app.add_exception_handler(APIException, api_exception_handler)
    app.add_exception_handler(ProjectStoreError, project_store_exception_handler)
    app.add_exception_handler(OSError, os_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
