"""Exception handlers to translate domain exceptions to HTTP responses."""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from marketplace.domain.exceptions import (
    CategoryHasChildren,
    CategoriesInUse,
    CategoryHasServices,
    CategoryNotFound,
    CircularCategoryReference,
    DomainException,
    DuplicateCategorySlug,
    InvalidCategoryId,
    InvalidDataFormat,
    ParentCategoryNotFound,
    RequiredFieldMissing,
    ResourceConflict,
    ResourceException,
    ResourceNotFound,
    SelfParentReference,
    ValidationException,
)
from marketplace.utils.logger import get_logger

logger = get_logger("exception_handlers")


class DomainExceptionHandler:
    """Centralized mapping of domain exceptions to HTTP status codes."""

    EXCEPTION_STATUS_MAP = {
        # Validation exceptions
        InvalidDataFormat: status.HTTP_400_BAD_REQUEST,
        InvalidCategoryId: status.HTTP_400_BAD_REQUEST,
        RequiredFieldMissing: status.HTTP_400_BAD_REQUEST,

        # Category exceptions
        CategoryNotFound: status.HTTP_404_NOT_FOUND,
        ParentCategoryNotFound: status.HTTP_400_BAD_REQUEST,
        DuplicateCategorySlug: status.HTTP_409_CONFLICT,
        SelfParentReference: status.HTTP_409_CONFLICT,
        CircularCategoryReference: status.HTTP_409_CONFLICT,
        CategoryHasChildren: status.HTTP_409_CONFLICT,
        CategoryHasServices: status.HTTP_409_CONFLICT,
        CategoriesInUse: status.HTTP_409_CONFLICT,
    }

    # Base exception type status codes, most specific first
    BASE_EXCEPTION_STATUS_MAP = {
        ValidationException: status.HTTP_400_BAD_REQUEST,
        ResourceNotFound: status.HTTP_404_NOT_FOUND,
        ResourceConflict: status.HTTP_409_CONFLICT,
        ResourceException: status.HTTP_400_BAD_REQUEST,
    }

    @classmethod
    def status_for(cls, exc: DomainException) -> int:
        status_code = cls.EXCEPTION_STATUS_MAP.get(type(exc))
        if status_code is None:
            for base_type, base_status in cls.BASE_EXCEPTION_STATUS_MAP.items():
                if isinstance(exc, base_type):
                    status_code = base_status
                    break
        if status_code is None:
            status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        return status_code

    @staticmethod
    def envelope(message: str, error_code: str | None = None) -> dict:
        body = {"success": False, "message": message}
        if error_code:
            body["errorCode"] = error_code
        return body

    @classmethod
    def handle_domain_exception(cls, exc: DomainException) -> JSONResponse:
        status_code = cls.status_for(exc)
        if status_code >= 500:
            logger.error(f"Unmapped domain exception: {exc!r}")
            return JSONResponse(
                status_code=status_code,
                content=cls.envelope("Internal server error"),
            )
        return JSONResponse(
            status_code=status_code,
            content=cls.envelope(exc.message, exc.error_code),
        )


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        # Drop the "body"/"query"/"path" prefix from the location
        loc = ".".join(str(p) for p in error.get("loc", ())[1:])
        parts.append(f"{loc}: {error.get('msg')}" if loc else str(error.get("msg")))
    return "; ".join(parts) or "Invalid request"


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(DomainException)
    async def _domain_exception(request: Request, exc: DomainException):
        return DomainExceptionHandler.handle_domain_exception(exc)

    @app.exception_handler(RequestValidationError)
    async def _request_validation(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=DomainExceptionHandler.envelope(
                _validation_message(exc), "VALIDATION_ERROR"
            ),
        )

    @app.exception_handler(StarletteHTTPException)
    async def _http_exception(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content=DomainExceptionHandler.envelope(str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def _unexpected(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=DomainExceptionHandler.envelope("Internal server error"),
        )
