"""
Error taxonomy shared by the service layer.

Every error carries its HTTP status and a machine-readable ``kind`` decided at
the raise site; ``service_error_handler`` renders them as
``{"error": ..., "kind": ...}``.
"""

from fastapi import HTTPException, Request, status
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

# Malformed input on these routes is reported like any other bad request.
BAD_REQUEST_VALIDATION_PREFIXES = ("/api/chapter1/",)


class ServiceError(HTTPException):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    kind: str = "internal"

    def __init__(self, detail: str) -> None:
        super().__init__(status_code=type(self).status_code, detail=detail)


class NotFound(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    kind = "not_found"


class Forbidden(ServiceError):
    status_code = status.HTTP_403_FORBIDDEN
    kind = "forbidden"


class BadRequest(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    kind = "bad_request"


class Conflict(ServiceError):
    status_code = status.HTTP_409_CONFLICT
    kind = "conflict"


class TokenNotFound(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    kind = "token_not_found"


class TokenExpired(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    kind = "expired"


class TokenAlreadyUsed(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    kind = "already_used"


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail, "kind": exc.kind},
    )


def _describe_validation_error(error: dict) -> str:
    field = ".".join(
        str(part) for part in error.get("loc", ()) if part not in ("body", "query")
    )
    message = error.get("msg", "Invalid value")
    return f"{field}: {message}" if field else message


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    if not request.url.path.startswith(BAD_REQUEST_VALIDATION_PREFIXES):
        return await request_validation_exception_handler(request, exc)

    errors = exc.errors()
    detail = _describe_validation_error(errors[0]) if errors else "Invalid request"
    return JSONResponse(
        status_code=BadRequest.status_code,
        content={"error": detail, "kind": BadRequest.kind},
    )
