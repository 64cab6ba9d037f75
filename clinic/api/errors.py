from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger

from clinic.api.responses import GENERIC_ERROR_MESSAGE
from clinic.domain.exceptions import ClinicError


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report a request that cannot be read at all (bad JSON, missing body, non-integer id)."""
    errors: dict[str, str] = {}
    for error in exc.errors():
        loc = error.get("loc") or ("body",)
        errors.setdefault(str(loc[-1]), error.get("msg", "Invalid value"))
    logger.warning("Malformed request to {}: {}", request.url.path, errors)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=errors)


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Answer 500 with a generic message; the details stay in the server log."""
    logger.opt(exception=exc).error(
        "Unexpected error handling {} {}", request.method, request.url.path
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": GENERIC_ERROR_MESSAGE},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, request_validation_handler)  # type: ignore[arg-type]
    app.add_exception_handler(ClinicError, unexpected_error_handler)
    # Last resort for faults raised outside the services.
    app.add_exception_handler(Exception, unexpected_error_handler)
