from typing import Any

from fastapi import Response, status
from fastapi.responses import JSONResponse

from clinic.domain.results import Invalid, NotFound, Result

GENERIC_ERROR_MESSAGE = "An unexpected error occurred."

# OpenAPI descriptions shared by the routers.
VALIDATION_ERROR_RESPONSE: dict[int | str, dict[str, Any]] = {
    status.HTTP_400_BAD_REQUEST: {
        "description": "Invalid input. The body maps each offending field to a message.",
        "content": {
            "application/json": {"example": {"firstName": "firstName must not be blank"}}
        },
    },
}
NOT_FOUND_RESPONSE: dict[int | str, dict[str, Any]] = {
    status.HTTP_404_NOT_FOUND: {"description": "No record with that id (empty body)."},
}


def to_response(result: Result[Any], success_status: int = status.HTTP_200_OK) -> Response:
    """Turn a service result into the HTTP response for it."""
    if isinstance(result, Invalid):
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=result.errors)
    if isinstance(result, NotFound):
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    if result.value is None:
        return Response(status_code=success_status)
    return JSONResponse(
        status_code=success_status,
        content=result.value.model_dump(mode="json", by_alias=True),
    )
