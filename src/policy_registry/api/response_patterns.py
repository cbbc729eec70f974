"""API response envelope following Result[T,E] + HTTP semantics."""

from collections.abc import Callable
from typing import Any, TypeVar

from beartype import beartype
from fastapi import status
from fastapi.responses import JSONResponse
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SerializerFunctionWrapHandler,
    model_serializer,
)

from ..core.result_types import Err, ErrorKind, PolicyError, Result

T = TypeVar("T")


class Envelope(BaseModel):
    """Uniform ``{success, message, data, error}`` body for every endpoint.

    Members left as ``None`` are omitted from the serialized body; ``None``
    values nested inside ``data`` are kept.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        populate_by_name=True,
    )

    success: bool = Field(..., description="Whether the operation succeeded")
    message: str | None = Field(default=None, description="Human-readable summary")
    policy_id: int | None = Field(
        default=None,
        serialization_alias="policyId",
        description="Id of the policy just created",
    )
    data: Any = Field(default=None, description="Response payload")
    error: str | None = Field(default=None, description="Underlying failure detail")

    @model_serializer(mode="wrap")
    def omit_empty_members(
        self, handler: SerializerFunctionWrapHandler
    ) -> dict[str, Any]:
        dumped = handler(self)
        return {key: value for key, value in dumped.items() if value is not None}


_STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.STORE: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


@beartype
def map_error_to_status(kind: ErrorKind) -> int:
    """Map a service failure category to its HTTP status code."""
    return _STATUS_BY_KIND.get(kind, status.HTTP_500_INTERNAL_SERVER_ERROR)


@beartype
def envelope_response(envelope: Envelope, status_code: int = 200) -> JSONResponse:
    """Serialize an envelope with the given status code."""
    return JSONResponse(
        status_code=status_code,
        content=envelope.model_dump(mode="json", by_alias=True),
    )


@beartype
def error_response(error: PolicyError) -> JSONResponse:
    """Render a service failure."""
    return envelope_response(
        Envelope(success=False, message=error.message, error=error.detail),
        map_error_to_status(error.kind),
    )


def handle_result(
    result: Result[T, PolicyError],
    on_success: Callable[[T], Envelope],
    success_status: int = status.HTTP_200_OK,
) -> JSONResponse:
    """Convert a service Result to an HTTP response.

    Args:
        result: Service layer Result
        on_success: Builds the success envelope from the unwrapped value
        success_status: HTTP status for successful operations (default 200)

    Returns:
        JSONResponse carrying either the success or the error envelope
    """
    if isinstance(result, Err):
        return error_response(result.unwrap_err())
    return envelope_response(on_success(result.unwrap()), success_status)
