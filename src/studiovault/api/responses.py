"""Shared response helpers for the REST routes."""

from fastapi import status
from fastapi.responses import JSONResponse

from studiovault.core.types import FailureReason, OperationResult

# HTTP status for each mutation failure reason
FAILURE_STATUS = {
    FailureReason.SECURITY: status.HTTP_403_FORBIDDEN,
    FailureReason.VALIDATION: status.HTTP_400_BAD_REQUEST,
    FailureReason.ALREADY_EXISTS: status.HTTP_409_CONFLICT,
    FailureReason.NOT_FOUND_OR_IO: status.HTTP_500_INTERNAL_SERVER_ERROR,
    FailureReason.UNSUPPORTED: status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
}


def operation_response(result: OperationResult) -> JSONResponse:
    """201 with the created path, or the status matching the failure."""
    if result.success:
        code = status.HTTP_201_CREATED
    else:
        code = FAILURE_STATUS.get(result.reason, status.HTTP_400_BAD_REQUEST)
    return JSONResponse(status_code=code, content=result.model_dump(mode="json"))
