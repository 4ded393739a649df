"""
Envelope to HTTP response mapping.

Success is always 200; a Failure's status code follows its error kind.
"""
from fastapi import status
from fastapi.responses import JSONResponse

from orderguard.application.dtos import ErrorKind, ResultEnvelope, is_success


STATUS_BY_ERROR_KIND = {
    ErrorKind.INVALID_INPUT: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.VALIDATION: 422,
    ErrorKind.DATABASE: 503,
    ErrorKind.UNKNOWN: 500,
}


def status_code_for(envelope: ResultEnvelope) -> int:
    if is_success(envelope):
        return status.HTTP_200_OK
    return STATUS_BY_ERROR_KIND.get(envelope.error_kind, status.HTTP_500_INTERNAL_SERVER_ERROR)


def envelope_response(envelope: ResultEnvelope) -> JSONResponse:
    """Serialize an envelope to JSON (decimals as strings)."""
    return JSONResponse(
        status_code=status_code_for(envelope),
        content=envelope.model_dump(mode="json"),
    )
