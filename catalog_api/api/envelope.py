"""Envelope Responses — ServiceResult to JSONResponse.

Invariants:
    - Success keeps the route's status code; Failure uses its own status_code
    - Bodies come only from Success.to_body() / Failure.to_body()
"""

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from catalog_api.core.responses import ServiceResult


def to_json_response(
    result: ServiceResult, status_code: int = status.HTTP_200_OK,
) -> JSONResponse:
    if result.success:
        return JSONResponse(
            status_code=status_code, content=jsonable_encoder(result.to_body()),
        )
    return JSONResponse(status_code=result.status_code, content=result.to_body())
