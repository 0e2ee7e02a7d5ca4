"""Geocode endpoint: strict single answer or ranked candidates."""

from typing import Any, Dict, Optional, Union

from fastapi import APIRouter, Body, Depends, Request

from georesolve.api.v1.geocode.models import (
    CandidatesResponse,
    ErrorResponse,
    GeocodeRequestBody,
    HitResponse,
)
from georesolve.geocoding.exceptions import InternalError
from georesolve.geocoding.service import GeocodeService

router = APIRouter(tags=["geocode"])


def get_geocode_service(request: Request) -> GeocodeService:
    """Return the process-wide geocode service built at startup."""
    state = getattr(request.app.state, "resources", None)
    service = getattr(state, "geocode_service", None)
    if service is None:
        raise InternalError("Geocode service is not initialized")
    return service


@router.post(
    "/geocode",
    response_model=Union[HitResponse, CandidatesResponse],
    responses={
        400: {"model": ErrorResponse, "description": "Missing query"},
        404: {"model": ErrorResponse, "description": "No acceptable match"},
        500: {"model": ErrorResponse, "description": "Unexpected failure"},
    },
)
async def geocode(
    body: Optional[GeocodeRequestBody] = Body(None),
    service: GeocodeService = Depends(get_geocode_service),
) -> Dict[str, Any]:
    """
    Resolve a free-text place description to coordinates.

    With ``candidates`` false (default) the providers are tried in priority
    order and the first precise, locality-accepted match is returned. With
    ``candidates`` true every provider is queried concurrently and a ranked,
    deduplicated list is returned.
    """
    request = (body or GeocodeRequestBody()).to_request()
    return await service.handle(request)
