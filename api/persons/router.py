"""
Person API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from . import dependencies, schemas, service

router = APIRouter()

ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": schemas.ErrorResponse},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": schemas.ErrorResponse},
}


@router.post(
    "/save",
    status_code=status.HTTP_201_CREATED,
    response_model=schemas.PersonResponse,
    responses={**ERROR_RESPONSES, status.HTTP_409_CONFLICT: {"model": schemas.ErrorResponse}},
)
async def save_person(
    request: schemas.SavePersonRequest,
    store: service.PersonStore = Depends(dependencies.get_person_store),
) -> schemas.PersonResponse:
    return await service.save_person(store, request)


# Path is parsed by hand so a bad id gets our own 400 message.
@router.get(
    "/{person_id}",
    response_model=schemas.PersonResponse,
    responses={**ERROR_RESPONSES, status.HTTP_404_NOT_FOUND: {"model": schemas.ErrorResponse}},
)
async def get_person(
    person_id: str,
    store: service.PersonStore = Depends(dependencies.get_person_store),
) -> schemas.PersonResponse:
    return await service.get_person(store, service.parse_person_id(person_id))
