"""
Tutorial CRUD endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Response, status

from . import schemas, service

router = APIRouter(prefix="/api/tutorials")


@router.get("", response_model=list[schemas.TutorialResponse])
async def list_tutorials() -> list[schemas.TutorialResponse]:
    return await service.list_tutorials()


# Declared before "/{tutorial_id}" so the literal path wins.
@router.get("/published", response_model=list[schemas.TutorialResponse])
async def list_published_tutorials() -> list[schemas.TutorialResponse]:
    return await service.list_published_tutorials()


@router.get("/{tutorial_id}", response_model=schemas.TutorialResponse)
async def get_tutorial(tutorial_id: int) -> schemas.TutorialResponse:
    return await service.get_tutorial(tutorial_id)


@router.post("", response_model=schemas.TutorialResponse, status_code=status.HTTP_201_CREATED)
async def create_tutorial(payload: schemas.TutorialCreate) -> schemas.TutorialResponse:
    return await service.create_tutorial(payload)


@router.put("/{tutorial_id}", response_model=schemas.TutorialResponse)
async def update_tutorial(tutorial_id: int, payload: schemas.TutorialUpdate) -> schemas.TutorialResponse:
    return await service.update_tutorial(tutorial_id, payload)


@router.delete("/{tutorial_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_tutorial(tutorial_id: int) -> Response:
    await service.delete_tutorial(tutorial_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def delete_all_tutorials() -> Response:
    await service.delete_all_tutorials()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
