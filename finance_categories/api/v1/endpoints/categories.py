"""
Category API endpoints

Mutating routes return the action result envelope with a status code
derived from its failure code.
"""
from typing import Any, List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from finance_categories.api.deps import get_category_actions
from finance_categories.models.category import CategoryType
from finance_categories.schemas.category import CategoryResponse
from finance_categories.services.category_actions import CategoryActions

router = APIRouter()

STATUS_BY_CODE = {
    "validation": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "not_found": status.HTTP_404_NOT_FOUND,
    "conflict": status.HTTP_409_CONFLICT,
    "in_use": status.HTTP_409_CONFLICT,
    "unexpected": status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def envelope_response(result: BaseModel, success_status: int = status.HTTP_200_OK) -> JSONResponse:
    """Serialize envelope with camelCase keys and matching status code"""
    if result.success:
        status_code = success_status
    else:
        status_code = STATUS_BY_CODE.get(result.code, status.HTTP_400_BAD_REQUEST)
    return JSONResponse(
        status_code=status_code,
        content=result.model_dump(mode="json", by_alias=True, exclude_none=True)
    )


@router.get("/", response_model=List[CategoryResponse])
async def get_categories(
    actions: CategoryActions = Depends(get_category_actions),
    type: Optional[CategoryType] = Query(
        None,
        description="Only categories usable for this flow (BOTH included)"
    )
):
    """
    Get all categories for current user ordered by name

    - **type**: Optional flow filter
    """
    return await actions.list(category_type=type)


@router.get("/{category_id}", response_model=CategoryResponse)
async def get_category(
    category_id: str,
    actions: CategoryActions = Depends(get_category_actions)
):
    """
    Get specific category by ID
    """
    result = await actions.get(category_id)
    if not result.success:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=result.error
        )
    return result.data


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_category(
    payload: Any = Body(...),
    actions: CategoryActions = Depends(get_category_actions)
):
    """
    Create new category
    """
    result = await actions.create(payload)
    return envelope_response(result, success_status=status.HTTP_201_CREATED)


@router.post("/defaults")
async def seed_default_categories(
    actions: CategoryActions = Depends(get_category_actions)
):
    """
    Add default categories the user does not have yet

    Returns 201 when something was added, 200 when nothing was missing.
    """
    result = await actions.seed_defaults()
    success_status = status.HTTP_201_CREATED if result.added else status.HTTP_200_OK
    return envelope_response(result, success_status=success_status)


@router.put("/{category_id}")
async def update_category(
    category_id: str,
    payload: Any = Body(...),
    actions: CategoryActions = Depends(get_category_actions)
):
    """
    Replace category attributes
    """
    result = await actions.update(category_id, payload)
    return envelope_response(result)


@router.delete("/{category_id}")
async def delete_category(
    category_id: str,
    actions: CategoryActions = Depends(get_category_actions)
):
    """
    Delete category

    Refused while budgets use it; its transactions become uncategorized.
    """
    result = await actions.delete(category_id)
    return envelope_response(result)
