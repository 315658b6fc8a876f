import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.core.security import get_current_user_id
from app.db import dynamo
from app.models.category import DEFAULT_CATEGORIES, CategoryCreate, CategoryInDB, CategoryPublic, CategoryUpdate
from app.models.transaction import TransactionType

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/", response_model=List[CategoryPublic])
def list_categories(
    type: Optional[TransactionType] = Query(None),
    user_id: str = Depends(get_current_user_id),
):
    return [CategoryPublic(**item) for item in dynamo.get_categories_for_user(user_id, type)]


@router.post("/", response_model=CategoryPublic, status_code=status.HTTP_201_CREATED)
def create_category(category: CategoryCreate, user_id: str = Depends(get_current_user_id)):
    category_db = CategoryInDB(user_id=user_id, **category.model_dump())
    if not dynamo.put_category(category_db.model_dump()):
        raise HTTPException(status_code=500, detail="Failed to save category")
    return CategoryPublic(**category_db.model_dump())


@router.post("/defaults", response_model=List[CategoryPublic], status_code=status.HTTP_201_CREATED)
def create_default_categories(user_id: str = Depends(get_current_user_id)):
    """Seed the default income and expense categories for a user who has none."""
    if dynamo.get_categories_for_user(user_id):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Categories already exist")

    created = []
    for default in DEFAULT_CATEGORIES:
        category_db = CategoryInDB(user_id=user_id, **default.model_dump())
        if not dynamo.put_category(category_db.model_dump()):
            raise HTTPException(status_code=500, detail="Failed to save category")
        created.append(CategoryPublic(**category_db.model_dump()))

    logger.info(f"Created {len(created)} default categories for user {user_id}")
    return created


@router.get("/{category_id}", response_model=CategoryPublic)
def get_category(category_id: str, user_id: str = Depends(get_current_user_id)):
    category = dynamo.get_category(user_id, category_id)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    return CategoryPublic(**category)


@router.put("/{category_id}", response_model=CategoryPublic)
def update_category(
    category_id: str,
    category_update: CategoryUpdate,
    user_id: str = Depends(get_current_user_id),
):
    mutable_fields = category_update.model_dump(exclude_unset=True, exclude_none=True)
    if not mutable_fields:
        raise HTTPException(status_code=400, detail="No fields to update")

    updated = dynamo.update_category(user_id, category_id, mutable_fields)
    if not updated:
        raise HTTPException(status_code=404, detail="Category not found")
    return CategoryPublic(**updated)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(category_id: str, user_id: str = Depends(get_current_user_id)):
    if not dynamo.delete_category(user_id, category_id):
        raise HTTPException(status_code=404, detail="Category not found")
    return None
