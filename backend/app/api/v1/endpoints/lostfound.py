from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from app.core.database import get_db
from app.core.policies import Action, require_permission
from app.models.user import User
from app.modules.auth.dependencies import get_current_user
from app.schemas.lost_found import CommentCreate, LostFoundCreate, LostFoundUpdate
from app.services.lost_found_service import get_lost_found_service

router = APIRouter()


# ==================== Public listing ====================

@router.get("")
async def list_items(
    type: Optional[str] = Query(None, description="lost or found"),
    status: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_db)
):
    return await get_lost_found_service(db).list_items(
        type=type, status=status, category=category, page=page, limit=limit
    )


@router.get("/{item_id}")
async def get_item(item_id: str, db: AsyncSession = Depends(get_db)):
    return await get_lost_found_service(db).get_item(item_id)


# ==================== Authenticated ====================

@router.post("", status_code=status.HTTP_201_CREATED)
async def create_item(
    payload: LostFoundCreate,
    current_user: User = Depends(require_permission(Action.LOSTFOUND_POST)),
    db: AsyncSession = Depends(get_db)
):
    item_id = await get_lost_found_service(db).create_item(
        current_user,
        type=payload.type,
        title=payload.title,
        description=payload.description,
        category=payload.category,
        location=payload.location,
        date=payload.date,
        contact_info=payload.contact_info,
        image_url=payload.image_url,
    )
    return {"message": "Item posted successfully", "item_id": item_id}


@router.put("/{item_id}")
async def update_item(
    item_id: str,
    payload: LostFoundUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Change the status or record who claimed the item (author or admin)"""
    return await get_lost_found_service(db).update_item(
        item_id,
        current_user,
        status=payload.status,
        claimed_by=payload.claimed_by,
        claimed_by_name=payload.claimed_by_name,
    )


@router.delete("/{item_id}")
async def delete_item(
    item_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await get_lost_found_service(db).delete_item(item_id, current_user)
    return {"message": "Item deleted successfully"}


@router.post("/{item_id}/comments", status_code=status.HTTP_201_CREATED)
async def add_comment(
    item_id: str,
    payload: CommentCreate,
    current_user: User = Depends(require_permission(Action.LOSTFOUND_POST)),
    db: AsyncSession = Depends(get_db)
):
    return await get_lost_found_service(db).add_comment(item_id, current_user, payload.content)


@router.delete("/{item_id}/comments/{comment_id}")
async def delete_comment(
    item_id: str,
    comment_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await get_lost_found_service(db).delete_comment(item_id, comment_id, current_user)
    return {"message": "Comment deleted successfully"}
