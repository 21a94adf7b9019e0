from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from app.core.database import get_db
from app.core.policies import Action, require_permission
from app.models.user import User
from app.schemas.forum import AcceptAnswer, ForumPostCreate, ForumPostUpdate, ForumReplyCreate, ForumVote
from app.services.forum_service import get_forum_service

router = APIRouter()


@router.get("")
async def list_posts(
    category: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    author: Optional[str] = Query(None, description="Author role: student, lecturer or admin"),
    search: Optional[str] = Query(None),
    current_user: User = Depends(require_permission(Action.FORUM_READ)),
    db: AsyncSession = Depends(get_db)
):
    """
    Department forum listing.

    Non-admins only see posts from their own department. Pinned posts come
    first, then the most recently active.
    """
    return await get_forum_service(db).list_posts(
        current_user, category=category, status=status, author=author, search=search
    )


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_post(
    payload: ForumPostCreate,
    current_user: User = Depends(require_permission(Action.FORUM_POST)),
    db: AsyncSession = Depends(get_db)
):
    post_id = await get_forum_service(db).create_post(
        current_user,
        title=payload.title,
        content=payload.content,
        category=payload.category,
        tags=payload.tags,
        is_anonymous=payload.is_anonymous,
    )
    return {"message": "Post created successfully", "post_id": post_id}


# Declared before /{post_id} so "stats" is not taken for an id
@router.get("/stats")
async def forum_stats(
    current_user: User = Depends(require_permission(Action.FORUM_READ)),
    db: AsyncSession = Depends(get_db)
):
    return await get_forum_service(db).get_stats(current_user)


@router.get("/{post_id}")
async def get_post(
    post_id: str,
    current_user: User = Depends(require_permission(Action.FORUM_READ)),
    db: AsyncSession = Depends(get_db)
):
    return await get_forum_service(db).get_post(post_id, current_user)


@router.patch("/{post_id}")
async def update_post(
    post_id: str,
    payload: ForumPostUpdate,
    current_user: User = Depends(require_permission(Action.FORUM_POST)),
    db: AsyncSession = Depends(get_db)
):
    return await get_forum_service(db).update_post(
        post_id, current_user, payload.model_dump(exclude_unset=True)
    )


@router.delete("/{post_id}")
async def delete_post(
    post_id: str,
    current_user: User = Depends(require_permission(Action.FORUM_POST)),
    db: AsyncSession = Depends(get_db)
):
    await get_forum_service(db).delete_post(post_id, current_user)
    return {"message": "Post deleted successfully"}


@router.post("/{post_id}/replies", status_code=status.HTTP_201_CREATED)
async def add_reply(
    post_id: str,
    payload: ForumReplyCreate,
    current_user: User = Depends(require_permission(Action.FORUM_POST)),
    db: AsyncSession = Depends(get_db)
):
    return await get_forum_service(db).add_reply(post_id, current_user, payload.content)


@router.post("/{post_id}/vote")
async def vote(
    post_id: str,
    payload: ForumVote,
    current_user: User = Depends(require_permission(Action.FORUM_READ)),
    db: AsyncSession = Depends(get_db)
):
    """Toggle an up or down vote on the post, or on one of its replies"""
    return await get_forum_service(db).vote(
        post_id, current_user, payload.vote_type, payload.reply_id
    )


@router.post("/{post_id}/accept-answer")
async def accept_answer(
    post_id: str,
    payload: AcceptAnswer,
    current_user: User = Depends(require_permission(Action.FORUM_POST)),
    db: AsyncSession = Depends(get_db)
):
    return await get_forum_service(db).accept_answer(post_id, current_user, payload.reply_id)
