"""
Forum Service Layer
Department-scoped discussion posts, replies, votes and statistics
"""

from collections import Counter
from typing import Any, Dict, Iterable, List, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    AuthorizationError,
    CommentNotFoundError,
    PostNotFoundError,
    ValidationError,
    require_fields,
)
from app.core.logging_config import logger
from app.core.policies import Action, is_allowed
from app.core.types import utc_now
from app.models.forum import ForumCategory, ForumPost, ForumPostStatus, ForumReply
from app.models.user import User, UserRole

VALID_CATEGORIES = {c.value for c in ForumCategory}
VOTE_TYPES = {"upvote": "upvotes", "downvote": "downvotes"}
RECENT_POSTS_LIMIT = 5
ANONYMOUS_NAME = "Anonymous"


def _role_value(role) -> str:
    return role.value if isinstance(role, UserRole) else str(role)


def in_department_scope(post, role, department: Optional[str]) -> bool:
    """Admins see every post, everyone else only their department's"""
    return _role_value(role) == UserRole.ADMIN.value or post.department == department


def compute_forum_stats(
    posts: Iterable[Any],
    requester_id: str,
    requester_role,
    requester_department: Optional[str],
) -> Dict[str, Any]:
    """
    Aggregate forum statistics over in-memory posts.

    Posts outside the requester's scope are ignored, so callers may pass any
    superset of the scoped posts.
    """
    requester_id = str(requester_id)
    scoped = [p for p in posts if in_department_scope(p, requester_role, requester_department)]

    def status_of(post) -> str:
        status = post.status
        return status.value if isinstance(status, ForumPostStatus) else str(status)

    categories = Counter(post.category for post in scoped)
    category_stats = [
        {"category": category, "count": count}
        for category, count in sorted(categories.items(), key=lambda item: (-item[1], item[0]))
    ]

    recent = sorted(scoped, key=lambda p: p.last_activity_at, reverse=True)[:RECENT_POSTS_LIMIT]

    return {
        "total_posts": len(scoped),
        "total_replies": sum(len(p.replies or []) for p in scoped),
        "resolved_posts": sum(1 for p in scoped if status_of(p) == ForumPostStatus.RESOLVED.value),
        "open_posts": sum(1 for p in scoped if status_of(p) == ForumPostStatus.OPEN.value),
        "my_posts": sum(1 for p in scoped if str(p.author_id) == requester_id),
        "my_replies": sum(
            1 for p in scoped for r in (p.replies or []) if str(r.author_id) == requester_id
        ),
        "category_stats": category_stats,
        "recent_posts": [
            {
                "id": str(p.id),
                "title": p.title,
                "author_name": p.author_name,
                "category": p.category,
                "status": status_of(p),
                "reply_count": len(p.replies or []),
                "last_activity_at": p.last_activity_at,
            }
            for p in recent
        ],
    }


def toggle_vote(upvotes: List[str], downvotes: List[str], user_id: str, vote_type: str):
    """
    Toggle a vote and drop the opposite one.

    Returns new (upvotes, downvotes) lists; the inputs are not modified.
    """
    if vote_type not in VOTE_TYPES:
        raise ValidationError("Vote type must be 'upvote' or 'downvote'", field="vote_type")

    user_id = str(user_id)
    up = [u for u in (upvotes or []) if u != user_id]
    down = [u for u in (downvotes or []) if u != user_id]

    if vote_type == "upvote" and user_id not in (upvotes or []):
        up.append(user_id)
    elif vote_type == "downvote" and user_id not in (downvotes or []):
        down.append(user_id)
    return up, down


class ForumService:
    """Service for forum operations"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _get(self, post_id: str) -> ForumPost:
        result = await self.db.execute(select(ForumPost).where(ForumPost.id == str(post_id)))
        post = result.scalar_one_or_none()
        if not post:
            raise PostNotFoundError(post_id)
        return post

    def _check_scope(self, post: ForumPost, user: User) -> None:
        if not in_department_scope(post, user.role, user.department):
            raise AuthorizationError()

    def _check_owner(self, post: ForumPost, user: User) -> None:
        if str(post.author_id) != str(user.id) and not is_allowed(user.role, Action.FORUM_MODERATE):
            raise AuthorizationError()

    def _scoped_query(self, user: User):
        query = select(ForumPost)
        if user.role != UserRole.ADMIN:
            if user.department is None:
                query = query.where(ForumPost.department.is_(None))
            else:
                query = query.where(ForumPost.department == user.department)
        return query

    @staticmethod
    def _vote_fields(item, user_id: str) -> Dict[str, Any]:
        return {
            "vote_count": item.vote_count,
            "has_upvoted": user_id in (item.upvotes or []),
            "has_downvoted": user_id in (item.downvotes or []),
        }

    def _serialize(self, post: ForumPost, user: User, with_replies: bool = False) -> Dict[str, Any]:
        user_id = str(user.id)
        data = {
            "id": str(post.id),
            "title": post.title,
            "content": post.content,
            "author_id": None if post.is_anonymous else str(post.author_id),
            "author_name": post.author_name,
            "author_role": post.author_role,
            "department": post.department,
            "category": post.category,
            "status": post.status.value,
            "tags": list(post.tags or []),
            "is_pinned": bool(post.is_pinned),
            "is_anonymous": bool(post.is_anonymous),
            "views": post.views,
            "reply_count": len(post.replies),
            "created_at": post.created_at,
            "updated_at": post.updated_at,
            "last_activity_at": post.last_activity_at,
            **self._vote_fields(post, user_id),
        }
        if with_replies:
            data["replies"] = [
                {
                    "id": str(reply.id),
                    "content": reply.content,
                    "author_id": str(reply.author_id),
                    "author_name": reply.author_name,
                    "author_role": reply.author_role,
                    "is_accepted_answer": bool(reply.is_accepted_answer),
                    "created_at": reply.created_at,
                    **self._vote_fields(reply, user_id),
                }
                for reply in post.replies
            ]
        return data

    # =====================================================
    # POSTS
    # =====================================================

    async def list_posts(
        self,
        user: User,
        category: Optional[str] = None,
        status: Optional[str] = None,
        author: Optional[str] = None,
        search: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        query = self._scoped_query(user)

        if category and category != "all":
            query = query.where(ForumPost.category == category)
        if status and status != "all":
            try:
                query = query.where(ForumPost.status == ForumPostStatus(status))
            except ValueError:
                raise ValidationError("Invalid status", field="status")
        if author and author != "all":
            query = query.where(ForumPost.author_role == author)

        result = await self.db.execute(
            query.order_by(ForumPost.is_pinned.desc(), ForumPost.last_activity_at.desc())
        )
        posts = list(result.scalars().all())

        if search and search.strip():
            needle = search.strip().lower()
            posts = [
                p for p in posts
                if needle in p.title.lower()
                or needle in p.content.lower()
                or any(needle in str(tag).lower() for tag in (p.tags or []))
            ]

        return [self._serialize(p, user) for p in posts]

    async def create_post(
        self,
        user: User,
        title: Optional[str],
        content: Optional[str],
        category: Optional[str],
        tags: Optional[List[str]] = None,
        is_anonymous: bool = False,
    ) -> str:
        require_fields(title=title, content=content, category=category)
        category = category.strip()
        if category not in VALID_CATEGORIES:
            raise ValidationError(
                f"Category must be one of: {', '.join(sorted(VALID_CATEGORIES))}", field="category"
            )

        now = utc_now()
        post = ForumPost(
            author_id=str(user.id),
            author_name=ANONYMOUS_NAME if is_anonymous else user.name,
            author_role=user.role_value,
            title=title.strip(),
            content=content.strip(),
            department=user.department,
            category=category,
            status=ForumPostStatus.OPEN,
            tags=[t.strip() for t in (tags or []) if t and t.strip()],
            is_pinned=False,
            is_anonymous=bool(is_anonymous),
            upvotes=[],
            downvotes=[],
            views=0,
            created_at=now,
            updated_at=now,
            last_activity_at=now,
        )
        self.db.add(post)
        await self.db.commit()

        logger.info(f"[Forum] {user.id} created post {post.id}")
        return str(post.id)

    async def get_post(self, post_id: str, user: User) -> Dict[str, Any]:
        """Full post with replies; counts as a view"""
        post = await self._get(post_id)
        self._check_scope(post, user)

        post.views = (post.views or 0) + 1
        await self.db.commit()
        return self._serialize(post, user, with_replies=True)

    async def update_post(self, post_id: str, user: User, updates: Dict[str, Any]) -> Dict[str, Any]:
        post = await self._get(post_id)
        self._check_owner(post, user)

        for field in ("title", "content"):
            if updates.get(field) is not None:
                if not updates[field].strip():
                    raise ValidationError(f"{field.capitalize()} cannot be empty", field=field)
                setattr(post, field, updates[field].strip())

        if updates.get("category") is not None:
            category = updates["category"].strip()
            if category not in VALID_CATEGORIES:
                raise ValidationError("Invalid category", field="category")
            post.category = category

        if updates.get("status") is not None:
            try:
                post.status = ForumPostStatus(updates["status"])
            except ValueError:
                raise ValidationError("Invalid status", field="status")

        if updates.get("tags") is not None:
            post.tags = [t.strip() for t in updates["tags"] if t and t.strip()]

        if updates.get("is_pinned") is not None:
            if not is_allowed(user.role, Action.FORUM_MODERATE):
                raise AuthorizationError()
            post.is_pinned = bool(updates["is_pinned"])

        now = utc_now()
        post.updated_at = now
        post.last_activity_at = now
        await self.db.commit()
        return self._serialize(post, user, with_replies=True)

    async def delete_post(self, post_id: str, user: User) -> None:
        post = await self._get(post_id)
        self._check_owner(post, user)
        await self.db.delete(post)
        await self.db.commit()
        logger.info(f"[Forum] {user.id} deleted post {post_id}")

    # =====================================================
    # REPLIES & VOTES
    # =====================================================

    async def add_reply(self, post_id: str, user: User, content: Optional[str]) -> Dict[str, Any]:
        require_fields(content=content)
        post = await self._get(post_id)
        self._check_scope(post, user)

        now = utc_now()
        post.replies.append(ForumReply(
            author_id=str(user.id),
            author_name=user.name,
            author_role=user.role_value,
            content=content.strip(),
            is_accepted_answer=False,
            upvotes=[],
            downvotes=[],
            created_at=now,
            updated_at=now,
        ))
        post.last_activity_at = now
        post.updated_at = now
        await self.db.commit()
        return self._serialize(post, user, with_replies=True)

    def _find_reply(self, post: ForumPost, reply_id: str) -> ForumReply:
        for reply in post.replies:
            if str(reply.id) == str(reply_id):
                return reply
        raise CommentNotFoundError(reply_id)

    async def vote(
        self, post_id: str, user: User, vote_type: Optional[str], reply_id: Optional[str] = None
    ) -> Dict[str, Any]:
        """Toggle the user's vote on the post, or on one of its replies"""
        require_fields(vote_type=vote_type)
        post = await self._get(post_id)
        self._check_scope(post, user)

        target = self._find_reply(post, reply_id) if reply_id else post
        # Reassign the JSON lists so the change is persisted
        target.upvotes, target.downvotes = toggle_vote(
            target.upvotes, target.downvotes, str(user.id), vote_type
        )
        await self.db.commit()
        return {"id": str(target.id), **self._vote_fields(target, str(user.id))}

    async def accept_answer(self, post_id: str, user: User, reply_id: Optional[str]) -> Dict[str, Any]:
        """Mark exactly one reply as the accepted answer and resolve the post"""
        require_fields(reply_id=reply_id)
        post = await self._get(post_id)
        self._check_owner(post, user)

        accepted = self._find_reply(post, reply_id)
        for reply in post.replies:
            reply.is_accepted_answer = reply is accepted
        post.status = ForumPostStatus.RESOLVED
        post.updated_at = utc_now()
        await self.db.commit()
        return self._serialize(post, user, with_replies=True)

    # =====================================================
    # STATISTICS
    # =====================================================

    async def get_stats(self, user: User) -> Dict[str, Any]:
        result = await self.db.execute(self._scoped_query(user))
        return compute_forum_stats(result.scalars().all(), str(user.id), user.role, user.department)


def get_forum_service(db: AsyncSession) -> ForumService:
    return ForumService(db)
