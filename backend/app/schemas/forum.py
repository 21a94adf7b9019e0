from pydantic import BaseModel, Field
from typing import List, Optional


class ForumPostCreate(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None
    category: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    is_anonymous: bool = False


class ForumPostUpdate(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None
    category: Optional[str] = None
    status: Optional[str] = None
    tags: Optional[List[str]] = None
    is_pinned: Optional[bool] = None


class ForumReplyCreate(BaseModel):
    content: Optional[str] = None


class ForumVote(BaseModel):
    vote_type: Optional[str] = None  # upvote | downvote
    reply_id: Optional[str] = None  # vote on a reply instead of the post


class AcceptAnswer(BaseModel):
    reply_id: Optional[str] = None
