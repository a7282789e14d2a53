from typing import List
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlmodel import Session

from . import comments_service, users_service
from .auth import AuthenticatedUser, UserOut, require_admin
from .comments_api import CommentOut, comment_out
from .db import get_session

router = APIRouter(prefix="/api/admin", tags=["admin"])

class UsersOut(BaseModel):
    users: List[UserOut]

class CommentsOut(BaseModel):
    comments: List[CommentOut]

@router.get("/users", response_model=UsersOut)
def list_users(session: Session = Depends(get_session), admin: AuthenticatedUser = Depends(require_admin)):
    return UsersOut(users=[UserOut.model_validate(u) for u in users_service.list_users(session)])

@router.get("/comments", response_model=CommentsOut)
def list_recent_comments(session: Session = Depends(get_session), admin: AuthenticatedUser = Depends(require_admin)):
    return CommentsOut(comments=[comment_out(r) for r in comments_service.list_recent(session)])
