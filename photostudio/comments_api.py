from __future__ import annotations
from datetime import datetime
from typing import List, Optional
from fastapi import APIRouter, Depends, Header, Path, Query, Request, Response
from pydantic import BaseModel
from sqlmodel import Session

from . import comments_service
from .auth import AuthenticatedUser, current_user, require_admin
from .db import get_session
from .errors import ValidationError
from .paging import paginate

router = APIRouter(prefix="/api/comments", tags=["comments"])

DEFAULT_LIMIT = 100

class CommentIn(BaseModel):
    photo_id: Optional[int] = None
    content: Optional[str] = None
    parent_comment_id: Optional[int] = None

class CommentOut(BaseModel):
    id: int
    photo_id: int
    user_id: int
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    parent_comment_id: Optional[int] = None
    content: str
    is_flagged: bool
    created_at: datetime
    updated_at: datetime

class CommentEnvelope(BaseModel):
    comment: CommentOut

class CommentPageOut(BaseModel):
    page: int
    limit: int
    comments: List[CommentOut]

def comment_out(row) -> CommentOut:
    c, first_name, last_name = row
    return CommentOut(
        id=c.id,
        photo_id=c.photo_id,
        user_id=c.user_id,
        first_name=first_name,
        last_name=last_name,
        parent_comment_id=c.parent_comment_id,
        content=c.content,
        is_flagged=c.is_flagged,
        created_at=c.created_at,
        updated_at=c.updated_at,
    )

def _list(photo_id: int, page: Optional[str], limit: Optional[str], session: Session) -> CommentPageOut:
    pg = paginate(page, limit, DEFAULT_LIMIT)
    rows = comments_service.list_for_photo(session, photo_id, pg)
    return CommentPageOut(page=pg.page, limit=pg.limit, comments=[comment_out(r) for r in rows])

def _create(photo_id: Optional[int], payload: CommentIn, request: Request, forwarded_for: Optional[str],
            session: Session, user: AuthenticatedUser) -> CommentEnvelope:
    if not photo_id or photo_id < 1:
        raise ValidationError("photo_id is required")
    peer = request.client.host if request.client else None
    row = comments_service.create_comment(
        session,
        photo_id,
        user.id,
        payload.content,
        parent_id=payload.parent_comment_id or None,
        ip=comments_service.client_ip(forwarded_for, peer),
    )
    return CommentEnvelope(comment=comment_out(row))

@router.get("/photo/{photo_id}", response_model=CommentPageOut)
def list_comments_legacy(
    photo_id: int = Path(..., gt=0),
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    session: Session = Depends(get_session),
):
    return _list(photo_id, page, limit, session)

@router.post("/photo/{photo_id}", response_model=CommentEnvelope, status_code=201)
def create_comment_legacy(
    payload: CommentIn,
    request: Request,
    photo_id: int = Path(..., gt=0),
    x_forwarded_for: Optional[str] = Header(None),
    session: Session = Depends(get_session),
    user: AuthenticatedUser = Depends(current_user),
):
    return _create(photo_id, payload, request, x_forwarded_for, session, user)

@router.get("/{photo_id}", response_model=CommentPageOut)
def list_comments(
    photo_id: int = Path(..., gt=0),
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    session: Session = Depends(get_session),
):
    return _list(photo_id, page, limit, session)

@router.post("", response_model=CommentEnvelope, status_code=201)
def create_comment(
    payload: CommentIn,
    request: Request,
    x_forwarded_for: Optional[str] = Header(None),
    session: Session = Depends(get_session),
    user: AuthenticatedUser = Depends(current_user),
):
    return _create(payload.photo_id, payload, request, x_forwarded_for, session, user)

@router.delete("/{comment_id}", status_code=204)
def delete_comment(
    comment_id: int = Path(..., gt=0),
    session: Session = Depends(get_session),
    admin: AuthenticatedUser = Depends(require_admin),
):
    comments_service.delete_comment(session, comment_id)
    return Response(status_code=204)
