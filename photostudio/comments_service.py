from __future__ import annotations
import logging
from typing import List, Optional, Tuple
from sqlalchemy import desc, update
from sqlmodel import Session, select

from .errors import NotFound, ValidationError
from .models import Comment, Photo, User
from .paging import Page

log = logging.getLogger(__name__)

IP_MAX_LEN = 45
ADMIN_LIST_CAP = 1000

# (comment, author first name, author last name)
CommentRow = Tuple[Comment, Optional[str], Optional[str]]

def _with_author():
    return select(Comment, User.first_name, User.last_name).join(User, User.id == Comment.user_id, isouter=True)

def _require_photo(session: Session, photo_id: int) -> None:
    if not session.get(Photo, photo_id):
        raise NotFound("Photo not found")

def client_ip(forwarded_for: Optional[str], peer: Optional[str]) -> Optional[str]:
    raw = forwarded_for or peer or ""
    ip = raw.split(",")[0].strip()[:IP_MAX_LEN]
    return ip or None

def list_for_photo(session: Session, photo_id: int, page: Page) -> List[CommentRow]:
    _require_photo(session, photo_id)
    stmt = (
        _with_author()
        .where(Comment.photo_id == photo_id)
        .order_by(Comment.created_at, Comment.id)
        .offset(page.offset)
        .limit(page.limit)
    )
    return list(session.exec(stmt).all())

def list_recent(session: Session, limit: int = ADMIN_LIST_CAP) -> List[CommentRow]:
    stmt = _with_author().order_by(desc(Comment.created_at), desc(Comment.id)).limit(min(limit, ADMIN_LIST_CAP))
    return list(session.exec(stmt).all())

def create_comment(
    session: Session,
    photo_id: int,
    author_user_id: int,
    content: Optional[str],
    parent_id: Optional[int] = None,
    ip: Optional[str] = None,
) -> CommentRow:
    text = (content or "").strip()
    if not text:
        raise ValidationError("content is required")
    _require_photo(session, photo_id)
    if parent_id is not None:
        parent = session.get(Comment, parent_id)
        if not parent:
            raise ValidationError("Parent comment not found")
        if parent.photo_id != photo_id:
            raise ValidationError("Parent comment does not belong to this photo")

    comment = Comment(
        photo_id=photo_id,
        user_id=author_user_id,
        parent_comment_id=parent_id,
        content=text,
        ip_address=ip[:IP_MAX_LEN] if ip else None,
    )
    session.add(comment)
    session.commit()
    log.info("COMMENT_CREATED id=%s photo=%s user=%s", comment.id, photo_id, author_user_id)

    row = session.exec(_with_author().where(Comment.id == comment.id)).first()
    if row is None:
        # deleted between insert and read-back
        raise NotFound("Comment not found")
    return row

def delete_comment(session: Session, comment_id: int) -> None:
    comment = session.get(Comment, comment_id)
    if not comment:
        raise NotFound("Comment not found")
    session.exec(update(Comment).where(Comment.parent_comment_id == comment_id).values(parent_comment_id=None))
    session.delete(comment)
    session.commit()
    log.info("COMMENT_DELETED id=%s", comment_id)
