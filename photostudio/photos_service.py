from __future__ import annotations
import logging
from datetime import datetime, timezone
from typing import List, Optional
from sqlalchemy import delete, desc, update
from sqlmodel import Session, select

from .errors import Forbidden, NotFound, ValidationError
from .models import Comment, Photo
from .paging import Page

log = logging.getLogger(__name__)

def _newest_first(stmt):
    return stmt.order_by(desc(Photo.created_at), desc(Photo.id))

def list_public(session: Session, page: Page) -> List[Photo]:
    stmt = _newest_first(select(Photo).where(Photo.is_public == True))  # noqa: E712
    return list(session.exec(stmt.offset(page.offset).limit(page.limit)).all())

def list_all(session: Session, is_admin: bool, page: Optional[Page] = None) -> List[Photo]:
    """Every photo for admins, public ones otherwise; ``page=None`` returns the full set."""
    stmt = select(Photo)
    if not is_admin:
        stmt = stmt.where(Photo.is_public == True)  # noqa: E712
    stmt = _newest_first(stmt)
    if page is not None:
        stmt = stmt.offset(page.offset).limit(page.limit)
    return list(session.exec(stmt).all())

def get_photo(session: Session, photo_id: int, is_admin: bool) -> Photo:
    photo = session.get(Photo, photo_id)
    if not photo:
        raise NotFound("Photo not found")
    if not photo.is_public and not is_admin:
        # 403 rather than 404: a private photo's existence is visible to callers
        raise Forbidden("Forbidden")
    return photo

def create_photo(
    session: Session,
    owner_user_id: int,
    *,
    file_path: Optional[str],
    title: Optional[str] = None,
    description: Optional[str] = None,
    thumbnail_path: Optional[str] = None,
    width: Optional[int] = None,
    height: Optional[int] = None,
    taken_at: Optional[datetime] = None,
    is_public: bool = True,
) -> Photo:
    if not file_path or not file_path.strip():
        raise ValidationError("file_path is required")
    if taken_at is not None:
        # stored as UTC; naive values are taken to be UTC already
        if taken_at.tzinfo is None:
            taken_at = taken_at.replace(tzinfo=timezone.utc)
        taken_at = taken_at.astimezone(timezone.utc)
    photo = Photo(
        owner_user_id=owner_user_id,
        title=title or None,
        description=description or None,
        file_path=file_path.strip(),
        thumbnail_path=thumbnail_path or None,
        width=width,
        height=height,
        taken_at=taken_at,
        is_public=bool(is_public),
    )
    session.add(photo)
    session.commit()
    session.refresh(photo)
    log.info("PHOTO_CREATED id=%s owner=%s public=%s", photo.id, owner_user_id, photo.is_public)
    return photo

def delete_photo(session: Session, photo_id: int) -> None:
    photo = session.get(Photo, photo_id)
    if not photo:
        raise NotFound("Photo not found")
    # detach replies first so the bulk delete never trips the self-referencing key
    session.exec(update(Comment).where(Comment.photo_id == photo_id).values(parent_comment_id=None))
    session.exec(delete(Comment).where(Comment.photo_id == photo_id))
    session.delete(photo)
    session.commit()
    log.info("PHOTO_DELETED id=%s", photo_id)
