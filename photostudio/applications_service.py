from __future__ import annotations
import logging
from datetime import date
from typing import List, Optional
from sqlalchemy import desc
from sqlmodel import Session, select

from .errors import Forbidden, NotFound, ValidationError
from .models import Application, utcnow
from .paging import Page

log = logging.getLogger(__name__)

STATUS_PENDING = "pending"

def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None

def create_application(
    session: Session,
    owner_user_id: int,
    *,
    full_name: Optional[str],
    email: Optional[str],
    message: Optional[str],
    phone: Optional[str] = None,
    event_date: Optional[date] = None,
    event_type: Optional[str] = None,
) -> Application:
    full_name, email, message = _clean(full_name), _clean(email), _clean(message)
    if not full_name or not email or not message:
        raise ValidationError("full_name, email and message are required")
    app = Application(
        user_id=owner_user_id,
        full_name=full_name,
        email=email.lower(),
        phone=_clean(phone),
        event_date=event_date,
        event_type=_clean(event_type),
        message=message,
        status=STATUS_PENDING,
    )
    session.add(app)
    session.commit()
    session.refresh(app)
    log.info("APPLICATION_CREATED id=%s user=%s", app.id, owner_user_id)
    return app

def list_applications(session: Session, page: Page, status: Optional[str] = None) -> List[Application]:
    stmt = select(Application)
    status = _clean(status)
    if status:
        stmt = stmt.where(Application.status == status)
    stmt = stmt.order_by(desc(Application.created_at), desc(Application.id)).offset(page.offset).limit(page.limit)
    return list(session.exec(stmt).all())

def get_application(session: Session, app_id: int, caller_user_id: int, caller_is_admin: bool) -> Application:
    app = session.get(Application, app_id)
    if not app:
        raise NotFound("Application not found")
    if app.user_id != caller_user_id and not caller_is_admin:
        raise Forbidden("Forbidden")
    return app

def update_status(session: Session, app_id: int, status: Optional[str]) -> Application:
    status = _clean(status)
    if not status:
        raise ValidationError("status is required")
    app = session.get(Application, app_id)
    if not app:
        raise NotFound("Application not found")
    previous = app.status
    app.status = status
    app.updated_at = utcnow()
    session.add(app)
    session.commit()
    session.refresh(app)
    log.info("APPLICATION_STATUS id=%s %s -> %s", app_id, previous, status)
    return app
