"""Module: notifications."""

import uuid

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import desc, select, update
from sqlalchemy.orm import Session

from innovet.api.v1.routes.deps import get_current_user, get_db
from innovet.core.errors import NotFound
from innovet.db.models.notification import Notification
from innovet.db.models.user import User
from innovet.services.notification_service import notification_to_dict

router = APIRouter()

NOTIFICATION_FILTERS = {"all", "unread", "emergency"}


def _is_emergency(item: dict) -> bool:
    return item["type"] == "sos" and item["is_user_triggered"]


# Endpoint: the actor's notifications, newest first, with badge counts.
@router.get("", summary="List notifications for the current user")
def list_notifications(
    view: str = Query(default="all", alias="filter"),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    if view not in NOTIFICATION_FILTERS:
        raise HTTPException(status_code=400, detail="Invalid filter (one of all, emergency, unread)")

    rows = db.execute(
        select(Notification)
        .where(Notification.user_id == user.user_id)
        .order_by(desc(Notification.created_at))
    ).scalars().all()
    items = [notification_to_dict(n) for n in rows]

    if view == "unread":
        visible = [i for i in items if not i["is_read"]]
    elif view == "emergency":
        visible = [i for i in items if _is_emergency(i)]
    else:
        visible = items

    return {
        "items": visible,
        "unread_count": sum(1 for i in items if not i["is_read"]),
        "sos_count": sum(1 for i in items if _is_emergency(i) and not i["is_read"]),
    }


@router.post("/{notification_id}/read", summary="Mark one notification read")
def mark_read(
    notification_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    try:
        nid = uuid.UUID(notification_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid notification_id (must be UUID)")

    notification = db.execute(
        select(Notification).where(
            Notification.notification_id == nid,
            Notification.user_id == user.user_id,
        )
    ).scalar_one_or_none()
    if not notification:
        raise NotFound("Notification not found")

    notification.is_read = True
    db.commit()
    db.refresh(notification)
    return notification_to_dict(notification)


@router.post("/read-all", summary="Mark all of the current user's notifications read")
def mark_all_read(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    result = db.execute(
        update(Notification)
        .where(Notification.user_id == user.user_id, Notification.is_read.is_(False))
        .values(is_read=True)
    )
    db.commit()
    return {"updated": result.rowcount}
