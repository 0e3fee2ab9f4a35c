# storefront/routers/contact.py
import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from storefront.core.auth import require_admin
from storefront.database import get_session
from storefront.models.user import User
from storefront.repositories.contact_repo import ContactRepository
from storefront.repositories.stats_repo import StatsRepository
from storefront.schemas.common import ApiResponse, SortOrder, ok
from storefront.schemas.contact import (
    ContactMessageCreate,
    ContactMessageRead,
    ContactStats,
    ContactSubmitted,
    MessageCategory,
    MessagePriority,
    MessagePriorityUpdate,
    MessageStatus,
    MessageStatusUpdate,
)
from storefront.services.contact_service import ContactService

router = APIRouter(prefix="/contact", tags=["Contact"])

service = ContactService(ContactRepository(), StatsRepository())


def _read(message) -> ContactMessageRead:
    return ContactMessageRead.model_validate(message)


# -------- Public endpoint --------


@router.post(
    "",
    response_model=ApiResponse[ContactSubmitted],
    status_code=status.HTTP_201_CREATED,
)
def submit_message(
    payload: ContactMessageCreate,
    session: Session = Depends(get_session),
):
    """
    Contact form submission. Anyone may post.
    """
    message = service.submit(session, payload)
    return ok(
        ContactSubmitted(id=message.id),
        message="Message sent successfully. We will get back to you soon.",
    )


# -------- Admin endpoints --------


@router.get(
    "",
    response_model=ApiResponse[list[ContactMessageRead]],
    dependencies=[Depends(require_admin)],
)
def list_messages(
    session: Session = Depends(get_session),
    status: MessageStatus | None = None,
    category: MessageCategory | None = None,
    priority: MessagePriority | None = None,
    search: str | None = None,
    sort_by: str = "created_at",
    order: SortOrder = "desc",
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
):
    """
    Inbox listing with filters (admin only).
    """
    messages, pagination = service.list_messages(
        session,
        status=status,
        category=category,
        priority=priority,
        search=search,
        sort_by=sort_by,
        descending=order == "desc",
        page=page,
        limit=limit,
    )
    return ok([_read(m) for m in messages], pagination=pagination)


@router.get(
    "/stats",
    response_model=ApiResponse[ContactStats],
    dependencies=[Depends(require_admin)],
)
def message_stats(session: Session = Depends(get_session)):
    """
    Counts per status, priority and category plus the latest messages.
    """
    return ok(service.stats(session))


@router.get(
    "/{message_id}",
    response_model=ApiResponse[ContactMessageRead],
    dependencies=[Depends(require_admin)],
)
def get_message(
    message_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Open a message (admin only). New messages become "read".
    """
    return ok(_read(service.get_message(session, message_id)))


@router.put("/{message_id}/status", response_model=ApiResponse[ContactMessageRead])
def update_message_status(
    message_id: uuid.UUID,
    payload: MessageStatusUpdate,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    """
    Change status and notes (admin only). "replied" records the replying admin.
    """
    message = service.update_status(session, message_id, payload, admin)
    return ok(_read(message), message="Message status updated")


@router.put(
    "/{message_id}/priority",
    response_model=ApiResponse[ContactMessageRead],
    dependencies=[Depends(require_admin)],
)
def update_message_priority(
    message_id: uuid.UUID,
    payload: MessagePriorityUpdate,
    session: Session = Depends(get_session),
):
    message = service.update_priority(session, message_id, payload)
    return ok(_read(message), message="Message priority updated")


@router.delete(
    "/{message_id}",
    response_model=ApiResponse[None],
    dependencies=[Depends(require_admin)],
)
def delete_message(
    message_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    service.delete_message(session, message_id)
    return ok(message="Message deleted")
