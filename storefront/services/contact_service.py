# storefront/services/contact_service.py
import logging
import uuid
from datetime import datetime, timezone

from sqlmodel import Session

from storefront.core.errors import BadRequest, MessageNotFound
from storefront.models.contact import ContactMessage
from storefront.models.user import User
from storefront.repositories.contact_repo import ContactRepository
from storefront.repositories.stats_repo import StatsRepository
from storefront.schemas.common import Pagination
from storefront.schemas.contact import (
    ContactMessageCreate,
    ContactMessageRead,
    ContactStats,
    CountByKey,
    MessagePriorityUpdate,
    MessageStatusUpdate,
)

logger = logging.getLogger(__name__)


class ContactService:
    """
    Inbox for the public contact form.

    Status flow: new -> read -> replied -> closed, with direct jumps allowed.
    Opening a new message marks it read; marking it replied records when
    and by whom.
    """

    def __init__(self, repo: ContactRepository, stats_repo: StatsRepository):
        self.repo = repo
        self.stats_repo = stats_repo

    def submit(self, session: Session, payload: ContactMessageCreate) -> ContactMessage:
        message = ContactMessage(
            name=payload.name,
            email=payload.email,
            phone=payload.phone,
            subject=payload.subject,
            message=payload.message,
            category=payload.category,
        )
        message = self.repo.create(session, message)
        logger.info("Contact message %s received (%s)", message.id, message.category)
        return message

    def list_messages(
        self,
        session: Session,
        *,
        status: str | None = None,
        category: str | None = None,
        priority: str | None = None,
        search: str | None = None,
        sort_by: str = "created_at",
        descending: bool = True,
        page: int = 1,
        limit: int = 20,
    ) -> tuple[list[ContactMessage], Pagination]:
        if sort_by not in ContactMessage.model_fields:
            raise BadRequest(f"Cannot sort by '{sort_by}'")

        messages, total = self.repo.search(
            session,
            status=status,
            category=category,
            priority=priority,
            search=search.strip() if search else None,
            sort_by=sort_by,
            descending=descending,
            skip=(page - 1) * limit,
            limit=limit,
        )
        return messages, Pagination.build(total, page, limit)

    def get_message(self, session: Session, message_id: uuid.UUID) -> ContactMessage:
        """
        Fetch one message; a "new" message becomes "read".
        """
        message = self._get(session, message_id)
        if message.status == "new":
            message.status = "read"
            message = self.repo.update(session, message)
        return message

    def update_status(
        self,
        session: Session,
        message_id: uuid.UUID,
        payload: MessageStatusUpdate,
        admin: User,
    ) -> ContactMessage:
        message = self._get(session, message_id)

        message.status = payload.status
        if payload.admin_notes is not None:
            message.admin_notes = payload.admin_notes
        if payload.status == "replied":
            message.replied_at = datetime.now(timezone.utc)
            message.replied_by = admin.id

        return self.repo.update(session, message)

    def update_priority(
        self,
        session: Session,
        message_id: uuid.UUID,
        payload: MessagePriorityUpdate,
    ) -> ContactMessage:
        message = self._get(session, message_id)
        message.priority = payload.priority
        return self.repo.update(session, message)

    def delete_message(self, session: Session, message_id: uuid.UUID) -> None:
        message = self._get(session, message_id)
        self.repo.delete(session, message)

    def stats(self, session: Session) -> ContactStats:
        def grouped(field: str) -> list[CountByKey]:
            return [
                CountByKey(key=key, count=int(count))
                for key, count in self.stats_repo.messages_grouped_by(session, field)
            ]

        return ContactStats(
            status_stats=grouped("status"),
            priority_stats=grouped("priority"),
            category_stats=grouped("category"),
            recent_messages=[
                ContactMessageRead.model_validate(m)
                for m in self.stats_repo.latest_messages(session, limit=5)
            ],
        )

    def _get(self, session: Session, message_id: uuid.UUID) -> ContactMessage:
        message = self.repo.get_by_id(session, message_id)
        if message is None:
            raise MessageNotFound()
        return message
