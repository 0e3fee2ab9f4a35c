# storefront/repositories/contact_repo.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import func, or_
from sqlmodel import Session, select

from storefront.models.contact import ContactMessage


class ContactRepository:
    """
    Data access layer for ContactMessage.
    """

    def get_by_id(self, session: Session, message_id: uuid.UUID) -> ContactMessage | None:
        return session.get(ContactMessage, message_id)

    def search(
        self,
        session: Session,
        *,
        status: str | None = None,
        category: str | None = None,
        priority: str | None = None,
        search: str | None = None,
        sort_by: str = "created_at",
        descending: bool = True,
        skip: int = 0,
        limit: int = 20,
    ) -> tuple[list[ContactMessage], int]:
        conditions = []
        if status is not None:
            conditions.append(ContactMessage.status == status)
        if category is not None:
            conditions.append(ContactMessage.category == category)
        if priority is not None:
            conditions.append(ContactMessage.priority == priority)
        if search:
            pattern = f"%{search.lower()}%"
            conditions.append(
                or_(
                    func.lower(ContactMessage.name).like(pattern),
                    func.lower(ContactMessage.email).like(pattern),
                    func.lower(ContactMessage.subject).like(pattern),
                    func.lower(ContactMessage.message).like(pattern),
                )
            )

        column = getattr(ContactMessage, sort_by)
        stmt = (
            select(ContactMessage)
            .where(*conditions)
            .order_by(column.desc() if descending else column.asc())
            .offset(skip)
            .limit(limit)
        )
        count_stmt = select(func.count()).select_from(ContactMessage).where(*conditions)

        messages = session.exec(stmt).all()
        total = session.exec(count_stmt).one()
        return list(messages), int(total or 0)

    def create(self, session: Session, message: ContactMessage) -> ContactMessage:
        session.add(message)
        session.commit()
        session.refresh(message)
        return message

    def update(self, session: Session, message: ContactMessage) -> ContactMessage:
        message.updated_at = datetime.now(timezone.utc)
        session.add(message)
        session.commit()
        session.refresh(message)
        return message

    def delete(self, session: Session, message: ContactMessage) -> None:
        session.delete(message)
        session.commit()
