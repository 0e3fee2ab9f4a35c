# storefront/repositories/stats_repo.py
from sqlalchemy import func
from sqlmodel import Session, select

from storefront.models.contact import ContactMessage
from storefront.models.order import Order


class StatsRepository:
    """
    Read-only aggregated queries for admin dashboards.
    """

    # ---- Orders ----

    def count_orders(self, session: Session) -> int:
        stmt = select(func.count()).select_from(Order)
        value = session.exec(stmt).one()
        return int(value or 0)

    def total_revenue(self, session: Session) -> float:
        """
        Sum of total_amount for all non-cancelled orders.
        """
        stmt = (
            select(func.coalesce(func.sum(Order.total_amount), 0.0))
            .where(Order.status != "cancelled")
        )
        value = session.exec(stmt).one()
        return float(value or 0.0)

    def orders_by_status(self, session: Session) -> list[tuple]:
        """
        (status, order_count, summed total_amount) per status.
        """
        stmt = (
            select(
                Order.status,
                func.count(Order.id),
                func.coalesce(func.sum(Order.total_amount), 0.0),
            )
            .group_by(Order.status)
            .order_by(Order.status)
        )
        return list(session.exec(stmt).all())

    def latest_orders(
        self,
        session: Session,
        limit: int = 5,
    ) -> list[Order]:
        """
        Latest N orders by created_at (any status).
        """
        stmt = (
            select(Order)
            .order_by(Order.created_at.desc())
            .limit(limit)
        )
        return list(session.exec(stmt).all())

    # ---- Contact messages ----

    def messages_grouped_by(self, session: Session, field: str) -> list[tuple]:
        """
        (value, count) per distinct value of status / priority / category.
        """
        column = getattr(ContactMessage, field)
        stmt = (
            select(column, func.count(ContactMessage.id))
            .group_by(column)
            .order_by(column)
        )
        return list(session.exec(stmt).all())

    def latest_messages(self, session: Session, limit: int = 5) -> list[ContactMessage]:
        stmt = (
            select(ContactMessage)
            .order_by(ContactMessage.created_at.desc())
            .limit(limit)
        )
        return list(session.exec(stmt).all())
