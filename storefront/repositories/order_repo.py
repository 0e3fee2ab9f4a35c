# storefront/repositories/order_repo.py
import uuid

from sqlalchemy import func
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlmodel import Session, select

from storefront.models.order import Order, OrderItem, OrderSequence


class OrderRepository:
    """
    Data access layer for orders, order_items and the daily order sequence.

    NOTE:
      - No commits here; order creation and cancellation are multi-step
        transactions. The service is responsible for calling session.commit().
    """

    # ---- Orders ----

    def search(
        self,
        session: Session,
        *,
        user_id: uuid.UUID | None = None,
        status: str | None = None,
        sort_by: str = "created_at",
        descending: bool = True,
        skip: int = 0,
        limit: int = 10,
    ) -> tuple[list[Order], int]:
        conditions = []
        if user_id is not None:
            conditions.append(Order.user_id == user_id)
        if status is not None:
            conditions.append(Order.status == status)

        column = getattr(Order, sort_by)
        stmt = (
            select(Order)
            .where(*conditions)
            .order_by(column.desc() if descending else column.asc())
            .offset(skip)
            .limit(limit)
        )
        count_stmt = select(func.count()).select_from(Order).where(*conditions)

        orders = session.exec(stmt).all()
        total = session.exec(count_stmt).one()
        return list(orders), int(total or 0)

    def get_by_id(self, session: Session, order_id: uuid.UUID) -> Order | None:
        return session.get(Order, order_id)

    def create_order(self, session: Session, order: Order) -> Order:
        """
        Insert an Order without committing, but ensure id is populated.
        """
        session.add(order)
        session.flush()  # Assign PK
        session.refresh(order)
        return order

    def update_order(self, session: Session, order: Order) -> Order:
        session.add(order)
        session.flush()
        session.refresh(order)
        return order

    # ---- Order items ----

    def list_items_for_order(
        self,
        session: Session,
        order_id: uuid.UUID,
    ) -> list[OrderItem]:
        stmt = select(OrderItem).where(OrderItem.order_id == order_id)
        return list(session.exec(stmt).all())

    def list_items_for_orders(
        self,
        session: Session,
        order_ids: list[uuid.UUID],
    ) -> dict[uuid.UUID, list[OrderItem]]:
        grouped: dict[uuid.UUID, list[OrderItem]] = {oid: [] for oid in order_ids}
        if not order_ids:
            return grouped
        stmt = select(OrderItem).where(OrderItem.order_id.in_(order_ids))
        for item in session.exec(stmt).all():
            grouped[item.order_id].append(item)
        return grouped

    def create_items(
        self,
        session: Session,
        items: list[OrderItem],
    ) -> list[OrderItem]:
        session.add_all(items)
        session.flush()
        for item in items:
            session.refresh(item)
        return items

    # ---- Daily sequence ----

    def next_sequence(self, session: Session, day: str) -> int:
        """
        Increment and return the order counter for `day` (yymmdd).

        One INSERT ... ON CONFLICT DO UPDATE ... RETURNING statement, so the
        first order of a day and every later one take distinct values even
        when checkouts run concurrently.
        """
        if session.get_bind().dialect.name == "postgresql":
            insert = pg_insert
        else:
            insert = sqlite_insert

        stmt = insert(OrderSequence).values(day=day, last_value=1)
        stmt = stmt.on_conflict_do_update(
            index_elements=[OrderSequence.day],
            set_={"last_value": OrderSequence.last_value + 1},
        ).returning(OrderSequence.last_value)
        return int(session.exec(stmt).scalar_one())
