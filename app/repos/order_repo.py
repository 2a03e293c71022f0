# app/repos/order_repo.py
import time
from datetime import datetime, timezone
from typing import Callable, List, TypeVar

from sqlalchemy import func, or_, select, text, update
from sqlalchemy.orm import Session, selectinload

from app.data.models.order import OrderModel
from app.data.models.order_item import OrderItemModel

T = TypeVar("T")


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    # =====================================================
    # TRANSACTION
    # =====================================================
    def with_transaction(self, unit_of_work: Callable[[], T], timeout: float | None = None) -> T:
        """
        Runs unit_of_work in the session transaction and commits once.
        Any exception -> rollback, nothing from unit_of_work is persisted.
        Past the deadline the work is rolled back and TimeoutError raised.
        """
        deadline = time.monotonic() + timeout if timeout else None

        try:
            if deadline is not None and self.db.get_bind().dialect.name == "postgresql":
                # SET LOCAL only lives until the end of this transaction
                self.db.execute(text(f"SET LOCAL statement_timeout = {int(timeout * 1000)}"))

            result = unit_of_work()
            self.db.flush()

            if deadline is not None and time.monotonic() > deadline:
                raise TimeoutError(f"transaction exceeded {timeout}s")

            self.db.commit()
            return result

        except Exception:
            self.db.rollback()
            raise

    # =====================================================
    # WRITE (no commit - caller owns the transaction)
    # =====================================================
    def add_order(self, order: OrderModel) -> OrderModel:
        self.db.add(order)
        self.db.flush()  # id for the lines
        return order

    def add_order_item(self, line: OrderItemModel) -> OrderItemModel:
        self.db.add(line)
        self.db.flush()
        return line

    def update_order_status(self, order: OrderModel, previous: str, status: str) -> OrderModel | None:
        """
        Compare-and-set on the status column.
        Returns None (and rolls back) when the row no longer holds `previous`.
        """
        result = self.db.execute(
            update(OrderModel)
            .where(OrderModel.id == order.id, OrderModel.status == previous)
            .values(status=status, updated_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False)
        )

        if result.rowcount != 1:
            self.db.rollback()
            return None

        self.db.commit()
        self.db.refresh(order)
        return order

    # =====================================================
    # READ
    # =====================================================
    def _aggregate_query(self):
        return select(OrderModel).options(
            selectinload(OrderModel.items).selectinload(OrderItemModel.item),
            selectinload(OrderModel.client),
        )

    def get_order(self, order_id: int) -> OrderModel | None:
        return self.db.execute(
            self._aggregate_query().where(OrderModel.id == order_id)
        ).scalar_one_or_none()

    def list_orders(self, client_id: int | None = None) -> List[OrderModel]:
        stmt = self._aggregate_query()

        if client_id is not None:
            stmt = stmt.where(OrderModel.client_id == client_id)

        # newest first, id breaks ties between equal timestamps
        stmt = stmt.order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
        return list(self.db.execute(stmt).scalars())

    def count_for_user(self, user_id: int) -> int:
        return self.db.execute(
            select(func.count(OrderModel.id)).where(
                or_(OrderModel.client_id == user_id, OrderModel.created_by_id == user_id)
            )
        ).scalar_one()
