# app/repos/item_repo.py
from typing import Iterable, List

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from app.data.models.item import ItemModel
from app.data.models.order_item import OrderItemModel


class ItemRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_item(self, item_id: int) -> ItemModel | None:
        return self.db.execute(
            select(ItemModel)
            .options(selectinload(ItemModel.category))
            .where(ItemModel.id == item_id)
        ).scalar_one_or_none()

    def list_items(self, category_id: int | None = None, search: str | None = None) -> List[ItemModel]:
        stmt = select(ItemModel).options(selectinload(ItemModel.category))

        if category_id is not None:
            stmt = stmt.where(ItemModel.category_id == category_id)
        if search:
            stmt = stmt.where(func.lower(ItemModel.description).contains(search.lower()))

        return list(self.db.execute(stmt.order_by(ItemModel.id)).scalars())

    def get_items_for_order(self, item_ids: Iterable[int]) -> List[ItemModel]:
        """
        Price lookup used while placing an order.
        FOR SHARE: price updates on these rows wait until the order commits
        (postgres; sqlite ignores the clause).
        """
        ids = list(item_ids)
        if not ids:
            return []

        stmt = (
            select(ItemModel)
            .where(ItemModel.id.in_(ids))
            .with_for_update(read=True)
            .execution_options(populate_existing=True)
        )
        return list(self.db.execute(stmt).scalars())

    def count_order_lines(self, item_id: int) -> int:
        return self.db.execute(
            select(func.count()).select_from(OrderItemModel).where(OrderItemModel.item_id == item_id)
        ).scalar_one()

    def create_item(self, item: ItemModel) -> ItemModel:
        self.db.add(item)
        self.db.commit()
        self.db.refresh(item)
        return item

    def save(self, item: ItemModel) -> ItemModel:
        self.db.add(item)
        self.db.commit()
        self.db.refresh(item)
        return item

    def delete_item(self, item: ItemModel) -> None:
        self.db.delete(item)
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
