# app/repos/category_repo.py
from typing import List, Tuple

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.data.models.category import CategoryModel
from app.data.models.item import ItemModel


class CategoryRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_category(self, category_id: int) -> CategoryModel | None:
        return self.db.get(CategoryModel, category_id)

    def list_with_item_count(self) -> List[Tuple[CategoryModel, int]]:
        stmt = (
            select(CategoryModel, func.count(ItemModel.id))
            .outerjoin(ItemModel, ItemModel.category_id == CategoryModel.id)
            .group_by(CategoryModel.id)
            .order_by(CategoryModel.id)
        )
        return [(category, count) for category, count in self.db.execute(stmt).all()]

    def count_items(self, category_id: int) -> int:
        return self.db.execute(
            select(func.count(ItemModel.id)).where(ItemModel.category_id == category_id)
        ).scalar_one()

    def create_category(self, category: CategoryModel) -> CategoryModel:
        self.db.add(category)
        self.db.commit()
        self.db.refresh(category)
        return category

    def save(self, category: CategoryModel) -> CategoryModel:
        self.db.add(category)
        self.db.commit()
        self.db.refresh(category)
        return category

    def delete_category(self, category: CategoryModel) -> None:
        self.db.delete(category)
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
