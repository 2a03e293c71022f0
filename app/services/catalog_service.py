# app/services/catalog_service.py
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.data.models.category import CategoryModel
from app.data.models.item import ItemModel
from app.domain.errors import CategoryNotFoundError, ConflictError, NotFoundError
from app.domain.schemas import CategoryIn, CategoryOut, ItemIn, ItemOut, ItemUpdate
from app.repos.category_repo import CategoryRepo
from app.repos.item_repo import ItemRepo
from app.utils.logging import get_logger

logger = get_logger(__name__)


class CatalogService:
    """
    Menu: categories and items.
    Item prices change here only; orders keep their own copy of the price.
    """

    def __init__(self, db: Session):
        self.category_repo = CategoryRepo(db)
        self.item_repo = ItemRepo(db)

    # categories
    def list_categories(self) -> List[CategoryOut]:
        return [
            CategoryOut(id=c.id, description=c.description, item_count=count)
            for c, count in self.category_repo.list_with_item_count()
        ]

    def get_category(self, category_id: int) -> CategoryOut:
        category = self._category_or_404(category_id)
        return CategoryOut(
            id=category.id,
            description=category.description,
            item_count=self.category_repo.count_items(category.id),
        )

    def create_category(self, payload: CategoryIn) -> CategoryOut:
        category = self.category_repo.create_category(CategoryModel(description=payload.description))
        logger.info(f"Category {category.id} created")
        return CategoryOut(id=category.id, description=category.description)

    def update_category(self, category_id: int, payload: CategoryIn) -> CategoryOut:
        category = self._category_or_404(category_id)
        category.description = payload.description
        category = self.category_repo.save(category)
        return CategoryOut(
            id=category.id,
            description=category.description,
            item_count=self.category_repo.count_items(category.id),
        )

    def delete_category(self, category_id: int) -> None:
        category = self._category_or_404(category_id)

        if self.category_repo.count_items(category_id):
            raise ConflictError("Category has items and cannot be deleted.")

        try:
            self.category_repo.delete_category(category)
        except IntegrityError:
            # an item was added between the count and the delete
            self.category_repo.rollback()
            raise ConflictError("Category has items and cannot be deleted.") from None

        logger.info(f"Category {category_id} deleted")

    # items
    def list_items(self, category_id: int | None = None, search: str | None = None) -> List[ItemOut]:
        return [ItemOut.model_validate(i) for i in self.item_repo.list_items(category_id, search)]

    def get_item(self, item_id: int) -> ItemOut:
        return ItemOut.model_validate(self._item_or_404(item_id))

    def create_item(self, payload: ItemIn) -> ItemOut:
        self._category_or_400(payload.category_id)

        item = self.item_repo.create_item(
            ItemModel(
                description=payload.description,
                unit_price=payload.unit_price,
                category_id=payload.category_id,
            )
        )
        logger.info(f"Item {item.id} created with price {item.unit_price}")
        return ItemOut.model_validate(self._item_or_404(item.id))

    def update_item(self, item_id: int, payload: ItemUpdate) -> ItemOut:
        item = self._item_or_404(item_id)
        changes = payload.model_dump(exclude_none=True)

        if "category_id" in changes:
            self._category_or_400(changes["category_id"])

        if "unit_price" in changes and changes["unit_price"] != item.unit_price:
            logger.info(f"Item {item_id} price {item.unit_price} -> {changes['unit_price']}")

        for field, value in changes.items():
            setattr(item, field, value)

        self.item_repo.save(item)
        return ItemOut.model_validate(self._item_or_404(item_id))

    def delete_item(self, item_id: int) -> None:
        item = self._item_or_404(item_id)

        if self.item_repo.count_order_lines(item_id):
            raise ConflictError("Item is referenced by orders and cannot be deleted.")

        try:
            self.item_repo.delete_item(item)
        except IntegrityError:
            # an order line was written between the count and the delete
            self.item_repo.rollback()
            raise ConflictError("Item is referenced by orders and cannot be deleted.") from None

        logger.info(f"Item {item_id} deleted")

    def _category_or_404(self, category_id: int) -> CategoryModel:
        category = self.category_repo.get_category(category_id)
        if not category:
            raise NotFoundError("Category not found.")
        return category

    def _category_or_400(self, category_id: int) -> CategoryModel:
        category = self.category_repo.get_category(category_id)
        if not category:
            raise CategoryNotFoundError(
                "Category not found.",
                details=[{"field": "categoryId", "message": "unknown category"}],
            )
        return category

    def _item_or_404(self, item_id: int) -> ItemModel:
        item = self.item_repo.get_item(item_id)
        if not item:
            raise NotFoundError("Item not found.")
        return item
