#import all models so SQLAlchemy registers them in Base.metadata

from app.data.models.user import UserModel
from app.data.models.address import AddressModel
from app.data.models.category import CategoryModel
from app.data.models.item import ItemModel
from app.data.models.order import OrderModel
from app.data.models.order_item import OrderItemModel

__all__ = [
    "UserModel",
    "AddressModel",
    "CategoryModel",
    "ItemModel",
    "OrderModel",
    "OrderItemModel",
]
