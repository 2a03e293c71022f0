# app/services/order_service.py
from decimal import Decimal
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from app.data.models.order import OrderModel
from app.data.models.order_item import OrderItemModel
from app.domain import status_machine
from app.domain.enums import OrderStatus, UserType
from app.domain.errors import (
    AddressNotFoundError,
    AddressRequiredError,
    DomainError,
    ForbiddenError,
    InvalidStatusTransitionError,
    ItemsNotFoundError,
    OrderNotFoundError,
    OrderPlacementError,
    OrderTimeoutError,
    ValidationFailed,
)
from app.domain.schemas import MAX_AMOUNT, OrderCreate
from app.repos.address_repo import AddressRepo
from app.repos.item_repo import ItemRepo
from app.repos.order_repo import OrderRepo
from app.utils.logging import get_logger
from app.utils.settings import ORDER_TX_TIMEOUT_SECONDS

logger = get_logger(__name__)

CENT = Decimal("0.01")


class OrderService:
    """
    Order domain: placing orders (command), role-scoped listing (query)
    and the status lifecycle driven by administrators.

    Repositories can be passed in explicitly; by default they are built
    on top of the request session.
    """

    def __init__(
        self,
        db: Session,
        order_repo: OrderRepo | None = None,
        item_repo: ItemRepo | None = None,
        address_repo: AddressRepo | None = None,
        tx_timeout: float | None = ORDER_TX_TIMEOUT_SECONDS,
    ):
        self.db = db
        self.repo = order_repo or OrderRepo(db)
        self.item_repo = item_repo or ItemRepo(db)
        self.address_repo = address_repo or AddressRepo(db)
        self.tx_timeout = tx_timeout

    # =====================================================
    # COMMANDS
    # =====================================================
    def place_order(self, caller_id: int, payload: OrderCreate) -> Dict[str, Any]:
        """
        Use Case: placing an order.

        1. Resolves the delivery address (explicit or the one on file)
        2. Reads current item prices inside the transaction
        3. Computes the total from those prices
        4. Writes header + one line per requested item, all or nothing
        """
        address_id = self._resolve_address(caller_id, payload.address_id)
        requested_ids = [line.item_id for line in payload.items]

        if len(set(requested_ids)) != len(requested_ids):
            raise ValidationFailed(
                "Each item may appear only once per order.",
                details=[{"field": "items", "message": "duplicated itemId"}],
            )

        def unit_of_work() -> int:
            # price read and order write share one transaction
            items = {i.id: i for i in self.item_repo.get_items_for_order(requested_ids)}

            missing = sorted(set(requested_ids) - set(items))
            if missing:
                raise ItemsNotFoundError(missing)

            total = sum(
                (items[line.item_id].unit_price * line.quantity for line in payload.items),
                Decimal("0.00"),
            ).quantize(CENT)

            if total > MAX_AMOUNT:
                raise ValidationFailed(
                    f"Order total {total} exceeds the maximum of {MAX_AMOUNT}.",
                    details=[{"field": "items", "message": "total too large"}],
                )

            order = self.repo.add_order(
                OrderModel(
                    client_id=caller_id,
                    created_by_id=caller_id,
                    address_id=address_id,
                    payment_method=payload.payment_method.value,
                    status=OrderStatus.PENDING.value,
                    total=total,
                )
            )

            for line in payload.items:
                item = items[line.item_id]
                self.repo.add_order_item(
                    OrderItemModel(
                        order=order,
                        item=item,
                        quantity=line.quantity,
                        unit_price=item.unit_price,
                    )
                )

            return order.id

        try:
            order_id = self.repo.with_transaction(unit_of_work, timeout=self.tx_timeout)
        except DomainError as e:
            logger.warning(f"Order rejected for user {caller_id}: {e.message}")
            raise
        except TimeoutError as e:
            logger.error(f"Order for user {caller_id} rolled back: {e}")
            raise OrderTimeoutError("Order could not be placed in time. Nothing was saved.") from e
        except Exception as e:
            logger.exception(f"Order for user {caller_id} rolled back after an unexpected error")
            raise OrderPlacementError("Order could not be placed. Nothing was saved.") from e

        order = self.repo.get_order(order_id)

        logger.info(
            f"Order {order.id} created for user {caller_id}: "
            f"{len(order.items)} line(s), total {order.total}, payment {order.payment_method}"
        )

        return self._order_to_dict(order)

    def update_order_status(self, caller_role: str, order_id: int, new_status: str) -> Dict[str, Any]:
        """
        Use Case: admin moves an order through its lifecycle.
        """
        if caller_role != UserType.ADMIN:
            raise ForbiddenError("Access denied. Only ADMIN users can change order status.")

        try:
            target = OrderStatus(new_status)
        except ValueError:
            raise ValidationFailed(
                f"Invalid status {new_status!r}.",
                details=[{"field": "status", "allowed": [s.value for s in OrderStatus]}],
            ) from None

        order = self.repo.get_order(order_id)
        if not order:
            raise OrderNotFoundError(f"Order {order_id} not found.")

        previous = order.status
        status_machine.ensure_transition(previous, target)

        # the write only lands if nobody changed the status since the read
        updated = self.repo.update_order_status(order, previous, target.value)
        if updated is None:
            logger.warning(f"Order {order_id} changed status concurrently, {target.value} rejected")
            raise InvalidStatusTransitionError(
                "Order status was changed by another request. Reload the order and try again.",
                details=[{"field": "status", "expected": previous, "requested": target.value}],
            )
        order = updated

        logger.info(f"Order {order.id} status {previous} -> {order.status}")

        return self._order_to_dict(order)

    # =====================================================
    # QUERIES
    # =====================================================
    def list_orders(self, caller_id: int, caller_role: str) -> List[Dict[str, Any]]:
        """
        ADMIN sees every order, CLIENT only its own. Newest first.
        """
        if caller_role == UserType.ADMIN:
            orders = self.repo.list_orders()
        else:
            orders = self.repo.list_orders(client_id=caller_id)

        return [self._order_to_dict(o) for o in orders]

    def list_my_orders(self, caller_id: int) -> List[Dict[str, Any]]:
        # always the caller's own orders, whatever the role
        orders = self.repo.list_orders(client_id=caller_id)
        return [self._order_to_dict(o, include_client=False) for o in orders]

    def get_order(self, order_id: int, caller_id: int, caller_role: str) -> Dict[str, Any]:
        order = self.repo.get_order(order_id)

        if not order:
            raise OrderNotFoundError(f"Order {order_id} not found.")

        if caller_role != UserType.ADMIN and order.client_id != caller_id:
            raise ForbiddenError("Access denied to this order.")

        return self._order_to_dict(order)

    # =====================================================
    # HELPERS
    # =====================================================
    def _resolve_address(self, caller_id: int, address_id: int | None) -> int:
        if address_id is None:
            address = self.address_repo.get_by_user(caller_id)
            if not address:
                raise AddressRequiredError(
                    "No delivery address on record. Register an address before ordering.",
                    details=[{"field": "addressId", "message": "address required"}],
                )
            return address.id

        address = self.address_repo.get_address(address_id)
        if not address or address.user_id != caller_id:
            raise AddressNotFoundError(
                f"Address {address_id} not found for this user.",
                details=[{"field": "addressId", "message": "unknown address"}],
            )
        return address.id

    @staticmethod
    def _order_to_dict(order: OrderModel, include_client: bool = True) -> Dict[str, Any]:
        lines = sorted(order.items, key=lambda line: line.item_id)

        data = {
            "id": order.id,
            "client_id": order.client_id,
            "created_by_id": order.created_by_id,
            "address_id": order.address_id,
            "payment_method": order.payment_method,
            "status": order.status,
            "total": order.total,
            "created_at": order.created_at,
            "updated_at": order.updated_at,
            "items": [
                {
                    "item_id": line.item_id,
                    "description": line.item.description,
                    "quantity": line.quantity,
                    "unit_price": line.unit_price,
                    "subtotal": (line.unit_price * line.quantity).quantize(CENT),
                }
                for line in lines
            ],
        }

        if include_client:
            client = order.client
            data["client"] = (
                {"id": client.id, "nome": client.nome, "phone": client.phone} if client else None
            )
        else:
            data.pop("client_id")
            data.pop("created_by_id")

        return data
