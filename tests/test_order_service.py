from decimal import Decimal

import pytest
from pydantic import ValidationError
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from app.data.models import OrderItemModel, OrderModel
from app.domain import status_machine
from app.domain.enums import OrderStatus, UserType
from app.domain.errors import (
    AddressNotFoundError,
    AddressRequiredError,
    ForbiddenError,
    InvalidStatusTransitionError,
    ItemsNotFoundError,
    OrderNotFoundError,
    OrderPlacementError,
    OrderTimeoutError,
    ValidationFailed,
)
from app.domain.schemas import MAX_ID, MAX_QUANTITY, ItemUpdate, OrderCreate
from app.repos.order_repo import OrderRepo
from app.services.catalog_service import CatalogService
from app.services.order_service import OrderService


def order_payload(*lines, payment_method="PIX", address_id=None):
    return OrderCreate(
        payment_method=payment_method,
        address_id=address_id,
        items=[{"item_id": item_id, "quantity": quantity} for item_id, quantity in lines],
    )


def count_rows(db, model):
    return db.execute(select(func.count()).select_from(model)).scalar_one()


class TestPlaceOrder:
    def test_total_and_lines_from_current_prices(self, db, customer, menu):
        svc = OrderService(db)

        order = svc.place_order(customer.id, order_payload((menu["burger"].id, 2), (menu["pizza"].id, 1)))

        assert order["total"] == Decimal("45.80")
        assert order["status"] == OrderStatus.PENDING.value
        assert order["client_id"] == customer.id
        assert order["created_by_id"] == customer.id
        assert order["address_id"] == customer.address.id
        assert len(order["items"]) == 2
        assert count_rows(db, OrderItemModel) == 2

        burger_line = next(line for line in order["items"] if line["item_id"] == menu["burger"].id)
        assert burger_line["unit_price"] == Decimal("15.90")
        assert burger_line["subtotal"] == Decimal("31.80")

    def test_total_does_not_follow_later_price_changes(self, db, customer, menu):
        svc = OrderService(db)
        created = svc.place_order(customer.id, order_payload((menu["burger"].id, 3)))

        CatalogService(db).update_item(menu["burger"].id, ItemUpdate(unit_price=Decimal("99.99")))
        db.expire_all()

        reloaded = svc.get_order(created["id"], customer.id, UserType.CLIENT)
        assert reloaded["total"] == Decimal("47.70")
        assert reloaded["items"][0]["unit_price"] == Decimal("15.90")

        # the next order sees the new price
        second = svc.place_order(customer.id, order_payload((menu["burger"].id, 1)))
        assert second["total"] == Decimal("99.99")

    def test_explicit_address_must_belong_to_caller(self, db, customer, other_customer, menu):
        svc = OrderService(db)

        with pytest.raises(AddressNotFoundError):
            svc.place_order(
                customer.id,
                order_payload((menu["soda"].id, 1), address_id=other_customer.address.id),
            )

        assert count_rows(db, OrderModel) == 0

    def test_explicit_own_address_is_used(self, db, customer, menu):
        order = OrderService(db).place_order(
            customer.id, order_payload((menu["soda"].id, 1), address_id=customer.address.id)
        )
        assert order["address_id"] == customer.address.id

    def test_address_required_when_none_on_file(self, db, homeless, menu):
        with pytest.raises(AddressRequiredError) as exc:
            OrderService(db).place_order(homeless.id, order_payload((menu["burger"].id, 1)))

        assert exc.value.status_code == 400
        assert count_rows(db, OrderModel) == 0

    def test_unknown_item_rejects_whole_order(self, db, customer, menu):
        with pytest.raises(ItemsNotFoundError) as exc:
            OrderService(db).place_order(customer.id, order_payload((menu["burger"].id, 1), (999, 1)))

        assert exc.value.missing_ids == [999]
        assert exc.value.details == [{"field": "items", "itemId": "999"}]
        assert count_rows(db, OrderModel) == 0
        assert count_rows(db, OrderItemModel) == 0

    def test_storage_failure_mid_write_leaves_nothing(self, db, customer, menu, monkeypatch):
        original = OrderRepo.add_order_item
        calls = []

        def failing_add(self, line):
            calls.append(line)
            if len(calls) == 2:
                raise OperationalError("INSERT INTO order_items", {}, Exception("disk I/O error"))
            return original(self, line)

        monkeypatch.setattr(OrderRepo, "add_order_item", failing_add)

        with pytest.raises(OrderPlacementError) as exc:
            OrderService(db).place_order(
                customer.id, order_payload((menu["burger"].id, 1), (menu["soda"].id, 2))
            )

        assert exc.value.status_code == 500
        assert count_rows(db, OrderModel) == 0
        assert count_rows(db, OrderItemModel) == 0

    def test_transaction_over_deadline_is_rolled_back(self, db, customer, menu):
        svc = OrderService(db, tx_timeout=1e-9)

        with pytest.raises(OrderTimeoutError):
            svc.place_order(customer.id, order_payload((menu["pizza"].id, 1)))

        assert count_rows(db, OrderModel) == 0
        assert count_rows(db, OrderItemModel) == 0


class TestListOrders:
    @pytest.fixture
    def orders(self, db, customer, other_customer, menu):
        svc = OrderService(db)
        return [
            svc.place_order(customer.id, order_payload((menu["burger"].id, 1))),
            svc.place_order(other_customer.id, order_payload((menu["soda"].id, 2))),
            svc.place_order(customer.id, order_payload((menu["pizza"].id, 1))),
        ]

    def test_admin_sees_every_order_newest_first(self, db, admin, orders):
        listed = OrderService(db).list_orders(admin.id, UserType.ADMIN)

        assert [o["id"] for o in listed] == [o["id"] for o in reversed(orders)]
        assert all(o["client"] is not None for o in listed)

    def test_client_sees_only_own_orders(self, db, customer, orders):
        listed = OrderService(db).list_orders(customer.id, UserType.CLIENT)

        assert {o["client_id"] for o in listed} == {customer.id}
        assert [o["id"] for o in listed] == [orders[2]["id"], orders[0]["id"]]

    def test_listing_twice_is_stable(self, db, admin, orders):
        svc = OrderService(db)
        first = [o["id"] for o in svc.list_orders(admin.id, UserType.ADMIN)]
        second = [o["id"] for o in svc.list_orders(admin.id, UserType.ADMIN)]
        assert first == second

    def test_my_orders_drops_client_block(self, db, admin, customer, orders):
        svc = OrderService(db)

        mine = svc.list_my_orders(customer.id)
        assert len(mine) == 2
        assert "client" not in mine[0]
        assert "client_id" not in mine[0]

        # admins only get their own here
        assert svc.list_my_orders(admin.id) == []

    def test_get_order_of_someone_else(self, db, customer, other_customer, admin, orders):
        svc = OrderService(db)
        foreign = orders[1]["id"]

        with pytest.raises(ForbiddenError):
            svc.get_order(foreign, customer.id, UserType.CLIENT)

        assert svc.get_order(foreign, admin.id, UserType.ADMIN)["client_id"] == other_customer.id

        with pytest.raises(OrderNotFoundError):
            svc.get_order(12345, admin.id, UserType.ADMIN)


class TestUpdateOrderStatus:
    @pytest.fixture
    def order(self, db, customer, menu):
        return OrderService(db).place_order(
            customer.id, order_payload((menu["burger"].id, 2), (menu["pizza"].id, 1))
        )

    def test_admin_moves_order_forward(self, db, order):
        updated = OrderService(db).update_order_status(UserType.ADMIN, order["id"], "PREPARING")

        assert updated["status"] == "PREPARING"
        assert updated["updated_at"] != order["updated_at"]
        assert updated["total"] == order["total"]

    def test_client_is_forbidden_and_status_kept(self, db, order):
        svc = OrderService(db)

        with pytest.raises(ForbiddenError):
            svc.update_order_status(UserType.CLIENT, order["id"], "PREPARING")

        db.expire_all()
        assert svc.get_order(order["id"], order["client_id"], UserType.CLIENT)["status"] == "PENDING"

    def test_backward_move_is_conflict(self, db, order):
        svc = OrderService(db)
        svc.update_order_status(UserType.ADMIN, order["id"], "DELIVERING")

        with pytest.raises(InvalidStatusTransitionError):
            svc.update_order_status(UserType.ADMIN, order["id"], "PREPARING")

    def test_cancelled_is_terminal(self, db, order):
        svc = OrderService(db)
        svc.update_order_status(UserType.ADMIN, order["id"], "CANCELLED")

        with pytest.raises(InvalidStatusTransitionError):
            svc.update_order_status(UserType.ADMIN, order["id"], "DELIVERED")

    def test_unknown_order(self, db, order):
        with pytest.raises(OrderNotFoundError):
            OrderService(db).update_order_status(UserType.ADMIN, 999, "PREPARING")


class TestLimits:
    def test_total_above_money_column_is_rejected(self, db, customer, menu):
        menu["burger"].unit_price = Decimal("9999999.00")
        db.commit()

        with pytest.raises(ValidationFailed) as exc:
            OrderService(db).place_order(customer.id, order_payload((menu["burger"].id, 100)))

        assert exc.value.status_code == 400
        assert count_rows(db, OrderModel) == 0

    def test_quantity_is_capped(self):
        with pytest.raises(ValidationError):
            order_payload((1, MAX_QUANTITY + 1))

        with pytest.raises(ValidationError):
            order_payload((MAX_ID + 1, 1))


class TestConcurrentStatusUpdates:
    def test_cancel_between_read_and_write_wins(self, db, session_factory, customer, menu, monkeypatch):
        order = OrderService(db).place_order(customer.id, order_payload((menu["pizza"].id, 1)))
        other_admin = session_factory()
        original = status_machine.ensure_transition
        raced = []

        def check_then_cancel_elsewhere(current, target):
            original(current, target)
            if not raced:
                # another admin cancels right after this request passed the check
                raced.append(True)
                OrderService(other_admin).update_order_status(UserType.ADMIN, order["id"], "CANCELLED")

        monkeypatch.setattr(status_machine, "ensure_transition", check_then_cancel_elsewhere)

        first_admin = session_factory()
        try:
            with pytest.raises(InvalidStatusTransitionError):
                OrderService(first_admin).update_order_status(UserType.ADMIN, order["id"], "DELIVERED")
        finally:
            first_admin.close()
            other_admin.close()

        db.expire_all()
        assert OrderService(db).get_order(order["id"], customer.id, UserType.CLIENT)["status"] == "CANCELLED"

    def test_stale_status_is_not_overwritten(self, db, session_factory, customer, menu):
        order = OrderService(db).place_order(customer.id, order_payload((menu["soda"].id, 1)))
        stale = OrderModel(id=order["id"], status="PENDING")

        other = session_factory()
        try:
            OrderService(other).update_order_status(UserType.ADMIN, order["id"], "CANCELLED")
        finally:
            other.close()

        assert OrderRepo(db).update_order_status(stale, "PENDING", "DELIVERED") is None

        db.expire_all()
        assert OrderRepo(db).get_order(order["id"]).status == "CANCELLED"
