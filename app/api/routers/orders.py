# app/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import PathId, get_current_user, require_admin
from app.data.database import get_db
from app.domain.schemas import MyOrderOut, OrderCreate, OrderOut, OrderStatusUpdate
from app.services.auth_service import CurrentUser
from app.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


def get_service(db: Session):
    return OrderService(db)


@router.post("", response_model=OrderOut, status_code=201)
def create_order(
    payload: OrderCreate,
    current: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Places an order for the logged user.
    Prices come from the menu at the moment of the order.
    """
    return get_service(db).place_order(current.id, payload)


@router.get("", response_model=List[OrderOut])
def list_orders(
    current: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    ADMIN: every order. CLIENT: only its own.
    """
    return get_service(db).list_orders(current.id, current.type)


@router.get("/my", response_model=List[MyOrderOut])
def list_my_orders(
    current: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_service(db).list_my_orders(current.id)


@router.get("/{order_id}", response_model=OrderOut)
def get_order(
    order_id: PathId,
    current: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_service(db).get_order(order_id, current.id, current.type)


@router.patch("/{order_id}/status", response_model=OrderOut)
def update_order_status(
    order_id: PathId,
    payload: OrderStatusUpdate,
    current: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return get_service(db).update_order_status(current.type, order_id, payload.status.value)
