# app/api/routers/addresses.py
from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from app.api.deps import get_current_user
from app.data.database import get_db
from app.domain.schemas import AddressIn, AddressOut, AddressUpdate
from app.services.address_service import AddressService
from app.services.auth_service import CurrentUser

router = APIRouter(prefix="/address", tags=["address"])


def get_service(db: Session):
    return AddressService(db)


@router.post("", response_model=AddressOut, status_code=201)
def create_address(
    payload: AddressIn,
    current: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_service(db).create_address(current.id, payload)


@router.get("", response_model=AddressOut)
def get_address(
    current: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_service(db).get_address(current.id)


@router.put("", response_model=AddressOut)
def update_address(
    payload: AddressUpdate,
    current: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_service(db).update_address(current.id, payload)


@router.delete("", status_code=204)
def delete_address(
    current: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    get_service(db).delete_address(current.id)
    return Response(status_code=204)
