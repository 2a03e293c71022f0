# app/api/routers/items.py
from typing import List

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from app.api.deps import PathId, require_admin
from app.data.database import get_db
from app.domain.schemas import MAX_ID, ItemIn, ItemOut, ItemUpdate
from app.services.auth_service import CurrentUser
from app.services.catalog_service import CatalogService

router = APIRouter(prefix="/items", tags=["items"])


def get_service(db: Session):
    return CatalogService(db)


@router.get("", response_model=List[ItemOut])
def list_items(
    category_id: int | None = Query(None, gt=0, le=MAX_ID),
    search: str | None = Query(None, max_length=100),
    db: Session = Depends(get_db),
):
    """
    Public menu. Optional filter by category and text search on description.
    """
    return get_service(db).list_items(category_id, search)


@router.get("/{item_id}", response_model=ItemOut)
def get_item(item_id: PathId, db: Session = Depends(get_db)):
    return get_service(db).get_item(item_id)


@router.post("", response_model=ItemOut, status_code=201)
def create_item(
    payload: ItemIn,
    _: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return get_service(db).create_item(payload)


@router.put("/{item_id}", response_model=ItemOut)
def update_item(
    item_id: PathId,
    payload: ItemUpdate,
    _: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return get_service(db).update_item(item_id, payload)


@router.delete("/{item_id}", status_code=204)
def delete_item(
    item_id: PathId,
    _: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    get_service(db).delete_item(item_id)
    return Response(status_code=204)
