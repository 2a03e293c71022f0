# app/api/routers/categories.py
from typing import List

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from app.api.deps import PathId, require_admin
from app.data.database import get_db
from app.domain.schemas import CategoryIn, CategoryOut
from app.services.auth_service import CurrentUser
from app.services.catalog_service import CatalogService

router = APIRouter(prefix="/categories", tags=["categories"])


def get_service(db: Session):
    return CatalogService(db)


@router.get("", response_model=List[CategoryOut])
def list_categories(db: Session = Depends(get_db)):
    return get_service(db).list_categories()


@router.get("/{category_id}", response_model=CategoryOut)
def get_category(category_id: PathId, db: Session = Depends(get_db)):
    return get_service(db).get_category(category_id)


@router.post("", response_model=CategoryOut, status_code=201)
def create_category(
    payload: CategoryIn,
    _: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return get_service(db).create_category(payload)


@router.put("/{category_id}", response_model=CategoryOut)
def update_category(
    category_id: PathId,
    payload: CategoryIn,
    _: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return get_service(db).update_category(category_id, payload)


@router.delete("/{category_id}", status_code=204)
def delete_category(
    category_id: PathId,
    _: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    get_service(db).delete_category(category_id)
    return Response(status_code=204)
