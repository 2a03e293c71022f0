from typing import List

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from app.api.deps import PathId, get_current_user, require_admin
from app.data.database import get_db
from app.domain.schemas import (
    ChangePasswordIn,
    LoginIn,
    LoginOut,
    UserCreate,
    UserOut,
    UserProfileOut,
    UserTypeUpdate,
    UserUpdate,
)
from app.services.auth_service import CurrentUser
from app.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])


@router.post("/create", response_model=UserOut, status_code=201)
def create_user(payload: UserCreate, db: Session = Depends(get_db)):
    return UserService(db).create_user(payload)


@router.post("/login", response_model=LoginOut)
def login(payload: LoginIn, db: Session = Depends(get_db)):
    return UserService(db).login(payload)


@router.get("", response_model=List[UserOut])
def list_users(
    _: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return UserService(db).list_users()


@router.get("/profile", response_model=UserProfileOut)
def get_profile(
    current: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return UserService(db).get_profile(current.id)


@router.put("/profile", response_model=UserOut)
def update_profile(
    payload: UserUpdate,
    current: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return UserService(db).update_profile(current.id, payload)


@router.post("/change-password")
def change_password(
    payload: ChangePasswordIn,
    current: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    UserService(db).change_password(current.id, payload)
    return {"message": "Password changed successfully."}


@router.patch("/{user_id}/type", response_model=UserOut)
def change_user_type(
    user_id: PathId,
    payload: UserTypeUpdate,
    admin: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return UserService(db).change_user_type(admin.id, user_id, payload.type)


@router.delete("/{user_id}", status_code=204)
def delete_user(
    user_id: PathId,
    admin: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    UserService(db).delete_user(admin.id, user_id)
    return Response(status_code=204)
