from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from app.data.models.user import UserModel


class UserRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: int) -> UserModel | None:
        return self.db.get(UserModel, user_id)

    def get_user_with_address(self, user_id: int) -> UserModel | None:
        return self.db.execute(
            select(UserModel)
            .options(selectinload(UserModel.address))
            .where(UserModel.id == user_id)
        ).scalar_one_or_none()

    def get_by_phone(self, phone: str) -> UserModel | None:
        return self.db.execute(
            select(UserModel).where(UserModel.phone == phone)
        ).scalar_one_or_none()

    def list_users(self) -> List[UserModel]:
        return list(
            self.db.execute(select(UserModel).order_by(UserModel.created_at, UserModel.id)).scalars()
        )

    def create_user(self, user: UserModel) -> UserModel:
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def save(self, user: UserModel) -> UserModel:
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def delete_user(self, user: UserModel) -> None:
        self.db.delete(user)
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
