from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.data.models.user import UserModel
from app.domain.enums import UserType
from app.domain.errors import (
    AuthenticationError,
    ConflictError,
    ForbiddenError,
    InvalidPasswordError,
    NotFoundError,
)
from app.domain.schemas import (
    ChangePasswordIn,
    LoginIn,
    LoginOut,
    UserCreate,
    UserOut,
    UserProfileOut,
    UserUpdate,
)
from app.repos.order_repo import OrderRepo
from app.repos.user_repo import UserRepo
from app.services.auth_service import create_access_token, hash_password, verify_password
from app.utils.logging import get_logger

logger = get_logger(__name__)


class UserService:
    def __init__(self, db: Session):
        self.repo = UserRepo(db)
        self.order_repo = OrderRepo(db)

    def create_user(self, payload: UserCreate, user_type: UserType = UserType.CLIENT) -> UserOut:
        if self.repo.get_by_phone(payload.phone):
            raise ConflictError("This phone number is already registered.")

        user = UserModel(
            nome=payload.nome,
            phone=payload.phone,
            password_hash=hash_password(payload.password),
            type=user_type.value,
        )

        try:
            created = self.repo.create_user(user)
        except IntegrityError:
            self.repo.rollback()
            raise ConflictError("This phone number is already registered.") from None

        logger.info(f"User {created.id} registered as {created.type}")
        return UserOut.model_validate(created)

    def login(self, payload: LoginIn) -> LoginOut:
        user = self.repo.get_by_phone(payload.phone)

        if not user or not verify_password(payload.password, user.password_hash):
            raise AuthenticationError("Invalid credentials.")

        token = create_access_token(user.id, user.type, user.phone)
        return LoginOut(token=token, user=UserOut.model_validate(user))

    def list_users(self) -> List[UserOut]:
        return [UserOut.model_validate(u) for u in self.repo.list_users()]

    def get_profile(self, user_id: int) -> UserProfileOut:
        user = self.repo.get_user_with_address(user_id)
        if not user:
            raise NotFoundError("User not found.")
        return UserProfileOut.model_validate(user)

    def update_profile(self, user_id: int, payload: UserUpdate) -> UserOut:
        user = self._get_or_404(user_id)

        if payload.phone and payload.phone != user.phone:
            other = self.repo.get_by_phone(payload.phone)
            if other and other.id != user.id:
                raise ConflictError("This phone number is already registered.")
            user.phone = payload.phone

        if payload.nome:
            user.nome = payload.nome

        try:
            saved = self.repo.save(user)
        except IntegrityError:
            self.repo.rollback()
            raise ConflictError("This phone number is already registered.") from None

        return UserOut.model_validate(saved)

    def change_password(self, user_id: int, payload: ChangePasswordIn) -> None:
        user = self._get_or_404(user_id)

        if not verify_password(payload.current_password, user.password_hash):
            raise InvalidPasswordError(
                "Current password is incorrect.",
                details=[{"field": "currentPassword", "message": "incorrect password"}],
            )

        user.password_hash = hash_password(payload.new_password)
        self.repo.save(user)
        logger.info(f"User {user_id} changed password")

    def change_user_type(self, admin_id: int, user_id: int, new_type: UserType) -> UserOut:
        if admin_id == user_id:
            raise ForbiddenError("You cannot change your own user type.")

        user = self._get_or_404(user_id)
        previous = user.type
        user.type = UserType(new_type).value
        saved = self.repo.save(user)

        logger.info(f"User {user_id} type {previous} -> {saved.type} (by admin {admin_id})")
        return UserOut.model_validate(saved)

    def delete_user(self, admin_id: int, user_id: int) -> None:
        if admin_id == user_id:
            raise ForbiddenError("You cannot delete your own account from the admin panel.")

        user = self._get_or_404(user_id)

        # orders keep the purchaser; the account cannot go while they exist
        if self.order_repo.count_for_user(user_id):
            raise ConflictError("User has orders and cannot be deleted.")

        self.repo.delete_user(user)
        logger.info(f"User {user_id} deleted by admin {admin_id}")

    def _get_or_404(self, user_id: int) -> UserModel:
        user = self.repo.get_user(user_id)
        if not user:
            raise NotFoundError("User not found.")
        return user
