# app/services/auth_service.py
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import bcrypt
import jwt

from app.domain.enums import UserType
from app.domain.errors import AuthenticationError
from app.utils.settings import BCRYPT_ROUNDS, JWT_ALGORITHM, JWT_EXPIRES_MINUTES, JWT_SECRET


@dataclass(frozen=True)
class CurrentUser:
    """Identity resolved from the bearer token."""

    id: int
    type: UserType
    phone: str

    @property
    def is_admin(self) -> bool:
        return self.type == UserType.ADMIN


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # malformed hash or password over the bcrypt limit
        return False


def create_access_token(user_id: int, user_type: str, phone: str, expires_minutes: int | None = None) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "type": str(UserType(user_type).value),
        "phone": phone,
        "iat": now,
        "exp": now + timedelta(minutes=expires_minutes or JWT_EXPIRES_MINUTES),
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> CurrentUser:
    try:
        payload = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Token expired. Log in again.") from None
    except jwt.PyJWTError:
        raise AuthenticationError("Invalid token.") from None

    try:
        return CurrentUser(
            id=int(payload["sub"]),
            type=UserType(payload["type"]),
            phone=payload.get("phone", ""),
        )
    except (KeyError, ValueError):
        raise AuthenticationError("Invalid token.") from None
