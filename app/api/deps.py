# app/api/deps.py
from typing import Annotated

from fastapi import Depends, Path
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.data.database import get_db
from app.domain.enums import UserType
from app.domain.errors import AuthenticationError, ForbiddenError
from app.domain.schemas import MAX_ID
from app.repos.user_repo import UserRepo
from app.services.auth_service import CurrentUser, decode_access_token

bearer = HTTPBearer(auto_error=False)

# ids in the URL, bounded like the integer key columns
PathId = Annotated[int, Path(gt=0, le=MAX_ID)]


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer),
    db: Session = Depends(get_db),
) -> CurrentUser:
    """
    Resolves the caller from the bearer token.
    The role is re-read from the database so a promotion or demotion
    takes effect without a new login.
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Access token not provided.")

    claims = decode_access_token(credentials.credentials)

    user = UserRepo(db).get_user(claims.id)
    if not user:
        raise AuthenticationError("User for this token no longer exists.")

    return CurrentUser(id=user.id, type=UserType(user.type), phone=user.phone)


def require_admin(current: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if not current.is_admin:
        raise ForbiddenError("Access denied. Only ADMIN users can access this resource.")
    return current
