import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Union

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from farmdirect.core.config import settings
from farmdirect.core.errors import (
    ForbiddenError,
    InvalidTokenError,
    UnauthenticatedError,
    UnknownSubjectError,
)
from farmdirect.db.session import get_db
from farmdirect.models.user import User as UserModel, UserRole
from farmdirect.schemas.user import TokenPayload

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/token", auto_error=False)


@dataclass(frozen=True)
class FarmerPrincipal:
    user: UserModel

    @property
    def id(self) -> int:
        return self.user.id


@dataclass(frozen=True)
class ConsumerPrincipal:
    user: UserModel

    @property
    def id(self) -> int:
        return self.user.id


Principal = Union[FarmerPrincipal, ConsumerPrincipal]


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def create_access_token(user: UserModel, expires_delta: Optional[timedelta] = None) -> str:
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    # "sub" must be a string claim
    to_encode = {"sub": str(user.id), "role": user.role.value, "exp": expire}
    return jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def verify_token(token: str) -> TokenPayload:
    """Decode a bearer token.

    Raises InvalidTokenError when the token is malformed, badly signed or
    expired. Whether the subject still exists is not checked here.
    """
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except ExpiredSignatureError:
        raise InvalidTokenError("Token has expired")
    except JWTError:
        raise InvalidTokenError()

    try:
        return TokenPayload.model_validate(payload)
    except PydanticValidationError:
        raise InvalidTokenError()


def principal_for(user: UserModel) -> Principal:
    if user.role == UserRole.FARMER:
        return FarmerPrincipal(user=user)
    return ConsumerPrincipal(user=user)


async def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> UserModel:
    if not token:
        raise UnauthenticatedError("Missing Authorization Bearer token")

    token_data = verify_token(token)
    user = db.query(UserModel).filter(UserModel.id == token_data.sub).first()
    if user is None:
        logger.warning("Token for unknown user id=%s", token_data.sub)
        raise UnknownSubjectError(token_data.sub)
    return user


async def get_current_principal(user: UserModel = Depends(get_current_user)) -> Principal:
    return principal_for(user)


def require_farmer(principal: Principal = Depends(get_current_principal)) -> FarmerPrincipal:
    if not isinstance(principal, FarmerPrincipal):
        raise ForbiddenError("Farmer access required")
    return principal


def require_consumer(principal: Principal = Depends(get_current_principal)) -> ConsumerPrincipal:
    if not isinstance(principal, ConsumerPrincipal):
        raise ForbiddenError("Consumer access required")
    return principal
