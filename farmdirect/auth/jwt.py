import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from farmdirect.core.errors import ConflictError
from farmdirect.db.session import get_db
from farmdirect.models.user import User, FarmerProfile, UserRole
from farmdirect.schemas.user import Token, UserWithToken, UserCreate, LoginRequest, User as UserSchema
from farmdirect.auth.security import (
    get_password_hash,
    verify_password,
    create_access_token,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


def authenticate(db: Session, email: str, password: str) -> User:
    user = db.query(User).filter(User.email == email).first()
    if not user or not verify_password(password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


# REGISTER: create user (+ farmer profile) and return user + token
@router.post("/register", response_model=UserWithToken, status_code=status.HTTP_201_CREATED)
def register_user(
    user_data: UserCreate,
    db: Session = Depends(get_db)
):
    existing_user = db.query(User).filter(User.email == user_data.email).first()
    if existing_user:
        raise ConflictError("Email already in use")

    db_user = User(
        role=user_data.role,
        name=user_data.name,
        email=user_data.email,
        password_hash=get_password_hash(user_data.password),
        phone=user_data.phone,
        city=user_data.city,
    )
    if user_data.role == UserRole.FARMER:
        db_user.farmer_profile = FarmerProfile(
            property_name=user_data.property_name,
            address=user_data.address,
        )

    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    logger.info("Registered %s user id=%s", db_user.role.value, db_user.id)

    return UserWithToken(
        user=UserSchema.model_validate(db_user),
        access_token=create_access_token(db_user),
        token_type="bearer"
    )

# LOGIN: JSON body, returns user + token
@router.post("/login", response_model=UserWithToken)
def login(
    credentials: LoginRequest,
    db: Session = Depends(get_db)
):
    user = authenticate(db, credentials.email, credentials.password)
    return UserWithToken(
        user=UserSchema.model_validate(user),
        access_token=create_access_token(user),
        token_type="bearer"
    )

# TOKEN-ONLY: OAuth2 form compatibility (for Swagger/OAuth2PasswordBearer)
@router.post("/token", response_model=Token)
def login_token_only(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db)
):
    user = authenticate(db, form_data.username, form_data.password)
    return {"access_token": create_access_token(user), "token_type": "bearer"}
