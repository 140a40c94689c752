from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from farmdirect.db.session import get_db
from farmdirect.models.user import User as UserModel, FarmerProfile
from farmdirect.schemas.user import User as UserSchema, UserUpdate, PasswordChange
from farmdirect.auth.security import (
    FarmerPrincipal,
    Principal,
    get_current_principal,
    get_password_hash,
    verify_password,
)

router = APIRouter()

# Placeholders used when a farmer somehow has no profile yet
DEFAULT_PROPERTY_NAME = "Property"
DEFAULT_ADDRESS = "Address"

# --------------------------------------------------------------------
# Get current user -> GET /me
# --------------------------------------------------------------------
@router.get("/", response_model=UserSchema)
def read_me(principal: Principal = Depends(get_current_principal)):
    return UserSchema.model_validate(principal.user)

# --------------------------------------------------------------------
# Update current user -> PUT /me
# --------------------------------------------------------------------
@router.put("/", response_model=UserSchema)
def update_me(
    user: UserUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal)
):
    db_user: UserModel = principal.user
    update_data = user.model_dump(exclude_unset=True, exclude_none=True)

    property_name = update_data.pop("property_name", None)
    address = update_data.pop("address", None)

    for field, value in update_data.items():
        setattr(db_user, field, value)

    # consumers silently ignore farm profile fields
    if isinstance(principal, FarmerPrincipal) and (property_name or address):
        if db_user.farmer_profile is None:
            db_user.farmer_profile = FarmerProfile(
                property_name=property_name or DEFAULT_PROPERTY_NAME,
                address=address or DEFAULT_ADDRESS,
            )
        else:
            if property_name:
                db_user.farmer_profile.property_name = property_name
            if address:
                db_user.farmer_profile.address = address

    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return UserSchema.model_validate(db_user)

# --------------------------------------------------------------------
# Change password -> PUT /me/password
# --------------------------------------------------------------------
@router.put("/password")
def change_password(
    passwords: PasswordChange,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal)
):
    db_user: UserModel = principal.user
    if not verify_password(passwords.current_password, db_user.password_hash):
        raise HTTPException(status_code=400, detail="Current password is incorrect")

    db_user.password_hash = get_password_hash(passwords.new_password)
    db.add(db_user)
    db.commit()
    return {"message": "Password updated"}
