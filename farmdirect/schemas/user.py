from typing import Optional
from pydantic import BaseModel, EmailStr, Field, model_validator
from farmdirect.models.user import UserRole
from farmdirect.schemas.base import BaseSchema, EntityId, TimestampSchema

class FarmerProfile(BaseSchema):
    property_name: str
    address: str

class UserBase(BaseModel):
    name: str = Field(min_length=2, max_length=100)
    email: EmailStr
    phone: str = Field(min_length=8, max_length=20)
    city: str = Field(min_length=2, max_length=100)

class UserCreate(UserBase):
    role: UserRole
    password: str = Field(min_length=6)
    property_name: Optional[str] = Field(default=None, min_length=2, max_length=150)
    address: Optional[str] = Field(default=None, min_length=2, max_length=255)

    @model_validator(mode="after")
    def check_farmer_profile(self):
        if self.role == UserRole.FARMER:
            missing = [f for f in ("property_name", "address") if not getattr(self, f)]
            if missing:
                raise ValueError(f"{', '.join(missing)} required for FARMER")
        return self

class UserUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    phone: Optional[str] = Field(default=None, min_length=8, max_length=20)
    city: Optional[str] = Field(default=None, min_length=2, max_length=100)
    # FARMER only
    property_name: Optional[str] = Field(default=None, min_length=2, max_length=150)
    address: Optional[str] = Field(default=None, min_length=2, max_length=255)

class PasswordChange(BaseModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=6)

class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)

class User(TimestampSchema):
    id: int
    role: UserRole
    name: str
    email: EmailStr
    phone: str
    city: str
    farmer_profile: Optional[FarmerProfile] = None

class Token(BaseModel):
    access_token: str
    token_type: str

class UserWithToken(Token):
    user: User

class TokenPayload(BaseModel):
    sub: EntityId
    role: UserRole
