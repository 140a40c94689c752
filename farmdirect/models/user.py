import enum

from sqlalchemy import Column, String, Enum, ForeignKey, Integer
from sqlalchemy.orm import relationship
from farmdirect.models.base import BaseModel


class UserRole(str, enum.Enum):
    FARMER = "FARMER"
    CONSUMER = "CONSUMER"


class User(BaseModel):
    __tablename__ = "users"
    
    role = Column(Enum(UserRole, name="user_roles"), nullable=False)
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    phone = Column(String(20), nullable=False)
    city = Column(String(100), nullable=False)

    farmer_profile = relationship(
        "FarmerProfile", uselist=False, back_populates="user", cascade="all, delete-orphan"
    )
    products = relationship("Product", back_populates="farmer")

    @property
    def property_name(self):
        return self.farmer_profile.property_name if self.farmer_profile else None

    @property
    def address(self):
        return self.farmer_profile.address if self.farmer_profile else None


class FarmerProfile(BaseModel):
    __tablename__ = "farmer_profiles"

    user_id = Column(Integer, ForeignKey('users.id'), nullable=False, unique=True)
    property_name = Column(String(150), nullable=False)
    address = Column(String(255), nullable=False)

    user = relationship("User", back_populates="farmer_profile")
