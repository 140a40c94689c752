import enum

from sqlalchemy import Column, String, Integer, Enum, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from farmdirect.models.base import BaseModel


class ProductCategory(str, enum.Enum):
    FRUITS = "FRUITS"
    VEGETABLES = "VEGETABLES"
    DAIRY = "DAIRY"
    EGGS = "EGGS"
    GRAINS = "GRAINS"


class ProductUnit(str, enum.Enum):
    TRAY = "TRAY"
    KG = "KG"
    UNIT = "UNIT"
    BUNCH = "BUNCH"


class ProductStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class Product(BaseModel):
    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("price_cents >= 0", name="ck_products_price_non_negative"),
        CheckConstraint("stock_qty >= 0", name="ck_products_stock_non_negative"),
    )
    
    farmer_id = Column(Integer, ForeignKey('users.id'), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    description = Column(String, nullable=False)
    category = Column(Enum(ProductCategory, name="product_categories"), nullable=False)
    unit = Column(Enum(ProductUnit, name="product_units"), nullable=False)
    price_cents = Column(Integer, nullable=False)
    stock_qty = Column(Integer, nullable=False, default=0)
    status = Column(
        Enum(ProductStatus, name="product_status"),
        nullable=False,
        default=ProductStatus.ACTIVE,
        index=True,
    )
    
    farmer = relationship("User", back_populates="products")
    photos = relationship(
        "ProductPhoto",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="ProductPhoto.id",
    )
    certs = relationship(
        "Certification",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="Certification.id",
    )


class ProductPhoto(BaseModel):
    __tablename__ = "product_photos"

    product_id = Column(Integer, ForeignKey('products.id'), nullable=False, index=True)
    url = Column(String(500), nullable=False)

    product = relationship("Product", back_populates="photos")
