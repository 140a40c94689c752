from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, Field, HttpUrl
from farmdirect.models.product import ProductCategory, ProductStatus, ProductUnit
from farmdirect.schemas.base import BaseSchema, TimestampSchema
from farmdirect.schemas.certification import Certification

MAX_PHOTOS = 6

class ProductBase(BaseModel):
    name: str = Field(min_length=2, max_length=100)
    description: str = Field(min_length=2)
    category: ProductCategory
    unit: ProductUnit
    price_cents: int = Field(ge=0)
    stock_qty: int = Field(ge=0)

class ProductCreate(ProductBase):
    photo_urls: Optional[List[HttpUrl]] = Field(default=None, max_length=MAX_PHOTOS)

class ProductUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    description: Optional[str] = Field(default=None, min_length=2)
    category: Optional[ProductCategory] = None
    unit: Optional[ProductUnit] = None
    price_cents: Optional[int] = Field(default=None, ge=0)
    stock_qty: Optional[int] = Field(default=None, ge=0)
    status: Optional[ProductStatus] = None
    # replaces ALL photos of the product
    photo_urls: Optional[List[HttpUrl]] = Field(default=None, max_length=MAX_PHOTOS)

class ProductPhoto(BaseSchema):
    id: int
    product_id: int
    url: str
    created_at: datetime

class Product(TimestampSchema):
    id: int
    farmer_id: int
    name: str
    description: str
    category: ProductCategory
    unit: ProductUnit
    price_cents: int
    stock_qty: int
    status: ProductStatus
    photos: List[ProductPhoto] = []
    certs: List[Certification] = []
