from typing import List, Optional
from farmdirect.schemas.base import BaseSchema
from farmdirect.schemas.product import Product

class CatalogFarmer(BaseSchema):
    id: int
    name: str
    city: str
    phone: str
    property_name: Optional[str] = None

class CatalogFarmerDetail(CatalogFarmer):
    address: Optional[str] = None

class CatalogProduct(Product):
    farmer: CatalogFarmer

class CatalogProductDetail(Product):
    farmer: CatalogFarmerDetail

class FarmerListing(CatalogFarmerDetail):
    active_products_count: int

class FarmerCatalog(BaseSchema):
    farmer: CatalogFarmerDetail
    products: List[Product]
