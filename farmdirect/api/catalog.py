from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session, joinedload, selectinload
from sqlalchemy import func
from typing import List, Optional
from farmdirect.api.params import IdPath
from farmdirect.db.session import get_db
from farmdirect.models.product import Product, ProductCategory, ProductStatus
from farmdirect.models.user import User, UserRole
from farmdirect.schemas.catalog import (
    CatalogProduct,
    CatalogProductDetail,
    FarmerCatalog,
    FarmerListing,
)
from farmdirect.auth.security import ConsumerPrincipal, require_consumer

router = APIRouter()

def active_products(db: Session):
    return db.query(Product).options(
        selectinload(Product.photos),
        selectinload(Product.certs),
    ).filter(Product.status == ProductStatus.ACTIVE)

@router.get("/products", response_model=List[CatalogProduct])
def read_catalog(
    category: Optional[ProductCategory] = Query(None, description="Filter by category"),
    city: Optional[str] = Query(None, min_length=2, description="Farmer city, case-insensitive"),
    q: Optional[str] = Query(None, min_length=1, description="Search in product name"),
    db: Session = Depends(get_db),
    consumer: ConsumerPrincipal = Depends(require_consumer)
):
    """
    Browse active products of every farmer, newest first.

    - **category**: Filter by product category
    - **city**: Only products of farmers in this city
    - **q**: Search term in the product name
    """
    query = active_products(db).options(
        joinedload(Product.farmer).joinedload(User.farmer_profile)
    )

    if category:
        query = query.filter(Product.category == category)

    if city:
        query = query.join(Product.farmer).filter(func.lower(User.city) == city.lower())

    if q:
        query = query.filter(Product.name.ilike(f"%{q}%"))

    return query.order_by(Product.created_at.desc(), Product.id.desc()).all()

@router.get("/products/{product_id}", response_model=CatalogProductDetail)
def read_catalog_product(
    product_id: IdPath,
    db: Session = Depends(get_db),
    consumer: ConsumerPrincipal = Depends(require_consumer)
):
    product = active_products(db).options(
        joinedload(Product.farmer).joinedload(User.farmer_profile)
    ).filter(Product.id == product_id).first()
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return product

@router.get("/farmers", response_model=List[FarmerListing])
def read_farmers(
    db: Session = Depends(get_db),
    consumer: ConsumerPrincipal = Depends(require_consumer)
):
    active_count = (
        db.query(Product.farmer_id, func.count(Product.id).label("active_products_count"))
        .filter(Product.status == ProductStatus.ACTIVE)
        .group_by(Product.farmer_id)
        .subquery()
    )

    rows = (
        db.query(User, func.coalesce(active_count.c.active_products_count, 0))
        .options(joinedload(User.farmer_profile))
        .outerjoin(active_count, active_count.c.farmer_id == User.id)
        .filter(User.role == UserRole.FARMER)
        .order_by(User.created_at.desc(), User.id.desc())
        .all()
    )

    return [
        FarmerListing(
            id=farmer.id,
            name=farmer.name,
            city=farmer.city,
            phone=farmer.phone,
            property_name=farmer.property_name,
            address=farmer.address,
            active_products_count=count,
        )
        for farmer, count in rows
    ]

@router.get("/farmers/{farmer_id}/products", response_model=FarmerCatalog)
def read_farmer_catalog(
    farmer_id: IdPath,
    db: Session = Depends(get_db),
    consumer: ConsumerPrincipal = Depends(require_consumer)
):
    farmer = db.query(User).filter(User.id == farmer_id, User.role == UserRole.FARMER).first()
    if farmer is None:
        raise HTTPException(status_code=404, detail="Farmer not found")

    products = active_products(db).filter(
        Product.farmer_id == farmer_id
    ).order_by(Product.created_at.desc(), Product.id.desc()).all()

    return {"farmer": farmer, "products": products}
