from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session, selectinload
from typing import List
import logging
from farmdirect.api.params import IdPath
from farmdirect.db.session import get_db
from farmdirect.models.product import Product, ProductPhoto, ProductStatus
from farmdirect.schemas.product import Product as ProductSchema, ProductCreate, ProductUpdate
from farmdirect.auth.security import FarmerPrincipal, require_farmer

logger = logging.getLogger(__name__)

router = APIRouter()

def get_owned_product(db: Session, product_id: int, farmer: FarmerPrincipal) -> Product:
    db_product = db.query(Product).filter(Product.id == product_id).first()
    if db_product is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Product not found"
        )
    if db_product.farmer_id != farmer.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
    return db_product

@router.post(
    "/",
    response_model=ProductSchema,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new product",
    description="Create a product in the caller's catalog. Requires the FARMER role."
)
def create_product(
    product: ProductCreate,
    db: Session = Depends(get_db),
    farmer: FarmerPrincipal = Depends(require_farmer)
):
    """
    Create a new product.

    - **name**: Product name (required)
    - **description**: Product description (required)
    - **category**: FRUITS, VEGETABLES, DAIRY, EGGS or GRAINS
    - **unit**: TRAY, KG, UNIT or BUNCH
    - **price_cents**: Unit price in cents
    - **stock_qty**: Units available for sale
    - **photo_urls**: Up to 6 photo URLs (optional)
    """
    db_product = Product(
        farmer_id=farmer.id,
        status=ProductStatus.ACTIVE,
        **product.model_dump(exclude={"photo_urls"})
    )
    db_product.photos = [ProductPhoto(url=str(url)) for url in product.photo_urls or []]
    db.add(db_product)
    db.commit()
    db.refresh(db_product)
    logger.info("Product %s created by farmer=%s", db_product.id, farmer.id)
    return db_product

@router.get(
    "/mine",
    response_model=List[ProductSchema],
    summary="List own products",
    description="All products of the caller, active or not, newest first."
)
def read_my_products(
    db: Session = Depends(get_db),
    farmer: FarmerPrincipal = Depends(require_farmer)
):
    return (
        db.query(Product)
        .options(selectinload(Product.photos), selectinload(Product.certs))
        .filter(Product.farmer_id == farmer.id)
        .order_by(Product.created_at.desc(), Product.id.desc())
        .all()
    )

@router.put(
    "/{product_id}",
    response_model=ProductSchema,
    summary="Update a product",
    description="Update one of the caller's products. Sending photo_urls replaces every photo."
)
def update_product(
    product_id: IdPath,
    product: ProductUpdate,
    db: Session = Depends(get_db),
    farmer: FarmerPrincipal = Depends(require_farmer)
):
    db_product = get_owned_product(db, product_id, farmer)

    update_data = product.model_dump(exclude_unset=True, exclude={"photo_urls"})
    for field, value in update_data.items():
        if value is not None:
            setattr(db_product, field, value)

    if product.photo_urls is not None:
        db_product.photos = [ProductPhoto(url=str(url)) for url in product.photo_urls]

    db.add(db_product)
    db.commit()
    db.refresh(db_product)
    return db_product

@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Deactivate a product",
    description="Soft delete: the product is marked INACTIVE and leaves the catalog."
)
def delete_product(
    product_id: IdPath,
    db: Session = Depends(get_db),
    farmer: FarmerPrincipal = Depends(require_farmer)
):
    db_product = get_owned_product(db, product_id, farmer)
    db_product.status = ProductStatus.INACTIVE
    db.add(db_product)
    db.commit()
    logger.info("Product %s deactivated by farmer=%s", product_id, farmer.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
