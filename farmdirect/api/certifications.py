from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session
from typing import List
from farmdirect.api.params import IdPath
from farmdirect.db.session import get_db
from farmdirect.models.certification import Certification
from farmdirect.models.product import Product
from farmdirect.schemas.certification import (
    Certification as CertificationSchema,
    CertificationCreate,
    CertificationUpdate,
)
from farmdirect.auth.security import FarmerPrincipal, require_farmer

router = APIRouter()

def check_product_owner(db: Session, product_id: int, farmer: FarmerPrincipal) -> Product:
    product = db.query(Product).filter(Product.id == product_id).first()
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    if product.farmer_id != farmer.id:
        raise HTTPException(status_code=403, detail="Forbidden")
    return product

def get_owned_certification(db: Session, cert_id: int, farmer: FarmerPrincipal) -> Certification:
    cert = db.query(Certification).filter(Certification.id == cert_id).first()
    if cert is None:
        raise HTTPException(status_code=404, detail="Certification not found")
    if cert.product.farmer_id != farmer.id:
        raise HTTPException(status_code=403, detail="Forbidden")
    return cert

@router.post("/", response_model=CertificationSchema, status_code=status.HTTP_201_CREATED)
def create_certification(
    certification: CertificationCreate,
    db: Session = Depends(get_db),
    farmer: FarmerPrincipal = Depends(require_farmer)
):
    check_product_owner(db, certification.product_id, farmer)

    db_cert = Certification(**certification.model_dump())
    db.add(db_cert)
    db.commit()
    db.refresh(db_cert)
    return db_cert

@router.get("/product/{product_id}", response_model=List[CertificationSchema])
def read_product_certifications(
    product_id: IdPath,
    db: Session = Depends(get_db),
    farmer: FarmerPrincipal = Depends(require_farmer)
):
    check_product_owner(db, product_id, farmer)

    # certifications without an expiry date go last
    return db.query(Certification).filter(
        Certification.product_id == product_id
    ).order_by(
        Certification.valid_until.is_(None),
        Certification.valid_until.asc(),
        Certification.created_at.desc(),
        Certification.id.desc(),
    ).all()

@router.put("/{cert_id}", response_model=CertificationSchema)
def update_certification(
    cert_id: IdPath,
    certification: CertificationUpdate,
    db: Session = Depends(get_db),
    farmer: FarmerPrincipal = Depends(require_farmer)
):
    db_cert = get_owned_certification(db, cert_id, farmer)

    update_data = certification.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        # only valid_until may be cleared
        if value is None and field != "valid_until":
            continue
        setattr(db_cert, field, value)

    db.add(db_cert)
    db.commit()
    db.refresh(db_cert)
    return db_cert

@router.delete("/{cert_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_certification(
    cert_id: IdPath,
    db: Session = Depends(get_db),
    farmer: FarmerPrincipal = Depends(require_farmer)
):
    db_cert = get_owned_certification(db, cert_id, farmer)
    db.delete(db_cert)
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
