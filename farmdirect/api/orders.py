from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List, Optional
from farmdirect.api.params import IdPath
from farmdirect.db.session import get_db
from farmdirect.models.order import OrderStatus
from farmdirect.schemas.order import Order as OrderSchema, OrderCreate, OrderStatusUpdate
from farmdirect.auth.security import (
    ConsumerPrincipal,
    FarmerPrincipal,
    Principal,
    get_current_principal,
    require_consumer,
    require_farmer,
)
from farmdirect.services import orders as order_service

router = APIRouter()

@router.post("/", response_model=OrderSchema, status_code=status.HTTP_201_CREATED)
def create_order(
    order: OrderCreate,
    db: Session = Depends(get_db),
    consumer: ConsumerPrincipal = Depends(require_consumer)
):
    """
    Place an order with products from a single farmer.

    Stock is checked but not reserved; prices are copied onto the order items.
    """
    return order_service.create_order(db, consumer, order)

@router.get("/mine", response_model=List[OrderSchema])
def read_my_orders(
    status: Optional[OrderStatus] = None,
    db: Session = Depends(get_db),
    consumer: ConsumerPrincipal = Depends(require_consumer)
):
    return order_service.list_mine(db, consumer, status)

# Must be registered before "/{order_id}"
@router.get("/inbox", response_model=List[OrderSchema])
def read_inbox(
    status: Optional[OrderStatus] = None,
    db: Session = Depends(get_db),
    farmer: FarmerPrincipal = Depends(require_farmer)
):
    return order_service.list_inbox(db, farmer, status)

@router.get("/{order_id}", response_model=OrderSchema)
def read_order(
    order_id: IdPath,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal)
):
    return order_service.get_order(db, principal, order_id)

@router.patch("/{order_id}/status", response_model=OrderSchema)
def update_order_status(
    order_id: IdPath,
    update: OrderStatusUpdate,
    db: Session = Depends(get_db),
    farmer: FarmerPrincipal = Depends(require_farmer)
):
    return order_service.set_status(db, farmer, order_id, update.status)
