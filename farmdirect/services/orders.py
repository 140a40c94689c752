"""Order lifecycle: checkout validation, status transitions and retrieval.

Every function runs inside the caller's session and either commits a single
unit of work or raises a domain error before writing anything.

Stock is validated at read time only. Nothing is decremented or reserved, so
two concurrent checkouts against the same low-stock product can both pass.
"""
import logging
from typing import Dict, FrozenSet, List, Optional

from sqlalchemy.orm import Session, joinedload, selectinload

from farmdirect.auth.security import ConsumerPrincipal, FarmerPrincipal, Principal
from farmdirect.core.errors import (
    ForbiddenError,
    InsufficientStockError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from farmdirect.models.order import Order, OrderItem, OrderStatus
from farmdirect.models.product import Product, ProductStatus
from farmdirect.models.user import User
from farmdirect.schemas.order import OrderCreate

logger = logging.getLogger(__name__)

TERMINAL_STATUSES: FrozenSet[OrderStatus] = frozenset({OrderStatus.DONE, OrderStatus.CANCELED})

ALLOWED_TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.CONFIRMED, OrderStatus.CANCELED}),
    OrderStatus.CONFIRMED: frozenset({OrderStatus.DONE, OrderStatus.CANCELED}),
    OrderStatus.DONE: frozenset(),
    OrderStatus.CANCELED: frozenset(),
}


def _order_query(db: Session):
    return db.query(Order).options(
        selectinload(Order.items),
        joinedload(Order.farmer).joinedload(User.farmer_profile),
        joinedload(Order.consumer),
    )


def _get_order_or_404(db: Session, order_id: int) -> Order:
    order = _order_query(db).filter(Order.id == order_id).first()
    if order is None:
        raise NotFoundError("Order", order_id)
    return order


def create_order(db: Session, consumer: ConsumerPrincipal, payload: OrderCreate) -> Order:
    # Repeated product ids collapse; the last requested qty wins
    qty_by_id = {item.product_id: item.qty for item in payload.items}
    product_ids = list(qty_by_id)

    products = (
        db.query(Product)
        .filter(Product.id.in_(product_ids), Product.status == ProductStatus.ACTIVE)
        .order_by(Product.id)
        .all()
    )
    if len(products) != len(product_ids):
        logger.info("Order rejected for consumer=%s: invalid or inactive products", consumer.id)
        raise ValidationError("One or more products are invalid/inactive")

    farmer_id = products[0].farmer_id
    if any(p.farmer_id != farmer_id for p in products):
        logger.info("Order rejected for consumer=%s: products from several farmers", consumer.id)
        raise ValidationError("Order must contain products from only one farmer")

    for product in products:
        requested = qty_by_id[product.id]
        if requested > product.stock_qty:
            logger.info(
                "Order rejected for consumer=%s: product=%s available=%s requested=%s",
                consumer.id, product.id, product.stock_qty, requested,
            )
            raise InsufficientStockError(product.id, product.name, product.stock_qty, requested)

    # Snapshot name and price so later catalog edits don't rewrite history
    items = []
    for product in products:
        qty = qty_by_id[product.id]
        items.append(OrderItem(
            product_id=product.id,
            product_name=product.name,
            unit_price_cents=product.price_cents,
            qty=qty,
            line_total_cents=product.price_cents * qty,
        ))

    order = Order(
        consumer_id=consumer.id,
        farmer_id=farmer_id,
        delivery_method=payload.delivery_method,
        status=OrderStatus.PENDING,
        note=payload.note,
        subtotal_cents=sum(item.line_total_cents for item in items),
        items=items,
    )
    db.add(order)
    db.commit()

    logger.info(
        "Order %s created: consumer=%s farmer=%s items=%d subtotal_cents=%d",
        order.id, consumer.id, farmer_id, len(items), order.subtotal_cents,
    )
    return _get_order_or_404(db, order.id)


def list_mine(
    db: Session, consumer: ConsumerPrincipal, status: Optional[OrderStatus] = None
) -> List[Order]:
    query = _order_query(db).filter(Order.consumer_id == consumer.id)
    if status:
        query = query.filter(Order.status == status)
    return query.order_by(Order.created_at.desc(), Order.id.desc()).all()


def list_inbox(
    db: Session, farmer: FarmerPrincipal, status: Optional[OrderStatus] = None
) -> List[Order]:
    query = _order_query(db).filter(Order.farmer_id == farmer.id)
    if status:
        query = query.filter(Order.status == status)
    return query.order_by(Order.created_at.desc(), Order.id.desc()).all()


def get_order(db: Session, principal: Principal, order_id: int) -> Order:
    order = _get_order_or_404(db, order_id)
    if principal.id not in (order.consumer_id, order.farmer_id):
        raise ForbiddenError()
    return order


def check_transition(current: OrderStatus, requested: OrderStatus) -> None:
    """Raise InvalidTransitionError unless current -> requested is allowed.

    PENDING -> CONFIRMED | CANCELED
    CONFIRMED -> DONE | CANCELED
    DONE and CANCELED are terminal. Re-applying the current status
    (e.g. CONFIRMED -> CONFIRMED) is rejected, not treated as a no-op.
    """
    if current in TERMINAL_STATUSES:
        raise InvalidTransitionError(current.value, requested.value, f"Order already {current.value}")
    if current == OrderStatus.PENDING and requested == OrderStatus.DONE:
        raise InvalidTransitionError(current.value, requested.value, "Cannot set DONE before CONFIRMED")
    if current == requested:
        raise InvalidTransitionError(current.value, requested.value, f"Order is already {current.value}")
    if requested not in ALLOWED_TRANSITIONS[current]:
        raise InvalidTransitionError(current.value, requested.value)


def set_status(
    db: Session, farmer: FarmerPrincipal, order_id: int, status: OrderStatus
) -> Order:
    order = _get_order_or_404(db, order_id)
    if order.farmer_id != farmer.id:
        raise ForbiddenError()

    previous = order.status
    check_transition(previous, status)

    order.status = status
    db.commit()

    logger.info("Order %s status %s -> %s by farmer=%s", order_id, previous.value, status.value, farmer.id)
    return _get_order_or_404(db, order_id)
