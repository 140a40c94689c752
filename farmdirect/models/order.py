import enum

from sqlalchemy import Column, Enum, String, ForeignKey, Integer
from sqlalchemy.orm import relationship
from farmdirect.models.base import BaseModel


class OrderStatus(str, enum.Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    DONE = "DONE"
    CANCELED = "CANCELED"


class DeliveryMethod(str, enum.Enum):
    DELIVERY = "DELIVERY"
    PICKUP = "PICKUP"


class Order(BaseModel):
    __tablename__ = "orders"
    
    consumer_id = Column(Integer, ForeignKey('users.id'), nullable=False, index=True)
    # Denormalized: every item of the order belongs to this farmer
    farmer_id = Column(Integer, ForeignKey('users.id'), nullable=False, index=True)
    delivery_method = Column(Enum(DeliveryMethod, name="delivery_methods"), nullable=False)
    status = Column(
        Enum(OrderStatus, name="order_status"),
        nullable=False,
        default=OrderStatus.PENDING,
        index=True,
    )
    subtotal_cents = Column(Integer, nullable=False)
    note = Column(String(500))
    
    consumer = relationship("User", foreign_keys=[consumer_id])
    farmer = relationship("User", foreign_keys=[farmer_id])
    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.id",
    )

class OrderItem(BaseModel):
    __tablename__ = "order_items"
    
    order_id = Column(Integer, ForeignKey('orders.id'), nullable=False, index=True)
    # Snapshot taken at checkout, not a live reference to the catalog
    product_id = Column(Integer, ForeignKey('products.id'), nullable=False)
    product_name = Column(String(100), nullable=False)
    unit_price_cents = Column(Integer, nullable=False)
    qty = Column(Integer, nullable=False)
    line_total_cents = Column(Integer, nullable=False)
    
    order = relationship("Order", back_populates="items")
