from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, Field
from farmdirect.models.order import DeliveryMethod, OrderStatus
from farmdirect.schemas.base import BaseSchema, EntityId, TimestampSchema

MAX_ITEM_QTY = 999
MAX_NOTE_LENGTH = 500

class OrderItemCreate(BaseModel):
    product_id: EntityId
    qty: int = Field(ge=1, le=MAX_ITEM_QTY)

class OrderCreate(BaseModel):
    delivery_method: DeliveryMethod
    note: Optional[str] = Field(default=None, max_length=MAX_NOTE_LENGTH)
    items: List[OrderItemCreate] = Field(min_length=1)

class OrderStatusUpdate(BaseModel):
    status: OrderStatus

class OrderItem(BaseSchema):
    id: int
    order_id: int
    product_id: int
    product_name: str
    unit_price_cents: int
    qty: int
    line_total_cents: int
    created_at: datetime

class OrderConsumer(BaseSchema):
    id: int
    name: str
    phone: str
    city: str

class OrderFarmer(OrderConsumer):
    property_name: Optional[str] = None
    address: Optional[str] = None

class Order(TimestampSchema):
    id: int
    consumer_id: int
    farmer_id: int
    delivery_method: DeliveryMethod
    status: OrderStatus
    subtotal_cents: int
    note: Optional[str] = None
    items: List[OrderItem]
    farmer: OrderFarmer
    consumer: OrderConsumer
