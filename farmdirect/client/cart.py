"""Client-side cart state.

A cart only ever holds products of one farmer, matching the checkout rule on
the server. Adding a product from another farmer starts a fresh cart.
"""
from dataclasses import dataclass, field
from typing import List, Optional

from farmdirect.core.errors import ValidationError
from farmdirect.models.order import DeliveryMethod
from farmdirect.schemas.catalog import CatalogProduct
from farmdirect.schemas.order import MAX_ITEM_QTY, OrderCreate, OrderItemCreate


@dataclass
class CartLine:
    product: CatalogProduct
    qty: int

    @property
    def line_total_cents(self) -> int:
        return self.product.price_cents * self.qty


@dataclass
class Cart:
    lines: List[CartLine] = field(default_factory=list)

    def _find(self, product_id: int) -> Optional[CartLine]:
        return next((line for line in self.lines if line.product.id == product_id), None)

    @staticmethod
    def _cap(product: CatalogProduct, qty: int) -> int:
        return min(qty, product.stock_qty, MAX_ITEM_QTY)

    def add(self, product: CatalogProduct, qty: int = 1) -> None:
        if qty <= 0:
            return
        if self.farmer_id is not None and self.farmer_id != product.farmer_id:
            self.lines = [CartLine(product=product, qty=self._cap(product, qty))]
            return

        line = self._find(product.id)
        if line is None:
            self.lines.append(CartLine(product=product, qty=self._cap(product, qty)))
        else:
            line.qty = self._cap(product, line.qty + qty)

    def remove(self, product_id: int) -> None:
        self.lines = [line for line in self.lines if line.product.id != product_id]

    def update_qty(self, product_id: int, qty: int) -> None:
        if qty <= 0:
            self.remove(product_id)
            return
        line = self._find(product_id)
        if line is not None:
            line.qty = self._cap(line.product, qty)

    def clear(self) -> None:
        self.lines = []

    @property
    def total_cents(self) -> int:
        return sum(line.line_total_cents for line in self.lines)

    @property
    def item_count(self) -> int:
        return sum(line.qty for line in self.lines)

    @property
    def farmer_id(self) -> Optional[int]:
        return self.lines[0].product.farmer_id if self.lines else None

    def to_order_request(
        self, delivery_method: DeliveryMethod, note: Optional[str] = None
    ) -> OrderCreate:
        """Build the checkout payload; the server re-validates stock and prices."""
        # out-of-stock lines are capped to 0 and can't be ordered
        lines = [line for line in self.lines if line.qty > 0]
        if not lines:
            raise ValidationError("Cart is empty")
        return OrderCreate(
            delivery_method=delivery_method,
            note=note,
            items=[OrderItemCreate(product_id=line.product.id, qty=line.qty) for line in lines],
        )
