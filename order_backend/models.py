"""
Domain Models

Plain in-memory records for the menu and the orders built from it.
Orders live only in the OrderStore registry; nothing here is persisted.
"""

import enum
from dataclasses import dataclass, field
from decimal import Decimal


class OrderStatus(str, enum.Enum):
    """
    Order status workflow.

    Values are the state names the restaurant shows on tickets and
    sends over the wire.
    """
    PROCESSING = "Diproses"
    OUT_FOR_DELIVERY = "Diantar"
    COMPLETED = "Selesai"


@dataclass(frozen=True)
class MenuItem:
    """A purchasable dish. Immutable for the lifetime of the process."""
    id: int
    name: str
    price: Decimal


@dataclass
class Order:
    """
    A customer's order.

    ``total`` is derived from ``items`` and is only ever changed together
    with them (see ``add_items``).

    Attributes:
        id: Order number assigned by the store
        items: Ordered dishes, duplicates allowed, insertion order kept
        total: Sum of item prices
        status: Current lifecycle status
    """
    id: int
    items: list[MenuItem] = field(default_factory=list)
    total: Decimal = Decimal("0")
    status: OrderStatus = OrderStatus.PROCESSING

    def add_items(self, items: list[MenuItem]) -> None:
        """Append dishes and grow the total by their prices."""
        self.items.extend(items)
        self.total += sum((item.price for item in items), Decimal("0"))

    def snapshot(self) -> "Order":
        """Return a copy that does not share the item list."""
        return Order(
            id=self.id,
            items=list(self.items),
            total=self.total,
            status=self.status,
        )

    def __repr__(self):
        return f"<Order #{self.id} - {len(self.items)} items - {self.total} - {self.status.value}>"


@dataclass(frozen=True)
class PaymentConfirmation:
    """Result of a successful payment."""
    order_id: int
    message: str = "Pembayaran berhasil. Pesanan sedang diantar."
