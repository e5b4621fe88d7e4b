"""
Order Backend Exceptions

Typed failures raised by the catalog and the order store. The HTTP layer
maps them to responses; nothing in the core catches them.
"""

from order_backend.models import OrderStatus


class OrderBackendError(Exception):
    """Base class for all order backend errors."""


class OrderNotFoundError(OrderBackendError):
    """The referenced order id is not in the registry."""

    message = "Pesanan tidak ditemukan"

    def __init__(self, order_id: int):
        self.order_id = order_id
        super().__init__(f"Order #{order_id} not found")


class InvalidOrderStateError(OrderBackendError):
    """The order's status does not allow the requested operation."""

    message = "Pesanan sudah dibayar atau sedang diproses"

    def __init__(self, order_id: int, status: OrderStatus):
        self.order_id = order_id
        self.status = status
        super().__init__(
            f"Order #{order_id} cannot be paid in status '{status.value}'"
        )


class CatalogLoadError(OrderBackendError):
    """The menu file could not be read or parsed."""
