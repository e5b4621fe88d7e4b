"""
Pydantic Schemas for Request/Response Validation

Wire shapes for the menu and order endpoints. Domain objects are
converted with the ``from_domain`` helpers so prices leave the API as
plain JSON numbers.
"""

from pydantic import BaseModel, Field, StrictInt
from typing import Optional, List
from datetime import datetime

from order_backend.models import MenuItem, Order, OrderStatus, PaymentConfirmation


# =============================================================================
# REQUEST SCHEMAS
# =============================================================================

class AddItemsRequest(BaseModel):
    """Request schema for adding items to an existing order."""
    order_id: StrictInt = Field(..., examples=[1])
    items: List[StrictInt] = Field(default_factory=list, examples=[[1, 3]])


class PayOrderRequest(BaseModel):
    """Request schema for paying an order."""
    order_id: StrictInt = Field(..., examples=[1])


class UpdateStatusRequest(BaseModel):
    """Request schema for overriding an order's status."""
    order_id: StrictInt = Field(..., examples=[1])
    status: OrderStatus = Field(..., examples=["Selesai"])


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================

class MenuItemResponse(BaseModel):
    """A single menu entry."""
    id: int
    name: str
    price: float

    @classmethod
    def from_domain(cls, item: MenuItem) -> "MenuItemResponse":
        return cls(id=item.id, name=item.name, price=float(item.price))


class OrderResponse(BaseModel):
    """Response schema for a single order."""
    id: int
    items: List[MenuItemResponse]
    total: float
    status: OrderStatus

    @classmethod
    def from_domain(cls, order: Order) -> "OrderResponse":
        return cls(
            id=order.id,
            items=[MenuItemResponse.from_domain(item) for item in order.items],
            total=float(order.total),
            status=order.status,
        )


class PaymentResponse(BaseModel):
    """Response after a successful payment."""
    message: str

    @classmethod
    def from_domain(cls, confirmation: PaymentConfirmation) -> "PaymentResponse":
        return cls(message=confirmation.message)


class ErrorResponse(BaseModel):
    """Standard error response."""
    success: bool = False
    error: str
    detail: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    environment: str
    menu_items: int
    orders: int
    timestamp: datetime
