"""
Order Store

Thread-safe in-memory registry of orders.

The store is the only owner of the order registry and the order-id
sequence. Every public method takes the same lock for its whole body,
so all operations, on any order, are applied one at a time and always
see the effects of every earlier call. Critical sections do no I/O and
never call back into the store.

Callers always receive snapshots; mutating a returned Order has no
effect on the registry.

Status rules:
    - New orders start as PROCESSING
    - pay_order only succeeds from PROCESSING and moves to OUT_FOR_DELIVERY
    - set_status is an unguarded override and accepts any status from any
      status (used by staff to correct or complete orders)

Usage:
    store = OrderStore(Catalog.default())
    order = store.create_order([1, 2])
    store.pay_order(order.id)
"""

import logging
import threading
from decimal import Decimal
from typing import Iterable

from order_backend.catalog import Catalog
from order_backend.errors import InvalidOrderStateError, OrderNotFoundError
from order_backend.models import Order, OrderStatus, PaymentConfirmation

logger = logging.getLogger(__name__)


class OrderStore:
    """
    In-memory order registry.

    Attributes:
        catalog: Menu used to resolve item ids
    """

    def __init__(self, catalog: Catalog):
        self.catalog = catalog
        self._orders: dict[int, Order] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def _get(self, order_id: int) -> Order:
        """Fetch a live order. Caller must hold the lock; no logging here."""
        order = self._orders.get(order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        return order

    # =========================================================================
    # OPERATIONS
    # =========================================================================

    def create_order(self, item_ids: Iterable[int]) -> Order:
        """
        Create a new order from menu item ids.

        Unknown ids are dropped, so an empty or fully unknown list yields
        a zero-item, zero-total order. Never fails.

        Args:
            item_ids: Menu item ids, duplicates allowed

        Returns:
            Snapshot of the new order
        """
        items = self.catalog.resolve(item_ids)

        with self._lock:
            order = Order(
                id=self._next_id,
                items=items,
                total=sum((item.price for item in items), Decimal("0")),
                status=OrderStatus.PROCESSING,
            )
            self._orders[order.id] = order
            self._next_id += 1
            snapshot = order.snapshot()

        logger.info(f"Order #{snapshot.id} created ({len(snapshot.items)} items, total {snapshot.total})")
        return snapshot

    def add_items(self, order_id: int, item_ids: Iterable[int]) -> Order:
        """
        Append menu items to an existing order.

        Existing items are kept in place and the new ones go after them.
        Allowed in any status.

        Raises:
            OrderNotFoundError: No order with this id
        """
        items = self.catalog.resolve(item_ids)

        with self._lock:
            order = self._get(order_id)
            order.add_items(items)
            snapshot = order.snapshot()

        logger.info(f"Order #{order_id}: added {len(items)} items, total now {snapshot.total}")
        return snapshot

    def pay_order(self, order_id: int) -> PaymentConfirmation:
        """
        Mark an order as paid and send it out for delivery.

        Raises:
            OrderNotFoundError: No order with this id
            InvalidOrderStateError: Order is not PROCESSING (already paid
                or moved on)
        """
        with self._lock:
            order = self._get(order_id)
            if order.status != OrderStatus.PROCESSING:
                raise InvalidOrderStateError(order_id, order.status)
            order.status = OrderStatus.OUT_FOR_DELIVERY

        logger.info(f"Order #{order_id} paid, out for delivery")
        return PaymentConfirmation(order_id=order_id)

    def set_status(self, order_id: int, status: OrderStatus) -> Order:
        """
        Overwrite an order's status.

        No transition rules apply here; any status may follow any other,
        including moving back to PROCESSING. Only pay_order is guarded.

        Raises:
            OrderNotFoundError: No order with this id
        """
        with self._lock:
            order = self._get(order_id)
            previous = order.status
            order.status = status
            snapshot = order.snapshot()

        logger.info(f"Order #{order_id} status: {previous.value} -> {status.value}")
        return snapshot

    def get_order(self, order_id: int) -> Order:
        """
        Get a single order.

        Raises:
            OrderNotFoundError: No order with this id
        """
        with self._lock:
            return self._get(order_id).snapshot()

    def list_orders(self) -> list[Order]:
        """Snapshot every known order. No ordering is guaranteed."""
        with self._lock:
            return [order.snapshot() for order in self._orders.values()]

    def __len__(self) -> int:
        with self._lock:
            return len(self._orders)
