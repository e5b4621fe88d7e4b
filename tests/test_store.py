from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal

import pytest

from order_backend.errors import InvalidOrderStateError, OrderNotFoundError
from order_backend.models import OrderStatus
from order_backend.store import OrderStore


class TestCreateOrder:
    def test_scenario_two_dishes(self, two_item_catalog):
        store = OrderStore(two_item_catalog)
        order = store.create_order([1, 2])

        assert order.id == 1
        assert [i.name for i in order.items] == ["Nasi Goreng", "Mie Goreng"]
        assert order.total == Decimal("45000")
        assert order.status == OrderStatus.PROCESSING

    def test_total_is_sum_of_known_items(self, store):
        order = store.create_order([1, 1, 3, 99, 2, 0])
        assert [i.id for i in order.items] == [1, 1, 3, 2]
        assert order.total == Decimal("25000") * 2 + Decimal("30000") + Decimal("20000")

    @pytest.mark.parametrize("item_ids", [[], [99], [7, 8, 9]])
    def test_empty_or_unknown_selection_still_creates_order(self, store, item_ids):
        order = store.create_order(item_ids)
        assert order.items == []
        assert order.total == 0
        assert order.status == OrderStatus.PROCESSING

    def test_ids_are_sequential_from_one(self, store):
        ids = [store.create_order([1]).id for _ in range(3)]
        assert ids == [1, 2, 3]


class TestAddItems:
    def test_additive_and_prefix_preserved(self, store):
        before = store.create_order([2, 1])
        after = store.add_items(before.id, [3, 3])

        assert after.items[:len(before.items)] == before.items
        assert [i.id for i in after.items] == [2, 1, 3, 3]
        assert after.total == before.total + Decimal("60000")

    def test_unknown_ids_change_nothing(self, two_item_catalog):
        store = OrderStore(two_item_catalog)
        store.create_order([1, 2])

        order = store.add_items(1, [3])
        assert [i.name for i in order.items] == ["Nasi Goreng", "Mie Goreng"]
        assert order.total == Decimal("45000")

    def test_allowed_after_payment(self, store):
        order = store.create_order([1])
        store.pay_order(order.id)

        updated = store.add_items(order.id, [2])
        assert updated.total == Decimal("45000")
        assert updated.status == OrderStatus.OUT_FOR_DELIVERY

    def test_not_found(self, store):
        with pytest.raises(OrderNotFoundError) as exc_info:
            store.add_items(5, [1])
        assert exc_info.value.order_id == 5
        assert len(store) == 0


class TestPayOrder:
    def test_pay_once(self, store):
        order = store.create_order([1, 2])

        confirmation = store.pay_order(order.id)
        assert confirmation.order_id == order.id
        assert confirmation.message == "Pembayaran berhasil. Pesanan sedang diantar."
        assert store.get_order(order.id).status == OrderStatus.OUT_FOR_DELIVERY

    def test_second_payment_rejected(self, store):
        order = store.create_order([1])
        store.pay_order(order.id)

        with pytest.raises(InvalidOrderStateError) as exc_info:
            store.pay_order(order.id)
        assert exc_info.value.status == OrderStatus.OUT_FOR_DELIVERY
        assert store.get_order(order.id).status == OrderStatus.OUT_FOR_DELIVERY

    def test_completed_order_cannot_be_paid(self, store):
        order = store.create_order([1])
        store.set_status(order.id, OrderStatus.COMPLETED)

        with pytest.raises(InvalidOrderStateError):
            store.pay_order(order.id)

    def test_not_found(self, store):
        with pytest.raises(OrderNotFoundError):
            store.pay_order(99)


class TestSetStatus:
    @pytest.mark.parametrize("status", list(OrderStatus))
    def test_any_status_accepted(self, store, status):
        order = store.create_order([1])
        assert store.set_status(order.id, status).status == status
        assert store.set_status(order.id, status).status == status

    def test_can_move_backwards(self, store):
        order = store.create_order([1])
        assert store.set_status(order.id, OrderStatus("Selesai")).status == OrderStatus.COMPLETED
        assert store.set_status(order.id, OrderStatus("Diproses")).status == OrderStatus.PROCESSING

        # Back in PROCESSING, so payment is possible again
        store.pay_order(order.id)

    def test_not_found(self, store):
        with pytest.raises(OrderNotFoundError):
            store.set_status(1, OrderStatus.COMPLETED)


class TestReads:
    def test_get_order_not_found(self, store):
        with pytest.raises(OrderNotFoundError):
            store.get_order(1)

    def test_list_orders(self, store):
        assert store.list_orders() == []
        store.create_order([1])
        store.create_order([2, 3])

        orders = store.list_orders()
        assert sorted(o.id for o in orders) == [1, 2]

    def test_snapshots_are_detached(self, store):
        order = store.create_order([1])
        order.items.append(store.catalog.get(3))
        order.status = OrderStatus.COMPLETED

        fresh = store.get_order(order.id)
        assert [i.id for i in fresh.items] == [1]
        assert fresh.status == OrderStatus.PROCESSING

        listed = store.list_orders()[0]
        listed.items.clear()
        assert len(store.get_order(order.id).items) == 1


class TestConcurrency:
    def test_concurrent_creates_get_distinct_ids(self, store):
        n = 200
        with ThreadPoolExecutor(max_workers=16) as pool:
            orders = list(pool.map(lambda _: store.create_order([1, 2]), range(n)))

        ids = [o.id for o in orders]
        assert len(set(ids)) == n
        assert sorted(ids) == list(range(1, n + 1))
        assert len(store.list_orders()) == n

    def test_concurrent_adds_keep_totals_consistent(self, store):
        order = store.create_order([])
        with ThreadPoolExecutor(max_workers=16) as pool:
            list(pool.map(lambda _: store.add_items(order.id, [2]), range(100)))

        final = store.get_order(order.id)
        assert len(final.items) == 100
        assert final.total == Decimal("20000") * 100

    def test_concurrent_payments_succeed_exactly_once(self, store):
        order = store.create_order([1])

        def attempt(_):
            try:
                store.pay_order(order.id)
                return True
            except InvalidOrderStateError:
                return False

        with ThreadPoolExecutor(max_workers=16) as pool:
            results = list(pool.map(attempt, range(50)))

        assert results.count(True) == 1
