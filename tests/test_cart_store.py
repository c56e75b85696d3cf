"""Tests for the cart store: merging, totals, deletion paths and strict mode."""

import json

import pytest

from conftest import make_product
from microservices.cart_microservice import InvalidQuantity, PersistenceUnavailable, ProductNotFound
from microservices.persistence_microservice import MemoryPersistence, PersistenceAdapter
from services.cart_service import CartStore


def expected_total(cart):
    return sum(item.price * item.quantity for item in cart.items)


class FailingPersistence(PersistenceAdapter):
    def load(self):
        return None

    def save(self, raw):
        raise PersistenceUnavailable("quota exceeded")


class TestAddItem:
    def test_same_product_merges_quantity(self, cart):
        cart.add_item(make_product("p1", price=100), 1)
        cart.add_item(make_product("p1", price=100), 2)

        assert len(cart.items) == 1
        assert cart.items[0].quantity == 3
        assert cart.total_price == 300

    def test_new_products_append_in_order(self, cart):
        cart.add_item(make_product("p1"))
        cart.add_item(make_product("p2"))
        cart.add_item(make_product("p3"))

        assert [item.product_id for item in cart.items] == ["p1", "p2", "p3"]

    def test_default_quantity_is_one(self, cart):
        cart.add_item(make_product("p1", price=40))

        assert cart.items[0].quantity == 1
        assert cart.total_price == 40

    def test_merge_is_not_clamped_to_stock(self, cart):
        cart.add_item(make_product("p1", count_in_stock=2), 2)
        cart.add_item(make_product("p1", count_in_stock=2), 3)

        assert cart.items[0].quantity == 5

    def test_price_is_a_snapshot(self, cart):
        cart.add_item(make_product("p1", price=100))
        cart.add_item(make_product("p1", price=150))

        assert cart.items[0].price == 100
        assert cart.total_price == 200

    def test_accepts_plain_dict_product(self, cart):
        cart.add_item({"product_id": "p9", "name": "Tent", "price": 12.5, "count_in_stock": 3}, 2)

        assert cart.items[0].name == "Tent"
        assert cart.total_price == 25

    def test_uniqueness_over_many_adds(self, cart):
        for product_id in ["a", "b", "a", "c", "b", "a"]:
            cart.add_item(make_product(product_id, price=10))

        ids = [item.product_id for item in cart.items]
        assert len(ids) == len(set(ids)) == 3
        assert cart.item_count == 6

    @pytest.mark.parametrize("quantity", [0, -1, 1.5, True])
    def test_invalid_quantity_is_ignored(self, cart, persistence, quantity):
        cart.add_item(make_product("p1"), quantity)

        assert cart.items == []
        assert persistence.raw is None

    @pytest.mark.parametrize("quantity", [0, -3, 2.0])
    def test_invalid_quantity_raises_in_strict_mode(self, strict_cart, quantity):
        with pytest.raises(InvalidQuantity):
            strict_cart.add_item(make_product("p1"), quantity)
        assert strict_cart.items == []


class TestUpdateQuantity:
    def test_sets_exact_quantity(self, cart):
        cart.add_item(make_product("p1", price=25), 1)
        cart.update_quantity("p1", 4)

        assert cart.items[0].quantity == 4
        assert cart.total_price == 100

    def test_zero_removes_item(self, cart):
        cart.add_item(make_product("p1", price=50), 1)
        cart.update_quantity("p1", 0)

        assert cart.items == []
        assert cart.total_price == 0

    def test_negative_removes_item(self, cart):
        cart.add_item(make_product("p1"))
        cart.add_item(make_product("p2", price=5))
        cart.update_quantity("p1", -2)

        assert [item.product_id for item in cart.items] == ["p2"]
        assert cart.total_price == 5

    def test_not_clamped_to_stock(self, cart):
        cart.add_item(make_product("p1", count_in_stock=1))
        cart.update_quantity("p1", 7)

        assert cart.items[0].quantity == 7

    def test_missing_product_is_a_no_op(self, cart, persistence):
        state = cart.update_quantity("missing", 5)

        assert state.items == []
        assert cart.items == []
        assert persistence.raw is None

    def test_missing_product_raises_in_strict_mode(self, strict_cart):
        with pytest.raises(ProductNotFound) as excinfo:
            strict_cart.update_quantity("missing", 5)
        assert excinfo.value.product_id == "missing"

    def test_non_integer_raises_in_strict_mode(self, strict_cart):
        strict_cart.add_item(make_product("p1"))
        with pytest.raises(InvalidQuantity):
            strict_cart.update_quantity("p1", 2.5)
        assert strict_cart.items[0].quantity == 1

    def test_keeps_position(self, cart):
        cart.add_item(make_product("p1"))
        cart.add_item(make_product("p2"))
        cart.update_quantity("p1", 3)

        assert [item.product_id for item in cart.items] == ["p1", "p2"]


class TestRemoveAndClear:
    def test_remove_item(self, cart):
        cart.add_item(make_product("p1", price=20), 1)
        cart.add_item(make_product("p2", price=30), 2)
        cart.remove_item("p1")

        assert [(item.product_id, item.quantity) for item in cart.items] == [("p2", 2)]
        assert cart.total_price == 60

    def test_remove_missing_is_a_no_op(self, cart):
        cart.add_item(make_product("p1", price=20))
        cart.remove_item("nope")

        assert len(cart.items) == 1

    def test_remove_missing_raises_in_strict_mode(self, strict_cart):
        with pytest.raises(ProductNotFound):
            strict_cart.remove_item("nope")

    def test_clear_is_idempotent(self, cart, persistence):
        cart.add_item(make_product("p1"), 2)
        once = cart.clear()
        twice = cart.clear()

        assert once == twice
        assert cart.items == []
        assert cart.total_price == 0
        assert cart.item_count == 0
        assert json.loads(persistence.raw) == []


class TestPersistence:
    def test_every_mutation_is_persisted(self, cart, persistence):
        cart.add_item(make_product("p1", price=10), 2)
        assert json.loads(persistence.raw)[0]["quantity"] == 2

        cart.update_quantity("p1", 5)
        assert json.loads(persistence.raw)[0]["quantity"] == 5

        cart.remove_item("p1")
        assert json.loads(persistence.raw) == []

    def test_new_store_hydrates_from_slot(self, persistence):
        first = CartStore(persistence)
        first.add_item(make_product("p1", price=20), 1)
        first.add_item(make_product("p2", price=30), 2)

        second = CartStore(persistence)

        assert second.items == first.items
        assert second.total_price == 80
        assert second.item_count == 3

    def test_unparsable_slot_starts_empty(self):
        cart = CartStore(MemoryPersistence("{not json"))

        assert cart.items == []
        assert cart.total_price == 0

    def test_failed_write_still_updates_memory(self):
        cart = CartStore(FailingPersistence())

        with pytest.raises(PersistenceUnavailable):
            cart.add_item(make_product("p1", price=10), 3)

        assert cart.items[0].quantity == 3
        assert cart.total_price == 30

    def test_total_matches_items_after_each_operation(self, cart):
        operations = [
            lambda: cart.add_item(make_product("a", price=9.99), 3),
            lambda: cart.add_item(make_product("b", price=0), 1),
            lambda: cart.add_item(make_product("a", price=9.99), 1),
            lambda: cart.update_quantity("b", 4),
            lambda: cart.add_item(make_product("c", price=120), 2),
            lambda: cart.remove_item("a"),
            lambda: cart.update_quantity("c", 0),
            lambda: cart.clear(),
        ]
        for operation in operations:
            state = operation()
            assert cart.total_price == pytest.approx(expected_total(cart))
            assert state.total_price == pytest.approx(cart.total_price)
            assert state.item_count == cart.item_count
