from typing import List, Union

import structlog
from pydantic import TypeAdapter, ValidationError

from microservices.cart_microservice import (InvalidQuantity, PersistenceUnavailable, ProductNotFound,
                                             calculate_total, count_items, find_item_index, is_whole_number)
from microservices.persistence_microservice import PersistenceAdapter
from schemas.cart_schemas import CartLineItem, CartState, ProductRef

logger = structlog.get_logger(__name__)

line_items_adapter = TypeAdapter(List[CartLineItem])


def build_state(items: List[CartLineItem]) -> CartState:
    return CartState(items=list(items), total_price=calculate_total(items), item_count=count_items(items))


def hydrate(persistence: PersistenceAdapter) -> CartState:
    # reads the persisted cart at startup, an absent or malformed value means an empty cart.
    # a failed read raises PersistenceUnavailable, an empty cart would overwrite the stored one
    raw = persistence.load()
    if not raw or not isinstance(raw, (str, bytes)):
        return CartState()
    try:
        items = line_items_adapter.validate_json(raw)
    except ValidationError:
        logger.warning("Stored cart has an unexpected shape, starting with an empty cart")
        return CartState()
    if len({item.product_id for item in items}) != len(items):
        logger.warning("Stored cart has duplicate products, starting with an empty cart")
        return CartState()
    return build_state(items)


def persist(persistence: PersistenceAdapter, items: List[CartLineItem]):
    # always the full list, overwriting whatever the slot held
    persistence.save(line_items_adapter.dump_json(list(items)).decode("utf-8"))


class CartStore:
    """Cart line items plus their derived total, kept in sync with a durable slot.

    Every mutation recomputes the total from scratch and writes the whole item
    list back through the persistence adapter. With ``strict=False`` (the
    default) unknown product ids and bad quantities are ignored; with
    ``strict=True`` they raise ``ProductNotFound`` / ``InvalidQuantity``.

    Quantities are never clamped to ``count_in_stock`` here, neither when
    ``add_item`` merges into an existing line nor in ``update_quantity``.
    Callers clamp before calling.

    Building a store raises ``PersistenceUnavailable`` when the slot cannot
    be read, nothing is written to the slot in that case.
    """

    def __init__(self, persistence: PersistenceAdapter, strict: bool = False):
        self.persistence = persistence
        self.strict = strict
        state = hydrate(persistence)
        self._items = state.items
        self._total_price = state.total_price

    @property
    def items(self) -> List[CartLineItem]:
        return list(self._items)

    @property
    def total_price(self) -> float:
        return self._total_price

    @property
    def item_count(self) -> int:
        return count_items(self._items)

    def snapshot(self) -> CartState:
        return build_state(self._items)

    def add_item(self, product: Union[ProductRef, dict], quantity: int = 1) -> CartState:
        if not is_whole_number(quantity) or quantity <= 0:
            return self._reject(InvalidQuantity(quantity))
        if not isinstance(product, ProductRef):
            product = ProductRef.model_validate(product)
        items = list(self._items)
        index = find_item_index(items, product.product_id)
        if index is not None:
            # merged quantity may exceed stock
            existing = items[index]
            items[index] = existing.model_copy(update={"quantity": existing.quantity + quantity})
        else:
            items.append(CartLineItem(**product.model_dump(), quantity=quantity))
        return self._commit(items)

    def update_quantity(self, product_id: str, quantity: int) -> CartState:
        if not is_whole_number(quantity):
            return self._reject(InvalidQuantity(quantity))
        index = find_item_index(self._items, product_id)
        if index is None:
            return self._reject(ProductNotFound(product_id))
        items = list(self._items)
        if quantity <= 0:
            del items[index]
        else:
            items[index] = items[index].model_copy(update={"quantity": quantity})
        return self._commit(items)

    def remove_item(self, product_id: str) -> CartState:
        index = find_item_index(self._items, product_id)
        if index is None:
            return self._reject(ProductNotFound(product_id))
        items = list(self._items)
        del items[index]
        return self._commit(items)

    def clear(self) -> CartState:
        return self._commit([])

    def _reject(self, error):
        if self.strict:
            raise error
        logger.info("Ignoring cart operation", reason=str(error))
        return self.snapshot()

    def _commit(self, items: List[CartLineItem]) -> CartState:
        # memory first, a failed write must not leave the store stale
        self._items = items
        self._total_price = calculate_total(items)
        try:
            persist(self.persistence, items)
        except PersistenceUnavailable as e:
            logger.warning("Cart could not be persisted", error=str(e))
            raise
        return self.snapshot()
