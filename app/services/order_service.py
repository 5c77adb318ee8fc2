"""
app/services/order_service.py

Purpose: Shipment order storage

- Idempotent order creation keyed by idempotency_key
- In-memory implementation for development and tests
"""

from abc import ABC, abstractmethod
from typing import Dict, List

from pymongo import ReturnDocument
from pymongo.errors import PyMongoError

from app.core.exceptions import StoreError
from app.core.logging import get_logger
from app.db.mongo import get_orders_collection
from app.models.order import Order

logger = get_logger(__name__)


def first_order_key(user_id: int) -> str:
    """Idempotency key of the order created during registration."""
    return f"{user_id}:first_order"


class OrderStore(ABC):

    @abstractmethod
    async def create(self, order: Order) -> Order:
        """
        Insert an order. If an order with the same idempotency key exists it is
        returned unchanged instead of inserting a second one.
        """


class MongoOrderStore(OrderStore):

    async def create(self, order: Order) -> Order:
        orders = get_orders_collection()

        try:
            if order.idempotency_key is None:
                await orders.insert_one(order.to_document())
                stored = order
            else:
                document = await orders.find_one_and_update(
                    {"idempotency_key": order.idempotency_key},
                    {"$setOnInsert": order.to_document()},
                    upsert=True,
                    return_document=ReturnDocument.AFTER
                )
                stored = Order.from_document(document)
        except PyMongoError as e:
            raise StoreError("Failed to create order", details={"client_id": order.client_id}) from e

        if stored.order_id != order.order_id:
            logger.warning(
                f"Order {order.idempotency_key} already exists, reusing {stored.order_id}"
            )
        else:
            logger.info(f"📦 Order created: {stored.summary}")

        return stored


class InMemoryOrderStore(OrderStore):
    """
    List-backed store for development and tests. Not suitable for production use.
    """

    def __init__(self):
        self.orders: List[Order] = []
        self._by_key: Dict[str, Order] = {}

    async def create(self, order: Order) -> Order:
        if order.idempotency_key is not None:
            existing = self._by_key.get(order.idempotency_key)
            if existing is not None:
                return existing
            self._by_key[order.idempotency_key] = order

        self.orders.append(order)
        return order
