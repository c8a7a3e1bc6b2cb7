"""
Business Logic Layer for Order Management.

Orders are created OPEN whatever the caller supplies, and move between OPEN
and CLOSED through the complete/reopen transitions. Both transitions are
accepted from either state, so repeating one is a no-op in effect.
"""

from typing import Any, Dict, List
from uuid import uuid4

from aws_lambda_powertools.metrics import MetricUnit

from storefront.dal import RecordStore
from storefront.handlers.utils.observability import logger, metrics, tracer
from storefront.models.records import (
    CONTEXT_ATTRIBUTE,
    ID_ATTRIBUTE,
    ORDER_STATUS_ATTRIBUTE,
    ORDER_TRANSITIONS,
    OrderStatus,
    OrderTransition,
    RecordContext,
)


class OrderService:
    """Business logic service for order management."""

    def __init__(self, store: RecordStore):
        self.store = store

    @tracer.capture_method
    def create_order(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Store a new order built from the caller's fields.

        The record's context, id and orderStatus are always set here,
        overriding anything of the same name in ``data``.

        Args:
            data: Order fields (title, price, buyerName, buyerAddress, ...)

        Returns:
            The stored order record
        """
        order = {
            **data,
            CONTEXT_ATTRIBUTE: RecordContext.ORDER.value,
            ID_ATTRIBUTE: str(uuid4()),
            ORDER_STATUS_ATTRIBUTE: OrderStatus.OPEN.value,
        }
        self.store.put_item(order)

        metrics.add_metric(name="OrderCreated", unit=MetricUnit.Count, value=1)
        logger.info("Order created", extra={"order_id": order[ID_ATTRIBUTE]})
        return order

    @tracer.capture_method
    def transition(self, order_id: str, transition: OrderTransition) -> Dict[str, Any]:
        """
        Apply a lifecycle transition to an existing order.

        Raises:
            RecordNotFoundError: If the order does not exist
        """
        new_status = ORDER_TRANSITIONS[transition]
        updated = self.store.update_field(
            RecordContext.ORDER, order_id, ORDER_STATUS_ATTRIBUTE, new_status.value
        )

        metrics.add_metric(name="OrderStatusChanged", unit=MetricUnit.Count, value=1)
        logger.info("Order status changed", extra={
            "order_id": order_id,
            "transition": transition.value,
            "order_status": new_status.value,
        })
        return updated

    def complete_order(self, order_id: str) -> Dict[str, Any]:
        return self.transition(order_id, OrderTransition.COMPLETE)

    def reopen_order(self, order_id: str) -> Dict[str, Any]:
        return self.transition(order_id, OrderTransition.REOPEN)

    @tracer.capture_method
    def list_orders(self) -> List[Dict[str, Any]]:
        orders = self.store.query_by_context(RecordContext.ORDER)
        logger.debug("Orders listed", extra={"count": len(orders)})
        return orders
