"""
Record model for the shared storefront table.

Every record lives in one table keyed by ``context`` (partition) and ``id``
(sort key). Attributes beyond the key vary per context, so records travel
through the service as plain dictionaries.
"""

from enum import Enum
from typing import Any, Dict


class RecordContext(str, Enum):
    """Partition key values of the shared table."""

    USER = 'user'
    ITEM = 'item'
    ORDER = 'order'


class OrderStatus(str, Enum):
    """Order lifecycle states."""

    OPEN = 'OPEN'
    CLOSED = 'CLOSED'


class OrderTransition(str, Enum):
    """Order lifecycle transitions."""

    COMPLETE = 'complete'
    REOPEN = 'reopen'


# Both transitions apply from any state; no state is terminal.
ORDER_TRANSITIONS: Dict[OrderTransition, OrderStatus] = {
    OrderTransition.COMPLETE: OrderStatus.CLOSED,
    OrderTransition.REOPEN: OrderStatus.OPEN,
}

CONTEXT_ATTRIBUTE = 'context'
ID_ATTRIBUTE = 'id'
ORDER_STATUS_ATTRIBUTE = 'orderStatus'


def record_key(context: RecordContext, record_id: str) -> Dict[str, Any]:
    """Build the composite primary key of a record."""
    return {CONTEXT_ATTRIBUTE: RecordContext(context).value, ID_ATTRIBUTE: record_id}
