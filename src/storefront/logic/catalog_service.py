"""
Business Logic Layer for the item catalog.
"""

from typing import Any, Dict, List
from uuid import uuid4

from aws_lambda_powertools.metrics import MetricUnit

from storefront.dal import RecordStore
from storefront.handlers.utils.observability import logger, metrics, tracer
from storefront.models.records import CONTEXT_ATTRIBUTE, ID_ATTRIBUTE, RecordContext


class CatalogService:
    """Items offered for sale. Items are added and removed, never updated."""

    def __init__(self, store: RecordStore):
        self.store = store

    @tracer.capture_method
    def add_item(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Store a new item (title, price, image, description, ...) under a fresh id."""
        item = {
            **data,
            CONTEXT_ATTRIBUTE: RecordContext.ITEM.value,
            ID_ATTRIBUTE: str(uuid4()),
        }
        self.store.put_item(item)

        metrics.add_metric(name="ItemAdded", unit=MetricUnit.Count, value=1)
        logger.info("Item added", extra={"item_id": item[ID_ATTRIBUTE]})
        return item

    @tracer.capture_method
    def remove_item(self, item_id: str) -> bool:
        removed = self.store.delete_by_key(RecordContext.ITEM, item_id)
        if removed:
            metrics.add_metric(name="ItemRemoved", unit=MetricUnit.Count, value=1)
        return removed

    @tracer.capture_method
    def list_items(self) -> List[Dict[str, Any]]:
        return self.store.query_by_context(RecordContext.ITEM)
