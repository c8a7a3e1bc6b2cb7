"""
Demo data seeding for the INIT action.

Upserts a fixed set of users, items and orders by id, so running it again
restores the demo records without duplicating them.
"""

from decimal import Decimal
from typing import Any, Dict, List

from aws_lambda_powertools.metrics import MetricUnit

from storefront.dal import RecordStore
from storefront.handlers.utils.observability import logger, metrics, tracer
from storefront.models.output import SeedOutput

DEMO_RECORDS: List[Dict[str, Any]] = [
    {"context": "item", "id": "1", "image": "images/product01.jpg", "price": Decimal(10), "title": "Tank Top", "description": ""},
    {"context": "item", "id": "2", "image": "images/product02.jpg", "price": Decimal(10), "title": "Polo-Shirt", "description": ""},
    {"context": "item", "id": "3", "image": "images/product03.jpg", "price": Decimal(10), "title": "T-Shirt", "description": ""},
    {
        "context": "user",
        "id": "admin",
        "password": "cac28395540089e505a68311833c2cb5a92f84f4",
        "info": {"userId": "admin", "name": "Administrator", "role": "admin"},
    },
    {
        "context": "order",
        "id": "1",
        "orderStatus": "OPEN",
        "price": Decimal(10),
        "title": "Tank Top",
        "buyerName": "Mark Zucherberg",
        "buyerAddress": "1 Hacker Way, Menlo Park, 94025 CA, United States of America.",
    },
    {
        "context": "order",
        "id": "2",
        "orderStatus": "OPEN",
        "price": Decimal(10),
        "title": "Polo-Shirt",
        "buyerName": "Sundar Pitchai",
        "buyerAddress": "1600 Amphitheatre Parkway, Mountain View, CA 94043",
    },
    {
        "context": "order",
        "id": "3",
        "orderStatus": "OPEN",
        "price": Decimal(10),
        "title": "T-Shirt",
        "buyerName": "Andy Jassy",
        "buyerAddress": "410 Terry Ave N, Seattle, Washington 98109, US",
    },
]


class SeedService:
    """Writes the demo records."""

    def __init__(self, store: RecordStore):
        self.store = store

    @tracer.capture_method
    def seed(self) -> SeedOutput:
        """
        Upsert every demo record concurrently.

        Returns:
            Per-record results; already-written records are kept when others fail
        """
        results = self.store.put_items([dict(record) for record in DEMO_RECORDS])
        failed = [result for result in results if not result.success]

        if failed:
            metrics.add_metric(name="SeedWriteFailed", unit=MetricUnit.Count, value=len(failed))
            logger.warning("Demo data seeded with failures", extra={"failed": len(failed), "total": len(results)})
        else:
            logger.info("Demo data seeded", extra={"total": len(results)})

        return SeedOutput(success=not failed, results=results)
