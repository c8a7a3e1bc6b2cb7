"""
Data Access Layer (DAL) for the storefront service.

This module defines the record store interface used by the logic layer and
the factory that builds the configured implementation. All records share one
table keyed by ``context`` and ``id``.
"""

from typing import Any, Dict, List, Optional, Protocol, Sequence, runtime_checkable

from storefront.dal.errors import DALError, RecordNotFoundError
from storefront.models.output import PutResult
from storefront.models.records import RecordContext


@runtime_checkable
class RecordStore(Protocol):
    """Protocol defining the record store interface."""

    table_name: str

    def get_by_key(self, context: RecordContext, record_id: str) -> Optional[Dict[str, Any]]:
        """Retrieve a record, or None when it does not exist."""
        ...

    def put_item(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """Create or fully replace a record. The record must carry context and id."""
        ...

    def put_items(self, records: Sequence[Dict[str, Any]]) -> List[PutResult]:
        """Upsert records concurrently and report the outcome of each write."""
        ...

    def update_field(self, context: RecordContext, record_id: str, field: str, value: Any) -> Dict[str, Any]:
        """Set one attribute of an existing record; RecordNotFoundError if it is missing."""
        ...

    def query_by_context(self, context: RecordContext) -> List[Dict[str, Any]]:
        """Return every record of a context, in no particular order."""
        ...

    def delete_by_key(self, context: RecordContext, record_id: str) -> bool:
        """Delete a record, returning whether it existed."""
        ...


def get_record_store(
    table_name: str,
    region_name: Optional[str] = None,
    endpoint_url: Optional[str] = None,
    max_workers: int = 8,
) -> RecordStore:
    """
    Factory function to get the DynamoDB record store.

    Args:
        table_name: Name of the shared table
        region_name: AWS region name
        endpoint_url: DynamoDB endpoint URL (for local testing)
        max_workers: Thread pool size for batch upserts

    Returns:
        Record store instance
    """
    # Import here to avoid loading boto3 for callers that only need the protocol
    from storefront.dal.dynamodb_handler import DynamoDBStore

    return DynamoDBStore(
        table_name=table_name,
        region_name=region_name,
        endpoint_url=endpoint_url,
        max_workers=max_workers,
    )


__all__ = [
    'DALError',
    'RecordNotFoundError',
    'RecordStore',
    'get_record_store',
]
