"""
In-memory implementation of the record store.

Mirrors the DynamoDB store's semantics (full upserts, conditional field
updates, unordered partition reads) without any AWS dependency. Used by the
unit tests and for running the dispatcher locally.
"""

import copy
import threading
from typing import Any, Dict, List, Optional, Sequence, Tuple

from storefront.dal.errors import RecordNotFoundError
from storefront.handlers.utils.errors import ValidationError
from storefront.handlers.utils.observability import logger
from storefront.models.output import PutResult
from storefront.models.records import CONTEXT_ATTRIBUTE, ID_ATTRIBUTE, RecordContext, record_key


class InMemoryStore:
    """Record store holding records in a dict keyed by (context, id)."""

    def __init__(self, table_name: str = 'in-memory', records: Optional[Sequence[Dict[str, Any]]] = None):
        self.table_name = table_name
        self._records: Dict[Tuple[str, str], Dict[str, Any]] = {}
        self._lock = threading.Lock()
        for record in records or []:
            self.put_item(dict(record))

    def get_by_key(self, context: RecordContext, record_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            record = self._records.get((RecordContext(context).value, record_id))
            return copy.deepcopy(record) if record is not None else None

    def put_item(self, record: Dict[str, Any]) -> Dict[str, Any]:
        if not record.get(CONTEXT_ATTRIBUTE) or not record.get(ID_ATTRIBUTE):
            raise ValidationError(message="Record must carry context and id")
        with self._lock:
            self._records[(record[CONTEXT_ATTRIBUTE], record[ID_ATTRIBUTE])] = copy.deepcopy(record)
        return record

    def put_items(self, records: Sequence[Dict[str, Any]]) -> List[PutResult]:
        results = []
        for record in records:
            context = str(record.get(CONTEXT_ATTRIBUTE, ''))
            record_id = str(record.get(ID_ATTRIBUTE, ''))
            try:
                self.put_item(record)
            except ValidationError as e:
                results.append(PutResult(context=context, id=record_id, success=False, error=e.error_code))
            else:
                results.append(PutResult(context=context, id=record_id, success=True))
        return results

    def update_field(self, context: RecordContext, record_id: str, field: str, value: Any) -> Dict[str, Any]:
        key = record_key(context, record_id)
        with self._lock:
            record = self._records.get((key[CONTEXT_ATTRIBUTE], record_id))
            if record is None:
                logger.info("Update target does not exist", extra={"key": key})
                raise RecordNotFoundError(table_name=self.table_name, key=key)
            record[field] = copy.deepcopy(value)
            return copy.deepcopy(record)

    def query_by_context(self, context: RecordContext) -> List[Dict[str, Any]]:
        partition = RecordContext(context).value
        with self._lock:
            return [copy.deepcopy(record) for (ctx, _), record in self._records.items() if ctx == partition]

    def delete_by_key(self, context: RecordContext, record_id: str) -> bool:
        with self._lock:
            return self._records.pop((RecordContext(context).value, record_id), None) is not None
