"""
Models Module.

Record keys and enumerations for the shared table, plus the Pydantic models
used to validate action data and shape action results.
"""

from storefront.models.input import LoginRequest, RecordIdRequest
from storefront.models.output import PutResult, SeedOutput, SuccessOutput, TokenOutput
from storefront.models.records import (
    ORDER_TRANSITIONS,
    OrderStatus,
    OrderTransition,
    RecordContext,
    record_key,
)

__all__ = [
    "LoginRequest",
    "RecordIdRequest",
    "PutResult",
    "SeedOutput",
    "SuccessOutput",
    "TokenOutput",
    "ORDER_TRANSITIONS",
    "OrderStatus",
    "OrderTransition",
    "RecordContext",
    "record_key",
]
