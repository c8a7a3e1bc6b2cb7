"""
Data Access Layer errors.

Shared by every ``RecordStore`` implementation so callers can handle store
failures without knowing which backend raised them.
"""

from typing import Any, Dict, Optional

from storefront.handlers.utils.errors import (
    BaseServiceError,
    ErrorCategory,
    ErrorContext,
    ErrorSeverity,
    ResourceNotFoundError,
)


class DALError(BaseServiceError):
    """A store operation failed for a reason other than a missing record."""

    error_code = "DAL_ERROR"
    severity = ErrorSeverity.HIGH
    category = ErrorCategory.INFRASTRUCTURE
    user_message = "A database error occurred. Please try again later."

    def __init__(
        self,
        message: str,
        operation: str,
        table_name: str,
        error_code: Optional[str] = None,
        severity: Optional[ErrorSeverity] = None,
        context: Optional[ErrorContext] = None,
        retry_after: Optional[int] = None,
    ):
        super().__init__(
            message,
            error_code=error_code,
            severity=severity,
            context=context,
            retry_after=retry_after,
        )
        self.operation = operation
        self.table_name = table_name


class RecordNotFoundError(ResourceNotFoundError):
    """A keyed write addressed a record that does not exist."""

    def __init__(
        self,
        table_name: str,
        key: Dict[str, Any],
        context: Optional[ErrorContext] = None,
    ):
        self.table_name = table_name
        self.key = key
        super().__init__(
            resource_type=str(key.get('context', 'record')).capitalize(),
            resource_id=str(key.get('id')),
            context=context,
        )
