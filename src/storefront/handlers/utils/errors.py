"""
Service errors for the storefront Lambda handler.

Every error the service raises on purpose derives from ``BaseServiceError``.
Subclasses fix their error code, category, severity and caller-facing message
as class attributes; the dispatcher turns any of them into a failed action
result with ``format_error_response``.
"""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from aws_lambda_powertools.metrics import MetricUnit
from pydantic import BaseModel, Field

from storefront.handlers.utils.observability import logger, metrics, tracer


class ErrorSeverity(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class ErrorCategory(str, Enum):
    VALIDATION = "VALIDATION"
    BUSINESS_LOGIC = "BUSINESS_LOGIC"
    EXTERNAL_SERVICE = "EXTERNAL_SERVICE"
    INFRASTRUCTURE = "INFRASTRUCTURE"
    SECURITY = "SECURITY"
    CONFIGURATION = "CONFIGURATION"


class ErrorContext(BaseModel):
    """Where an error happened: the API Gateway request and the action being run."""

    request_id: str = Field(description="API Gateway request id")
    action: str = Field(description="Action being dispatched")
    record_id: Optional[str] = Field(default=None, description="Id of the record the action addressed")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    additional_data: Dict[str, Any] = Field(default_factory=dict)


class BaseServiceError(Exception):
    """
    Base class of every deliberate service failure.

    A raise may override the class defaults, as the store does with its
    per-DynamoDB-code ``error_code``.
    """

    error_code: str = "SERVICE_ERROR"
    severity: ErrorSeverity = ErrorSeverity.MEDIUM
    category: ErrorCategory = ErrorCategory.BUSINESS_LOGIC
    user_message: str = "The action could not be completed."

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        severity: Optional[ErrorSeverity] = None,
        category: Optional[ErrorCategory] = None,
        context: Optional[ErrorContext] = None,
        retry_after: Optional[int] = None,
        user_message: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        if error_code is not None:
            self.error_code = error_code
        if severity is not None:
            self.severity = severity
        if category is not None:
            self.category = category
        if user_message is not None:
            self.user_message = user_message
        self.context = context
        self.retry_after = retry_after
        self.error_id = str(uuid.uuid4())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_id": self.error_id,
            "error_code": self.error_code,
            "error_message": self.message,
            "severity": self.severity.value,
            "category": self.category.value,
            "retry_after": self.retry_after,
            "context": self.context.model_dump(mode="json") if self.context else None,
        }


class ValidationError(BaseServiceError):
    """Action data lacks a field the action cannot run without."""

    error_code = "VALIDATION_ERROR"
    severity = ErrorSeverity.LOW
    category = ErrorCategory.VALIDATION
    user_message = "The action data is invalid."

    def __init__(
        self,
        message: str,
        field_errors: Optional[List[Dict[str, str]]] = None,
        context: Optional[ErrorContext] = None,
    ):
        super().__init__(message, context=context)
        self.field_errors = field_errors or []


class MalformedRequestError(BaseServiceError):
    """The request body cannot be decoded into an action."""

    error_code = "MALFORMED_REQUEST"
    severity = ErrorSeverity.LOW
    category = ErrorCategory.VALIDATION
    user_message = "The request body must be a JSON object with an action."


class UnauthorizedError(BaseServiceError):
    """A protected action was called without a verified identity."""

    error_code = "UNAUTHORIZED"
    severity = ErrorSeverity.LOW
    category = ErrorCategory.SECURITY
    user_message = "Please log in and try again."

    def __init__(self, action: str, context: Optional[ErrorContext] = None):
        super().__init__(f"Action {action} requires a valid token", context=context)
        self.action = action


class ConfigurationError(BaseServiceError):
    """The function was started with unusable configuration."""

    error_code = "CONFIGURATION_ERROR"
    severity = ErrorSeverity.CRITICAL
    category = ErrorCategory.CONFIGURATION
    user_message = "The service is misconfigured."


class ExternalServiceError(BaseServiceError):
    """An AWS dependency could not be reached."""

    error_code = "EXTERNAL_SERVICE_ERROR"
    severity = ErrorSeverity.HIGH
    category = ErrorCategory.EXTERNAL_SERVICE
    user_message = "A required service is temporarily unavailable. Please try again later."

    def __init__(
        self,
        message: str,
        service_name: str,
        error_code: Optional[str] = None,
        retry_after: Optional[int] = None,
        context: Optional[ErrorContext] = None,
    ):
        super().__init__(message, error_code=error_code, context=context, retry_after=retry_after)
        self.service_name = service_name


class ResourceNotFoundError(BaseServiceError):
    """An action addressed a record that does not exist."""

    error_code = "RESOURCE_NOT_FOUND"
    severity = ErrorSeverity.LOW
    category = ErrorCategory.BUSINESS_LOGIC

    def __init__(
        self,
        resource_type: str,
        resource_id: str,
        context: Optional[ErrorContext] = None,
    ):
        super().__init__(
            f"{resource_type} with ID '{resource_id}' not found",
            context=context,
            user_message=f"The requested {resource_type.lower()} was not found.",
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


def create_error_context(
    request_id: str,
    action: str,
    record_id: Optional[str] = None,
    **additional_data: Any,
) -> ErrorContext:
    return ErrorContext(
        request_id=request_id,
        action=action,
        record_id=record_id,
        additional_data=additional_data,
    )


@tracer.capture_method
def log_error_metrics(error: BaseServiceError) -> None:
    """Count, annotate and log a failed action."""
    metrics.add_metric(name="ActionFailed", unit=MetricUnit.Count, value=1)
    metrics.add_metric(name=f"Error{error.category.value}Count", unit=MetricUnit.Count, value=1)

    tracer.put_annotation("error_code", error.error_code)
    tracer.put_annotation("error_category", error.category.value)

    log = logger.error if error.severity in (ErrorSeverity.HIGH, ErrorSeverity.CRITICAL) else logger.warning
    log("Action failed", extra=error.to_dict())


def format_error_response(error: BaseServiceError) -> Dict[str, Any]:
    """Failed action result: ``{"success": false, "error": <code>, ...}``."""
    response: Dict[str, Any] = {
        "success": False,
        "error": error.error_code,
        "message": error.user_message,
        "error_id": error.error_id,
    }
    if error.retry_after:
        response["retry_after"] = error.retry_after
    if isinstance(error, ValidationError) and error.field_errors:
        response["field_errors"] = error.field_errors
    return response
