"""
Action dispatcher.

Maps the ``action`` of a normalized request to its handler through a fixed,
read-only table, runs it, and turns the outcome into the response envelope.
Unknown actions answer with an empty object. Handler failures never escape:
they are logged and answered with ``{"success": false, "error": <code>}``.
"""

from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional

from aws_lambda_powertools.metrics import MetricUnit
from pydantic import ValidationError

from storefront.handlers import actions
from storefront.handlers.utils.errors import (
    BaseServiceError,
    ErrorCategory,
    ErrorSeverity,
    MalformedRequestError,
    UnauthorizedError,
    ValidationError as ServiceValidationError,
    create_error_context,
    format_error_response,
    log_error_metrics,
)
from storefront.handlers.utils.observability import logger, metrics, tracer
from storefront.handlers.utils.request import ApiRequest, extract_request
from storefront.handlers.utils.response import create_api_response
from storefront.logic import StorefrontServices


class Action(str, Enum):
    """Recognized action names."""

    INIT = 'INIT'
    LOGIN = 'LOGIN'
    ADD_ORDER = 'ADD_ORDER'
    ORDER_LIST = 'ORDER_LIST'
    COMPLETE_ORDER = 'COMPLETE_ORDER'
    REOPEN_ORDER = 'REOPEN_ORDER'
    ITEM_LIST = 'ITEM_LIST'
    ADD_ITEM = 'ADD_ITEM'
    REMOVE_ITEM = 'REMOVE_ITEM'

    @classmethod
    def lookup(cls, name: Optional[str]) -> Optional['Action']:
        """Exact, case-sensitive match; None for anything else."""
        if not isinstance(name, str):
            return None
        try:
            return cls(name)
        except ValueError:
            return None


ActionHandler = Callable[[StorefrontServices, Dict[str, Any]], Any]

ACTION_HANDLERS: Mapping[Action, ActionHandler] = MappingProxyType({
    Action.INIT: actions.init,
    Action.LOGIN: actions.login,
    Action.ADD_ORDER: actions.add_order,
    Action.ORDER_LIST: actions.order_list,
    Action.COMPLETE_ORDER: actions.complete_order,
    Action.REOPEN_ORDER: actions.reopen_order,
    Action.ITEM_LIST: actions.item_list,
    Action.ADD_ITEM: actions.add_item,
    Action.REMOVE_ITEM: actions.remove_item,
})


class Dispatcher:
    """Routes normalized requests to action handlers."""

    def __init__(
        self,
        services: StorefrontServices,
        handlers: Mapping[Action, ActionHandler] = ACTION_HANDLERS,
    ):
        self.services = services
        self.handlers = handlers

    @tracer.capture_method
    def dispatch(self, request: ApiRequest) -> Any:
        """
        Run the handler for the request's action.

        Returns:
            The handler result, ``{}`` for an unknown action, or a failure body
        """
        action = Action.lookup(request.action)
        handler = self.handlers.get(action) if action is not None else None
        if handler is None:
            metrics.add_metric(name="UnknownAction", unit=MetricUnit.Count, value=1)
            logger.info("Unknown action", extra={"action": request.action})
            return {}

        logger.append_keys(action=action.value)
        tracer.put_annotation("action", action.value)
        metrics.add_metric(name="ActionDispatched", unit=MetricUnit.Count, value=1)

        try:
            if action.value in self.services.protected_actions and not request.is_authenticated:
                raise UnauthorizedError(
                    action=action.value,
                    context=create_error_context(
                        request_id=request.request_id or "unknown",
                        action=action.value,
                    ),
                )
            return handler(self.services, request.data)

        except BaseServiceError as e:
            log_error_metrics(e)
            return format_error_response(e)

        except ValidationError as e:
            logger.warning("Action data validation failed", extra={
                "validation_errors": str(e),
                "error_count": e.error_count(),
            })
            validation_error = ServiceValidationError(
                message="Action data validation failed",
                field_errors=[
                    {"field": str(error["loc"][-1]) if error["loc"] else "data", "message": error["msg"]}
                    for error in e.errors()
                ],
            )
            log_error_metrics(validation_error)
            return format_error_response(validation_error)

        except Exception as e:
            logger.exception("Unexpected error in action handler", extra={
                "error": str(e),
                "handler": getattr(handler, "__name__", str(handler)),
            })
            unexpected_error = BaseServiceError(
                message="An unexpected error occurred",
                error_code="INTERNAL_SERVER_ERROR",
                severity=ErrorSeverity.CRITICAL,
                category=ErrorCategory.INFRASTRUCTURE,
            )
            log_error_metrics(unexpected_error)
            return format_error_response(unexpected_error)

    def handle_event(self, event: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Normalize a proxy event, dispatch it and build the response envelope.
        """
        try:
            request = extract_request(event, self.services.token_service)
        except MalformedRequestError as e:
            metrics.add_metric(name="MalformedRequest", unit=MetricUnit.Count, value=1)
            logger.warning("Malformed request body", extra={"error": e.message})
            return create_api_response(format_error_response(e), status_code=400)

        logger.debug("Request normalized", extra={
            "path": request.path,
            "method": request.method,
            "source_ip": request.source_ip,
            "user_agent": request.user_agent,
            "authenticated": request.is_authenticated,
        })
        return create_api_response(self.dispatch(request))
