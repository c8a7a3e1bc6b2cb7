"""
Action handlers.

One function per supported action. Each takes the invocation's services and
the request's ``data`` mapping and returns the result to serialize; ``None``
means success with no payload.
"""

from typing import Any, Dict, List, Optional

from storefront.logic import StorefrontServices
from storefront.models.input import LoginRequest, RecordIdRequest
from storefront.models.output import SuccessOutput, TokenOutput


def login(services: StorefrontServices, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    request = LoginRequest.model_validate(data)
    token = services.login.login(request.userId, request.password)
    if token is None:
        return None
    return TokenOutput(token=token).model_dump()


def add_order(services: StorefrontServices, data: Dict[str, Any]) -> Dict[str, Any]:
    services.orders.create_order(data)
    return SuccessOutput().model_dump()


def complete_order(services: StorefrontServices, data: Dict[str, Any]) -> Dict[str, Any]:
    request = RecordIdRequest.model_validate(data)
    services.orders.complete_order(request.id)
    return SuccessOutput().model_dump()


def reopen_order(services: StorefrontServices, data: Dict[str, Any]) -> Dict[str, Any]:
    request = RecordIdRequest.model_validate(data)
    services.orders.reopen_order(request.id)
    return SuccessOutput().model_dump()


def order_list(services: StorefrontServices, data: Dict[str, Any]) -> List[Dict[str, Any]]:
    return services.orders.list_orders()


def item_list(services: StorefrontServices, data: Dict[str, Any]) -> List[Dict[str, Any]]:
    return services.catalog.list_items()


def add_item(services: StorefrontServices, data: Dict[str, Any]) -> None:
    services.catalog.add_item(data)


def remove_item(services: StorefrontServices, data: Dict[str, Any]) -> None:
    request = RecordIdRequest.model_validate(data)
    services.catalog.remove_item(request.id)


def init(services: StorefrontServices, data: Dict[str, Any]) -> Dict[str, Any]:
    return services.seed.seed().model_dump()
