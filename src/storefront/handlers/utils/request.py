"""
Request normalization for API Gateway proxy events.

Converts the raw proxy event into an immutable ``ApiRequest``: decoded body,
query parameters, path, method, caller IP, resolved identity, API key and
user agent. The identity is resolved by verifying the Authorization header.
"""

import base64
import binascii
import json
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from storefront.handlers.utils.errors import MalformedRequestError
from storefront.handlers.utils.observability import tracer
from storefront.handlers.utils.response import DecimalEncoder
from storefront.security.tokens import TokenService


class ApiRequest(BaseModel):
    """Canonical request record handed to the dispatcher."""

    model_config = ConfigDict(frozen=True)

    body: Dict[str, Any] = Field(default_factory=dict)
    query: Dict[str, Any] = Field(default_factory=dict)
    path: Optional[str] = None
    method: Optional[str] = None
    source_ip: Optional[str] = None
    user: Any = Field(default_factory=dict)
    api_key: Optional[str] = None
    user_agent: Optional[str] = None
    request_id: Optional[str] = None

    @property
    def action(self) -> Optional[str]:
        action = self.body.get('action')
        return action if isinstance(action, str) else None

    @property
    def data(self) -> Dict[str, Any]:
        """Action data; a missing or null ``data`` is an empty mapping."""
        data = self.body.get('data')
        return {} if data is None else data

    @property
    def is_authenticated(self) -> bool:
        return bool(self.user)


def get_header(headers: Optional[Mapping[str, Any]], name: str) -> Optional[str]:
    """Case-insensitive header lookup."""
    if not headers:
        return None
    if name in headers:
        return headers[name]
    lowered = name.lower()
    for key, value in headers.items():
        if key.lower() == lowered:
            return value
    return None


def _reject_constant(name: str) -> Any:
    raise MalformedRequestError(f"Non-finite number {name} in JSON body")


def parse_body(event: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Decode the request body.

    A body handed over already decoded (direct invocation) is re-encoded and
    goes through the same checks as a JSON string body.

    Args:
        event: API Gateway proxy event

    Returns:
        The decoded JSON object; empty when the event has no body

    Raises:
        MalformedRequestError: If the body is not a JSON object
    """
    raw = event.get('body')
    if raw is None or raw == '':
        return {}

    if isinstance(raw, Mapping):
        try:
            raw = json.dumps(raw, cls=DecimalEncoder)
        except (TypeError, ValueError, ArithmeticError) as exc:
            raise MalformedRequestError(f"Body is not JSON serializable: {exc}") from exc
    elif event.get('isBase64Encoded'):
        try:
            raw = base64.b64decode(raw).decode('utf-8')
        except (binascii.Error, UnicodeDecodeError) as exc:
            raise MalformedRequestError(f"Invalid base64 body: {exc}") from exc

    try:
        # DynamoDB rejects floats, numbers stay exact as Decimal
        parsed = json.loads(raw, parse_float=Decimal, parse_constant=_reject_constant)
    except (json.JSONDecodeError, TypeError) as exc:
        raise MalformedRequestError(f"Invalid JSON body: {exc}") from exc

    if not isinstance(parsed, dict):
        raise MalformedRequestError("JSON body must be an object")
    if parsed.get('data') is not None and not isinstance(parsed['data'], dict):
        raise MalformedRequestError("Action data must be an object")
    return parsed


@tracer.capture_method
def extract_request(event: Mapping[str, Any], token_service: TokenService) -> ApiRequest:
    """
    Build the canonical request record from a proxy event.

    Raises:
        MalformedRequestError: If the body cannot be decoded
    """
    headers = event.get('headers') or {}
    request_context = event.get('requestContext') or {}
    identity = request_context.get('identity') or {}

    return ApiRequest(
        body=parse_body(event),
        query=event.get('queryStringParameters') or {},
        path=event.get('path'),
        method=event.get('httpMethod'),
        source_ip=identity.get('sourceIp'),
        user=token_service.verify(get_header(headers, 'Authorization')),
        api_key=get_header(headers, 'x-api-key'),
        user_agent=get_header(headers, 'User-Agent'),
        request_id=request_context.get('requestId'),
    )
