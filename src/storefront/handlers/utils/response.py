"""
Response envelope utilities for the storefront Lambda handler.

Every action result is returned in the same API Gateway proxy envelope:
permissive CORS headers and a JSON body. Action outcomes, failed ones
included, use status 200 so existing clients keep working; only a body that
cannot be decoded at all is answered with 400.
"""

import json
from decimal import Decimal
from typing import Any, Dict, Optional

from pydantic import BaseModel

CORS_HEADERS = {
    "Access-Control-Allow-Headers": "*",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "*",
}


class DecimalEncoder(json.JSONEncoder):
    """JSON encoder for values read back from DynamoDB."""

    def default(self, obj):
        if isinstance(obj, Decimal):
            if obj % 1 == 0:
                return int(obj)
            return float(obj)
        if isinstance(obj, BaseModel):
            return obj.model_dump(mode="json")
        return super().default(obj)


def create_api_response(
    body: Any,
    status_code: int = 200,
    headers: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    """
    Create the response envelope.

    Args:
        body: Action result; ``None`` is sent as an empty object
        status_code: HTTP status code
        headers: Extra headers merged over the CORS defaults

    Returns:
        API Gateway proxy response dictionary
    """
    response_headers = {"Content-Type": "application/json", **CORS_HEADERS}
    if headers:
        response_headers.update(headers)

    return {
        "statusCode": status_code,
        "headers": response_headers,
        "body": json.dumps({} if body is None else body, cls=DecimalEncoder),
    }
