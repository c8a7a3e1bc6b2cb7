"""
Storefront Handlers Module.

The handler layer of the service: the Lambda entry point
(``storefront_handler.lambda_handler``), the action dispatcher, the per-action
handlers, and the request/response/error utilities they share.
"""

from storefront.handlers.utils.observability import logger, metrics, tracer

__all__ = [
    "logger",
    "tracer",
    "metrics",
]
