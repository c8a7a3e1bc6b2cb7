"""
Powertools instances shared by every layer of the storefront service.

Logger and Tracer take the service name from POWERTOOLS_SERVICE_NAME; tracing
is switched off with POWERTOOLS_TRACE_DISABLED. Metrics always go to the
Storefront namespace.
"""

from aws_lambda_powertools.logging import Logger
from aws_lambda_powertools.metrics import Metrics
from aws_lambda_powertools.tracing import Tracer

METRICS_NAMESPACE = 'Storefront'

logger: Logger = Logger()
tracer: Tracer = Tracer()
metrics: Metrics = Metrics(namespace=METRICS_NAMESPACE)
