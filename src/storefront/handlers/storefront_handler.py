"""
Storefront Handler - single Lambda entry point for the storefront API.

Every request is a POST of ``{"action": ..., "data": ...}``. The handler builds
its dependencies once per cold start from the environment and hands each event
to the dispatcher.
"""

from typing import Any, Dict, Optional

from aws_lambda_powertools.logging import correlation_paths
from aws_lambda_powertools.utilities.typing import LambdaContext

from storefront.dal import get_record_store
from storefront.handlers.dispatcher import Dispatcher
from storefront.handlers.models.env_vars import StorefrontEnvVars, get_handler_env_vars
from storefront.handlers.utils.observability import logger, metrics, tracer
from storefront.logic import StorefrontServices
from storefront.security.tokens import TokenService

_dispatcher: Optional[Dispatcher] = None


def build_dispatcher(settings: StorefrontEnvVars) -> Dispatcher:
    """
    Wire the store, token service and logic services from configuration.

    Raises:
        ConfigurationError: If the signing secret is missing in production
    """
    store = get_record_store(
        table_name=settings.TABLE_NAME,
        region_name=settings.AWS_REGION,
        endpoint_url=settings.DYNAMODB_ENDPOINT,
        max_workers=settings.SEED_MAX_WORKERS,
    )
    services = StorefrontServices.build(
        store=store,
        token_service=TokenService.from_settings(settings),
        protected_actions=settings.protected_actions,
    )
    logger.info("Storefront dispatcher initialized", extra={
        "table_name": settings.TABLE_NAME,
        "environment": settings.ENVIRONMENT,
        "protected_actions": sorted(settings.protected_actions),
    })
    return Dispatcher(services)


def get_dispatcher() -> Dispatcher:
    """Get or create the dispatcher for this execution environment."""
    global _dispatcher

    if _dispatcher is None:
        _dispatcher = build_dispatcher(get_handler_env_vars())

    return _dispatcher


@metrics.log_metrics(capture_cold_start_metric=True)
@tracer.capture_lambda_handler
@logger.inject_lambda_context(correlation_id_path=correlation_paths.API_GATEWAY_REST, clear_state=True)
def lambda_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    """
    Lambda function entry point for the storefront API.

    Args:
        event: API Gateway proxy event
        context: Lambda context object

    Returns:
        API Gateway response dictionary; status 200 for every action outcome
    """
    return get_dispatcher().handle_event(event)
