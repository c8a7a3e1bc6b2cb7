"""
Environment variable models for type-safe configuration.

This module defines the Pydantic model for the environment variables read by the
storefront handler at cold start.
"""

from typing import Annotated, FrozenSet, Optional

from aws_lambda_env_modeler import get_environment_variables
from pydantic import BaseModel, Field


class StorefrontEnvVars(BaseModel):
    """Environment variables for the storefront handler."""

    # Shared DynamoDB table holding user, item and order records
    TABLE_NAME: Annotated[str, Field(
        description='DynamoDB table name for storefront records',
        min_length=1
    )] = 'EcommerceData'

    # Endpoint override (DynamoDB Local, LocalStack)
    DYNAMODB_ENDPOINT: Annotated[Optional[str], Field(
        description='DynamoDB endpoint URL for local testing'
    )] = None

    AWS_REGION: Annotated[str, Field(
        description='AWS region for service deployment'
    )] = 'us-east-1'

    ENVIRONMENT: Annotated[str, Field(
        description='Deployment environment name',
        pattern=r'^(dev|test|staging|prod)$'
    )] = 'dev'

    # Token signing secret, required in prod
    SECRET: Annotated[Optional[str], Field(
        description='HMAC secret used to sign bearer tokens'
    )] = None

    TOKEN_TTL_SECONDS: Annotated[int, Field(
        description='Bearer token lifetime in seconds',
        ge=1
    )] = 86400

    PROTECTED_ACTIONS: Annotated[str, Field(
        description='Comma separated actions that require a verified identity'
    )] = ''

    SEED_MAX_WORKERS: Annotated[int, Field(
        description='Thread pool size for concurrent seed writes',
        ge=1,
        le=32
    )] = 8

    POWERTOOLS_SERVICE_NAME: Annotated[str, Field(
        description='Service name for AWS Powertools'
    )] = 'storefront'

    LOG_LEVEL: Annotated[str, Field(
        description='Log level for application logging',
        pattern=r'^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$'
    )] = 'INFO'

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.ENVIRONMENT == 'prod'

    @property
    def protected_actions(self) -> FrozenSet[str]:
        """Action names that need a non-empty identity."""
        return frozenset(name.strip().upper() for name in self.PROTECTED_ACTIONS.split(',') if name.strip())


def get_handler_env_vars() -> StorefrontEnvVars:
    """
    Get typed environment variables for the storefront handler.

    Returns:
        Validated environment variables model instance
    """
    return get_environment_variables(model=StorefrontEnvVars)
