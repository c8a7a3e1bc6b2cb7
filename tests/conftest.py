"""
Pytest configuration and shared fixtures for the storefront service.

This module provides common test fixtures and configuration used across
unit, integration, and end-to-end tests.
"""

import base64
import json
import os
from typing import Any, Callable, Dict, Optional

# Configure the environment before the service modules create their
# Powertools instances at import time.
os.environ.update({
    "AWS_DEFAULT_REGION": "us-east-1",
    "AWS_ACCESS_KEY_ID": "testing",
    "AWS_SECRET_ACCESS_KEY": "testing",
    "AWS_SECURITY_TOKEN": "testing",
    "AWS_SESSION_TOKEN": "testing",
    "POWERTOOLS_SERVICE_NAME": "test-storefront",
    "POWERTOOLS_METRICS_NAMESPACE": "TestStorefront",
    "POWERTOOLS_TRACE_DISABLED": "true",  # Disable X-Ray in tests
    "LOG_LEVEL": "DEBUG",
})

import boto3
import pytest
from moto import mock_aws

from storefront.dal.memory_handler import InMemoryStore
from storefront.handlers.dispatcher import Dispatcher
from storefront.handlers.models.env_vars import StorefrontEnvVars
from storefront.handlers.utils.observability import metrics
from storefront.logic import StorefrontServices
from storefront.logic.seed_service import DEMO_RECORDS
from storefront.security.tokens import TokenService

TEST_TABLE_NAME = "test-storefront-table"
TEST_SECRET = "test-signing-secret"
ADMIN_PASSWORD = "cac28395540089e505a68311833c2cb5a92f84f4"


@pytest.fixture
def settings() -> StorefrontEnvVars:
    """Typed configuration for tests, independent of the process environment."""
    return StorefrontEnvVars(
        TABLE_NAME=TEST_TABLE_NAME,
        ENVIRONMENT="test",
        SECRET=TEST_SECRET,
    )


# Store fixtures
@pytest.fixture
def memory_store() -> InMemoryStore:
    return InMemoryStore(table_name=TEST_TABLE_NAME)


@pytest.fixture
def seeded_store() -> InMemoryStore:
    """In-memory store holding the demo records."""
    return InMemoryStore(table_name=TEST_TABLE_NAME, records=DEMO_RECORDS)


@pytest.fixture
def dynamodb_table():
    """Create a mock DynamoDB table with the storefront key schema."""
    with mock_aws():
        dynamodb = boto3.resource("dynamodb", region_name="us-east-1")

        table = dynamodb.create_table(
            TableName=TEST_TABLE_NAME,
            KeySchema=[
                {"AttributeName": "context", "KeyType": "HASH"},
                {"AttributeName": "id", "KeyType": "RANGE"},
            ],
            AttributeDefinitions=[
                {"AttributeName": "context", "AttributeType": "S"},
                {"AttributeName": "id", "AttributeType": "S"},
            ],
            BillingMode="PAY_PER_REQUEST",
        )

        table.wait_until_exists()
        yield table


@pytest.fixture
def admin_password() -> str:
    """Password hash of the seeded admin user."""
    return ADMIN_PASSWORD


# Service fixtures
@pytest.fixture
def token_service() -> TokenService:
    return TokenService(secret=TEST_SECRET)


@pytest.fixture
def services(seeded_store, token_service) -> StorefrontServices:
    return StorefrontServices.build(store=seeded_store, token_service=token_service)


@pytest.fixture
def dispatcher(services) -> Dispatcher:
    return Dispatcher(services)


# Event fixtures
@pytest.fixture
def make_event() -> Callable[..., Dict[str, Any]]:
    """Build an API Gateway REST proxy event carrying an action."""

    def _make_event(
        action: Optional[str] = None,
        data: Optional[Dict[str, Any]] = None,
        token: Optional[str] = None,
        raw_body: Optional[str] = None,
        base64_encoded: bool = False,
    ) -> Dict[str, Any]:
        if raw_body is None:
            body: Dict[str, Any] = {}
            if action is not None:
                body["action"] = action
            if data is not None:
                body["data"] = data
            raw_body = json.dumps(body)
        if base64_encoded:
            raw_body = base64.b64encode(raw_body.encode("utf-8")).decode("ascii")

        headers = {
            "Content-Type": "application/json",
            "User-Agent": "test-agent/1.0",
            "x-api-key": "test-api-key",
        }
        if token is not None:
            headers["Authorization"] = f"Bearer {token}"

        return {
            "httpMethod": "POST",
            "path": "/v1/storefront",
            "headers": headers,
            "body": raw_body,
            "isBase64Encoded": base64_encoded,
            "queryStringParameters": None,
            "requestContext": {
                "requestId": "test-request-id-123",
                "stage": "test",
                "identity": {
                    "sourceIp": "127.0.0.1",
                    "userAgent": "test-agent/1.0",
                },
            },
        }

    return _make_event


class FakeLambdaContext:
    function_name = "test-storefront-function"
    function_version = "$LATEST"
    memory_limit_in_mb = 512
    invoked_function_arn = "arn:aws:lambda:us-east-1:123456789012:function:test-storefront-function"
    aws_request_id = "test-request-id-123"
    log_group_name = "/aws/lambda/test-storefront-function"
    log_stream_name = "2024/01/01/[$LATEST]test123"

    @staticmethod
    def get_remaining_time_in_millis() -> int:
        return 30000


@pytest.fixture
def lambda_context() -> FakeLambdaContext:
    """Create a Lambda context for testing."""
    return FakeLambdaContext()


@pytest.fixture(autouse=True)
def reset_metrics():
    """Drop metrics buffered by tests that do not go through the Lambda handler."""
    yield
    metrics.clear_metrics()


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        elif "e2e" in str(item.fspath):
            item.add_marker(pytest.mark.e2e)
