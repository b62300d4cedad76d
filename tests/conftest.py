"""Pytest configuration and fixtures."""

import json
import os
from unittest.mock import MagicMock, patch

import pytest

# Set environment variables before imports
os.environ["TABLE_NAME"] = "sitecms-test"
os.environ["STAGE"] = "test"
os.environ["SERVICE_NAME"] = "sitecms"
os.environ["ASSET_BUCKET"] = "sitecms-test-assets"
os.environ["ASSET_PUBLIC_BASE_URL"] = "https://cdn.example.com"
os.environ["AWS_DEFAULT_REGION"] = "us-east-1"
os.environ["AWS_ACCESS_KEY_ID"] = "testing"
os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"


@pytest.fixture(autouse=True)
def reset_caches():
    """Clear module-level caches so tests never see each other's state."""
    from sitecms.repositories.settings import invalidate_settings_cache
    from sitecms.services import media_usage

    media_usage.invalidate()
    invalidate_settings_cache()
    yield
    media_usage.invalidate()
    invalidate_settings_cache()


@pytest.fixture
def aws_credentials():
    """Mock AWS credentials for moto."""
    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_SECURITY_TOKEN"] = "testing"
    os.environ["AWS_SESSION_TOKEN"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = "us-east-1"


@pytest.fixture
def dynamodb_table(aws_credentials):
    """Create mocked DynamoDB table (and the asset bucket)."""
    import boto3
    from moto import mock_aws

    with mock_aws():
        dynamodb = boto3.resource("dynamodb", region_name="us-east-1")

        table = dynamodb.create_table(
            TableName="sitecms-test",
            KeySchema=[
                {"AttributeName": "PK", "KeyType": "HASH"},
                {"AttributeName": "SK", "KeyType": "RANGE"},
            ],
            AttributeDefinitions=[
                {"AttributeName": "PK", "AttributeType": "S"},
                {"AttributeName": "SK", "AttributeType": "S"},
            ],
            BillingMode="PAY_PER_REQUEST",
        )

        table.wait_until_exists()

        s3 = boto3.client("s3", region_name="us-east-1")
        s3.create_bucket(Bucket="sitecms-test-assets")

        yield table


@pytest.fixture
def page_repo(dynamodb_table):
    from sitecms.repositories.page_record import PageRecordRepository

    return PageRecordRepository()


@pytest.fixture
def publishing(page_repo):
    from sitecms.services.publishing import PublishingService

    return PublishingService(repo=page_repo)


@pytest.fixture
def sample_sections():
    """A small valid section list (hero, text block, CTA)."""
    from sitecms.models.section_registry import parse_section

    return [
        parse_section({
            "id": "hero-1",
            "type": "hero",
            "order": 0,
            "headline": "Original headline",
            "subheadline": "Sub",
            "backgroundImage": {"src": "/images/hero.jpg", "alt": "Hero"},
        }),
        parse_section({
            "id": "text-block-1",
            "type": "text-block",
            "order": 1,
            "content": "<p>Hello</p>",
        }),
        parse_section({
            "id": "cta-1",
            "type": "cta",
            "order": 2,
            "headline": "Get in touch",
            "primaryButton": {"text": "Contact", "href": "/contact"},
        }),
    ]


@pytest.fixture
def api_gateway_event():
    """Create a sample API Gateway event."""
    def _create_event(
        method: str = "GET",
        path: str = "/",
        path_params: dict = None,
        query_params: dict = None,
        body: dict = None,
        user_id: str = "test-user-123",
        role: str = "editor",
        authenticated: bool = True,
    ):
        authorizer = {}
        if authenticated:
            authorizer = {
                "userId": user_id,
                "email": "editor@example.com",
                "role": role,
            }

        return {
            "httpMethod": method,
            "path": path,
            "pathParameters": path_params or {},
            "queryStringParameters": query_params or {},
            "body": body if isinstance(body, str) else (
                json.dumps(body) if body is not None else None
            ),
            "headers": {
                "Authorization": "Bearer test-token",
                "Content-Type": "application/json",
            },
            "requestContext": {
                "authorizer": authorizer,
            },
        }

    return _create_event


@pytest.fixture
def mock_bedrock():
    """Mock Bedrock runtime client."""
    from sitecms.services import ai_service

    mock_bedrock = MagicMock()

    # Mock invoke_model response
    mock_response = MagicMock()
    mock_response.read.return_value = json.dumps({
        "content": [{"type": "text", "text": "This is a test response."}],
        "stop_reason": "end_turn",
    }).encode()

    mock_bedrock.invoke_model.return_value = {"body": mock_response}

    with patch.object(ai_service, "_get_bedrock", return_value=mock_bedrock):
        yield mock_bedrock


class LambdaContext:
    """Mock Lambda context."""

    def __init__(self):
        self.function_name = "test-function"
        self.memory_limit_in_mb = 128
        self.invoked_function_arn = "arn:aws:lambda:us-east-1:123456789:function:test"
        self.aws_request_id = "test-request-id"

    def get_remaining_time_in_millis(self):
        return 30000


@pytest.fixture
def lambda_context():
    """Create a mock Lambda context."""
    return LambdaContext()
