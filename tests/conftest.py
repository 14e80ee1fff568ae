"""Test configuration and fixtures for s3-console."""

import boto3
import pytest
from fastapi.testclient import TestClient
from moto import mock_aws

from s3_console.api import create_app
from s3_console.core.config import Settings
from s3_console.schemas import CredentialRecord

TEST_BUCKET = "console-bucket"


@pytest.fixture(autouse=True)
def aws_environment(monkeypatch):
    """Point boto3 at fake ambient credentials so nothing reaches real AWS."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
    monkeypatch.delenv("AWS_PROFILE", raising=False)


@pytest.fixture
def aws():
    """Mock every AWS service for the duration of a test."""
    with mock_aws():
        yield


@pytest.fixture
def s3_client(aws):
    """Create a mocked S3 client with one empty bucket."""
    client = boto3.client(
        "s3",
        aws_access_key_id="test_key",
        aws_secret_access_key="test_secret",
        region_name="us-east-1",
    )
    client.create_bucket(Bucket=TEST_BUCKET)
    return client


@pytest.fixture
def record():
    """Static credentials accepted by the mocked services."""
    return CredentialRecord(
        access_key_id="test_key",
        secret_access_key="test_secret",
        region="us-east-1",
    )


@pytest.fixture
def settings():
    """Development settings with a non-placeholder secret."""
    return Settings(session_secret="test-session-secret")


@pytest.fixture
def client(s3_client, settings):
    """Create a test client around a fresh application."""
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def connected_client(client):
    """Test client that has already connected with static keys."""
    response = client.post(
        "/api/connect/credentials",
        json={
            "accessKeyId": "test_key",
            "secretAccessKey": "test_secret",
            "region": "us-east-1",
        },
    )
    assert response.status_code == 200
    return client
