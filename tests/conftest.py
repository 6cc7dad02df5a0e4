"""
Module: conftest.py
Description: Shared pytest fixtures for work-queue tests.

Provides test settings, AsyncMock SQS transports for unit tests and a
moto-backed SQS client for integration tests.
"""

from unittest.mock import AsyncMock

import boto3
import pytest
from moto import mock_aws

from sqs_helpers import (
    DEAD_LETTER_ARN,
    DEAD_LETTER_URL,
    QUEUE_NAME,
    QUEUE_URL,
    receive_response,
)
from workqueue.config.settings import Settings
from workqueue.sqs_queue.queue import Queue


@pytest.fixture
def test_settings():
    """
    Provide test configuration settings.

    Disables .env loading and uses zero wait and visibility times so that
    polls return immediately and failed messages are redelivered at once.
    """
    return Settings(
        _env_file=None,
        log_level="DEBUG",
        aws_region="eu-central-1",
        visibility_timeout=0,
        wait_time_seconds=0,
    )


@pytest.fixture
def mock_sqs_client():
    """AsyncMock standing in for an aioboto3 SQS client."""
    client = AsyncMock()
    client.create_queue.side_effect = [
        {"QueueUrl": DEAD_LETTER_URL},
        {"QueueUrl": QUEUE_URL},
    ]
    client.get_queue_attributes.return_value = {
        "Attributes": {"QueueArn": DEAD_LETTER_ARN}
    }
    client.send_message.return_value = {"MessageId": "msg-1"}
    client.receive_message.return_value = receive_response()
    client.delete_message.return_value = {}
    return client


@pytest.fixture
def provisioned_queue(mock_sqs_client, test_settings):
    """Queue attached to already provisioned URLs on the mock client."""
    return Queue(
        QUEUE_NAME,
        mock_sqs_client,
        settings=test_settings,
        url=QUEUE_URL,
        dead_letter_url=DEAD_LETTER_URL,
    )


@pytest.fixture
def aws_credentials(monkeypatch):
    """Fake credentials so botocore never looks for real ones."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "eu-central-1")


@pytest.fixture
def moto_sqs(aws_credentials):
    """
    Provide a moto-backed boto3 SQS client.

    Wrap it in AsyncSQSClient to hand it to a Queue.
    """
    with mock_aws():
        yield boto3.client("sqs", region_name="eu-central-1")
