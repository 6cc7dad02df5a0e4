"""
Module: sqs_helpers.py
Description: Builders and adapters shared by the work-queue tests.
"""

import json
from typing import Any, Dict, Optional

QUEUE_NAME = "thumbnails"
QUEUE_URL = "https://sqs.eu-central-1.amazonaws.com/123456789012/thumbnails"
DEAD_LETTER_URL = "https://sqs.eu-central-1.amazonaws.com/123456789012/thumbnails-deadMessages"
DEAD_LETTER_ARN = "arn:aws:sqs:eu-central-1:123456789012:thumbnails-deadMessages"


def make_sqs_message(
    body: Any,
    message_id: str = "msg-1",
    receipt_handle: str = "receipt-1",
    receive_count: int = 1
) -> Dict[str, Any]:
    """Build one entry of a ReceiveMessage response."""
    return {
        "MessageId": message_id,
        "ReceiptHandle": receipt_handle,
        "Body": body if isinstance(body, str) else json.dumps(body),
        "Attributes": {"ApproximateReceiveCount": str(receive_count)},
    }


def receive_response(*messages: Dict[str, Any]) -> Dict[str, Any]:
    """Build a ReceiveMessage response; no arguments means an empty poll."""
    if not messages:
        return {}
    return {"Messages": list(messages)}


class AsyncSQSClient:
    """
    Awaitable facade over a synchronous boto3 SQS client.

    moto intercepts the synchronous botocore client, so integration tests
    drive the Queue through this wrapper instead of aioboto3.
    """

    def __init__(self, client):
        self._client = client

    def __getattr__(self, name: str):
        method = getattr(self._client, name)

        async def call(**kwargs):
            return method(**kwargs)

        return call


def queue_depth(client, url: str) -> int:
    """Visible plus in-flight messages of a queue."""
    names = ["ApproximateNumberOfMessages", "ApproximateNumberOfMessagesNotVisible"]
    attributes = client.get_queue_attributes(QueueUrl=url, AttributeNames=names)["Attributes"]
    return sum(int(attributes.get(name, 0)) for name in names)


def find_queue_url(client, name: str) -> Optional[str]:
    urls = client.list_queues(QueueNamePrefix=name).get("QueueUrls", [])
    for url in urls:
        if url.rsplit("/", 1)[-1] == name:
            return url
    return None
