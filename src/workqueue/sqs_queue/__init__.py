"""
Package: sqs_queue
Description: SQS queue provisioning and message operations.

Provides the Queue abstraction over an injected aioboto3 SQS client,
the JSON message codec and the client factory.
"""

from workqueue.sqs_queue.client import SQSTransport, sqs_client
from workqueue.sqs_queue.queue import Queue

__all__ = ["Queue", "SQSTransport", "sqs_client"]
