"""
Package: workqueue
Description: Durable SQS work-queue client.

Provisions an SQS queue with a dead-letter queue, publishes typed work
items and runs a polling processor that acknowledges items only after
they were handled successfully.
"""

from workqueue.config.settings import Settings, settings
from workqueue.errors import (
    DecodeError,
    DeleteError,
    EncodeError,
    ProvisionError,
    QueueAttributeError,
    ReceiveError,
    SendError,
    TransportError,
    WorkQueueError,
)
from workqueue.models.message import QueueMessage
from workqueue.models.redrive import RedrivePolicy
from workqueue.processing.processor import Outcome, Processor
from workqueue.sqs_queue.client import sqs_client
from workqueue.sqs_queue.queue import Queue

__version__ = "0.1.0"

__all__ = [
    "DecodeError",
    "DeleteError",
    "EncodeError",
    "Outcome",
    "Processor",
    "ProvisionError",
    "Queue",
    "QueueAttributeError",
    "QueueMessage",
    "ReceiveError",
    "RedrivePolicy",
    "SendError",
    "Settings",
    "TransportError",
    "WorkQueueError",
    "settings",
    "sqs_client",
]
