"""
Module: errors.py
Description: Exception taxonomy for the work-queue client.

Provisioning errors are fatal to startup and propagate to the caller.
Codec and transport errors are message-scoped; the processor catches
them and abandons the current iteration.
"""

from typing import Optional


class WorkQueueError(Exception):
    """Base class for all work-queue errors."""


class ProvisionError(WorkQueueError):
    """Creating a queue or looking up its attributes failed."""


class EncodeError(WorkQueueError):
    """A payload could not be serialized to a message body."""


class DecodeError(WorkQueueError):
    """A message body could not be deserialized into the item type."""


class TransportError(WorkQueueError):
    """
    A call to the SQS transport failed.

    Attributes:
        error_code: AWS error code when the failure came from the service
    """

    def __init__(self, message: str, error_code: Optional[str] = None):
        super().__init__(message)
        self.error_code = error_code


class SendError(TransportError):
    """SQS rejected a SendMessage call."""


class ReceiveError(TransportError):
    """SQS rejected a ReceiveMessage call."""


class DeleteError(TransportError):
    """SQS rejected a DeleteMessage call; the message stays in flight."""


class QueueAttributeError(TransportError):
    """SQS rejected a GetQueueAttributes call."""
