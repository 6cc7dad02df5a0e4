"""
Package: models
Description: Value objects exchanged with SQS.
"""

from workqueue.models.message import QueueMessage
from workqueue.models.redrive import RedrivePolicy

__all__ = ["QueueMessage", "RedrivePolicy"]
