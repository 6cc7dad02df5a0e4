"""
Module: message.py
Description: Envelope for messages received from SQS.
"""

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field

RECEIVE_COUNT_ATTRIBUTE = "ApproximateReceiveCount"


class QueueMessage(BaseModel):
    """
    A message as received from the queue.

    Attributes:
        message_id: Identifier assigned by SQS on send
        receipt_handle: Handle required to delete (acknowledge) this delivery
        body: Raw message body, JSON encoded by the codec
        receive_count: How many times SQS has delivered the message
        attributes: System attributes returned with the message
    """

    model_config = ConfigDict(frozen=True)

    message_id: str = Field(..., min_length=1)
    receipt_handle: str = Field(..., min_length=1)
    body: str = ""
    receive_count: int = Field(default=1, ge=1)
    attributes: Dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_sqs(cls, message: Dict[str, Any]) -> "QueueMessage":
        """Build the envelope from one entry of a ReceiveMessage response."""
        attributes = message.get("Attributes") or {}
        return cls(
            message_id=message["MessageId"],
            receipt_handle=message["ReceiptHandle"],
            body=message.get("Body", ""),
            receive_count=int(attributes.get(RECEIVE_COUNT_ATTRIBUTE, 1)),
            attributes=attributes,
        )
