"""
Module: redrive.py
Description: Redrive policy value object for SQS dead-letter queues.

The policy is stored on the primary queue as the string-valued
RedrivePolicy attribute. SQS fixes the JSON field names, so the model
serializes by alias.
"""

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic_core import PydanticSerializationError

from workqueue.config.settings import MAX_RECEIVE_COUNT_BEFORE_DEAD
from workqueue.errors import DecodeError, EncodeError
from workqueue.utils.logger import get_logger

logger = get_logger(__name__)


class RedrivePolicy(BaseModel):
    """
    Dead-letter relationship of a queue.

    Attributes:
        max_receive_count: Deliveries before SQS moves a message to the
            dead-letter queue
        dead_letter_target_arn: ARN of the dead-letter queue

    Example:
        >>> policy = RedrivePolicy(dead_letter_target_arn="arn:aws:sqs:eu-central-1:1:jobs-deadMessages")
        >>> policy.to_attribute()
        '{"maxReceiveCount":5,"deadLetterTargetArn":"arn:aws:sqs:eu-central-1:1:jobs-deadMessages"}'
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    max_receive_count: int = Field(
        default=MAX_RECEIVE_COUNT_BEFORE_DEAD,
        gt=0,
        alias="maxReceiveCount",
        description="Receive count before a message is dead-lettered"
    )
    dead_letter_target_arn: str = Field(
        ...,
        min_length=1,
        alias="deadLetterTargetArn",
        description="ARN of the dead-letter queue"
    )

    def to_attribute(self) -> str:
        """
        Serialize the policy as the RedrivePolicy queue attribute value.

        Raises:
            EncodeError: If the policy cannot be serialized
        """
        try:
            return self.model_dump_json(by_alias=True)
        except PydanticSerializationError as e:
            logger.error("Marshal the redrive policy", error=str(e))
            raise EncodeError(f"cannot serialize redrive policy: {e}") from e

    @classmethod
    def from_attribute(cls, value: str) -> "RedrivePolicy":
        """
        Parse a RedrivePolicy attribute value as returned by GetQueueAttributes.

        Raises:
            DecodeError: If the value is not a valid redrive policy
        """
        try:
            return cls.model_validate_json(value)
        except ValidationError as e:
            raise DecodeError(f"invalid redrive policy: {e}") from e
