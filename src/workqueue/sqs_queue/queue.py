"""
Module: queue.py
Description: SQS work queue with an attached dead-letter queue.

Provisions a primary queue and its dead-letter queue, wires the redrive
policy between them, and exposes send, receive, delete and describe
operations on top of an injected SQS transport.

Key Components:
- Queue: queue identity, provisioning and message operations
- Provisioning order: dead-letter queue first, then the primary queue
  with a RedrivePolicy pointing at it
- Error handling: botocore failures are logged and re-raised as the
  matching WorkQueueError subclass

Dependencies: botocore, pydantic (via codec and models), structlog
"""

from typing import Any, Dict, List, Optional, Type

from botocore.exceptions import BotoCoreError, ClientError

from workqueue.config.settings import Settings, settings as default_settings
from workqueue.errors import (
    DeleteError,
    ProvisionError,
    QueueAttributeError,
    ReceiveError,
    SendError,
    TransportError,
    WorkQueueError,
)
from workqueue.models.message import RECEIVE_COUNT_ATTRIBUTE, QueueMessage
from workqueue.models.redrive import RedrivePolicy
from workqueue.sqs_queue import codec
from workqueue.sqs_queue.client import SQSTransport
from workqueue.utils.logger import get_logger

logger = get_logger(__name__)

QUEUE_ARN_ATTRIBUTE = "QueueArn"

TRANSPORT_ERRORS = (ClientError, BotoCoreError)


def _error_context(e: Exception) -> Dict[str, Any]:
    """Structured log fields describing a transport failure."""
    if isinstance(e, ClientError):
        return {
            "error_code": e.response['Error'].get('Code'),
            "error_message": e.response['Error'].get('Message')
        }
    return {"error": str(e), "error_type": type(e).__name__}


def _transport_error(error_cls: Type[TransportError], action: str, e: Exception) -> TransportError:
    error_code = None
    if isinstance(e, ClientError):
        error_code = e.response['Error'].get('Code')
    return error_cls(f"{action} failed: {e}", error_code=error_code)


class Queue:
    """
    An SQS queue paired with a dead-letter queue.

    Attributes:
        name: Logical queue name; the dead-letter queue is named
            name + settings.dead_letter_suffix
        url: Primary queue URL, empty until provisioned
        dead_letter_url: Dead-letter queue URL, empty until provisioned
        client: SQS transport used for every call
        settings: Retention, redrive and polling configuration

    URLs are written only by provision(); afterwards the instance can be
    shared by any number of senders and processors.

    Example:
        >>> async with sqs_client() as client:
        ...     queue = await Queue.create("thumbnails", client)
        ...     await queue.send_message({"image": "s3://bucket/key.png"})
    """

    def __init__(
        self,
        name: str,
        client: SQSTransport,
        settings: Optional[Settings] = None,
        url: str = "",
        dead_letter_url: str = ""
    ):
        """
        Initialize the queue without touching SQS.

        Args:
            name: Logical queue name
            client: SQS transport (aioboto3 client or test double)
            settings: Configuration, defaults to the global settings
            url: Known primary URL, for attaching to an existing queue
            dead_letter_url: Known dead-letter URL

        Raises:
            ValueError: If name is empty
        """
        if not name or not isinstance(name, str):
            raise ValueError("name must be a non-empty string")

        self.name = name
        self.client = client
        self.settings = settings or default_settings
        self.url = url
        self.dead_letter_url = dead_letter_url

    @classmethod
    async def create(
        cls,
        name: str,
        client: SQSTransport,
        settings: Optional[Settings] = None
    ) -> "Queue":
        """Construct and provision a queue in one step."""
        queue = cls(name, client, settings=settings)
        await queue.provision()
        return queue

    @property
    def dead_letter_name(self) -> str:
        return self.name + self.settings.dead_letter_suffix

    @property
    def is_provisioned(self) -> bool:
        return bool(self.url and self.dead_letter_url)

    def _log_context(self) -> Dict[str, Any]:
        return {"queue_name": self.name, "queue_url": self.url}

    async def provision(self) -> None:
        """
        Create the dead-letter queue, then the primary queue redriving to it.

        CreateQueue is create-if-absent, so provisioning an existing pair
        is idempotent. Nothing is rolled back on failure: if the primary
        queue cannot be created the dead-letter queue remains.

        Raises:
            ProvisionError: If either queue cannot be created or the
                dead-letter queue ARN cannot be read
        """
        retention = str(self.settings.message_retention_period)

        try:
            response = await self.client.create_queue(
                QueueName=self.dead_letter_name,
                Attributes={"MessageRetentionPeriod": retention}
            )
        except TRANSPORT_ERRORS as e:
            logger.error(
                "Creating the dead letter queue failed",
                queue_name=self.name,
                dead_letter_queue_name=self.dead_letter_name,
                **_error_context(e)
            )
            raise ProvisionError(
                f"cannot create dead letter queue {self.dead_letter_name}: {e}"
            ) from e

        self.dead_letter_url = response['QueueUrl']
        logger.info(
            "Dead letter queue initialized",
            queue_name=self.name,
            dead_letter_queue_url=self.dead_letter_url
        )

        try:
            attributes = await self.describe_attributes(
                self.dead_letter_url, [QUEUE_ARN_ATTRIBUTE]
            )
        except QueueAttributeError as e:
            raise ProvisionError(
                f"cannot read ARN of dead letter queue {self.dead_letter_name}: {e}"
            ) from e

        dead_letter_arn = attributes.get(QUEUE_ARN_ATTRIBUTE)
        if not dead_letter_arn:
            logger.error(
                "Dead letter queue has no ARN attribute",
                queue_name=self.name,
                dead_letter_queue_url=self.dead_letter_url
            )
            raise ProvisionError(f"dead letter queue {self.dead_letter_name} reported no ARN")

        policy = RedrivePolicy(
            max_receive_count=self.settings.max_receive_count,
            dead_letter_target_arn=dead_letter_arn
        )
        try:
            redrive_policy = policy.to_attribute()
        except WorkQueueError as e:
            raise ProvisionError(str(e)) from e

        try:
            response = await self.client.create_queue(
                QueueName=self.name,
                Attributes={
                    "RedrivePolicy": redrive_policy,
                    "MessageRetentionPeriod": retention
                }
            )
        except TRANSPORT_ERRORS as e:
            logger.error(
                "Creating the queue failed",
                queue_name=self.name,
                **_error_context(e)
            )
            raise ProvisionError(f"cannot create queue {self.name}: {e}") from e

        self.url = response['QueueUrl']
        logger.info(
            "Queue initialized",
            queue_name=self.name,
            queue_url=self.url,
            max_receive_count=policy.max_receive_count
        )

    async def send_message(self, payload: Any) -> str:
        """
        Encode a payload and send it to the primary queue.

        Args:
            payload: Pydantic model, dataclass or JSON-compatible value

        Returns:
            Message ID assigned by SQS

        Raises:
            EncodeError: If the payload cannot be encoded; nothing is sent
            SendError: If SQS rejects the message
        """
        try:
            body = codec.encode(payload)
        except WorkQueueError as e:
            logger.error(
                "Marshal the message body for the queue failed",
                error=str(e),
                **self._log_context()
            )
            raise

        if not self.url:
            raise SendError(f"queue {self.name} is not provisioned")

        try:
            response = await self.client.send_message(
                QueueUrl=self.url,
                MessageBody=body
            )
        except TRANSPORT_ERRORS as e:
            logger.error(
                "Sending message to queue failed",
                **self._log_context(),
                **_error_context(e)
            )
            raise _transport_error(SendError, "SendMessage", e) from e

        message_id = response['MessageId']
        logger.info(
            "Message sent to queue",
            message_id=message_id,
            **self._log_context()
        )
        return message_id

    async def receive_message(self) -> Optional[QueueMessage]:
        """
        Long-poll the primary queue for a single message.

        Blocks for at most settings.wait_time_seconds plus network latency.
        A received message stays hidden from other receivers for
        settings.visibility_timeout seconds unless it is deleted.

        Returns:
            The message, or None when nothing arrived within the wait time

        Raises:
            ReceiveError: If SQS rejects the call
        """
        if not self.url:
            raise ReceiveError(f"queue {self.name} is not provisioned")

        try:
            response = await self.client.receive_message(
                QueueUrl=self.url,
                MaxNumberOfMessages=1,
                VisibilityTimeout=self.settings.visibility_timeout,
                WaitTimeSeconds=self.settings.wait_time_seconds,
                AttributeNames=[RECEIVE_COUNT_ATTRIBUTE]
            )
        except TRANSPORT_ERRORS as e:
            logger.error(
                "Receiving message from queue failed",
                **self._log_context(),
                **_error_context(e)
            )
            raise _transport_error(ReceiveError, "ReceiveMessage", e) from e

        messages = response.get('Messages') or []
        if not messages:
            return None

        message = QueueMessage.from_sqs(messages[0])
        logger.debug(
            "Message received from queue",
            message_id=message.message_id,
            receive_count=message.receive_count,
            **self._log_context()
        )
        return message

    async def delete_message(self, message: QueueMessage) -> None:
        """
        Acknowledge a message by deleting it from the primary queue.

        Raises:
            DeleteError: If SQS rejects the call; the message stays in
                flight and reappears after the visibility timeout
        """
        try:
            await self.delete_by_receipt_handle(message.receipt_handle)
        except DeleteError as e:
            logger.error(
                "Deleting message from queue failed",
                message_id=message.message_id,
                error=str(e),
                **self._log_context()
            )
            raise

        logger.info(
            "Message deleted from queue",
            message_id=message.message_id,
            **self._log_context()
        )

    async def delete_by_receipt_handle(self, receipt_handle: str) -> None:
        """
        Delete a message from the primary queue by its receipt handle.

        Raises:
            DeleteError: If the queue is not provisioned or SQS rejects the call
        """
        if not self.url:
            raise DeleteError(f"queue {self.name} is not provisioned")

        try:
            await self.client.delete_message(
                QueueUrl=self.url,
                ReceiptHandle=receipt_handle
            )
        except TRANSPORT_ERRORS as e:
            raise _transport_error(DeleteError, "DeleteMessage", e) from e

    async def describe_attributes(self, url: str, names: List[str]) -> Dict[str, str]:
        """
        Fetch attributes of any queue by URL.

        Args:
            url: Queue URL, not necessarily this queue's
            names: Attribute names, e.g. ["QueueArn"]

        Returns:
            Mapping of attribute name to value; absent attributes are omitted

        Raises:
            QueueAttributeError: If SQS rejects the call
        """
        try:
            response = await self.client.get_queue_attributes(
                QueueUrl=url,
                AttributeNames=list(names)
            )
        except TRANSPORT_ERRORS as e:
            logger.error(
                "Getting queue attributes failed",
                queue_name=self.name,
                queue_url=url,
                **_error_context(e)
            )
            raise _transport_error(QueueAttributeError, "GetQueueAttributes", e) from e

        return dict(response.get('Attributes') or {})

    def __repr__(self) -> str:
        return f"Queue(name={self.name!r}, url={self.url!r})"
