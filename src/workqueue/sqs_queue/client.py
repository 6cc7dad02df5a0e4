"""
Module: client.py
Description: SQS transport for the work-queue client.

SQSTransport is the narrow slice of the aiobotocore SQS client the Queue
depends on. sqs_client() opens a real aioboto3 client configured from
Settings; tests substitute any object with the same coroutine methods.
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, List, Optional, Protocol

from aioboto3 import Session

from workqueue.config.settings import Settings, settings as default_settings
from workqueue.utils.logger import get_logger

logger = get_logger(__name__)


class SQSTransport(Protocol):
    """Coroutine methods of the aiobotocore SQS client used by Queue."""

    async def create_queue(
        self, *, QueueName: str, Attributes: Dict[str, str]
    ) -> Dict[str, Any]: ...

    async def send_message(self, *, QueueUrl: str, MessageBody: str) -> Dict[str, Any]: ...

    async def receive_message(
        self,
        *,
        QueueUrl: str,
        MaxNumberOfMessages: int,
        VisibilityTimeout: int,
        WaitTimeSeconds: int,
        AttributeNames: List[str],
    ) -> Dict[str, Any]: ...

    async def delete_message(self, *, QueueUrl: str, ReceiptHandle: str) -> Dict[str, Any]: ...

    async def get_queue_attributes(
        self, *, QueueUrl: str, AttributeNames: List[str]
    ) -> Dict[str, Any]: ...


@asynccontextmanager
async def sqs_client(
    settings: Optional[Settings] = None,
    session: Optional[Session] = None,
) -> AsyncGenerator[SQSTransport, None]:
    """
    Open an aioboto3 SQS client for the configured region.

    Credentials are resolved by botocore's default chain (environment,
    shared config, instance role).

    Args:
        settings: Settings to read region and endpoint from
        session: Existing aioboto3 session to reuse

    Example:
        >>> async with sqs_client() as client:
        ...     queue = await Queue.create("thumbnails", client)
    """
    settings = settings or default_settings
    session = session or Session()

    client_kwargs = {"region_name": settings.aws_region}
    if settings.endpoint_url is not None:
        client_kwargs["endpoint_url"] = settings.endpoint_url

    async with session.client("sqs", **client_kwargs) as client:
        logger.debug(
            "SQS client opened",
            region=settings.aws_region,
            endpoint_url=settings.endpoint_url
        )
        yield client
