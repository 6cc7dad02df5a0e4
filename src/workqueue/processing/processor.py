"""
Module: processor.py
Description: Polling worker loop for SQS work queues.

Receives one message at a time, decodes it into the processor's item
type, dispatches it to the handler and deletes it on success.

Failure contract:
- Receive failure or empty poll: next iteration, no backoff; the long-poll
  wait time is the only throttle.
- Decode or handler failure: the message is left alone. It reappears when
  its visibility timeout expires and SQS moves it to the dead-letter queue
  once its receive count passes the redrive policy's maxReceiveCount.
- Delete failure: logged; the message will be delivered again, so
  handlers must be idempotent.

None of these failures stops the loop. Only the stop event or task
cancellation does.
"""

import asyncio
import inspect
from enum import Enum
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar, Union

from workqueue.errors import DecodeError, DeleteError, WorkQueueError
from workqueue.models.message import QueueMessage
from workqueue.sqs_queue import codec
from workqueue.sqs_queue.queue import Queue
from workqueue.utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

Handler = Callable[["Processor[T]", T], Union[None, Awaitable[None]]]

# Bodies longer than this are truncated in failure logs.
MAX_LOGGED_BODY = 500

_STOPPED = object()


class Outcome(str, Enum):
    """Result of a single processor iteration."""

    IDLE = "idle"
    STOPPED = "stopped"
    RECEIVE_FAILED = "receive_failed"
    DECODE_FAILED = "decode_failed"
    HANDLER_FAILED = "handler_failed"
    DELETE_FAILED = "delete_failed"
    ACKNOWLEDGED = "acknowledged"


class Processor(Generic[T]):
    """
    Binds a Queue to a handler and runs the poll, decode, handle, acknowledge loop.

    Every message is decoded into a new ``item_type`` value, so nothing
    leaks between deliveries. A single Processor must only be run by one
    task at a time; any number of Processors may poll the same Queue.

    Attributes:
        queue: Queue to poll
        handler: Called as handler(processor, item); raising marks the
            delivery as failed. May be a plain function or a coroutine
            function.
        item_type: Type message bodies are decoded into; Any yields plain
            JSON values

    Example:
        >>> async def resize(processor: Processor[ResizeJob], job: ResizeJob) -> None:
        ...     await thumbnails.render(job.image, job.width)
        >>> processor = Processor(queue, resize, ResizeJob)
        >>> stop = asyncio.Event()
        >>> await processor.run(stop)
    """

    def __init__(self, queue: Queue, handler: Handler, item_type: Any = Any):
        if not callable(handler):
            raise ValueError("handler must be callable")
        try:
            codec.get_adapter(item_type)
        except Exception as e:
            raise ValueError(f"item_type {item_type!r} cannot be decoded from JSON: {e}") from e

        self.queue = queue
        self.handler = handler
        self.item_type = item_type

    @property
    def max_receive_count(self) -> int:
        return self.queue.settings.max_receive_count

    def _log_context(self, message: Optional[QueueMessage] = None) -> dict:
        context = {"queue_name": self.queue.name, "queue_url": self.queue.url}
        if message is not None:
            context["message_id"] = message.message_id
            context["receive_count"] = message.receive_count
        return context

    async def run(self, stop_event: Optional[asyncio.Event] = None) -> None:
        """
        Process messages until stop_event is set.

        The stop event is checked before every poll and interrupts a
        pending receive. A message that has already been received is
        always decoded, handled and acknowledged before the loop exits.

        Args:
            stop_event: Signal to stop; without one the loop runs until the
                task is cancelled
        """
        stop_event = stop_event or asyncio.Event()

        logger.info("Processing queue started", **self._log_context())
        while not stop_event.is_set():
            await self.process_next(stop_event)
        logger.info("Processing queue stopped", **self._log_context())

    async def process_next(self, stop_event: Optional[asyncio.Event] = None) -> Outcome:
        """
        Run one iteration: poll once and process what was received.

        Args:
            stop_event: Interrupts the receive call when set

        Returns:
            What happened to the polled message, if any
        """
        logger.debug("Polling queue", **self._log_context())

        try:
            message = await self._receive(stop_event)
        except WorkQueueError:
            return Outcome.RECEIVE_FAILED

        if message is _STOPPED:
            return Outcome.STOPPED
        if message is None:
            return Outcome.IDLE
        return await self.process_message(message)

    async def _receive(self, stop_event: Optional[asyncio.Event]) -> Any:
        """Receive one message, or _STOPPED if stop_event fires first."""
        if stop_event is None:
            return await self.queue.receive_message()
        if stop_event.is_set():
            return _STOPPED

        receive = asyncio.ensure_future(self.queue.receive_message())
        stopped = asyncio.ensure_future(stop_event.wait())
        try:
            await asyncio.wait({receive, stopped}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for task in (receive, stopped):
                if not task.done():
                    task.cancel()
            await asyncio.gather(receive, stopped, return_exceptions=True)

        if receive.cancelled():
            return _STOPPED
        return receive.result()

    async def process_message(self, message: QueueMessage) -> Outcome:
        """
        Decode, handle and acknowledge a received message.

        Returns:
            DECODE_FAILED, HANDLER_FAILED, DELETE_FAILED or ACKNOWLEDGED
        """
        try:
            item = codec.decode(message.body, self.item_type)
        except DecodeError as e:
            logger.warning(
                "Error unmarshalling message",
                error=str(e),
                body=message.body[:MAX_LOGGED_BODY],
                **self._log_context(message)
            )
            return Outcome.DECODE_FAILED

        try:
            result = self.handler(self, item)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            logger.warning(
                "Error processing message",
                error=str(e),
                error_type=type(e).__name__,
                max_receive_count=self.max_receive_count,
                **self._log_context(message)
            )
            if message.receive_count >= self.max_receive_count:
                logger.warning(
                    "Message reached max receive count, next expiry moves it to the dead letter queue",
                    dead_letter_queue_url=self.queue.dead_letter_url,
                    **self._log_context(message)
                )
            return Outcome.HANDLER_FAILED

        try:
            await self.queue.delete_message(message)
        except DeleteError as e:
            logger.warning(
                "Error deleting queue message",
                error=str(e),
                **self._log_context(message)
            )
            return Outcome.DELETE_FAILED

        return Outcome.ACKNOWLEDGED
