"""
Module: codec.py
Description: JSON message codec for work items.

Encodes outbound payloads to SQS message bodies and decodes inbound
bodies into a caller-chosen item type using pydantic. Pydantic models,
dataclasses, TypedDicts and plain JSON containers are all supported.
Decoding into ``Any`` yields plain JSON values.
"""

from functools import lru_cache
from typing import Any, Type, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError, to_json

from workqueue.errors import DecodeError, EncodeError

T = TypeVar("T")


@lru_cache(maxsize=128)
def get_adapter(item_type: Any) -> TypeAdapter:
    """
    Return the cached validator for ``item_type``.

    Raises:
        PydanticSchemaGenerationError: If pydantic cannot validate item_type
    """
    return TypeAdapter(item_type)


def _type_name(item_type: Any) -> str:
    return getattr(item_type, "__name__", str(item_type))


def encode(payload: Any) -> str:
    """
    Serialize a payload to a message body.

    Args:
        payload: Pydantic model, dataclass or JSON-compatible value

    Returns:
        JSON encoded body

    Raises:
        EncodeError: If the payload cannot be represented as JSON
    """
    try:
        if isinstance(payload, BaseModel):
            return payload.model_dump_json()
        return to_json(payload).decode("utf-8")
    except (PydanticSerializationError, TypeError, ValueError) as e:
        raise EncodeError(f"cannot encode {type(payload).__name__} payload: {e}") from e


def decode(body: str, item_type: Type[T]) -> T:
    """
    Deserialize a message body into a fresh ``item_type`` value.

    Any failure, including exceptions raised by validators on the item
    type, is reported as DecodeError so it stays scoped to the message.

    Raises:
        DecodeError: If the body is not valid JSON, does not match
            item_type, or item_type cannot be validated at all
    """
    try:
        return get_adapter(item_type).validate_json(body)
    except ValidationError as e:
        raise DecodeError(
            f"cannot decode body into {_type_name(item_type)}: "
            f"{e.error_count()} validation error(s)"
        ) from e
    except Exception as e:
        raise DecodeError(
            f"cannot decode body into {_type_name(item_type)}: {type(e).__name__}: {e}"
        ) from e
