"""
Module: test_codec.py
Description: Unit tests for the JSON message codec.
"""

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import pytest
from pydantic import BaseModel, field_validator

from workqueue.errors import DecodeError, EncodeError
from workqueue.sqs_queue import codec


class ResizeJob(BaseModel):
    image: str
    width: int
    crop: Optional[str] = None


@dataclass
class ArchiveJob:
    path: str
    created_at: datetime


class TestEncode:
    """Test cases for codec.encode()."""

    def test_encode_model(self):
        """Test pydantic models are encoded with their JSON schema."""
        body = codec.encode(ResizeJob(image="a.png", width=120))

        assert json.loads(body) == {"image": "a.png", "width": 120, "crop": None}

    def test_encode_dict(self):
        """Test plain dictionaries are encoded as JSON objects."""
        body = codec.encode({"image": "a.png", "sizes": [64, 128]})

        assert json.loads(body) == {"image": "a.png", "sizes": [64, 128]}

    def test_encode_dataclass_with_datetime(self):
        """Test dataclasses and datetimes are supported."""
        job = ArchiveJob(path="/tmp/a", created_at=datetime(2026, 1, 15, 10, 30, tzinfo=timezone.utc))

        body = json.loads(codec.encode(job))

        assert body["path"] == "/tmp/a"
        assert body["created_at"].startswith("2026-01-15T10:30:00")

    def test_encode_unserializable(self):
        """Test values without a JSON representation raise EncodeError."""
        with pytest.raises(EncodeError):
            codec.encode({"handle": object()})


class TestDecode:
    """Test cases for codec.decode()."""

    def test_decode_model(self):
        """Test bodies are validated into the item type."""
        job = codec.decode('{"image": "a.png", "width": 120}', ResizeJob)

        assert job == ResizeJob(image="a.png", width=120)

    def test_decode_any(self):
        """Test decoding into Any yields plain JSON values."""
        assert codec.decode('{"a": [1, 2]}', Any) == {"a": [1, 2]}

    def test_decode_generic_container(self):
        """Test parametrised containers can be used as item types."""
        assert codec.decode('{"a": 1}', Dict[str, int]) == {"a": 1}

    def test_decode_returns_fresh_values(self):
        """Test every decode produces a new value."""
        first = codec.decode('{"image": "a.png", "width": 1, "crop": "center"}', ResizeJob)
        second = codec.decode('{"image": "b.png", "width": 2}', ResizeJob)

        assert first is not second
        assert second.crop is None

    def test_decode_malformed_json(self):
        """Test invalid JSON raises DecodeError."""
        with pytest.raises(DecodeError):
            codec.decode("{not json", ResizeJob)

    def test_decode_schema_mismatch(self):
        """Test bodies that do not match the item type raise DecodeError."""
        with pytest.raises(DecodeError, match="ResizeJob"):
            codec.decode('{"image": "a.png"}', ResizeJob)


class StrictFormatJob(BaseModel):
    image: str
    format: str

    @field_validator("format")
    @classmethod
    def known_format(cls, v: str) -> str:
        return {"png": "image/png", "jpg": "image/jpeg"}[v]


class PlainJob:
    def __init__(self, image: str):
        self.image = image


class TestDecodeFailures:
    """Test cases for failures pydantic does not wrap in ValidationError."""

    def test_validator_exception_becomes_decode_error(self):
        """Test non-ValueError exceptions from validators raise DecodeError."""
        assert codec.decode('{"image": "a", "format": "png"}', StrictFormatJob).format == "image/png"

        with pytest.raises(DecodeError, match="KeyError") as exc_info:
            codec.decode('{"image": "a", "format": "gif"}', StrictFormatJob)

        assert isinstance(exc_info.value.__cause__, KeyError)

    def test_unsupported_item_type_becomes_decode_error(self):
        """Test item types pydantic cannot build a validator for raise DecodeError."""
        with pytest.raises(DecodeError, match="PlainJob"):
            codec.decode('{"image": "a.png"}', PlainJob)
