"""
Request-body extraction for host frameworks.

Json wraps a value extracted from a request body. Json.from_body() reads the
body, deserializes it and raises JsonExtractionError (status 400) with the
failure path in the message when the body does not match the schema.
"""

from __future__ import annotations

import logging
from typing import Any, Generic, TypeVar

from .deserializer import PathTrackingDeserializer
from .translator import ErrorRecord
from .types import Err

logger = logging.getLogger(__name__)

T = TypeVar("T")


class JsonExtractionError(Exception):
    """The request body could not be read or did not match the schema."""

    status_code = 400

    def __init__(self, message: str, record: ErrorRecord | None = None):
        super().__init__(message)
        self.message = message
        self.record = record

    def to_dict(self) -> dict[str, Any]:
        """Payload for the host framework's error response."""
        payload: dict[str, Any] = {"error": self.message}
        if self.record is not None:
            payload["path"] = self.record.path
            payload["detail"] = self.record.message
        return payload


def read_body(body: Any) -> bytes:
    """
    Read raw request-body bytes.

    Accepts bytes-like objects or readable objects with a .read() method
    (e.g. a WSGI input stream).

    Raises:
        JsonExtractionError: If reading the body fails
    """
    if isinstance(body, (bytes, bytearray, memoryview)):
        return bytes(body)
    if isinstance(body, str):
        return body.encode("utf-8")
    try:
        data = body.read()
    except OSError as e:
        raise JsonExtractionError(f"Failed to read request body: {e}") from e
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


class Json(Generic[T]):
    """
    Value extracted from a JSON request body.

    Attribute and item access are forwarded to the wrapped value, so a handler
    can use the wrapper directly or call into_inner(). Wrappers compare by
    value and are not hashable.

    Usage:
        payload = Json.from_body(request.get_data(), CreateUser)
        payload.name          # forwarded to the CreateUser instance
        user = payload.into_inner()
    """

    __slots__ = ("_value",)

    def __init__(self, value: T):
        self._value = value

    def into_inner(self) -> T:
        return self._value

    @property
    def value(self) -> T:
        return self._value

    def __getattr__(self, name: str) -> Any:
        if name == "_value":
            raise AttributeError(name)
        return getattr(self._value, name)

    def __getitem__(self, key: Any) -> Any:
        return self._value[key]  # type: ignore[index]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Json):
            return self._value == other._value
        return False

    def __repr__(self) -> str:
        return f"Json({self._value!r})"

    @classmethod
    def from_body(
        cls, body: Any, schema: Any, *, strict: bool | None = None
    ) -> Json[Any]:
        """
        Extract and deserialize a request body.

        Args:
            body: Raw body bytes or a readable stream
            schema: Descriptor, dict-like schema, or pydantic model class
            strict: Reject undeclared fields; None uses the active context

        Raises:
            JsonExtractionError: "Failed to read request body: ..." or
                "Invalid JSON at <path>: <message>"
        """
        data = read_body(body)
        result = PathTrackingDeserializer(schema, strict=strict).deserialize(data)
        if isinstance(result, Err):
            record = result.error.record
            logger.debug("Rejected request body: %s", record)
            raise JsonExtractionError(str(record), record=record)
        return cls(result.value)
