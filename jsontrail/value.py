"""
Generic JSON value for jsontrail.

JsonValue is a closed tagged variant (kind + payload), built from raw bytes by
parse_json() before any schema is consulted.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from enum import Enum, auto
from types import MappingProxyType
from typing import Any, Iterable, Iterator, Mapping, Union


class JsonKind(Enum):
    NULL = auto()
    BOOLEAN = auto()
    NUMBER = auto()
    STRING = auto()
    ARRAY = auto()
    OBJECT = auto()


@dataclass(frozen=True, slots=True)
class JsonValue:
    """A single node of a parsed JSON document."""

    kind: JsonKind
    value: Union[
        None,
        bool,
        int,
        float,
        str,
        tuple["JsonValue", ...],
        Mapping[str, "JsonValue"],
    ]

    @classmethod
    def null(cls) -> JsonValue:
        return cls(JsonKind.NULL, None)

    @classmethod
    def boolean(cls, flag: bool) -> JsonValue:
        return cls(JsonKind.BOOLEAN, flag)

    @classmethod
    def number(cls, num: int | float) -> JsonValue:
        return cls(JsonKind.NUMBER, num)

    @classmethod
    def string(cls, text: str) -> JsonValue:
        return cls(JsonKind.STRING, text)

    @classmethod
    def array(cls, items: Iterable[JsonValue]) -> JsonValue:
        return cls(JsonKind.ARRAY, tuple(items))

    @classmethod
    def object(cls, pairs: Iterable[tuple[str, JsonValue]]) -> JsonValue:
        return cls(JsonKind.OBJECT, MappingProxyType(dict(pairs)))

    @property
    def type_name(self) -> str:
        """Name of this node's kind as used in error messages."""
        if self.kind is JsonKind.NUMBER:
            return "integer" if isinstance(self.value, int) else "float"
        return self.kind.name.lower()

    def to_python(self) -> Any:
        """Convert back to plain dict/list/scalar data."""
        if self.kind not in _CONTAINERS:
            return self.value

        # Walked with an explicit stack so depth is bounded only by the parser
        root = _empty_container(self.kind)
        pending: list[tuple[JsonValue, Any]] = [(self, root)]
        while pending:
            node, out = pending.pop()
            if node.kind is JsonKind.ARRAY:
                entries = enumerate(node.value)  # type: ignore[arg-type]
            else:
                entries = node.value.items()  # type: ignore[union-attr]
            for key, child in entries:
                if child.kind in _CONTAINERS:
                    converted = _empty_container(child.kind)
                    pending.append((child, converted))
                else:
                    converted = child.value
                if node.kind is JsonKind.ARRAY:
                    out.append(converted)
                else:
                    out[key] = converted
        return root

    @classmethod
    def from_python(cls, data: Any) -> JsonValue:
        """Wrap plain Python data (as produced by json.loads) into JsonValue."""
        # Each frame holds an open container: its kind, an iterator over its
        # remaining children, and the keys and values converted so far.
        frames: list[tuple[JsonKind, Iterator[Any], list[str], list[JsonValue]]] = []
        current = data
        while True:
            if isinstance(current, (list, tuple)):
                frames.append((JsonKind.ARRAY, iter(current), [], []))
            elif isinstance(current, dict):
                frames.append((JsonKind.OBJECT, iter(current.items()), [], []))
            else:
                leaf = cls._from_scalar(current)
                if not frames:
                    return leaf
                frames[-1][3].append(leaf)

            while frames:
                kind, children, keys, values = frames[-1]
                child = next(children, _EXHAUSTED)
                if child is _EXHAUSTED:
                    frames.pop()
                    if kind is JsonKind.ARRAY:
                        built = cls.array(values)
                    else:
                        built = cls.object(zip(keys, values))
                    if not frames:
                        return built
                    frames[-1][3].append(built)
                    continue
                if kind is JsonKind.OBJECT:
                    key, child = child
                    keys.append(str(key))
                current = child
                break

    @classmethod
    def _from_scalar(cls, data: Any) -> JsonValue:
        if isinstance(data, JsonValue):
            return data
        if data is None:
            return cls.null()
        if isinstance(data, bool):
            return cls.boolean(data)
        if isinstance(data, (int, float)):
            return cls.number(data)
        if isinstance(data, str):
            return cls.string(data)
        raise TypeError(f"Cannot convert {type(data).__name__} to JsonValue")


_CONTAINERS = (JsonKind.ARRAY, JsonKind.OBJECT)
_EXHAUSTED = object()


def _empty_container(kind: JsonKind) -> Any:
    return [] if kind is JsonKind.ARRAY else {}


class JsonSyntaxError(ValueError):
    """Raised when a document is not valid JSON text."""

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid number `{name}`")


def _finite_float(text: str) -> float:
    num = float(text)
    if math.isinf(num):
        raise ValueError("number out of range")
    return num


def _object_hook(pairs: list[tuple[str, Any]]) -> JsonValue:
    return JsonValue.object((k, JsonValue.from_python(v)) for k, v in pairs)


def parse_json(data: bytes | bytearray | memoryview | str) -> JsonValue:
    """
    Parse JSON text into a JsonValue.

    Bytes must be UTF-8. NaN/Infinity literals and floats that overflow to
    infinity are rejected.

    Raises:
        JsonSyntaxError: If the input is not a valid JSON document
    """
    if isinstance(data, (bytes, bytearray, memoryview)):
        try:
            text = bytes(data).decode("utf-8")
        except UnicodeDecodeError as e:
            raise JsonSyntaxError(
                f"invalid UTF-8 at byte offset {e.start}"
            ) from e
    else:
        text = data

    try:
        parsed = json.loads(
            text,
            object_pairs_hook=_object_hook,
            parse_constant=_reject_constant,
            parse_float=_finite_float,
        )
    except json.JSONDecodeError as e:
        raise JsonSyntaxError(f"{e.msg} at line {e.lineno} column {e.colno}") from e
    except ValueError as e:
        raise JsonSyntaxError(str(e)) from e
    except RecursionError as e:
        raise JsonSyntaxError("recursion limit exceeded") from e

    return JsonValue.from_python(parsed)
