"""
Path-tracking deserialization for jsontrail.

Walks a JsonValue against a schema descriptor, pushing a PathSegment before
each descent into an object field or array element and popping it on a
successful return. The first mismatch aborts the walk; the stack at that moment
is the failure's Path.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Mapping

from pydantic import BaseModel, ValidationError

from .causes import (
    CauseKind,
    Failure,
    InvalidFormat,
    MissingField,
    OutOfRange,
    TypeMismatch,
    UnknownField,
)
from .context import is_strict
from .path import PathSegment, render_path
from .schema.core import (
    F32_MAX,
    AnyNode,
    ArrayNode,
    BoolNode,
    ChoiceNode,
    Descriptor,
    FloatNode,
    IntNode,
    MapNode,
    ModelNode,
    ObjectNode,
    OptionalNode,
    StrNode,
    required_fields,
    to_descriptor,
)
from .schema.models import field_keys_at
from .types import Err, Ok
from .value import JsonKind, JsonSyntaxError, JsonValue, parse_json

logger = logging.getLogger(__name__)

Outcome = Ok[Any] | Err[Failure]


class _Mismatch(Exception):
    """Internal signal carrying the cause of the first mismatch."""

    def __init__(self, cause: CauseKind, extra: tuple[PathSegment, ...] = ()):
        self.cause = cause
        self.extra = extra


class PathTrackingDeserializer:
    """
    Deserializer bound to one compiled schema.

    The compiled descriptor is immutable, so one instance may serve any number
    of concurrent calls; each call owns its own traversal stack.

    Usage:
        deserializer = PathTrackingDeserializer({"user": {"age": int}})
        result = deserializer.deserialize(b'{"user": {"age": "thirty"}}')
        # Err(Failure(path=(field user, field age), cause=TypeMismatch(...)))
    """

    def __init__(self, schema: Any, *, strict: bool | None = None):
        self.schema: Descriptor = to_descriptor(schema)
        self.strict = strict

    def deserialize(self, data: bytes | bytearray | memoryview | str) -> Outcome:
        """Parse JSON text and deserialize it against the schema."""
        try:
            document = parse_json(data)
        except JsonSyntaxError as e:
            logger.debug("Rejected malformed JSON document: %s", e.detail)
            return Err(Failure(path=(), cause=InvalidFormat(e.detail)))

        return self.deserialize_value(document)

    def deserialize_value(self, document: JsonValue) -> Outcome:
        """Deserialize an already-parsed JsonValue against the schema."""
        strict = is_strict() if self.strict is None else self.strict
        return _Descent(strict).run(document, self.schema)


class _Descent:
    """State of one deserialization call."""

    def __init__(self, strict: bool):
        self.strict = strict
        self.stack: list[PathSegment] = []

    def run(self, document: JsonValue, schema: Descriptor) -> Outcome:
        try:
            value = self.visit(document, schema)
        except _Mismatch as signal:
            failure = Failure(path=(*self.stack, *signal.extra), cause=signal.cause)
            logger.debug(
                "Deserialization failed at %s: %r",
                render_path(failure.path),
                failure.cause,
            )
            return Err(failure)
        except RecursionError:
            logger.debug("Deserialization failed: document nested too deep")
            return Err(Failure(path=(), cause=InvalidFormat("recursion limit exceeded")))
        return Ok(value)

    def visit(self, node: JsonValue, schema: Descriptor) -> Any:
        match schema:
            case OptionalNode():
                if node.kind is JsonKind.NULL and schema.nullable:
                    return schema.make_default()
                return self.visit(node, schema.inner)
            case AnyNode():
                return node.to_python()
            case BoolNode():
                self.expect(node, schema, JsonKind.BOOLEAN)
                return node.value
            case IntNode():
                return self.visit_int(node, schema)
            case FloatNode():
                return self.visit_float(node, schema)
            case StrNode():
                self.expect(node, schema, JsonKind.STRING)
                if not schema.matches(node.value):  # type: ignore[arg-type]
                    raise _Mismatch(
                        InvalidFormat(
                            f"string does not match pattern `{schema.pattern}`"
                        )
                    )
                return node.value
            case ChoiceNode():
                self.expect(node, schema, JsonKind.STRING)
                if node.value not in schema.values:
                    variants = ", ".join(f"`{v}`" for v in schema.values)
                    raise _Mismatch(
                        InvalidFormat(
                            f"unknown variant `{node.value}`, expected one of {variants}"
                        )
                    )
                return node.value
            case ArrayNode():
                return self.visit_array(node, schema)
            case MapNode():
                return self.visit_map(node, schema)
            case ObjectNode():
                return self.visit_object(node, schema)
            case ModelNode():
                return self.visit_model(node, schema)

        raise TypeError(f"Unsupported descriptor: {type(schema).__name__}")

    def expect(self, node: JsonValue, schema: Descriptor, kind: JsonKind) -> None:
        if node.kind is not kind:
            raise _Mismatch(TypeMismatch(expected=schema.expected, found=node.type_name))

    def visit_int(self, node: JsonValue, schema: IntNode) -> int:
        if node.kind is not JsonKind.NUMBER or not isinstance(node.value, int):
            raise _Mismatch(TypeMismatch(expected=schema.expected, found=node.type_name))
        lower, upper = schema.bounds
        if (lower is not None and node.value < lower) or (
            upper is not None and node.value > upper
        ):
            raise _Mismatch(OutOfRange(value=node.value, expected=schema.range_label))
        return node.value

    def visit_float(self, node: JsonValue, schema: FloatNode) -> float:
        self.expect(node, schema, JsonKind.NUMBER)
        num = node.value
        assert isinstance(num, (int, float))
        try:
            result = float(num)
        except OverflowError:
            result = math.inf
        if (
            math.isinf(result)
            or (schema.bits == 32 and abs(result) > F32_MAX)
            or (schema.ge is not None and result < schema.ge)
            or (schema.le is not None and result > schema.le)
        ):
            raise _Mismatch(OutOfRange(value=num, expected=schema.range_label))
        return result

    def visit_array(self, node: JsonValue, schema: ArrayNode) -> list[Any]:
        self.expect(node, schema, JsonKind.ARRAY)
        result = []
        for i, item in enumerate(node.value):  # type: ignore[arg-type]
            self.stack.append(PathSegment.index(i))
            result.append(self.visit(item, schema.items))
            self.stack.pop()
        return result

    def visit_map(self, node: JsonValue, schema: MapNode) -> dict[str, Any]:
        self.expect(node, schema, JsonKind.OBJECT)
        result = {}
        for key, child in node.value.items():  # type: ignore[union-attr]
            self.stack.append(PathSegment.field(key))
            result[key] = self.visit(child, schema.values)
            self.stack.pop()
        return result

    def visit_fields(
        self, node: JsonValue, schema: ObjectNode | ModelNode, keep_extra: bool
    ) -> dict[str, Any]:
        """
        Shared object walk.

        Document order first (unknown fields in strict mode, then each declared
        field's own checks), then missing required fields in declaration order.
        """
        self.expect(node, schema, JsonKind.OBJECT)
        strict = self.strict if schema.strict is None else schema.strict
        pairs: Mapping[str, JsonValue] = node.value  # type: ignore[assignment]

        found: dict[str, Any] = {}
        for key, child in pairs.items():
            field_schema = schema.fields.get(key)
            if field_schema is None:
                if strict:
                    raise _Mismatch(
                        UnknownField(name=key, expected=tuple(schema.fields))
                    )
                if keep_extra:
                    found[key] = child.to_python()
                continue
            self.stack.append(PathSegment.field(key))
            found[key] = self.visit(child, field_schema)
            self.stack.pop()

        for key in required_fields(schema):
            if key not in pairs:
                raise _Mismatch(MissingField(name=key))

        return found

    def visit_object(self, node: JsonValue, schema: ObjectNode) -> dict[str, Any]:
        found = self.visit_fields(node, schema, keep_extra=False)
        result = {}
        for key, field_schema in schema.fields.items():
            if key in found:
                result[key] = found[key]
            else:
                assert isinstance(field_schema, OptionalNode)
                result[key] = field_schema.make_default()
        return result

    def visit_model(self, node: JsonValue, schema: ModelNode) -> Any:
        found = self.visit_fields(node, schema, keep_extra=schema.keep_extra)
        try:
            return schema.model.model_validate(found)
        except ValidationError as e:
            raise _from_pydantic(e, schema.model) from e


_RANGE_ERRORS = {
    "greater_than": ("gt", ">"),
    "greater_than_equal": ("ge", ">="),
    "less_than": ("lt", "<"),
    "less_than_equal": ("le", "<="),
}


def _python_type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "float"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def _from_pydantic(error: ValidationError, model: type[BaseModel]) -> _Mismatch:
    """Convert the first pydantic error into a mismatch located below the model."""
    first = error.errors()[0]
    loc = tuple(
        PathSegment.index(p) if isinstance(p, int) else PathSegment.field(str(p))
        for p in first["loc"]
    )
    kind = first["type"]
    value = first.get("input")

    if kind == "missing" and loc:
        return _Mismatch(MissingField(name=str(loc[-1].value)), loc[:-1])
    if kind == "extra_forbidden" and loc:
        return _Mismatch(
            UnknownField(
                name=str(loc[-1].value),
                expected=field_keys_at(model, first["loc"][:-1]),
            ),
            loc[:-1],
        )
    if kind in _RANGE_ERRORS and isinstance(value, (int, float)):
        ctx_key, op = _RANGE_ERRORS[kind]
        bound = first.get("ctx", {}).get(ctx_key)
        label = "integer" if isinstance(value, int) else "number"
        return _Mismatch(OutOfRange(value=value, expected=f"{label} {op} {bound}"), loc)
    if kind.endswith("_type"):
        expected = kind.removesuffix("_type").replace("_", " ")
        return _Mismatch(
            TypeMismatch(expected=expected, found=_python_type_name(value)), loc
        )
    return _Mismatch(InvalidFormat(first["msg"]), loc)


def deserialize(
    data: bytes | bytearray | memoryview | str,
    schema: Any,
    *,
    strict: bool | None = None,
) -> Outcome:
    """
    Deserialize JSON text against a schema, tracking the failure path.

    Args:
        data: UTF-8 JSON bytes (or already-decoded text)
        schema: Descriptor, dict-like schema, or pydantic model class
        strict: Reject undeclared fields; None uses the active
                deserialization_context

    Returns:
        Ok(value) if the document matches the schema
        Err(Failure(path, cause)) for the first mismatch found

    Usage:
        result = deserialize(b'{"items": [1, 2, "x"]}', {"items": [int]})
        render_path(result.error.path)  # "items[2]"
    """
    return PathTrackingDeserializer(schema, strict=strict).deserialize(data)


def deserialize_value(
    document: JsonValue, schema: Any, *, strict: bool | None = None
) -> Outcome:
    """Deserialize an already-parsed JsonValue against a schema."""
    return PathTrackingDeserializer(schema, strict=strict).deserialize_value(document)
