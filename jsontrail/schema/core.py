"""
Schema descriptor nodes for jsontrail.

Descriptors are immutable dataclasses consulted node-by-node during descent.
Each node carries an `expected` label used in TypeMismatch causes.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Callable, ClassVar, Mapping, Union

from pydantic import BaseModel

INT_WIDTHS = (8, 16, 32, 64, 128)
FLOAT_WIDTHS = (32, 64)
F32_MAX = 3.4028234663852886e38


def _bounds_label(kind: str, lower: Any, upper: Any) -> str:
    if lower is not None and upper is not None:
        return f"{kind} in {lower}..={upper}"
    if lower is not None:
        return f"{kind} >= {lower}"
    return f"{kind} <= {upper}"


@dataclass(frozen=True, slots=True)
class BoolNode:
    expected: ClassVar[str] = "boolean"


@dataclass(frozen=True, slots=True)
class IntNode:
    """Integer with an optional machine width and optional inclusive bounds."""

    expected: ClassVar[str] = "integer"

    bits: int | None = None
    signed: bool = True
    ge: int | None = None
    le: int | None = None

    def __post_init__(self) -> None:
        if self.bits is not None and self.bits not in INT_WIDTHS:
            raise ValueError(f"Unsupported integer width: {self.bits}")

    @property
    def bounds(self) -> tuple[int | None, int | None]:
        lower, upper = self.ge, self.le
        if self.bits is not None:
            if self.signed:
                w_lower, w_upper = -(2 ** (self.bits - 1)), 2 ** (self.bits - 1) - 1
            else:
                w_lower, w_upper = 0, 2**self.bits - 1
            lower = w_lower if lower is None else max(lower, w_lower)
            upper = w_upper if upper is None else min(upper, w_upper)
        return lower, upper

    @property
    def range_label(self) -> str:
        if self.ge is None and self.le is None:
            if self.bits is None:
                return self.expected
            return f"{'i' if self.signed else 'u'}{self.bits}"
        lower, upper = self.bounds
        return _bounds_label(self.expected, lower, upper)


@dataclass(frozen=True, slots=True)
class FloatNode:
    """Floating point number; integers are accepted and widened."""

    expected: ClassVar[str] = "number"

    bits: int = 64
    ge: float | None = None
    le: float | None = None

    def __post_init__(self) -> None:
        if self.bits not in FLOAT_WIDTHS:
            raise ValueError(f"Unsupported float width: {self.bits}")

    @property
    def range_label(self) -> str:
        if self.ge is None and self.le is None:
            return f"f{self.bits}"
        return _bounds_label(self.expected, self.ge, self.le)


@dataclass(frozen=True, slots=True)
class StrNode:
    expected: ClassVar[str] = "string"

    pattern: str | None = None
    _regex: re.Pattern[str] | None = field(
        init=False, default=None, compare=False, repr=False
    )

    def __post_init__(self) -> None:
        if self.pattern is not None:
            object.__setattr__(self, "_regex", re.compile(self.pattern))

    def matches(self, text: str) -> bool:
        return self._regex is None or self._regex.fullmatch(text) is not None


@dataclass(frozen=True, slots=True)
class ChoiceNode:
    """String restricted to a fixed set of variants."""

    expected: ClassVar[str] = "string"

    values: tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.values:
            raise ValueError("Choice requires at least one value")


@dataclass(frozen=True, slots=True)
class AnyNode:
    """Accepts any JSON value and returns it as plain Python data."""

    expected: ClassVar[str] = "any value"


@dataclass(frozen=True, slots=True)
class OptionalNode:
    """
    A field that may be omitted.

    When the field is missing (or JSON null, if nullable) the default is used.
    """

    inner: Descriptor
    default: Any = None
    default_factory: Callable[[], Any] | None = None
    nullable: bool = True

    @property
    def expected(self) -> str:
        return self.inner.expected

    def make_default(self) -> Any:
        if self.default_factory is not None:
            return self.default_factory()
        return self.default


@dataclass(frozen=True, slots=True)
class ArrayNode:
    expected: ClassVar[str] = "array"

    items: Descriptor


@dataclass(frozen=True, slots=True)
class MapNode:
    """Object with arbitrary string keys and uniformly typed values."""

    expected: ClassVar[str] = "object"

    values: Descriptor


@dataclass(frozen=True, slots=True)
class ObjectNode:
    """Object with declared fields; undeclared fields are dropped unless strict."""

    expected: ClassVar[str] = "object"

    fields: Mapping[str, Descriptor]
    strict: bool | None = None


@dataclass(frozen=True, slots=True)
class ModelNode:
    """Object backed by a pydantic model; keys are the model's JSON names."""

    expected: ClassVar[str] = "object"

    model: type[BaseModel]
    fields: Mapping[str, Descriptor]
    required: frozenset[str] = frozenset()
    strict: bool | None = None
    keep_extra: bool = False


Descriptor = Union[
    BoolNode,
    IntNode,
    FloatNode,
    StrNode,
    ChoiceNode,
    AnyNode,
    OptionalNode,
    ArrayNode,
    MapNode,
    ObjectNode,
    ModelNode,
]

DESCRIPTOR_TYPES = (
    BoolNode,
    IntNode,
    FloatNode,
    StrNode,
    ChoiceNode,
    AnyNode,
    OptionalNode,
    ArrayNode,
    MapNode,
    ObjectNode,
    ModelNode,
)


def required_fields(node: ObjectNode | ModelNode) -> list[str]:
    """Names of fields that must be present, in declaration order."""
    explicit = node.required if isinstance(node, ModelNode) else frozenset()
    return [
        key
        for key, child in node.fields.items()
        if key in explicit or not isinstance(child, OptionalNode)
    ]


def to_descriptor(v: Any) -> Descriptor:
    """
    Coerce a value to a descriptor.

    Conversion rules:
        descriptor node -> pass through
        bool / int / float / str -> scalar node
        typing.Any -> AnyNode
        pydantic model class -> ModelNode
        {str: v} -> MapNode with value descriptor from v
        dict -> ObjectNode with recursive conversion
        [v] -> ArrayNode with item descriptor from v
    """
    if isinstance(v, DESCRIPTOR_TYPES):
        return v

    if v is Any:
        return AnyNode()

    if v is bool:
        return BoolNode()
    if v is int:
        return IntNode()
    if v is float:
        return FloatNode()
    if v is str:
        return StrNode()

    if isinstance(v, type) and issubclass(v, BaseModel):
        # Import here to avoid circular dependency
        from .models import from_model

        return from_model(v)

    if isinstance(v, dict):
        if len(v) == 1 and str in v:
            return MapNode(values=to_descriptor(v[str]))
        for key in v:
            if not isinstance(key, str):
                raise TypeError(
                    f"Object field names must be strings, got {type(key).__name__}"
                )
        return ObjectNode(fields={k: to_descriptor(val) for k, val in v.items()})

    if isinstance(v, list):
        if len(v) != 1:
            raise ValueError(
                f"List schema must hold exactly one item descriptor, got {len(v)}"
            )
        return ArrayNode(items=to_descriptor(v[0]))

    raise TypeError(f"Cannot convert {type(v).__name__} to descriptor")
