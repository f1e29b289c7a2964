"""
Built-in descriptor factories for jsontrail schemas.

Provides factory functions that return descriptor nodes, plus width constants.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Mapping

from .core import (
    AnyNode,
    ArrayNode,
    BoolNode,
    ChoiceNode,
    Descriptor,
    FloatNode,
    IntNode,
    MapNode,
    ObjectNode,
    OptionalNode,
    StrNode,
    to_descriptor,
)


def Boolean() -> BoolNode:
    return BoolNode()


def Integer(
    bits: int | None = None,
    signed: bool = True,
    *,
    ge: int | None = None,
    le: int | None = None,
) -> IntNode:
    """
    Integer, optionally limited to a machine width and/or inclusive bounds.

    Usage:
        Integer()                 # any integer
        Integer(32)               # i32
        Integer(8, signed=False)  # u8
        Integer(ge=0, le=150)     # 0..=150
    """
    return IntNode(bits=bits, signed=signed, ge=ge, le=le)


def Number(
    bits: int = 64, *, ge: float | None = None, le: float | None = None
) -> FloatNode:
    """Floating point number (f64 by default, f32 with bits=32)."""
    return FloatNode(bits=bits, ge=ge, le=le)


def String(pattern: str | None = None) -> StrNode:
    """
    String, optionally required to fully match a regex pattern.

    Usage:
        String()
        String(r"[a-z]+")
    """
    return StrNode(pattern=pattern)


def Choice(values: Iterable[str]) -> ChoiceNode:
    """
    String restricted to a fixed set of variants.

    Usage:
        Choice(["active", "inactive", "pending"])
    """
    return ChoiceNode(values=tuple(values))


def AnyValue() -> AnyNode:
    return AnyNode()


def Optional(
    v: Any,
    default: Any = None,
    *,
    default_factory: Callable[[], Any] | None = None,
) -> OptionalNode:
    """
    Allow the field to be missing or null; either yields the default.

    Usage:
        Optional(str)                       # None when absent
        Optional(int, 0)                    # 0 when absent
        Optional([str], default_factory=list)
    """
    return OptionalNode(
        inner=to_descriptor(v), default=default, default_factory=default_factory
    )


def Default(
    v: Any,
    default: Any = None,
    *,
    default_factory: Callable[[], Any] | None = None,
) -> OptionalNode:
    """
    Allow the field to be missing, but not null.

    Usage:
        Default(int, 10)    # 10 when absent, TypeMismatch on null
    """
    return OptionalNode(
        inner=to_descriptor(v),
        default=default,
        default_factory=default_factory,
        nullable=False,
    )


def Array(items: Any) -> ArrayNode:
    return ArrayNode(items=to_descriptor(items))


def Map(values: Any) -> MapNode:
    """Object with arbitrary keys, e.g. Map(int) for {"a": 1, "b": 2}."""
    return MapNode(values=to_descriptor(values))


def Object(fields: Mapping[str, Any], strict: bool | None = None) -> ObjectNode:
    """
    Object with declared fields.

    Args:
        fields: Field name -> descriptor (or anything to_descriptor accepts)
        strict: True rejects undeclared fields, False ignores them,
                None defers to the call/context setting
    """
    return ObjectNode(
        fields={k: to_descriptor(v) for k, v in fields.items()}, strict=strict
    )


U8: Descriptor = IntNode(bits=8, signed=False)
U16: Descriptor = IntNode(bits=16, signed=False)
U32: Descriptor = IntNode(bits=32, signed=False)
U64: Descriptor = IntNode(bits=64, signed=False)
I8: Descriptor = IntNode(bits=8)
I16: Descriptor = IntNode(bits=16)
I32: Descriptor = IntNode(bits=32)
I64: Descriptor = IntNode(bits=64)
F32: Descriptor = FloatNode(bits=32)
F64: Descriptor = FloatNode(bits=64)
