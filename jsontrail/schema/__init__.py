"""
jsontrail schema descriptors.

Usage:
    from jsontrail.schema import Optional, Integer, U8, Choice, Object

    schema = {
        "name": str,
        "age": U8,
        "email": Optional(str),
        "role": Choice(["admin", "member"]),
        "tags": [str],
    }
"""

from .core import (
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
from .fields import (
    F32,
    F64,
    I8,
    I16,
    I32,
    I64,
    U8,
    U16,
    U32,
    U64,
    AnyValue,
    Array,
    Boolean,
    Choice,
    Default,
    Integer,
    Map,
    Number,
    Object,
    Optional,
    String,
)
from .models import from_model, to_pydantic

__all__ = [
    # Nodes
    "Descriptor",
    "BoolNode",
    "IntNode",
    "FloatNode",
    "StrNode",
    "ChoiceNode",
    "AnyNode",
    "OptionalNode",
    "ArrayNode",
    "MapNode",
    "ObjectNode",
    "ModelNode",
    "to_descriptor",
    "required_fields",
    # Factories
    "Boolean",
    "Integer",
    "Number",
    "String",
    "Choice",
    "AnyValue",
    "Optional",
    "Default",
    "Array",
    "Map",
    "Object",
    # Widths
    "U8",
    "U16",
    "U32",
    "U64",
    "I8",
    "I16",
    "I32",
    "I64",
    "F32",
    "F64",
    # Pydantic
    "from_model",
    "to_pydantic",
]
