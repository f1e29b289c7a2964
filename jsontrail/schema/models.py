"""
Pydantic interop for jsontrail schemas.

Provides from_model() (model class -> descriptor) and to_pydantic()
(object descriptor -> model class).
"""

from __future__ import annotations

import types
from enum import Enum
from typing import Annotated, Any, Literal, Union, get_args, get_origin
from typing import Optional as TypingOptional

import annotated_types
from pydantic import BaseModel, ConfigDict, Field, create_model
from pydantic.fields import FieldInfo

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
    to_descriptor,
)

_NONE_TYPE = type(None)


def from_model(model: type[BaseModel]) -> ModelNode:
    """
    Derive a descriptor from a pydantic model class.

    Field keys are the names the model validates by (alias if set). Fields with
    defaults become optional; `extra="forbid"` makes the object strict.

    Usage:
        class User(BaseModel):
            name: str
            age: int = 0

        node = from_model(User)
    """
    return _from_model(model, frozenset())


def _from_model(model: type[BaseModel], seen: frozenset[type]) -> ModelNode:
    seen = seen | {model}
    fields: dict[str, Descriptor] = {}
    required: set[str] = set()

    for name, info in model.model_fields.items():
        key = _json_key(name, info)
        node = _annotation_to_node(info.annotation, list(info.metadata), seen)
        if info.is_required():
            # `x: int | None` without a default: must be present, may be null
            required.add(key)
        elif not isinstance(node, OptionalNode):
            # Defaults are filled in by pydantic, so only omission matters here
            node = OptionalNode(inner=node, nullable=False)
        fields[key] = node

    extra = model.model_config.get("extra")
    return ModelNode(
        model=model,
        fields=fields,
        required=frozenset(required),
        strict=True if extra == "forbid" else None,
        keep_extra=extra == "allow",
    )


def _json_key(name: str, info: FieldInfo) -> str:
    if isinstance(info.validation_alias, str):
        return info.validation_alias
    return info.alias or name


def _annotation_to_node(
    annotation: Any, metadata: list[Any], seen: frozenset[type]
) -> Descriptor:
    """Map a type annotation (plus constraint metadata) to a descriptor."""
    origin = get_origin(annotation)
    args = get_args(annotation)

    if annotation is Any or annotation is None:
        return AnyNode()

    if origin is Annotated:
        return _annotation_to_node(args[0], metadata + list(args[1:]), seen)

    if origin is Union or origin is types.UnionType:
        members = [a for a in args if a is not _NONE_TYPE]
        if len(members) == 1 and len(args) == 2:
            return OptionalNode(inner=_annotation_to_node(members[0], metadata, seen))
        return AnyNode()

    if origin is Literal:
        if args and all(isinstance(a, str) for a in args):
            return ChoiceNode(values=tuple(args))
        return AnyNode()

    if origin is list:
        item = args[0] if args else Any
        return ArrayNode(items=_annotation_to_node(item, [], seen))

    if origin is dict:
        if len(args) == 2 and args[0] is str:
            return MapNode(values=_annotation_to_node(args[1], [], seen))
        return AnyNode()

    if annotation is bool:
        return BoolNode()
    if annotation is int:
        ge, le = _int_bounds(metadata)
        return IntNode(ge=ge, le=le)
    if annotation is float:
        return FloatNode(
            ge=_first(metadata, annotated_types.Ge, "ge"),
            le=_first(metadata, annotated_types.Le, "le"),
        )
    if annotation is str:
        return StrNode()

    if isinstance(annotation, type):
        if issubclass(annotation, Enum):
            values = [m.value for m in annotation]
            if values and all(isinstance(v, str) for v in values):
                return ChoiceNode(values=tuple(values))
            return AnyNode()
        if issubclass(annotation, BaseModel):
            if annotation in seen:
                # Recursive model: the nested level is left to pydantic
                return AnyNode()
            return _from_model(annotation, seen)

    return AnyNode()


def _first(metadata: list[Any], kind: type, attr: str) -> Any:
    for item in metadata:
        if isinstance(item, kind):
            return getattr(item, attr)
    return None


def _int_bounds(metadata: list[Any]) -> tuple[int | None, int | None]:
    ge = _first(metadata, annotated_types.Ge, "ge")
    gt = _first(metadata, annotated_types.Gt, "gt")
    le = _first(metadata, annotated_types.Le, "le")
    lt = _first(metadata, annotated_types.Lt, "lt")
    if ge is None and isinstance(gt, int):
        ge = gt + 1
    if le is None and isinstance(lt, int):
        le = lt - 1
    return ge, le


def to_pydantic(name: str, schema: Any) -> type[BaseModel]:
    """
    Compile an object schema to a Pydantic model.

    Args:
        name: Name of the generated model class
        schema: Object descriptor or dict-like schema definition

    Returns:
        A Pydantic BaseModel subclass

    Usage:
        User = to_pydantic("User", {
            "name": str,
            "email": Optional(str),
        })
        user = User(name="Alice")
    """
    node = to_descriptor(schema)
    if isinstance(node, ModelNode):
        return node.model
    if not isinstance(node, ObjectNode):
        raise TypeError("Schema must describe an object")

    fields: dict[str, Any] = {}
    for key, v in node.fields.items():
        fields[key] = _extract_pydantic_field(f"{name}_{key}", v)

    config = ConfigDict(extra="forbid") if node.strict else None
    return create_model(name, __config__=config, **fields)


def _extract_pydantic_field(name: str, v: Descriptor) -> tuple[Any, Any]:
    """Extract Pydantic field type and default from a descriptor."""
    match v:
        case OptionalNode(inner=inner, nullable=nullable):
            field_type, _ = _extract_pydantic_field(name, inner)
            if nullable:
                field_type = TypingOptional[field_type]
            if v.default_factory is not None:
                return (field_type, Field(default_factory=v.default_factory))
            return (field_type, v.default)

    return (_pydantic_type(name, v), ...)


def _pydantic_type(name: str, v: Descriptor) -> Any:
    match v:
        case BoolNode():
            return bool
        case IntNode():
            lower, upper = v.bounds
            if lower is None and upper is None:
                return int
            return Annotated[int, Field(ge=lower, le=upper)]
        case FloatNode(ge=ge, le=le):
            if ge is None and le is None:
                return float
            return Annotated[float, Field(ge=ge, le=le)]
        case StrNode(pattern=pattern):
            if pattern is None:
                return str
            return Annotated[str, Field(pattern=f"^(?:{pattern})$")]
        case ChoiceNode(values=values):
            return Literal[values]  # type: ignore[valid-type]
        case ArrayNode(items=items):
            return list[_pydantic_type(f"{name}_item", items)]  # type: ignore[misc]
        case MapNode(values=values):
            return dict[str, _pydantic_type(f"{name}_value", values)]  # type: ignore[misc]
        case ObjectNode():
            return to_pydantic(name, v)
        case ModelNode(model=model):
            return model
        case OptionalNode():
            field_type, _ = _extract_pydantic_field(name, v)
            return field_type

    return Any


def field_keys_at(
    model: type[BaseModel], loc: tuple[str | int, ...]
) -> tuple[str, ...] | None:
    """
    JSON field names of the model found by following a pydantic error `loc`.

    Returns None when loc does not lead to a model (e.g. it passes through an
    annotation jsontrail cannot follow).
    """
    current: Any = model
    for part in loc:
        current = _unwrap_optional(current)
        origin = get_origin(current)
        if isinstance(part, int):
            if origin is not list:
                return None
            current = get_args(current)[0] if get_args(current) else Any
        elif isinstance(current, type) and issubclass(current, BaseModel):
            for name, info in current.model_fields.items():
                if part in (name, _json_key(name, info)):
                    current = info.annotation
                    break
            else:
                return None
        elif origin is dict and len(get_args(current)) == 2:
            current = get_args(current)[1]
        else:
            return None

    current = _unwrap_optional(current)
    if isinstance(current, type) and issubclass(current, BaseModel):
        return tuple(_json_key(n, i) for n, i in current.model_fields.items())
    return None


def _unwrap_optional(annotation: Any) -> Any:
    while True:
        origin = get_origin(annotation)
        if origin is Annotated:
            annotation = get_args(annotation)[0]
            continue
        if origin is Union or origin is types.UnionType:
            members = [a for a in get_args(annotation) if a is not _NONE_TYPE]
            if len(members) == 1:
                annotation = members[0]
                continue
        return annotation
