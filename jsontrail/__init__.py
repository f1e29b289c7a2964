from .causes import (
    CauseKind,
    Failure,
    InvalidFormat,
    MissingField,
    OutOfRange,
    TypeMismatch,
    UnknownField,
)
from .context import deserialization_context, is_strict
from .deserializer import PathTrackingDeserializer, deserialize, deserialize_value
from .extract import Json, JsonExtractionError
from .path import ROOT_PATH, PathSegment, make_path, parse_path, render_path
from .translator import ErrorRecord, translate
from .types import Err, Ok
from .value import JsonKind, JsonSyntaxError, JsonValue, parse_json

__all__ = [
    "deserialize",
    "deserialize_value",
    "PathTrackingDeserializer",
    "translate",
    "ErrorRecord",
    "Failure",
    "CauseKind",
    "TypeMismatch",
    "MissingField",
    "UnknownField",
    "OutOfRange",
    "InvalidFormat",
    "PathSegment",
    "ROOT_PATH",
    "make_path",
    "render_path",
    "parse_path",
    "JsonValue",
    "JsonKind",
    "JsonSyntaxError",
    "parse_json",
    "deserialization_context",
    "is_strict",
    "Json",
    "JsonExtractionError",
    "Ok",
    "Err",
]
