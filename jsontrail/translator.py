"""
Error translation for jsontrail.

Turns a (Path, CauseKind) pair into a stable, user-facing ErrorRecord.
Messages are fixed templates; clients may assert on them verbatim.
"""

from __future__ import annotations

from dataclasses import dataclass

from .causes import (
    CauseKind,
    InvalidFormat,
    MissingField,
    OutOfRange,
    TypeMismatch,
    UnknownField,
)
from .path import Path, render_path


@dataclass(frozen=True, slots=True)
class ErrorRecord:
    """Rendered failure location plus human-readable message."""

    path: str
    message: str

    def __str__(self) -> str:
        return f"Invalid JSON at {self.path}: {self.message}"

    def to_dict(self) -> dict[str, str]:
        return {"path": self.path, "message": self.message}


def _one_of(names: tuple[str, ...]) -> str:
    if not names:
        return "there are no fields"
    if len(names) == 1:
        return f"expected `{names[0]}`"
    return "expected one of " + ", ".join(f"`{n}`" for n in names)


def describe(cause: CauseKind) -> str:
    """Render the message template for a single cause."""
    match cause:
        case TypeMismatch(expected=expected, found=found):
            return f"invalid type: {found}, expected {expected}"
        case MissingField(name=name):
            return f"missing field `{name}`"
        case UnknownField(name=name, expected=None):
            return f"unknown field `{name}`"
        case UnknownField(name=name, expected=expected):
            return f"unknown field `{name}`, {_one_of(expected)}"
        case OutOfRange(value=value, expected=expected):
            return f"invalid value: `{value}`, expected {expected}"
        case InvalidFormat(detail=detail):
            return detail

    return f"invalid input: {cause!r}"


def translate(path: Path, cause: CauseKind) -> ErrorRecord:
    """
    Translate a failure location and cause into an ErrorRecord.

    Usage:
        translate(make_path("items", 2), TypeMismatch("integer", "string"))
        # ErrorRecord(path="items[2]", message="invalid type: string, expected integer")
    """
    return ErrorRecord(path=render_path(path), message=describe(cause))
