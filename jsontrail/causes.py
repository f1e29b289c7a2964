"""
Failure causes for jsontrail deserialization.

The cause set is closed: TypeMismatch, MissingField, UnknownField, OutOfRange
and InvalidFormat. A Failure pairs one cause with the Path where it occurred.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

from .path import Path

if TYPE_CHECKING:
    from .translator import ErrorRecord


@dataclass(frozen=True, slots=True)
class TypeMismatch:
    """The JSON node has the wrong kind for the expected schema node."""

    expected: str
    found: str


@dataclass(frozen=True, slots=True)
class MissingField:
    """A required field is absent from the containing object."""

    name: str


@dataclass(frozen=True, slots=True)
class UnknownField:
    """
    An undeclared field was found in strict mode.

    expected lists the declared field names, or is None when they are not known.
    """

    name: str
    expected: tuple[str, ...] | None = ()


@dataclass(frozen=True, slots=True)
class OutOfRange:
    """A number does not fit the declared width or bounds."""

    value: int | float
    expected: str


@dataclass(frozen=True, slots=True)
class InvalidFormat:
    """Structurally broken input, or a value violating a format constraint."""

    detail: str


CauseKind = Union[TypeMismatch, MissingField, UnknownField, OutOfRange, InvalidFormat]


@dataclass(frozen=True, slots=True)
class Failure:
    """Location and cause of the first mismatch found during descent."""

    path: Path
    cause: CauseKind

    @property
    def record(self) -> ErrorRecord:
        from .translator import translate

        return translate(self.path, self.cause)
