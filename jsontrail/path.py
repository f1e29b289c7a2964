"""
Path segments and rendering for jsontrail error locations.

Rendered form:
- Fields joined by dots: "user.age"
- Array indices appended in brackets: "items[2].name", "[0].id"
- Field names that are empty or contain ".", "[" or "]" are quoted: a["x.y"]
- The root (empty path) renders as ROOT_PATH, "."
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from enum import Enum, auto
from typing import Union

ROOT_PATH = "."

_PLAIN_KEY = re.compile(r"[^.\[\]]+")


class PathSegmentType(Enum):
    FIELD = auto()
    INDEX = auto()


@dataclass(frozen=True, slots=True)
class PathSegment:
    """Represents a single step from a container into one of its children."""

    type: PathSegmentType
    value: Union[str, int]

    @classmethod
    def field(cls, name: str) -> "PathSegment":
        return cls(PathSegmentType.FIELD, name)

    @classmethod
    def index(cls, idx: int) -> "PathSegment":
        if idx < 0:
            raise ValueError(f"Index segment must be non-negative, got {idx}")
        return cls(PathSegmentType.INDEX, idx)

    def __str__(self) -> str:
        if self.type is PathSegmentType.INDEX:
            return f"[{self.value}]"
        return str(self.value)


Path = tuple[PathSegment, ...]


def make_path(*parts: str | int) -> Path:
    """Build a Path from plain names and indices: make_path("items", 2)."""
    return tuple(
        PathSegment.index(p) if isinstance(p, int) else PathSegment.field(p)
        for p in parts
    )


def render_path(path: Path) -> str:
    """Render a Path to its stable string form."""
    if not path:
        return ROOT_PATH

    out: list[str] = []
    for segment in path:
        if segment.type is PathSegmentType.INDEX:
            out.append(f"[{segment.value}]")
        elif not _PLAIN_KEY.fullmatch(str(segment.value)):
            out.append(f"[{json.dumps(segment.value)}]")
        else:
            if out:
                out.append(".")
            out.append(str(segment.value))
    return "".join(out)


class PathParser:
    """Parser for rendered paths, the inverse of render_path()."""

    KEY_PATTERN = re.compile(r"^[^.\[\]]+")
    INDEX_PATTERN = re.compile(r"^\[(\d+)\]")
    QUOTED_KEY_PATTERN = re.compile(r'^\[("(?:[^"\\]|\\.)*")\]')

    def parse(self, path_str: str) -> Path:
        """Parse a rendered path string into a Path."""
        if path_str == ROOT_PATH:
            return ()
        if not path_str:
            raise ValueError("Empty path")

        segments: list[PathSegment] = []
        remaining = path_str

        while remaining:
            if match := self.INDEX_PATTERN.match(remaining):
                segments.append(PathSegment.index(int(match.group(1))))
            elif match := self.QUOTED_KEY_PATTERN.match(remaining):
                segments.append(PathSegment.field(json.loads(match.group(1))))
            elif segments and remaining[0] == ".":
                match = self.KEY_PATTERN.match(remaining[1:])
                if match is None:
                    raise ValueError(f"Invalid path syntax at: {remaining}")
                segments.append(PathSegment.field(match.group(0)))
                remaining = remaining[1 + match.end() :]
                continue
            elif not segments and (match := self.KEY_PATTERN.match(remaining)):
                segments.append(PathSegment.field(match.group(0)))
            else:
                raise ValueError(f"Invalid path syntax at: {remaining}")
            remaining = remaining[match.end() :]

        return tuple(segments)


def parse_path(path_str: str) -> Path:
    """Convenience function to parse a rendered path string."""
    parser = PathParser()
    return parser.parse(path_str)
