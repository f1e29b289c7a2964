"""
Shared test models for all test files.

Consolidates the Pydantic models used across the test suite so that request
payload shapes are defined once.
"""

from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# =============================================================================
# User Domain Models
# =============================================================================


class Address(BaseModel):
    """Address with a camelCase JSON key."""

    street: str
    zip_code: str = Field(alias="zipCode")


class User(BaseModel):
    """Typical request body with nested and optional data."""

    name: str
    age: int = Field(ge=0)
    email: Optional[str] = None
    address: Address | None = None
    tags: list[str] = []


class TestData(BaseModel):
    """Minimal body: a name and an unsigned age."""

    __test__ = False

    name: str
    age: int = Field(ge=0, le=2**32 - 1)


# =============================================================================
# Order Domain Models
# =============================================================================


class StrictItem(BaseModel):
    """Line item that rejects undeclared fields."""

    model_config = ConfigDict(extra="forbid")

    sku: str
    quantity: int


class Order(BaseModel):
    id: int
    items: list[StrictItem]
    status: Literal["open", "closed"] = "open"


class Color(str, Enum):
    RED = "red"
    GREEN = "green"


class Palette(BaseModel):
    primary: Color
    weights: dict[str, int] = {}


class Loose(BaseModel):
    """Keeps undeclared fields."""

    model_config = ConfigDict(extra="allow")

    id: int


class Note(BaseModel):
    """Required but nullable body, plus a defaulted non-nullable count."""

    body: str | None
    count: int = 0


# =============================================================================
# Models With Custom Validation
# =============================================================================


class Signup(BaseModel):
    username: str
    password: str
    confirm: str

    @field_validator("username")
    @classmethod
    def no_spaces(cls, v: str) -> str:
        if " " in v:
            raise ValueError("username must not contain spaces")
        return v

    @model_validator(mode="after")
    def passwords_match(self) -> "Signup":
        if self.password != self.confirm:
            raise ValueError("passwords do not match")
        return self


class Team(BaseModel):
    members: list[Signup]


# =============================================================================
# Recursive Models
# =============================================================================


class TreeNode(BaseModel):
    """Self-referencing model; nested levels are validated by pydantic."""

    model_config = ConfigDict(extra="forbid")

    name: str
    child: Optional["TreeNode"] = None
    children: list["TreeNode"] = []
