"""Tests for pydantic-backed schemas."""

import pytest
from pydantic import ValidationError
from structstest import (
    Address,
    Loose,
    Note,
    Order,
    Palette,
    Signup,
    Team,
    TreeNode,
    User,
)

from jsontrail import (
    Err,
    InvalidFormat,
    MissingField,
    Ok,
    OutOfRange,
    TypeMismatch,
    UnknownField,
    deserialize,
    make_path,
    render_path,
)
from jsontrail.schema import (
    U8,
    ArrayNode,
    ChoiceNode,
    IntNode,
    ModelNode,
    Object,
    Optional,
    OptionalNode,
    StrNode,
    from_model,
    to_pydantic,
)
from jsontrail.schema.models import field_keys_at


def failure_of(result):
    assert isinstance(result, Err), f"expected Err, got {result!r}"
    return result.error


class TestFromModel:
    def test_field_nodes(self):
        node = from_model(User)
        assert isinstance(node, ModelNode)
        assert node.model is User
        assert node.fields["name"] == StrNode()
        assert node.fields["age"] == IntNode(ge=0)
        assert isinstance(node.fields["email"], OptionalNode)
        assert isinstance(node.fields["tags"], OptionalNode)
        assert node.fields["tags"].inner == ArrayNode(items=StrNode())
        assert node.required == frozenset({"name", "age"})

    def test_alias_keys(self):
        node = from_model(Address)
        assert list(node.fields) == ["street", "zipCode"]

    def test_literal_and_enum(self):
        assert from_model(Order).fields["status"].inner == ChoiceNode(("open", "closed"))
        assert from_model(Palette).fields["primary"] == ChoiceNode(("red", "green"))

    def test_extra_config(self):
        assert from_model(Order).fields["items"].items.strict is True
        assert from_model(User).strict is None
        assert from_model(Loose).keep_extra is True


class TestModelDeserialization:
    def test_success_returns_instance(self):
        result = deserialize(
            b'{"name": "Ann", "age": 30, "address": {"street": "Main", "zipCode": "02139"}}',
            User,
        )
        assert isinstance(result, Ok)
        user = result.value
        assert isinstance(user, User)
        assert user.address == Address(street="Main", zipCode="02139")
        assert user.tags == []

    def test_type_mismatch(self):
        failure = failure_of(deserialize(b'{"name": "Ann", "age": "x"}', User))
        assert failure.path == make_path("age")
        assert failure.cause == TypeMismatch(expected="integer", found="string")

    def test_field_constraint(self):
        failure = failure_of(deserialize(b'{"name": "Ann", "age": -1}', User))
        assert failure.cause == OutOfRange(value=-1, expected="integer >= 0")

    def test_missing_aliased_field(self):
        failure = failure_of(
            deserialize(b'{"name": "A", "age": 1, "address": {"street": "s"}}', User)
        )
        assert failure.path == make_path("address")
        assert failure.cause == MissingField(name="zipCode")

    def test_forbidden_extra_in_list(self):
        data = b'{"id": 1, "items": [{"sku": "a", "quantity": 1, "color": "red"}]}'
        failure = failure_of(deserialize(data, Order))
        assert render_path(failure.path) == "items[0]"
        assert failure.cause == UnknownField(name="color", expected=("sku", "quantity"))

    def test_literal_variant(self):
        failure = failure_of(deserialize(b'{"id": 1, "items": [], "status": "pending"}', Order))
        assert failure.path == make_path("status")
        assert failure.cause == InvalidFormat(
            "unknown variant `pending`, expected one of `open`, `closed`"
        )

    def test_enum_value(self):
        result = deserialize(b'{"primary": "red", "weights": {"a": 1}}', Palette)
        assert isinstance(result, Ok)
        assert result.value.weights == {"a": 1}

        failure = failure_of(deserialize(b'{"primary": "purple"}', Palette))
        assert failure.path == make_path("primary")
        assert isinstance(failure.cause, InvalidFormat)

    def test_allowed_extra_kept(self):
        result = deserialize(b'{"id": 1, "x": 2}', Loose)
        assert isinstance(result, Ok)
        assert result.value.model_extra == {"x": 2}

    def test_required_nullable(self):
        failure = failure_of(deserialize(b"{}", Note))
        assert failure.cause == MissingField(name="body")
        result = deserialize(b'{"body": null}', Note)
        assert isinstance(result, Ok)
        assert result.value.body is None
        assert result.value.count == 0

    def test_defaulted_field_rejects_null(self):
        failure = failure_of(deserialize(b'{"body": "x", "count": null}', Note))
        assert failure.path == make_path("count")
        assert failure.cause == TypeMismatch(expected="integer", found="null")


class TestPydanticValidators:
    def test_field_validator_located(self):
        data = b'{"username": "a b", "password": "p", "confirm": "p"}'
        failure = failure_of(deserialize(data, Signup))
        assert failure.path == make_path("username")
        assert isinstance(failure.cause, InvalidFormat)
        assert "username must not contain spaces" in failure.cause.detail

    def test_model_validator_at_model_path(self):
        data = b'{"username": "ann", "password": "p", "confirm": "q"}'
        failure = failure_of(deserialize(data, Signup))
        assert failure.path == ()
        assert "passwords do not match" in failure.cause.detail

    def test_nested_validator_path(self):
        data = (
            b'{"members": ['
            b'{"username": "ok", "password": "a", "confirm": "a"},'
            b'{"username": "bad name", "password": "a", "confirm": "a"}]}'
        )
        failure = failure_of(deserialize(data, Team))
        assert render_path(failure.path) == "members[1].username"


class TestRecursiveModels:
    def test_nested_level_validates(self):
        data = b'{"name": "a", "child": {"name": "b", "children": [{"name": "c"}]}}'
        result = deserialize(data, TreeNode)
        assert isinstance(result, Ok)
        assert result.value.child.children[0].name == "c"

    def test_unknown_field_lists_nested_model_fields(self):
        data = b'{"name": "a", "child": {"name": "b", "bogus": 1}}'
        failure = failure_of(deserialize(data, TreeNode))
        assert failure.path == make_path("child")
        assert failure.cause == UnknownField(
            name="bogus", expected=("name", "child", "children")
        )
        assert str(failure.record) == (
            "Invalid JSON at child: unknown field `bogus`, "
            "expected one of `name`, `child`, `children`"
        )

    def test_unknown_field_inside_list(self):
        data = b'{"name": "a", "children": [{"name": "b"}, {"name": "c", "x": 0}]}'
        failure = failure_of(deserialize(data, TreeNode))
        assert render_path(failure.path) == "children[1]"
        assert failure.cause.expected == ("name", "child", "children")


class TestFieldKeysAt:
    def test_top_level(self):
        assert field_keys_at(Address, ()) == ("street", "zipCode")

    def test_follows_optional_and_list(self):
        assert field_keys_at(User, ("address",)) == ("street", "zipCode")
        assert field_keys_at(Order, ("items", 3)) == ("sku", "quantity")

    def test_unresolvable(self):
        assert field_keys_at(User, ("name",)) is None
        assert field_keys_at(User, ("nope",)) is None
        assert field_keys_at(Order, ("items", "sku")) is None


class TestToPydantic:
    def test_simple_model(self):
        Model = to_pydantic("Account", {"name": str, "level": U8, "email": Optional(str)})
        account = Model(name="Ann", level=3)
        assert account.name == "Ann"
        assert account.email is None

    def test_width_becomes_constraint(self):
        Model = to_pydantic("Account", {"level": U8})
        with pytest.raises(ValidationError):
            Model(level=300)

    def test_strict_object_forbids_extra(self):
        Model = to_pydantic("Item", Object({"sku": str}, strict=True))
        with pytest.raises(ValidationError):
            Model(sku="a", color="red")

    def test_nested_schema(self):
        Model = to_pydantic("Outer", {"inner": {"v": int}, "tags": [str]})
        outer = Model(inner={"v": 1}, tags=["a"])
        assert outer.inner.v == 1

    def test_compiled_model_deserializes(self):
        Model = to_pydantic("Account", {"name": str, "level": U8})
        result = deserialize(b'{"name": "Ann", "level": 7}', Model)
        assert isinstance(result, Ok)
        assert result.value.level == 7

        failure = failure_of(deserialize(b'{"name": "Ann", "level": 700}', Model))
        assert failure.cause == OutOfRange(value=700, expected="integer in 0..=255")

    def test_rejects_non_object(self):
        with pytest.raises(TypeError):
            to_pydantic("Nope", [int])
