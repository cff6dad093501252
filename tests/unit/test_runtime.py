"""Tests for runtime projections of live classes."""

import copy
from dataclasses import FrozenInstanceError, dataclass, field, fields
from enum import Enum
from typing import NamedTuple

import pytest
from pydantic import BaseModel

from partialgen import materialize, partial, projections_of
from partialgen.core import ir
from partialgen.core.errors import (
    ConflictingClassificationError,
    DirectiveSyntaxError,
    UnknownFieldError,
    UnsupportedShapeError,
)
from partialgen.runtime import record_from_class


class Serializable:
    def to_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@partial("omit(id), optional(email)")
@dataclass
class User:
    id: int
    name: str
    email: str


@partial()
@dataclass
class Point:
    x: float
    y: float


@partial('"Draft", omit(id, tags), optional(title)', '"Summary", derive(frozen, Serializable)')
@dataclass
class Article:
    id: int
    title: str
    body: str
    tags: list[str]


class TestRecordFromClass:
    def test_dataclass(self):
        record = record_from_class(Article)
        assert record.shape == ir.RecordShape.NAMED
        assert [(f.name, f.type) for f in record.fields] == [
            ("id", "int"),
            ("title", "str"),
            ("body", "str"),
            ("tags", "list[str]"),
        ]

    def test_pydantic_model(self):
        class Account(BaseModel):
            id: int
            owner: str | None

        record = record_from_class(Account)
        assert [(f.name, f.type) for f in record.fields] == [("id", "int"), ("owner", "str | None")]

    def test_named_tuple_is_positional(self):
        class Pair(NamedTuple):
            left: int
            right: int

        record = record_from_class(Pair)
        assert record.shape == ir.RecordShape.POSITIONAL
        assert all(f.name is None for f in record.fields)

    def test_enum_is_variant(self):
        class Color(Enum):
            RED = 1

        assert record_from_class(Color).shape == ir.RecordShape.VARIANT

    def test_class_without_fields_is_unit(self):
        class Marker:
            pass

        assert record_from_class(Marker).shape == ir.RecordShape.UNIT


class TestUserScenario:
    """User{id, name, email} with omit(id), optional(email)."""

    def test_generated_classes_exported(self):
        assert set(projections_of(User)) == {"PartialUser", "PartialUserOmitted"}
        assert PartialUser is projections_of(User)["PartialUser"]  # noqa: F821

    def test_projection_fields(self):
        assert [f.name for f in fields(PartialUser)] == ["name", "email"]  # noqa: F821
        assert [f.name for f in fields(PartialUserOmitted)] == ["id"]  # noqa: F821

    def test_split_then_reconstruct(self):
        user = User(id=7, name="Ada", email="ada@example.com")
        projection, remainder = user.into_partial_user_with_omitted()
        assert (projection.name, projection.email) == ("Ada", "ada@example.com")
        assert remainder.id == 7
        assert projection.to_user(remainder.id) == user

    def test_absent_optional_uses_override(self):
        projection = PartialUser(name="Bob", email=None)  # noqa: F821
        assert projection.to_user(2, email="bob@example.com") == User(2, "Bob", "bob@example.com")

    def test_present_optional_wins_over_override(self):
        projection = PartialUser(name="Bob", email="own@example.com")  # noqa: F821
        assert projection.to_user(2, email="other@example.com").email == "own@example.com"

    def test_absent_optional_without_override_fails(self):
        projection = PartialUser(name="Bob", email=None)  # noqa: F821
        with pytest.raises(ValueError, match="optional field 'email'"):
            projection.to_user(2)

    def test_from_user_drops_omitted(self):
        projection = PartialUser.from_user(User(1, "Ada", "a@x"))  # noqa: F821
        assert projection == PartialUser(name="Ada", email="a@x")  # noqa: F821


class TestPointScenario:
    """Point{x, y} with no directive."""

    def test_default_projection(self):
        assert set(projections_of(Point)) == {"PartialPoint"}

    def test_round_trip(self):
        point = Point(1.5, -2.0)
        projection, remainder = point.into_partial_point_with_omitted()
        assert remainder is None
        assert projection.to_point() == point
        assert PartialPoint.from_point(point).to_point_cloned() == point  # noqa: F821


class TestMultipleDirectives:
    def test_each_directive_gets_its_own_types(self):
        assert set(projections_of(Article)) == {"Draft", "DraftOmitted", "Summary"}

    def test_draft_round_trip_preserves_declaration_order(self):
        article = Article(1, "Title", "Body", ["a", "b"])
        draft, rest = article.into_draft_with_omitted()
        rebuilt = draft.to_article(rest.id, rest.tags)
        assert rebuilt == article
        assert list(vars(rebuilt)) == ["id", "title", "body", "tags"]

    def test_cloned_reconstruction_deep_copies(self):
        summary = Summary.from_article(Article(1, "T", "B", ["x"]))  # noqa: F821
        rebuilt = summary.to_article_cloned()
        assert rebuilt.tags == summary.tags
        assert rebuilt.tags is not summary.tags
        assert copy.deepcopy(summary) == summary

    def test_capabilities_applied(self):
        summary = Summary(id=1, title="T", body="B", tags=[])  # noqa: F821
        assert isinstance(summary, Serializable)
        assert summary.to_dict()["title"] == "T"
        with pytest.raises(FrozenInstanceError):
            summary.title = "changed"


class TestMaterializeErrors:
    def test_unknown_field(self):
        @dataclass
        class Thing:
            a: int

        with pytest.raises(UnknownFieldError):
            materialize(Thing, "omit(b)")

    def test_conflict(self):
        @dataclass
        class Thing:
            a: int
            b: int

        with pytest.raises(ConflictingClassificationError, match="'a', 'b'"):
            materialize(Thing, "omit(a, b), optional(b, a)")

    def test_syntax_error(self):
        @dataclass
        class Thing:
            a: int

        with pytest.raises(DirectiveSyntaxError):
            materialize(Thing, "omit(a")

    def test_unsupported_shape(self):
        class Pair(NamedTuple):
            left: int

        with pytest.raises(UnsupportedShapeError):
            materialize(Pair)

    def test_init_false_field_rejected(self):
        """The constructor cannot take the field back, so reconstruction is impossible."""

        @dataclass
        class Rec:
            a: int
            b: list = field(default_factory=list, init=False)

        with pytest.raises(UnsupportedShapeError, match="init=False") as exc_info:
            materialize(Rec, "omit(a)")
        assert exc_info.value.context is not None
        assert exc_info.value.context.record == "Rec"

    def test_local_class_without_export(self):
        @dataclass
        class Local:
            a: int
            b: str

        Local = partial("omit(b)", export=False)(Local)
        generated = projections_of(Local)
        projection = generated["PartialLocal"](a=1)
        assert projection.to_local("x") == Local(1, "x")
