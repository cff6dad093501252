"""Tests for projection, remainder and operation synthesis."""

from partialgen.core import ir
from partialgen.core.engine import project


class TestSynthesizeProjection:
    def test_included_and_optional_fields(self, user_record: ir.SourceRecord):
        output = project(user_record, ir.Directive(omit=("id",), optional=("email",)))
        projection = output.projection
        assert projection.name == "PartialUser"
        assert [f.name for f in projection.fields] == ["name", "email", "tags"]
        assert [f.type_expr for f in projection.fields] == ["str", "str | None", "list[str]"]

    def test_annotations_preserved(self, user_record: ir.SourceRecord):
        output = project(user_record, ir.Directive(optional=("email",)))
        email = output.projection.fields[2]
        assert email.annotations == ("'pii'",)
        assert email.container == ir.PresenceContainer.OPTIONAL

    def test_capabilities_forwarded_in_order(self, point_record: ir.SourceRecord):
        output = project(point_record, ir.Directive(capabilities=("frozen", "Base", "eq")))
        assert output.projection.capabilities == ("frozen", "Base", "eq")

    def test_doc_mentions_omitted_fields(self, user_record: ir.SourceRecord):
        output = project(user_record, ir.Directive(omit=("id", "tags")))
        assert output.projection.doc == "A partial version of `User` omitting the fields: id, tags"


class TestSynthesizeRemainder:
    def test_remainder_holds_omitted_fields(self, user_record: ir.SourceRecord):
        output = project(
            user_record, ir.Directive(target_name="Form", omit=("tags", "id"), capabilities=("eq",))
        )
        remainder = output.remainder
        assert remainder is not None
        assert remainder.name == "FormOmitted"
        assert [f.name for f in remainder.fields] == ["id", "tags"]
        assert remainder.capabilities == ("eq",)
        assert output.remainder_type == "FormOmitted"

    def test_no_remainder_without_omitted_fields(self, point_record: ir.SourceRecord):
        output = project(point_record, ir.Directive())
        assert output.remainder is None
        assert output.remainder_type == ir.UNIT_TYPE


class TestSynthesizeOperations:
    def test_operation_owners_and_receivers(self, user_record: ir.SourceRecord):
        ops = project(user_record, ir.Directive(omit=("id",))).operations
        assert [(op.name, op.owner, op.receiver) for op in ops.all()] == [
            ("to_user", "PartialUser", ir.Receiver.CONSUMED),
            ("to_user_cloned", "PartialUser", ir.Receiver.BORROWED),
            ("from_user", "PartialUser", ir.Receiver.CLASS),
            ("from_user_with_omitted", "PartialUser", ir.Receiver.CLASS),
            ("into_partial_user_with_omitted", "User", ir.Receiver.CONSUMED),
        ]

    def test_reconstruction_parameters(self, user_record: ir.SourceRecord):
        """Omitted values come first, then optional overrides, each in declaration order."""
        ops = project(
            user_record, ir.Directive(omit=("tags", "id"), optional=("email", "name"))
        ).operations
        params = ops.to_full.parameters
        assert [(p.name, p.role) for p in params] == [
            ("id", ir.ParameterRole.OMITTED),
            ("tags", ir.ParameterRole.OMITTED),
            ("name", ir.ParameterRole.OVERRIDE),
            ("email", ir.ParameterRole.OVERRIDE),
        ]
        assert params[2].type == "str | None"
        assert params[2].default == "None"

    def test_reconstruction_bindings_follow_declaration_order(self, user_record: ir.SourceRecord):
        ops = project(user_record, ir.Directive(omit=("id",), optional=("email",))).operations
        assert [(b.field, b.source) for b in ops.to_full.bindings] == [
            ("id", ir.ValueSource.PARAMETER),
            ("name", ir.ValueSource.SELF),
            ("email", ir.ValueSource.SELF_OR_PARAMETER),
            ("tags", ir.ValueSource.SELF),
        ]
        assert not any(b.duplicate for b in ops.to_full.bindings)

    def test_cloned_reconstruction_duplicates_kept_fields(self, user_record: ir.SourceRecord):
        ops = project(user_record, ir.Directive(omit=("id",), optional=("email",))).operations
        duplicated = {b.field: b.duplicate for b in ops.to_full_cloned.bindings}
        assert duplicated == {"id": False, "name": True, "email": True, "tags": True}
        assert [(r.type, r.capability) for r in ops.to_full_cloned.requires] == [
            ("str", "duplicable"),
            ("list[str]", "duplicable"),
        ]

    def test_split_routes_fields(self, user_record: ir.SourceRecord):
        ops = project(user_record, ir.Directive(omit=("id",), optional=("email",))).operations
        split = ops.from_full_with_remainder
        assert split.returns == "tuple[PartialUser, PartialUserOmitted]"
        assert [(b.field, b.target) for b in split.bindings] == [
            ("id", ir.BindTarget.REMAINDER),
            ("name", ir.BindTarget.PROJECTION),
            ("email", ir.BindTarget.PROJECTION),
            ("tags", ir.BindTarget.PROJECTION),
        ]
        assert [b.field for b in ops.from_full.bindings] == ["name", "email", "tags"]

    def test_split_without_omitted_returns_unit(self, point_record: ir.SourceRecord):
        ops = project(point_record, ir.Directive()).operations
        assert ops.from_full_with_remainder.returns == "tuple[PartialPoint, None]"
        assert ops.to_full.parameters == ()

    def test_mirror_delegates_to_split(self, point_record: ir.SourceRecord):
        ops = project(point_record, ir.Directive()).operations
        mirror = ops.into_projection_with_remainder
        assert mirror.delegate == "from_point_with_omitted"
        assert ops.owned_by("Point") == [mirror]
