import pytest

from dfgraph.components import join, sort_rows
from dfgraph.core.descriptor import FieldSpec, NodeDescriptor, VisibleWhen, is_visible, validate_config, visible_fields
from dfgraph.core.types import FieldType, NodeKind
from dfgraph.errors import InvalidConfig


def _descriptor(*fields, defaults=None):
    return NodeDescriptor(
        id="sample",
        display_name="Sample",
        kind=NodeKind.SINGLE_INPUT,
        category="test",
        default_config=defaults or {},
        form_schema=fields,
    )


class TestNodeKind:

    @pytest.mark.parametrize("kind, minimum, maximum, outputs", [
        (NodeKind.SOURCE, 0, 0, 1),
        (NodeKind.SINGLE_INPUT, 1, 1, 1),
        (NodeKind.DOUBLE_INPUT, 2, 2, 1),
        (NodeKind.MULTI_INPUT, 1, None, 1),
        (NodeKind.SINK, 1, 1, 0),
    ])
    def test_arity(self, kind, minimum, maximum, outputs):
        assert kind.min_inputs == minimum
        assert kind.max_inputs == maximum
        assert kind.output_arity == outputs

    def test_accepts_slot(self):
        assert NodeKind.DOUBLE_INPUT.accepts_slot(1)
        assert not NodeKind.DOUBLE_INPUT.accepts_slot(2)
        assert NodeKind.MULTI_INPUT.accepts_slot(40)
        assert not NodeKind.SOURCE.accepts_slot(0)
        assert not NodeKind.SINGLE_INPUT.accepts_slot(-1)


class TestFieldChecks:

    def test_required_text(self):
        spec = FieldSpec("path", FieldType.TEXT, "Path", required=True)
        assert spec.check("a.csv") is None
        assert spec.check("   ") is not None
        assert spec.check(None) is not None

    def test_nullable_missing_value(self):
        assert FieldSpec("n", FieldType.INTEGER, "N", nullable=True).check(None) is None

    def test_explicit_none_needs_nullable(self):
        problem = FieldSpec("ascending", FieldType.BOOLEAN, "Ascending").check(None)
        assert problem == "'Ascending' must have a value"

    def test_integer_rejects_bool_and_float(self):
        spec = FieldSpec("n", FieldType.INTEGER, "N", minimum=1)
        assert spec.check(3) is None
        assert spec.check(True) is not None
        assert spec.check(2.5) is not None
        assert spec.check(0) is not None

    def test_number_bounds(self):
        spec = FieldSpec("ratio", FieldType.NUMBER, "Ratio", minimum=0, maximum=1)
        assert spec.check(0.5) is None
        assert spec.check(1.5) is not None

    def test_select_options(self):
        spec = FieldSpec("how", FieldType.SELECT, "How", options=("left", "inner"))
        assert spec.check("inner") is None
        assert "must be one of" in spec.check("sideways")

    def test_column_references(self):
        spec = FieldSpec("cols", FieldType.COLUMNS, "Columns", min_items=1)
        assert spec.check(["a", {"value": "b", "named": True}, {"value": 3, "named": False}]) is None
        assert spec.check([{"value": "x", "named": False}]) is not None
        assert spec.check([]) is not None
        assert spec.check("a") is not None

    def test_single_column(self):
        spec = FieldSpec("col", FieldType.COLUMN, "Column", required=True)
        assert spec.check({"value": "2", "named": False}) is None
        assert spec.check("") is not None


class TestVisibility:

    def setup_method(self):
        self.descriptor = _descriptor(
            FieldSpec("mode", FieldType.SELECT, "Mode", options=("simple", "custom")),
            FieldSpec("style", FieldType.SELECT, "Style", options=("a", "b"),
                      condition=VisibleWhen("mode", {"custom"})),
            FieldSpec("detail", FieldType.TEXT, "Detail", required=True,
                      condition=VisibleWhen("style", {"b"})),
            defaults={"mode": "simple"},
        )

    def test_hidden_by_controller_value(self):
        ids = [f.id for f in visible_fields(self.descriptor, {"mode": "simple", "style": "b"})]
        assert ids == ["mode"]

    def test_chain_visible(self):
        config = {"mode": "custom", "style": "b"}
        assert [f.id for f in visible_fields(self.descriptor, config)] == ["mode", "style", "detail"]
        assert is_visible(self.descriptor, "detail", config)

    def test_hidden_fields_are_not_validated(self):
        # style/detail hold invalid values but mode hides them both
        effective = validate_config(self.descriptor, {"style": "zzz", "detail": None})
        assert effective["mode"] == "simple"

    def test_visible_field_is_validated(self):
        with pytest.raises(InvalidConfig) as info:
            validate_config(self.descriptor, {"mode": "custom", "style": "b"}, node_id="n1")
        assert info.value.field == "detail"
        assert info.value.node_id == "n1"

    def test_unhashable_controller_value_hides_dependents(self):
        assert not VisibleWhen("mode", {"custom"}).matches({"mode": ["custom"]})
        assert [f.id for f in visible_fields(self.descriptor, {"mode": ["custom"]})] == ["mode"]

    def test_unhashable_controller_value_is_a_config_error(self):
        config = {"how": ["inner"], "left_keys": ["id"], "right_keys": ["id"]}
        with pytest.raises(InvalidConfig) as info:
            validate_config(join.DESCRIPTOR, config, node_id="j")
        assert info.value.field == "how"

    @pytest.mark.parametrize("module, config, field", [
        (join, {"how": None}, "how"),
        (sort_rows, {"by": ["x"], "ascending": None}, "ascending"),
    ])
    def test_explicit_none_overrides_are_rejected(self, module, config, field):
        with pytest.raises(InvalidConfig) as info:
            validate_config(module.DESCRIPTOR, config)
        assert info.value.field == field

    def test_defaults_overlay(self):
        descriptor = _descriptor(
            FieldSpec("sep", FieldType.SELECT, "Sep", options=(",", ";")),
            defaults={"sep": ","},
        )
        assert validate_config(descriptor, {})["sep"] == ","
        assert validate_config(descriptor, {"sep": ";"})["sep"] == ";"
        assert dict(descriptor.default_config) == {"sep": ","}


class TestDescriptor:

    def test_duplicate_field_ids_rejected(self):
        with pytest.raises(ValueError):
            _descriptor(
                FieldSpec("x", FieldType.TEXT, "X"),
                FieldSpec("x", FieldType.TEXT, "X again"),
            )

    def test_defaults_are_read_only(self):
        descriptor = _descriptor(defaults={"a": 1})
        with pytest.raises(TypeError):
            descriptor.default_config["a"] = 2

    def test_dotted_category_is_split(self):
        descriptor = NodeDescriptor(id="d", display_name="D", kind=NodeKind.SOURCE, category="inputs.files")
        assert (descriptor.category, descriptor.subcategory) == ("inputs", "files")

    def test_explicit_subcategory_wins(self):
        descriptor = NodeDescriptor(id="d", display_name="D", kind=NodeKind.SOURCE,
                                    category="inputs", subcategory="databases")
        assert (descriptor.category, descriptor.subcategory) == ("inputs", "databases")

    def test_output_arity_follows_kind(self):
        sink = NodeDescriptor(id="s", display_name="S", kind=NodeKind.SINK, category="outputs")
        assert sink.output_arity == 0
