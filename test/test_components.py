import pytest

from dfgraph.components import concat, csv_input, csv_output, deduplicate, filter_rows, join, select_columns, sort_rows
from dfgraph.components.base import column_list
from dfgraph.core.contract import CodeWriter
from dfgraph.core.descriptor import validate_config
from dfgraph.errors import InvalidConfig, UnsupportedConfigValue


def emit(module, contract, config, inputs=("df",), out="out"):
    effective = validate_config(module.DESCRIPTOR, config)
    contract.check(effective)
    return contract.emit(effective, list(inputs), out)


class TestCodeWriter:

    def test_fragment_carries_lines_and_names(self):
        frag = CodeWriter().comment("note").writeln("out = df").fragment(reads=["df"], writes=["out"])
        assert frag.lines == ("# note", "out = df")
        assert frag.text() == "# note\nout = df"
        assert (frag.reads, frag.writes, frag.calls) == ({"df"}, {"out"}, frozenset())


class TestColumnLiterals:

    def test_names_and_positions(self):
        refs = ["a", {"value": "b c", "named": True}, {"value": "3", "named": False}]
        assert column_list(refs) == "['a', 'b c', 3]"


class TestCsvInput:

    def test_defaults(self):
        frag = emit(csv_input, csv_input.CsvInput(), {"file_path": "in.csv"}, inputs=())
        assert frag.lines == ("out = pd.read_csv('in.csv', sep=',', encoding='utf-8')",)
        assert frag.writes == {"out"}
        assert frag.reads == frozenset()

    def test_nrows(self):
        frag = emit(csv_input, csv_input.CsvInput(), {"file_path": "in.csv", "sep": ";", "nrows": 10}, inputs=())
        assert frag.text() == "out = pd.read_csv('in.csv', sep=';', encoding='utf-8', nrows=10)"

    def test_nrows_may_be_cleared(self):
        frag = emit(csv_input, csv_input.CsvInput(), {"file_path": "in.csv", "nrows": None}, inputs=())
        assert "nrows" not in frag.text()

    def test_path_is_required(self):
        with pytest.raises(InvalidConfig) as info:
            emit(csv_input, csv_input.CsvInput(), {}, inputs=())
        assert info.value.field == "file_path"


class TestFilterRows:

    def test_string_comparison(self):
        frag = emit(filter_rows, filter_rows.FilterRows(), {"column": "status", "value": "paid"})
        assert frag.text() == "out = df[df['status'] == 'paid']"
        assert frag.reads == {"df"}

    def test_number_comparison(self):
        config = {"column": "amount", "operator": ">=", "value": "10.5", "value_type": "number"}
        frag = emit(filter_rows, filter_rows.FilterRows(), config)
        assert frag.text() == "out = df[df['amount'] >= 10.5]"

    def test_integer_literal(self):
        config = {"column": "qty", "operator": "<", "value": "3", "value_type": "number"}
        assert emit(filter_rows, filter_rows.FilterRows(), config).text() == "out = df[df['qty'] < 3]"

    @pytest.mark.parametrize("value", ["ten", "nan", "inf"])
    def test_number_rejects_non_numbers(self, value):
        config = {"column": "amount", "operator": ">", "value": value, "value_type": "number"}
        with pytest.raises(InvalidConfig) as info:
            emit(filter_rows, filter_rows.FilterRows(), config)
        assert info.value.field == "value"

    def test_contains(self):
        config = {"column": "name", "operator": "contains", "value": "ab"}
        frag = emit(filter_rows, filter_rows.FilterRows(), config)
        assert frag.text() == "out = df[df['name'].astype(str).str.contains('ab', regex=False, na=False)]"

    def test_null_check_needs_no_value(self):
        config = {"column": {"value": 0, "named": False}, "operator": "isnull"}
        assert emit(filter_rows, filter_rows.FilterRows(), config).text() == "out = df[df[0].isna()]"

    def test_value_type_ignored_for_contains(self):
        # value_type is hidden, so a stale 'number' does not force a numeric literal
        config = {"column": "c", "operator": "contains", "value": "x", "value_type": "number"}
        assert "'x'" in emit(filter_rows, filter_rows.FilterRows(), config).text()


class TestSelectColumns:

    def test_keep(self):
        frag = emit(select_columns, select_columns.SelectColumns(), {"columns": ["a", "b"]})
        assert frag.text() == "out = df[['a', 'b']]"

    def test_drop(self):
        frag = emit(select_columns, select_columns.SelectColumns(), {"columns": ["a"], "mode": "drop"})
        assert frag.text() == "out = df.drop(columns=['a'])"

    def test_empty_column_list(self):
        with pytest.raises(InvalidConfig):
            emit(select_columns, select_columns.SelectColumns(), {"columns": []})

    def test_unknown_mode_at_emit(self):
        with pytest.raises(UnsupportedConfigValue):
            select_columns.SelectColumns().emit({"columns": ["a"], "mode": "rename"}, ["df"], "out")


class TestSortRows:

    def test_sort(self):
        frag = emit(sort_rows, sort_rows.SortRows(), {"by": ["date"], "ascending": False})
        assert frag.text() == "out = df.sort_values(by=['date'], ascending=False, na_position='last')"


class TestDeduplicate:

    def test_all_columns(self):
        frag = emit(deduplicate, deduplicate.Deduplicate(), {})
        assert frag.text() == "out = df.drop_duplicates(keep='first')"

    def test_subset_and_keep_none(self):
        config = {"compare": "columns", "subset": ["id"], "keep": "none"}
        frag = emit(deduplicate, deduplicate.Deduplicate(), config)
        assert frag.text() == "out = df.drop_duplicates(subset=['id'], keep=False)"

    def test_hidden_subset_is_ignored(self):
        frag = emit(deduplicate, deduplicate.Deduplicate(), {"subset": []})
        assert "subset" not in frag.text()


class TestJoin:

    KEYS = {"left_keys": ["id"], "right_keys": ["cust_id"]}

    def test_left_join_default(self):
        frag = emit(join, join.Join(), dict(self.KEYS), inputs=("a", "b"))
        assert frag.lines == (
            "# Join a and b",
            "out = pd.merge(a, b, how='left', left_on=['id'], right_on=['cust_id'])",
        )
        assert frag.calls == frozenset()
        assert join.Join().imports(validate_config(join.DESCRIPTOR, self.KEYS)) == ["import pandas as pd"]

    def test_guard_raise(self):
        config = dict(self.KEYS, how="inner", cartesian_policy="raise")
        effective = validate_config(join.DESCRIPTOR, config)
        contract = join.Join()
        frag = contract.emit(effective, ["a", "b"], "out")
        assert frag.lines[1] == "check_cartesian_product(a, b, ['id'], ['cust_id'], 'raise')"
        assert frag.calls == {"check_cartesian_product"}
        assert contract.imports(effective) == ["import pandas as pd", "import warnings"]
        assert [h.name for h in contract.helper_functions(effective)] == ["check_cartesian_product"]

    def test_anti_right_swaps_sides(self):
        config = dict(self.KEYS, how="anti-right")
        frag = emit(join, join.Join(), config, inputs=("a", "b"))
        assert frag.lines[-1] == "out = anti_join(b, a, ['cust_id'], ['id'])"
        assert frag.calls == {"anti_join"}

    def test_anti_left_with_warn_guard(self):
        config = dict(self.KEYS, how="anti-left", cartesian_policy="warn")
        effective = validate_config(join.DESCRIPTOR, config)
        names = [h.name for h in join.Join().helper_functions(effective)]
        assert names == ["check_cartesian_product", "anti_join"]

    def test_cross_ignores_keys_and_policy(self):
        config = {"how": "cross", "cartesian_policy": "raise", "left_keys": []}
        effective = validate_config(join.DESCRIPTOR, config)
        contract = join.Join()
        contract.check(effective)
        frag = contract.emit(effective, ["a", "b"], "out")
        assert frag.lines == ("# Join a and b", "out = a.merge(b, how='cross')")
        assert contract.helper_functions(effective) == []
        assert contract.imports(effective) == ["import pandas as pd"]

    def test_key_count_mismatch(self):
        config = {"left_keys": ["a", "b"], "right_keys": ["c"]}
        with pytest.raises(InvalidConfig) as info:
            emit(join, join.Join(), config, inputs=("a", "b"))
        assert info.value.field == "right_keys"

    def test_missing_keys(self):
        with pytest.raises(InvalidConfig) as info:
            emit(join, join.Join(), {"how": "inner"}, inputs=("a", "b"))
        assert info.value.field == "left_keys"


class TestConcat:

    def test_many_inputs(self):
        frag = emit(concat, concat.Concat(), {}, inputs=("a", "b", "c"))
        assert frag.text() == "out = pd.concat([a, b, c], join='outer', ignore_index=True)"
        assert frag.reads == {"a", "b", "c"}


class TestCsvOutput:

    def test_write(self):
        contract = csv_output.CsvOutput()
        frag = emit(csv_output, contract, {"file_path": "out.csv"}, out=None)
        assert frag.text() == "df.to_csv('out.csv', sep=',', index=False, mode='w')"
        assert frag.writes == frozenset()
        assert contract.imports({}) == []
