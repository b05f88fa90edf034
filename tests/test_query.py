from __future__ import annotations

import pytest

from dynastore.cursor import CursorCodec
from dynastore.errors import DdbValidation, InvalidCursor, UnsupportedFilter
from dynastore.filters import Clause, exact_filters, freeze_filter_specs, ord_filters
from dynastore.keys import CompositeKey, KeySchema, SimpleKey
from dynastore.query import CompiledQuery, Query, compile_query

CODEC = CursorCodec(KeySchema(partition_key="id"))
SPECS = freeze_filter_specs({"name": exact_filters("name"), "age": ord_filters("age")})


def test_empty_or_missing_filter_compiles_to_unfiltered_scan():
    for query in (None, {}, Query(), {"filter": {}}, {"filter": {"age": {}}}, {"filter": {"age": None}}):
        compiled = compile_query(query, SPECS, codec=CODEC)

        assert compiled.filter_expression is None
        assert compiled.is_filtered is False
        assert compiled.scan_kwargs() == {}


def test_range_on_one_field_is_a_conjunction_with_distinct_value_placeholders():
    compiled = compile_query({"filter": {"age": {"gte": 40, "lt": 60}}}, SPECS, codec=CODEC)

    assert compiled.filter_expression == "#age < :age_lt and #age >= :age_gte"
    assert compiled.expression_attribute_names == {"#age": "age"}
    assert compiled.expression_attribute_values == {":age_gte": 40, ":age_lt": 60}


def test_fragments_follow_configuration_order_across_fields():
    compiled = compile_query(
        Query(filter={"age": {"gt": 18}, "name": {"ne": "Eternal", "in": "T"}}),
        SPECS,
        codec=CODEC,
    )

    assert compiled.filter_expression == "#name <> :name_ne and contains(#name, :name_in) and #age > :age_gt"
    assert compiled.expression_attribute_names == {"#name": "name", "#age": "age"}
    assert compiled.expression_attribute_values == {":name_ne": "Eternal", ":name_in": "T", ":age_gt": 18}


def test_none_values_count_as_absent_but_falsy_values_do_not():
    compiled = compile_query({"filter": {"age": {"eq": None, "gte": 0}}}, SPECS, codec=CODEC)

    assert compiled.filter_expression == "#age >= :age_gte"
    assert compiled.expression_attribute_values == {":age_gte": 0}


def test_unknown_filters_are_ignored_by_default():
    compiled = compile_query(
        {"filter": {"createdAt": {"eq": "today"}, "age": {"between": [1, 2], "lt": 5}}},
        SPECS,
        codec=CODEC,
    )

    assert compiled.filter_expression == "#age < :age_lt"


def test_unknown_field_can_be_rejected():
    with pytest.raises(UnsupportedFilter) as exc:
        compile_query(
            {"filter": {"createdAt": {"eq": "today"}}},
            SPECS,
            codec=CODEC,
            reject_unknown_filters=True,
        )
    assert exc.value.field == "createdAt"


def test_unknown_comparator_can_be_rejected():
    with pytest.raises(UnsupportedFilter) as exc:
        compile_query(
            {"filter": {"name": {"lt": "M"}}},
            SPECS,
            codec=CODEC,
            reject_unknown_filters=True,
        )
    assert (exc.value.field, exc.value.comparator) == ("name", "lt")


def test_known_filters_pass_strict_mode():
    compiled = compile_query(
        {"filter": {"name": {"eq": "Trevor"}}},
        SPECS,
        codec=CODEC,
        reject_unknown_filters=True,
    )
    assert compiled.filter_expression == "#name = :name_eq"


def test_limit_and_cursor_become_scan_parameters():
    cursor = CODEC.encode(SimpleKey("u1"))

    compiled = compile_query({"limit": 2, "cursor": cursor}, SPECS, codec=CODEC)

    assert compiled.limit == 2
    assert compiled.exclusive_start_key == {"id": "u1"}
    assert compiled.scan_kwargs() == {"Limit": 2, "ExclusiveStartKey": {"id": "u1"}}


def test_composite_cursor_decodes_to_full_start_key():
    codec = CursorCodec(KeySchema(partition_key="teamId", sort_key="id"))

    compiled = compile_query({"cursor": codec.encode(CompositeKey("t1", "u1"))}, {}, codec=codec)

    assert compiled.exclusive_start_key == {"teamId": "t1", "id": "u1"}


def test_bad_cursor_raises_before_anything_else():
    with pytest.raises(InvalidCursor):
        compile_query({"cursor": "definitely-not-a-cursor"}, SPECS, codec=CODEC)


def test_full_scan_kwargs():
    compiled = compile_query(
        {"filter": {"age": {"lte": 65}}, "limit": 10, "cursor": CODEC.encode(SimpleKey("u9"))},
        SPECS,
        codec=CODEC,
    )

    assert compiled.scan_kwargs() == {
        "FilterExpression": "#age <= :age_lte",
        "ExpressionAttributeNames": {"#age": "age"},
        "ExpressionAttributeValues": {":age_lte": 65},
        "Limit": 10,
        "ExclusiveStartKey": {"id": "u9"},
    }


@pytest.mark.parametrize(
    "query",
    [
        {"limit": 0},
        {"limit": "many"},
        {"filter": {"age": 5}},
        {"page": 2},
    ],
)
def test_malformed_queries_raise_validation_errors(query):
    with pytest.raises(DdbValidation):
        compile_query(query, SPECS, codec=CODEC)


def test_custom_builders_may_not_rebind_a_value_placeholder():
    def clashing(value):
        return Clause(expression="#age = :age_eq", names={"#age": "age"}, values={":age_eq": value + 1})

    specs = freeze_filter_specs({"age": {"eq": ord_filters("age")["eq"], "eq2": clashing}})

    with pytest.raises(DdbValidation, match="bound twice"):
        compile_query({"filter": {"age": {"eq": 1, "eq2": 1}}}, specs, codec=CODEC)


def test_compiled_query_defaults_are_an_unfiltered_scan():
    assert CompiledQuery().scan_kwargs() == {}
