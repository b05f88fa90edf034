from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .cursor import CursorCodec
from .errors import DdbValidation, UnsupportedFilter
from .filters import ClauseBuilder


class Query(BaseModel):
    model_config = ConfigDict(extra="forbid")

    # field -> comparator -> value, e.g. {"age": {"gte": 40, "lt": 60}}
    filter: dict[str, dict[str, Any] | None] | None = None
    limit: int | None = Field(default=None, ge=1)
    cursor: str | None = None


def as_query(query: Query | Mapping[str, Any] | None) -> Query:
    if query is None:
        return Query()
    if isinstance(query, Query):
        return query
    try:
        return Query.model_validate(dict(query))
    except ValidationError as e:
        raise DdbValidation(message=f"Invalid query: {e.errors()}", operation="Scan", cause=e) from e


@dataclass(slots=True)
class CompiledQuery:
    filter_expression: str | None = None
    expression_attribute_names: dict[str, str] = field(default_factory=dict)
    expression_attribute_values: dict[str, Any] = field(default_factory=dict)
    limit: int | None = None
    exclusive_start_key: dict[str, Any] | None = None

    @property
    def is_filtered(self) -> bool:
        return self.filter_expression is not None

    def scan_kwargs(self) -> dict[str, Any]:
        # Only pass what is present: DynamoDB rejects empty attribute maps.
        kwargs: dict[str, Any] = {}
        if self.filter_expression:
            kwargs["FilterExpression"] = self.filter_expression
        if self.expression_attribute_names:
            kwargs["ExpressionAttributeNames"] = self.expression_attribute_names
        if self.expression_attribute_values:
            kwargs["ExpressionAttributeValues"] = self.expression_attribute_values
        if self.limit is not None:
            kwargs["Limit"] = self.limit
        if self.exclusive_start_key:
            kwargs["ExclusiveStartKey"] = self.exclusive_start_key
        return kwargs


def _merge(into: dict[str, Any], bindings: Mapping[str, Any], *, kind: str) -> None:
    for placeholder, value in bindings.items():
        if placeholder in into and into[placeholder] != value:
            raise DdbValidation(
                message=f"{kind} placeholder {placeholder} is bound twice",
                operation="Scan",
            )
        into[placeholder] = value


def _check_supported(criteria: Mapping[str, Any], filter_specs: Mapping[str, Mapping[str, ClauseBuilder]]) -> None:
    for attr, comparators in criteria.items():
        configured = filter_specs.get(attr)
        if configured is None:
            raise UnsupportedFilter(
                message=f"Filtering on '{attr}' is not supported",
                operation="Scan",
                field=attr,
            )
        for comparator in comparators or {}:
            if comparator not in configured:
                raise UnsupportedFilter(
                    message=f"Comparator '{comparator}' is not supported for '{attr}'",
                    operation="Scan",
                    field=attr,
                    comparator=comparator,
                )


def compile_query(
    query: Query | Mapping[str, Any] | None,
    filter_specs: Mapping[str, Mapping[str, ClauseBuilder]],
    *,
    codec: CursorCodec,
    reject_unknown_filters: bool = False,
) -> CompiledQuery:
    """Turn a structured query into Scan parameters.

    Every configured (field, comparator) the query supplies a value for
    becomes one clause; clauses are joined with ``and``. Fields or
    comparators the configuration does not know are ignored unless
    ``reject_unknown_filters`` is set. A cursor is decoded before anything
    is sent, so a bad token never reaches the table.
    """
    q = as_query(query)
    criteria = q.filter or {}

    if reject_unknown_filters:
        _check_supported(criteria, filter_specs)

    expressions: list[str] = []
    names: dict[str, str] = {}
    values: dict[str, Any] = {}

    for attr, comparators in filter_specs.items():
        supplied = criteria.get(attr)
        if not supplied:
            continue
        for comparator, build in comparators.items():
            value = supplied.get(comparator)
            if value is None:
                continue
            clause = build(value)
            expressions.append(clause.expression)
            _merge(names, clause.names, kind="Name")
            _merge(values, clause.values, kind="Value")

    start_key = None
    if q.cursor:
        start_key = codec.schema.lookup_params(codec.decode(q.cursor))

    return CompiledQuery(
        filter_expression=" and ".join(expressions) if expressions else None,
        expression_attribute_names=names,
        expression_attribute_values=values,
        limit=q.limit,
        exclusive_start_key=start_key,
    )
