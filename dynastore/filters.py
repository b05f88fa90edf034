"""Filter clause builders.

Each builder is bound to one attribute and renders a DynamoDB condition
fragment plus the placeholders it uses. Name placeholders are per
attribute (``#age``); value placeholders are per attribute *and*
comparator (``:age_lt``), so any set of clauses can be ANDed together
without two of them fighting over the same placeholder.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

_ATTRIBUTE_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def validate_attribute_name(name: str, *, what: str = "attribute") -> str:
    # Filter names end up inside "#name" and ":name_cmp" placeholders.
    if not isinstance(name, str) or not _ATTRIBUTE_RE.match(name):
        raise ValueError(f"Invalid {what} name {name!r}: must match [A-Za-z_][A-Za-z0-9_]*")
    return name


@dataclass(frozen=True, slots=True)
class Clause:
    expression: str
    names: dict[str, str] = field(default_factory=dict)
    values: dict[str, Any] = field(default_factory=dict)


ClauseBuilder = Callable[[Any], Clause]
FilterSpecs = Mapping[str, Mapping[str, ClauseBuilder]]


def name_placeholder(attr: str) -> str:
    return f"#{attr}"


def value_placeholder(attr: str, comparator: str) -> str:
    return f":{attr}_{comparator}"


def _operator_filter(attr: str, comparator: str, operator: str) -> ClauseBuilder:
    name = name_placeholder(attr)
    placeholder = value_placeholder(attr, comparator)

    def build(value: Any) -> Clause:
        return Clause(
            expression=f"{name} {operator} {placeholder}",
            names={name: attr},
            values={placeholder: value},
        )

    return build


def _function_filter(attr: str, comparator: str, function: str) -> ClauseBuilder:
    name = name_placeholder(attr)
    placeholder = value_placeholder(attr, comparator)

    def build(value: Any) -> Clause:
        return Clause(
            expression=f"{function}({name}, {placeholder})",
            names={name: attr},
            values={placeholder: value},
        )

    return build


def eq_filter(attr: str) -> ClauseBuilder:
    return _operator_filter(attr, "eq", "=")


def ne_filter(attr: str) -> ClauseBuilder:
    return _operator_filter(attr, "ne", "<>")


def in_filter(attr: str) -> ClauseBuilder:
    """Membership: ``value`` is an element of the set/list stored at ``attr``."""
    return _function_filter(attr, "in", "contains")


def lt_filter(attr: str) -> ClauseBuilder:
    return _operator_filter(attr, "lt", "<")


def lte_filter(attr: str) -> ClauseBuilder:
    return _operator_filter(attr, "lte", "<=")


def gt_filter(attr: str) -> ClauseBuilder:
    return _operator_filter(attr, "gt", ">")


def gte_filter(attr: str) -> ClauseBuilder:
    return _operator_filter(attr, "gte", ">=")


def begins_with_filter(attr: str) -> ClauseBuilder:
    return _function_filter(attr, "begins_with", "begins_with")


# --- presets ---


def exact_filters(attr: str) -> dict[str, ClauseBuilder]:
    return {
        "eq": eq_filter(attr),
        "ne": ne_filter(attr),
        "in": in_filter(attr),
    }


def ord_filters(attr: str) -> dict[str, ClauseBuilder]:
    return {
        "eq": eq_filter(attr),
        "lt": lt_filter(attr),
        "lte": lte_filter(attr),
        "gt": gt_filter(attr),
        "gte": gte_filter(attr),
    }


def prefix_filters(attr: str) -> dict[str, ClauseBuilder]:
    return {
        "eq": eq_filter(attr),
        "ne": ne_filter(attr),
        "begins_with": begins_with_filter(attr),
    }


def freeze_filter_specs(specs: FilterSpecs | None) -> Mapping[str, Mapping[str, ClauseBuilder]]:
    """Validate a filter configuration and return a read-only copy.

    Field and comparator names end up inside placeholders, so both must be
    plain identifiers. Configuration order is kept; it decides the order of
    fragments in the compiled expression.
    """
    frozen: dict[str, Mapping[str, ClauseBuilder]] = {}
    for attr, comparators in (specs or {}).items():
        validate_attribute_name(attr, what="filter field")
        checked: dict[str, ClauseBuilder] = {}
        for comparator, builder in comparators.items():
            validate_attribute_name(comparator, what="comparator")
            if not callable(builder):
                raise TypeError(f"Filter builder for {attr}.{comparator} is not callable")
            checked[comparator] = builder
        frozen[attr] = MappingProxyType(checked)
    return MappingProxyType(frozen)
