"""Translate a listing filter bag into a store-agnostic query specification.

The builder only validates and describes; executing the result is the
record store's job (see ``jobly.repository``).
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from jobly.errors import InvalidFilterError
from jobly.models import INTEGER_MAX

FILTER_KEYS = ("title", "minSalary", "hasEquity")
ORDER_BY = ("title ASC", "id ASC")

_LIKE_ESCAPE = "\\"


@dataclass(frozen=True)
class Predicate:
    fragment: str
    param: str | None = None
    value: Any = None


@dataclass(frozen=True)
class QuerySpec:
    predicates: tuple[Predicate, ...] = ()
    order_by: tuple[str, ...] = ORDER_BY

    @property
    def bind_values(self) -> tuple[Any, ...]:
        return tuple(p.value for p in self.predicates if p.param is not None)

    @property
    def params(self) -> dict[str, Any]:
        return {p.param: p.value for p in self.predicates if p.param is not None}

    def where_clause(self) -> str:
        if not self.predicates:
            return ""
        return "WHERE " + " AND ".join(p.fragment for p in self.predicates)

    def order_clause(self) -> str:
        return "ORDER BY " + ", ".join(self.order_by)


def _escape_like(value: str) -> str:
    return (
        value.replace(_LIKE_ESCAPE, _LIKE_ESCAPE * 2)
        .replace("%", _LIKE_ESCAPE + "%")
        .replace("_", _LIKE_ESCAPE + "_")
    )


def _validate(filters: Mapping[str, Any]) -> None:
    unknown = sorted(key for key in filters if key not in FILTER_KEYS)
    if unknown:
        raise InvalidFilterError(unknown[0], "unrecognized filter")

    if "title" in filters and not isinstance(filters["title"], str):
        raise InvalidFilterError("title", "must be a string")

    if "minSalary" in filters:
        min_salary = filters["minSalary"]
        # bool is an int subclass; True is not a salary
        if isinstance(min_salary, bool) or not isinstance(min_salary, int):
            raise InvalidFilterError("minSalary", "must be an integer")
        if min_salary < 0:
            raise InvalidFilterError("minSalary", "must be >= 0")
        if min_salary > INTEGER_MAX:
            raise InvalidFilterError("minSalary", f"must be <= {INTEGER_MAX}")

    if "hasEquity" in filters and not isinstance(filters["hasEquity"], bool):
        raise InvalidFilterError("hasEquity", "must be a boolean")


def build_job_query(filters: Mapping[str, Any]) -> QuerySpec:
    """Validate ``filters`` and return the predicates that implement them.

    Raises ``InvalidFilterError`` for an unrecognized key, a value of the
    wrong type or a ``minSalary`` outside the salary column range. ``hasEquity=False`` adds no
    predicate: it means "don't filter on equity", not "equity is zero".
    """
    _validate(filters)

    predicates: list[Predicate] = []

    title = filters.get("title")
    if title is not None:
        predicates.append(
            Predicate(
                fragment=f"lower(title) LIKE :title_pattern ESCAPE '{_LIKE_ESCAPE}'",
                param="title_pattern",
                value=f"%{_escape_like(title.lower())}%",
            )
        )

    min_salary = filters.get("minSalary")
    if min_salary is not None:
        predicates.append(
            Predicate(fragment="salary >= :min_salary", param="min_salary", value=min_salary)
        )

    if filters.get("hasEquity") is True:
        predicates.append(Predicate(fragment="equity > 0"))

    return QuerySpec(predicates=tuple(predicates))
