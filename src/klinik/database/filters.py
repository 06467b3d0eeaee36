"""Predicate composition and pagination shared by the repositories."""

from typing import List, Optional

from sqlalchemy import and_
from sqlalchemy.orm import Query
from sqlalchemy.sql.elements import ColumnElement


def combine_predicates(conditions: List[ColumnElement]) -> Optional[ColumnElement]:
    """
    AND-combine a list of predicates.

    Returns None for an empty list (match all), the predicate itself for a
    single entry, and an ``and_`` conjunction otherwise.
    """
    if not conditions:
        return None
    if len(conditions) == 1:
        return conditions[0]
    return and_(*conditions)


def apply_predicates(query: Query, conditions: List[ColumnElement]) -> Query:
    """Attach the combined predicate as a WHERE clause, if there is one."""
    clause = combine_predicates(conditions)
    if clause is None:
        return query
    return query.filter(clause)


def apply_window(query: Query, limit: Optional[int] = None, offset: int = 0) -> Query:
    """
    Apply limit/offset after ordering.

    A None limit returns every row; offset 0 is a no-op.
    """
    if limit is not None:
        query = query.limit(limit)
    if offset:
        query = query.offset(offset)
    return query
