"""Validation and formatting of caller supplied filter expressions.

Filters are only parsed to reject malformed input and to render a canonical
form; their structure is never inspected.
"""

from sqlglot import exp, parse_one
from sqlglot.errors import SqlglotError

from realtime.domain.errors import InvalidArgumentError

DIALECT = "clickhouse"


def parse_filter(text: str) -> exp.Expression:
    try:
        return parse_one(text, dialect=DIALECT, into=exp.Condition)
    except SqlglotError as e:
        raise InvalidArgumentError(f"invalid filter expression: {text!r}") from e


def format_filter(expression: exp.Expression) -> str:
    return expression.sql(dialect=DIALECT)


def normalize_filter(text: str | None) -> str | None:
    """Round-trip ``text`` through the parser, ``None`` stays ``None``."""
    if text is None:
        return None
    return format_filter(parse_filter(text))
