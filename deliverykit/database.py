"""A thin layer over a DB-API connection: placeholder translation, dict rows, transactions."""

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from typing import Any

__all__ = ["DatabaseError", "NotFoundError", "Database"]

PARAMSTYLES = frozenset({"qmark", "numeric", "named", "format", "pyformat"})

_PLACEHOLDER_PATTERN = re.compile(
    r"""
      (?P<literal>'(?:[^']|'')*'|"(?:[^"]|"")*")
    | (?P<cast>::)
    | :(?P<name>[A-Za-z_]\w*)
    | \$(?P<num>\d+)
    | (?P<q>\?)
    | (?P<pct>%)
    """,
    re.VERBOSE,
)


class DatabaseError(Exception):
    """A statement or transaction failed."""


class NotFoundError(DatabaseError, LookupError):
    """A query that must return a row returned none."""


def _convert(query: str, params: Any, style: str) -> tuple[str, Any]:
    """Rewrite ``?``, ``$N`` and ``:name`` placeholders into the driver's paramstyle."""
    named_input = isinstance(params, Mapping)
    positional = None if named_input else list(params or ())
    values: list[Any] = []
    named: dict[str, Any] = {}
    percent_escaped = style in ("format", "pyformat")
    question_marks = 0

    def placeholder(key: str, value: Any) -> str:
        if style == "named":
            named[key] = value
            return f":{key}"
        if style == "pyformat":
            named[key] = value
            return f"%({key})s"
        values.append(value)
        if style == "numeric":
            return f":{len(values)}"
        return "%s" if style == "format" else "?"

    def replace(match: re.Match[str]) -> str:
        nonlocal question_marks
        if match.group("literal") is not None:
            text = match.group("literal")
            return text.replace("%", "%%") if percent_escaped else text
        if match.group("cast") is not None:
            return "::"
        if match.group("pct") is not None:
            return "%%" if percent_escaped else "%"
        if match.group("name") is not None:
            if not named_input:
                return match.group(0)
            key = match.group("name")
            return placeholder(key, params[key])
        if positional is None:
            raise TypeError("positional placeholder with named parameters")
        if match.group("num") is not None:
            number = int(match.group("num"))
            if number < 1:
                raise IndexError(number)
            return placeholder(f"p{number}", positional[number - 1])
        question_marks += 1
        return placeholder(f"p{question_marks}", positional[question_marks - 1])

    try:
        sql = _PLACEHOLDER_PATTERN.sub(replace, query)
    except (KeyError, IndexError, TypeError) as exc:
        raise DatabaseError(f"query parameters do not match placeholders: {exc}") from exc
    if style in ("named", "pyformat"):
        return sql, named
    return sql, tuple(values)


def _rowcount(cursor: Any) -> int:
    return cursor.rowcount


def _rows(cursor: Any) -> list[dict[str, Any]]:
    if cursor.description is None:
        return []
    columns = [column[0] for column in cursor.description]
    return [dict(zip(columns, row)) for row in cursor.fetchall()]


class Database:
    """Runs statements on a DB-API connection, committing each one unless inside a transaction."""

    def __init__(self, connection: Any, paramstyle: str = "qmark") -> None:
        if paramstyle not in PARAMSTYLES:
            raise ValueError(f"unsupported paramstyle: {paramstyle!r}")
        self._connection = connection
        self.paramstyle = paramstyle
        self._depth = 0

    def __enter__(self) -> Database:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def in_transaction(self) -> bool:
        return self._depth > 0

    def _run(self, query: str, params: Any, collect: Any) -> Any:
        sql, args = _convert(query, params, self.paramstyle)
        try:
            cursor = self._connection.cursor()
            try:
                cursor.execute(sql, args)
                result = collect(cursor)
            finally:
                cursor.close()
            if not self._depth:
                self._connection.commit()
        except DatabaseError:
            raise
        except Exception as exc:
            raise DatabaseError(str(exc)) from exc
        return result

    def execute(self, query: str, params: Mapping[str, Any] | Sequence[Any] = ()) -> int:
        """Run a statement and return the number of rows it affected."""
        return self._run(query, params, _rowcount)

    def fetch_one(self, query: str, params: Mapping[str, Any] | Sequence[Any] = ()) -> dict[str, Any]:
        """Return the first row of a query; raise NotFoundError when there is none."""
        rows = self._run(query, params, _rows)
        if not rows:
            raise NotFoundError("no rows in result set")
        return rows[0]

    def fetch_all(
        self, query: str, params: Mapping[str, Any] | Sequence[Any] = ()
    ) -> list[dict[str, Any]]:
        """Return every row of a query as a dict keyed by column name."""
        return self._run(query, params, _rows)

    @contextmanager
    def transaction(self) -> Iterator[Database]:
        """Group statements; commit when the block ends, roll back if it raises."""
        if self._depth:
            self._depth += 1
            try:
                yield self
            finally:
                self._depth -= 1
            return

        self._depth = 1
        try:
            yield self
        except BaseException as exc:
            self._depth = 0
            try:
                self._connection.rollback()
            except Exception as rollback_error:
                raise DatabaseError(
                    f"Failed to rollback transaction: {rollback_error}"
                ) from rollback_error
            if isinstance(exc, Exception):
                raise DatabaseError(f"Failed to execute transaction: {exc}") from exc
            raise
        self._depth = 0
        try:
            self._connection.commit()
        except Exception as exc:
            raise DatabaseError(f"Failed to commit transaction: {exc}") from exc

    def close(self) -> None:
        """Close the underlying connection."""
        self._connection.close()