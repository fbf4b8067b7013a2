"""Column descriptors and the validated, ordered column schema."""

from __future__ import annotations

import inspect
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Iterator

from opsdesk_table.exceptions import SchemaError

RenderFn = Callable[..., Any]


def _positional_arity(fn: RenderFn, *, label: str) -> int:
    """How many of ``(value, record)`` a render callable takes: 1 or 2."""

    try:
        sig = inspect.signature(fn)
    except (TypeError, ValueError):
        # Some builtins have no introspectable signature.
        return 1

    positional = [
        p
        for p in sig.parameters.values()
        if p.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
    ]
    if any(p.kind is inspect.Parameter.VAR_POSITIONAL for p in sig.parameters.values()):
        return 2

    required = [p for p in positional if p.default is inspect.Parameter.empty]
    if len(required) > 2:
        names = ", ".join(p.name for p in required)
        raise SchemaError(f"{label} must accept (value, record); it requires: {names}")
    if not positional:
        raise SchemaError(f"{label} must accept at least the cell value")
    return min(len(positional), 2)


@dataclass(frozen=True)
class Column:
    """One table column.

    ``render`` receives ``(raw_value, record)``; callables taking a single
    positional parameter receive only the raw value.
    """

    key: str
    label: str
    sortable: bool = False
    render: RenderFn | None = None
    _arity: int = field(default=0, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.key, str) or not self.key.strip():
            raise SchemaError(f"Column key must be a non-empty string (got {self.key!r})")
        if self.render is not None:
            if not callable(self.render):
                raise SchemaError(f"Render for column '{self.key}' is not callable")
            arity = _positional_arity(self.render, label=f"Render for column '{self.key}'")
            object.__setattr__(self, "_arity", arity)

    @property
    def has_render(self) -> bool:
        return self.render is not None

    def call_render(self, value: Any, record: Any) -> Any:
        if self.render is None:
            raise SchemaError(f"Column '{self.key}' has no render function")
        if self._arity == 1:
            return self.render(value)
        return self.render(value, record)


class ColumnSchema:
    """Ordered, immutable column set with unique keys.

    Validated once when built; rendering never re-checks it.
    """

    __slots__ = ("_columns", "_by_key")

    def __init__(self, columns: Iterable[Column]) -> None:
        cols = tuple(columns)
        for col in cols:
            if not isinstance(col, Column):
                raise SchemaError(f"Expected Column, got {type(col).__name__}")

        counts = Counter(col.key for col in cols)
        duplicates = [key for key, count in counts.items() if count > 1]
        if duplicates:
            raise SchemaError(f"Duplicate column key(s): {', '.join(duplicates)}")

        self._columns: tuple[Column, ...] = cols
        self._by_key: dict[str, Column] = {col.key: col for col in cols}

    @classmethod
    def coerce(cls, columns: "ColumnSchema | Iterable[Column]") -> "ColumnSchema":
        if isinstance(columns, ColumnSchema):
            return columns
        return cls(columns)

    def keys(self) -> tuple[str, ...]:
        return tuple(col.key for col in self._columns)

    def get(self, key: str | None) -> Column | None:
        if key is None:
            return None
        return self._by_key.get(key)

    def extend(self, *columns: Column) -> "ColumnSchema":
        return ColumnSchema((*self._columns, *columns))

    def extend_if(self, condition: bool, *columns: Column) -> "ColumnSchema":
        """Append ``columns`` only when ``condition`` holds (e.g. role-gated actions)."""

        return self.extend(*columns) if condition else self

    def __iter__(self) -> Iterator[Column]:
        return iter(self._columns)

    def __len__(self) -> int:
        return len(self._columns)

    def __contains__(self, key: object) -> bool:
        return key in self._by_key

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ColumnSchema):
            return NotImplemented
        return self._columns == other._columns

    def __hash__(self) -> int:
        return hash(self._columns)

    def __repr__(self) -> str:
        return f"ColumnSchema({list(self.keys())!r})"


__all__ = ["Column", "ColumnSchema", "RenderFn"]
