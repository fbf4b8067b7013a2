"""Reusable cell renderers for the console's list pages.

Each factory returns a ``(value, record)`` render function suitable for
:attr:`opsdesk_table.models.columns.Column.render`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Literal, Sequence

from opsdesk_table.models.columns import Column, RenderFn
from opsdesk_table.pipeline.extract import display_text, extract_value, is_empty, is_number
from opsdesk_table.pipeline.render import ClickEvent

BadgeVariant = Literal["default", "secondary", "destructive", "success", "outline"]


@dataclass(frozen=True)
class Badge:
    label: str
    variant: BadgeVariant = "default"

    def __str__(self) -> str:
        return self.label


def _grouped(value: Decimal, places: int | None) -> str:
    if places is not None:
        return f"{value:,.{places}f}"
    # Default locale-style output: at most three fraction digits, no trailing zeros.
    text = f"{value:,.3f}".rstrip("0").rstrip(".")
    return text if text != "-0" else "0"


def currency(symbol: str = "₱", *, places: int | None = None) -> RenderFn:
    """``1234.5`` -> ``"₱1,234.5"``; empty or non-numeric values render as ``""``."""

    def render(value: Any) -> str:
        if is_empty(value):
            return ""
        try:
            amount = Decimal(str(value)) if not isinstance(value, Decimal) else value
        except InvalidOperation:
            return ""
        if isinstance(value, bool) or not amount.is_finite():
            return ""
        return f"{symbol}{_grouped(amount, places)}"

    return render


def fallback(text: str) -> RenderFn:
    """Show ``text`` when the value is empty (e.g. ``"Uncategorized"``)."""

    def render(value: Any) -> Any:
        return text if is_empty(value) else value

    return render


def from_field(name: str, renderer: RenderFn | None = None) -> RenderFn:
    """Render a column from another field of the record."""

    def render(_value: Any, record: Any) -> Any:
        value = extract_value(record, name)
        if renderer is not None:
            return renderer(value)
        return display_text(value)

    return render


def stock_status(field_name: str = "quantity", *, low_threshold: int = 10) -> RenderFn:
    """Stock badge computed from a quantity field of the record."""

    def render(_value: Any, record: Any) -> Badge | None:
        quantity = extract_value(record, field_name)
        if not is_number(quantity) or is_empty(quantity):
            return None
        if quantity == 0:
            return Badge("Out of Stock", "destructive")
        if quantity < low_threshold:
            return Badge("Low Stock", "secondary")
        return Badge("In Stock", "success")

    return render


@dataclass(frozen=True)
class MenuAction:
    label: str
    handler: Callable[[Any], None]


@dataclass
class ActionMenu:
    """Per-row actions menu; clicks on it never activate the row."""

    record: Any
    actions: Sequence[MenuAction] = field(default_factory=tuple)

    @property
    def labels(self) -> list[str]:
        return [action.label for action in self.actions]

    def handle_click(self, event: ClickEvent, action: str | None = None) -> None:
        event.stop_propagation()
        if action is None:
            return
        for item in self.actions:
            if item.label == action:
                item.handler(self.record)
                return
        raise KeyError(f"Unknown action: {action!r}. Available: {self.labels}")

    def choose(self, action: str) -> None:
        """Pick a menu entry directly (outside of a row click)."""

        self.handle_click(ClickEvent(), action)

    def __str__(self) -> str:
        return " | ".join(self.labels)


def actions_column(*actions: MenuAction, key: str = "actions", label: str = "Actions") -> Column:
    def render(_value: Any, record: Any) -> ActionMenu:
        return ActionMenu(record=record, actions=actions)

    return Column(key=key, label=label, sortable=False, render=render)


RENDERERS: dict[str, Callable[..., RenderFn]] = {
    "currency": currency,
    "fallback": fallback,
    "from_field": from_field,
    "stock_status": stock_status,
}


__all__ = [
    "ActionMenu",
    "Badge",
    "MenuAction",
    "RENDERERS",
    "actions_column",
    "currency",
    "fallback",
    "from_field",
    "stock_status",
]
