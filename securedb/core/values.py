"""Special parameter values understood by the template engine."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any


class MacroControl(Enum):
    """Control values for `{ ... }` macro blocks."""

    SKIP = "skip"


SKIP = MacroControl.SKIP


def is_skip(value: Any) -> bool:
    """Return whether `value` is the macro skip sentinel."""

    return value is MacroControl.SKIP


class TypedValue(ABC):
    """Domain value wrapper that can hand out its native database value.

    Subclass it, or register an existing class with `TypedValue.register()`
    when that class already provides `to_native()`.
    """

    @abstractmethod
    def to_native(self) -> Any:
        """Return the value the driver should bind."""


def unwrap_value(value: Any) -> Any:
    """Return the native value for typed wrappers, anything else unchanged."""

    if isinstance(value, TypedValue):
        return value.to_native()
    return value
