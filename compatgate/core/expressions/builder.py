from __future__ import annotations

import os
from typing import Optional, Sequence, Tuple, Union

from compatgate.core.errors import ConfigurationError

from .models import (
    DEFAULT_COMPATIBILITY_PACKAGE,
    AllOf,
    AnyOf,
    CompatibilityExpression,
    CompatibilityGroup,
    Constraint,
    NoneOf,
)

ExpressionPart = Union[CompatibilityGroup, CompatibilityExpression, str]


def default_package() -> str:
    return (os.getenv("COMPATGATE_COMPATIBILITY_PACKAGE") or DEFAULT_COMPATIBILITY_PACKAGE).strip()


def _members(values: Tuple) -> Tuple[str, ...]:
    # any_of(":a", ":b") and any_of([":a", ":b"]) are equivalent
    if len(values) == 1 and isinstance(values[0], (list, tuple)):
        values = tuple(values[0])
    return tuple(str(v) for v in values)


def any_of(*constraint_values, package: Optional[str] = None) -> AnyOf:
    """Compatible when the platform has at least one of the values."""
    return AnyOf(members=_members(constraint_values), package=package or default_package())


def none_of(*constraint_values, package: Optional[str] = None) -> NoneOf:
    """Compatible when the platform has none of the values."""
    return NoneOf(members=_members(constraint_values), package=package or default_package())


def all_of(*constraint_values, package: Optional[str] = None) -> AllOf:
    """Compatible when the platform has every one of the values."""
    return AllOf(members=_members(constraint_values), package=package or default_package())


def constraint(value: str) -> Constraint:
    return Constraint(members=(value,))


def expression(*parts: ExpressionPart) -> CompatibilityExpression:
    """Compose groups, expressions and bare value labels, in order."""
    out = CompatibilityExpression()
    for part in parts:
        if isinstance(part, str):
            part = constraint(part)
        if not isinstance(part, (CompatibilityGroup, CompatibilityExpression)):
            raise ConfigurationError(f"Unsupported compatibility entry: {part!r}")
        out = out + part
    return out


def as_expression(value: Union[ExpressionPart, Sequence[ExpressionPart]]) -> CompatibilityExpression:
    if isinstance(value, CompatibilityExpression):
        return value
    if isinstance(value, (CompatibilityGroup, str)):
        return expression(value)
    return expression(*value)
