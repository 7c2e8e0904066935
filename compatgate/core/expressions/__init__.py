from .models import (
    AllOf,
    AnyOf,
    CompatibilityExpression,
    CompatibilityGroup,
    Constraint,
    GroupKind,
    NoneOf,
)
from .builder import all_of, any_of, as_expression, constraint, expression, none_of

__all__ = [
    "AllOf",
    "AnyOf",
    "CompatibilityExpression",
    "CompatibilityGroup",
    "Constraint",
    "GroupKind",
    "NoneOf",
    "all_of",
    "any_of",
    "as_expression",
    "constraint",
    "expression",
    "none_of",
]
