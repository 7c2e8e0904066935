from .models import ConstraintSetting, ConstraintValue, Platform
from .registry import ConstraintModel

__all__ = [
    "ConstraintModel",
    "ConstraintSetting",
    "ConstraintValue",
    "Platform",
]
