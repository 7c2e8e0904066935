from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Optional, Tuple


@dataclass(frozen=True)
class ConstraintSetting:
    label: str
    values: FrozenSet[str] = frozenset()


@dataclass(frozen=True)
class ConstraintValue:
    label: str
    setting: str  # back-reference to the owning ConstraintSetting label


@dataclass(frozen=True)
class Platform:
    label: str
    constraint_values: Tuple[str, ...] = ()
    parent: Optional[str] = None
