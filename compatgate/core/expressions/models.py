from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, replace
from enum import Enum
from typing import AbstractSet, ClassVar, Iterator, List, Optional, Tuple

from compatgate.core.errors import ConfigurationError

DEFAULT_COMPATIBILITY_PACKAGE = "//lib/compatibility"


class GroupKind(str, Enum):
    ANY_OF = "any_of"
    NONE_OF = "none_of"
    ALL_OF = "all_of"
    CONSTRAINT = "constraint"


@dataclass(frozen=True)
class CompatibilityGroup:
    """One clause of a target's compatibility expression.

    `occurrence` is None unless the same kind appears more than once in the
    enclosing expression, in which case it is the 1-based position among
    groups of that kind.
    """

    members: Tuple[str, ...]
    package: str = DEFAULT_COMPATIBILITY_PACKAGE
    occurrence: Optional[int] = None

    kind: ClassVar[GroupKind]

    def __post_init__(self) -> None:
        object.__setattr__(self, "members", tuple(self.members))
        if not self.members:
            raise ConfigurationError(f"{self.kind.value} requires at least one constraint value")

    @property
    def label(self) -> str:
        name = self.kind.value
        if self.occurrence is not None:
            name = f"{name}_{self.occurrence}"
        return f"{self.package}:{name}"

    def is_satisfied_by(self, resolved: AbstractSet[str]) -> bool:
        raise NotImplementedError

    def __add__(self, other):
        return CompatibilityExpression((self,)) + other


@dataclass(frozen=True)
class AnyOf(CompatibilityGroup):
    kind = GroupKind.ANY_OF

    def is_satisfied_by(self, resolved: AbstractSet[str]) -> bool:
        return any(m in resolved for m in self.members)


@dataclass(frozen=True)
class NoneOf(CompatibilityGroup):
    kind = GroupKind.NONE_OF

    def is_satisfied_by(self, resolved: AbstractSet[str]) -> bool:
        return not any(m in resolved for m in self.members)


@dataclass(frozen=True)
class AllOf(CompatibilityGroup):
    kind = GroupKind.ALL_OF

    def is_satisfied_by(self, resolved: AbstractSet[str]) -> bool:
        return all(m in resolved for m in self.members)


@dataclass(frozen=True)
class Constraint(CompatibilityGroup):
    """A bare constraint value listed directly on a target."""

    kind = GroupKind.CONSTRAINT

    def __post_init__(self) -> None:
        super().__post_init__()
        if len(self.members) != 1:
            raise ConfigurationError("constraint takes exactly one constraint value")

    @property
    def label(self) -> str:
        return self.members[0]

    def is_satisfied_by(self, resolved: AbstractSet[str]) -> bool:
        return self.members[0] in resolved


def _number_occurrences(groups: Tuple[CompatibilityGroup, ...]) -> Tuple[CompatibilityGroup, ...]:
    totals = Counter(g.kind for g in groups if g.kind is not GroupKind.CONSTRAINT)
    seen: Counter = Counter()
    out = []
    for g in groups:
        occurrence = None
        if totals[g.kind] > 1:
            seen[g.kind] += 1
            occurrence = seen[g.kind]
        out.append(g if g.occurrence == occurrence else replace(g, occurrence=occurrence))
    return tuple(out)


@dataclass(frozen=True)
class CompatibilityExpression:
    """Ordered AND of compatibility groups."""

    groups: Tuple[CompatibilityGroup, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "groups", _number_occurrences(tuple(self.groups)))

    def __add__(self, other):
        if isinstance(other, CompatibilityGroup):
            return CompatibilityExpression(self.groups + (other,))
        if isinstance(other, CompatibilityExpression):
            return CompatibilityExpression(self.groups + other.groups)
        return NotImplemented

    def __iter__(self) -> Iterator[CompatibilityGroup]:
        return iter(self.groups)

    def __len__(self) -> int:
        return len(self.groups)

    def labels(self) -> List[str]:
        return [g.label for g in self.groups]

    def is_satisfied_by(self, resolved: AbstractSet[str]) -> bool:
        return all(g.is_satisfied_by(resolved) for g in self.groups)
