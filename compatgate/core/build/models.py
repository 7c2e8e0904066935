from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

from compatgate.core.diagnostics import SUCCESS_MARKER
from compatgate.core.errors import IncompatibilityError
from compatgate.core.expressions import CompatibilityGroup


@dataclass(frozen=True)
class SkippedIncompatible:
    """Incompatible target left out of the build; not an error."""

    target: str
    platform: str
    failing: Tuple[CompatibilityGroup, ...]
    explicit: bool = False


@dataclass
class BuildOutcome:
    target_platform: str
    built: List[str] = field(default_factory=list)
    failures: List[IncompatibilityError] = field(default_factory=list)
    skipped: List[SkippedIncompatible] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.failures

    @property
    def exit_code(self) -> int:
        return 0 if self.success else 1

    def log_lines(self) -> List[str]:
        lines: List[str] = []
        for err in self.failures:
            lines.extend(err.report)

        # transitively skipped targets are silent
        explicit_skips = [s for s in self.skipped if s.explicit]
        if explicit_skips:
            n = len(explicit_skips)
            lines.append(f"INFO: Skipped {n} incompatible target{'' if n == 1 else 's'}:")
            lines.extend(f"  {s.target}" for s in explicit_skips)

        if self.success:
            lines.append(SUCCESS_MARKER)
        return lines
