from __future__ import annotations

from typing import List, Sequence

from compatgate.core.expressions import CompatibilityGroup

SUCCESS_MARKER = "INFO: Build completed successfully"
FAILURE_MARKER = "FAILED: Build did NOT complete successfully"


def describe_failures(platform: str, failing: Sequence[CompatibilityGroup]) -> str:
    """
    One-line reason for an incompatible target.

    Labels are listed in declaration order; the caller's ordering is kept as is.
    """
    if not failing:
        raise ValueError("describe_failures requires at least one failing group")

    if len(failing) == 1:
        return f"target platform ({platform}) didn't satisfy constraint {failing[0].label}"

    labels = ", ".join(g.label for g in failing)
    return f"target platform ({platform}) didn't satisfy constraints [{labels}]"


def failure_report(target: str, platform: str, failing: Sequence[CompatibilityGroup]) -> List[str]:
    return [
        f"ERROR: Target {target} is incompatible and cannot be built, but was explicitly requested.",
        f"      <-- {describe_failures(platform, failing)}",
        FAILURE_MARKER,
    ]
