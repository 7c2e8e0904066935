from __future__ import annotations

from typing import Sequence


class CompatibilityError(Exception):
    pass


class ConfigurationError(CompatibilityError):
    """Invalid declaration document or invocation configuration."""


class UnknownConstraintError(CompatibilityError):
    def __init__(self, kind: str, label: str):
        super().__init__(f"Unknown {kind}: {label}")
        self.kind = kind
        self.label = label


class CycleError(CompatibilityError):
    def __init__(self, chain: Sequence[str]):
        super().__init__("Platform parent cycle detected: " + " -> ".join(chain))
        self.chain = list(chain)


class IncompatibilityError(CompatibilityError):
    """
    Explicitly requested target is incompatible with the target platform.

    Expected failure mode, reported per target; carries the rendered report.
    """

    def __init__(self, target: str, platform: str, failing: Sequence, report: Sequence[str]):
        super().__init__("\n".join(report))
        self.target = target
        self.platform = platform
        self.failing = list(failing)
        self.report = list(report)
