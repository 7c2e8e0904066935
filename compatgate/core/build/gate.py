from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence

from compatgate.core.declarations import Declarations
from compatgate.core.diagnostics import failure_report
from compatgate.core.errors import IncompatibilityError
from compatgate.core.evaluator import CompatibilityEvaluator, CompatibilityResult
from compatgate.core.observability.metrics import record_evaluation

from .config import InvocationConfig
from .models import BuildOutcome, SkippedIncompatible

log = logging.getLogger("compatgate.build")


def _unique(labels: Iterable[str]) -> List[str]:
    seen = set()
    out = []
    for label in labels:
        if label not in seen:
            seen.add(label)
            out.append(label)
    return out


class BuildGate:
    """Applies compatibility verdicts to one build invocation.

    Explicitly requested incompatible targets fail the invocation (unless
    skip_incompatible_targets is set); transitively reached ones are dropped
    without a diagnostic.
    """

    def __init__(self, declarations: Declarations, config: InvocationConfig):
        self.declarations = declarations
        self.config = config
        self.evaluator = CompatibilityEvaluator(declarations.model)

    def check(self, target: str) -> CompatibilityResult:
        expr = self.declarations.expression_for(target)
        result = self.evaluator.evaluate(expr, self.config.target_platform)
        record_evaluation(result.compatible)
        return result

    def require_compatible(self, target: str) -> CompatibilityResult:
        result = self.check(target)
        if not result.compatible:
            raise IncompatibilityError(
                target=target,
                platform=result.platform,
                failing=result.failing,
                report=failure_report(target, result.platform, result.failing),
            )
        return result

    def run(self, targets: Sequence[str], transitive: Optional[Sequence[str]] = None) -> BuildOutcome:
        platform = self.config.target_platform
        model = self.declarations.model

        # Malformed platform graphs fail the whole invocation up front.
        model.resolve(platform)
        if self.config.host_platform:
            model.resolve(self.config.host_platform)

        explicit = _unique(targets)
        explicit_set = set(explicit)
        reached = [t for t in _unique(transitive or []) if t not in explicit_set]

        outcome = BuildOutcome(target_platform=platform)

        for target in explicit:
            try:
                self.require_compatible(target)
            except IncompatibilityError as err:
                if self.config.skip_incompatible_targets:
                    log.info("Skipping incompatible target %s on %s", target, platform)
                    outcome.skipped.append(
                        SkippedIncompatible(target=target, platform=platform, failing=tuple(err.failing), explicit=True)
                    )
                    continue
                log.warning("Incompatible explicit target %s on %s", target, platform)
                outcome.failures.append(err)
                continue
            outcome.built.append(target)

        for target in reached:
            result = self.check(target)
            if result.compatible:
                outcome.built.append(target)
            else:
                log.debug("Dropping transitive target %s on %s", target, platform)
                outcome.skipped.append(SkippedIncompatible(target=target, platform=platform, failing=result.failing))

        log.info(
            "Invocation on %s: %d built, %d failed, %d skipped",
            platform,
            len(outcome.built),
            len(outcome.failures),
            len(outcome.skipped),
        )
        return outcome
