from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Sequence, Tuple, Union

from compatgate.core.constraints import ConstraintModel, Platform
from compatgate.core.expressions import CompatibilityExpression, CompatibilityGroup, as_expression

log = logging.getLogger("compatgate.evaluator")

ExpressionLike = Union[CompatibilityExpression, CompatibilityGroup, Sequence[CompatibilityGroup]]


@dataclass(frozen=True)
class CompatibilityResult:
    platform: str
    compatible: bool
    failing: Tuple[CompatibilityGroup, ...] = ()

    def failing_labels(self) -> List[str]:
        return [g.label for g in self.failing]


class CompatibilityEvaluator:
    """Checks compatibility expressions against platforms of one ConstraintModel.

    Every group is evaluated; failures are kept in declaration order.
    Resolution errors (cycles, unknown platforms or values) propagate to the
    caller.
    """

    def __init__(self, model: ConstraintModel):
        self._model = model

    @property
    def model(self) -> ConstraintModel:
        return self._model

    def evaluate(self, expression: ExpressionLike, platform: Union[Platform, str]) -> CompatibilityResult:
        expr = as_expression(expression)
        resolved = self._model.resolve(platform)
        label = platform.label if isinstance(platform, Platform) else platform

        # Undeclared members raise UnknownConstraintError.
        for g in expr.groups:
            for member in g.members:
                self._model.value(member)

        failing = tuple(g for g in expr.groups if not g.is_satisfied_by(resolved))

        log.debug(
            "Evaluated %d group(s) against %s: %d failing %s",
            len(expr),
            label,
            len(failing),
            [g.label for g in failing],
        )
        return CompatibilityResult(platform=label, compatible=not failing, failing=failing)
