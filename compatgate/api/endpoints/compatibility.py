from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter
from pydantic import BaseModel, Field

from compatgate.core.build import BuildGate, InvocationConfig
from compatgate.core.declarations import absolute_label, load_declarations
from compatgate.core.diagnostics import describe_failures

# CompatibilityError raised here is shaped into a 400 by SafeErrorMiddleware.
router = APIRouter(prefix="/api/v1/compatibility", tags=["compatibility"])


class EvaluateRequest(BaseModel):
    declarations: Dict[str, Any]
    target: str
    platform: str


class BuildRequest(BaseModel):
    declarations: Dict[str, Any]
    targets: List[str]
    transitive_targets: List[str] = Field(default_factory=list)
    target_platform: str
    host_platform: Optional[str] = None
    skip_incompatible_targets: bool = False


def _label(declarations: Dict[str, Any], name: str) -> str:
    return absolute_label(name, str(declarations.get("package") or "//"))


@router.post("/evaluate")
def evaluate(req: EvaluateRequest):
    decls = load_declarations(req.declarations)
    target = _label(req.declarations, req.target)
    gate = BuildGate(decls, InvocationConfig(target_platform=_label(req.declarations, req.platform)))
    result = gate.check(target)

    return {
        "target": target,
        "platform": result.platform,
        "compatible": result.compatible,
        "failing": result.failing_labels(),
        "diagnostic": None if result.compatible else describe_failures(result.platform, result.failing),
    }


@router.post("/build")
def build(req: BuildRequest):
    decls = load_declarations(req.declarations)
    cfg = InvocationConfig.from_payload(
        {
            "target_platform": _label(req.declarations, req.target_platform),
            "host_platform": _label(req.declarations, req.host_platform) if req.host_platform else None,
            "skip_incompatible_targets": req.skip_incompatible_targets,
        }
    )
    outcome = BuildGate(decls, cfg).run(
        [_label(req.declarations, t) for t in req.targets],
        transitive=[_label(req.declarations, t) for t in req.transitive_targets],
    )

    return {
        "exit_code": outcome.exit_code,
        "success": outcome.success,
        "built": outcome.built,
        "reports": [err.report for err in outcome.failures],
        "skipped": [s.target for s in outcome.skipped],
        "log": outcome.log_lines(),
    }
