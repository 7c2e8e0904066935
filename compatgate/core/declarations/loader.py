"""
Declaration loader.

Builds a ConstraintModel and per-target compatibility expressions from a
declaration document (YAML or JSON):

    package: //target_skipping
    constraint_settings: [foo_version]
    constraint_values:
      - {name: foo1, constraint_setting: foo_version}
    platforms:
      - {name: foo1_platform, parents: ["//host:platform"], constraint_values: [foo1]}
    targets:
      - name: only_on_foo1
        target_compatible_with:
          - any_of: [foo1]

Environment variable:
    COMPATGATE_DECLARATIONS_FILE: default document path for load_declarations_file().
"""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml
from pydantic import ValidationError

from compatgate.core.constraints import ConstraintModel
from compatgate.core.errors import ConfigurationError, UnknownConstraintError
from compatgate.core.expressions import CompatibilityExpression, all_of, any_of, constraint, expression, none_of
from compatgate.core.expressions.builder import default_package

from .schema import CompatibilityEntry, DeclarationDocument, PlatformDecl

_log = logging.getLogger("compatgate.declarations")

_GROUP_BUILDERS = {
    "any_of": any_of,
    "none_of": none_of,
    "all_of": all_of,
}


@dataclass
class Declarations:
    model: ConstraintModel
    targets: Dict[str, CompatibilityExpression] = field(default_factory=dict)

    def expression_for(self, target: str) -> CompatibilityExpression:
        expr = self.targets.get(target)
        if expr is None:
            raise UnknownConstraintError("target", target)
        return expr

    def list_targets(self) -> List[str]:
        return sorted(self.targets.keys())


def absolute_label(name: str, package: str) -> str:
    """Resolve `foo`, `:foo` or `//pkg:foo` against the declaring package."""
    n = str(name).strip()
    if not n:
        raise ConfigurationError("Empty label")
    if n.startswith("//") or n.startswith("@"):
        return n
    if n.startswith(":"):
        n = n[1:]
    return f"{package.rstrip(':')}:{n}"


def _platform_parent(decl: PlatformDecl, package: str) -> Optional[str]:
    parents = list(decl.parents)
    if decl.parent:
        parents.insert(0, decl.parent)
    if len(parents) > 1:
        raise ConfigurationError(f"Platform {decl.name} declares more than one parent: {parents}")
    return absolute_label(parents[0], package) if parents else None


def _compile_entry(entry: CompatibilityEntry, package: str, group_package: str):
    if isinstance(entry, str):
        return constraint(absolute_label(entry, package))

    if len(entry) != 1:
        raise ConfigurationError(f"Compatibility group must have exactly one key, got {sorted(entry)}")

    kind, values = next(iter(entry.items()))
    builder = _GROUP_BUILDERS.get(kind)
    if builder is None:
        raise ConfigurationError(f"Unknown compatibility group {kind!r} (expected any_of, none_of or all_of)")
    return builder([absolute_label(v, package) for v in values], package=group_package)


def load_declarations(data: Mapping[str, Any]) -> Declarations:
    """Validate a declaration mapping and build the model. Raises ConfigurationError."""
    try:
        doc = DeclarationDocument.model_validate(dict(data or {}))
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid declaration document: {exc}") from exc

    pkg = doc.package
    group_package = doc.compatibility_package or default_package()

    model = ConstraintModel()
    try:
        for name in doc.constraint_settings:
            model.add_setting(absolute_label(name, pkg))

        for v in doc.constraint_values:
            model.add_value(absolute_label(v.name, pkg), absolute_label(v.constraint_setting, pkg))

        for p in doc.platforms:
            model.add_platform(
                absolute_label(p.name, pkg),
                [absolute_label(v, pkg) for v in p.constraint_values],
                parent=_platform_parent(p, pkg),
            )
    except UnknownConstraintError as exc:
        # a dangling reference inside the document itself is a declaration error
        raise ConfigurationError(str(exc)) from exc

    targets: Dict[str, CompatibilityExpression] = {}
    try:
        for t in doc.targets:
            label = absolute_label(t.name, pkg)
            if label in targets:
                raise ConfigurationError(f"Duplicate target: {label}")
            expr = expression(*[_compile_entry(e, pkg, group_package) for e in t.target_compatible_with])
            for group in expr:
                for member in group.members:
                    model.value(member)
            targets[label] = expr
    except UnknownConstraintError as exc:
        raise ConfigurationError(f"Target {label}: {exc}") from exc

    _log.info(
        "Loaded declarations for %s: %d setting(s), %d value(s), %d platform(s), %d target(s)",
        pkg,
        len(doc.constraint_settings),
        len(doc.constraint_values),
        len(doc.platforms),
        len(targets),
    )
    return Declarations(model=model, targets=targets)


def _resolve_path(path: Optional[Path]) -> Path:
    if path is not None:
        return Path(path)
    env_path = os.getenv("COMPATGATE_DECLARATIONS_FILE", "").strip()
    if env_path:
        return Path(env_path)
    raise ConfigurationError("No declarations file given and COMPATGATE_DECLARATIONS_FILE is not set")


def load_declarations_file(path: Optional[Path] = None) -> Declarations:
    resolved = _resolve_path(path)
    try:
        raw_text = resolved.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Cannot read declarations file {resolved}: {exc}") from exc

    try:
        data = json.loads(raw_text)
    except json.JSONDecodeError:
        try:
            data = yaml.safe_load(raw_text)
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"Failed to parse {resolved} as JSON or YAML: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigurationError(f"Declarations file {resolved} must be a mapping, got {type(data).__name__}")

    _log.info("Reading declarations from %s", resolved)
    return load_declarations(data)
