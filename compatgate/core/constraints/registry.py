from __future__ import annotations

import logging
from dataclasses import replace
from typing import Dict, FrozenSet, Iterable, List, Optional, Union

from compatgate.core.errors import ConfigurationError, CycleError, UnknownConstraintError

from .models import ConstraintSetting, ConstraintValue, Platform

log = logging.getLogger("compatgate.constraints")

PlatformRef = Union[Platform, str]


class ConstraintModel:
    """Static constraint declarations for one build invocation.

    Settings, values and platforms are declared once and never change afterward.
    A platform's effective constraint set is derived on first use and memoized
    by platform label (write-once, insert-if-absent).
    """

    def __init__(self) -> None:
        self._settings: Dict[str, ConstraintSetting] = {}
        self._values: Dict[str, ConstraintValue] = {}
        self._platforms: Dict[str, Platform] = {}
        self._resolved: Dict[str, FrozenSet[str]] = {}

    # ------------------------------------------------------------
    # Declarations
    # ------------------------------------------------------------
    def add_setting(self, label: str) -> ConstraintSetting:
        if label in self._settings:
            raise ConfigurationError(f"Duplicate constraint_setting: {label}")
        setting = ConstraintSetting(label=label)
        self._settings[label] = setting
        return setting

    def add_value(self, label: str, setting: str) -> ConstraintValue:
        if label in self._values:
            raise ConfigurationError(f"Duplicate constraint_value: {label}")
        owner = self.setting(setting)
        value = ConstraintValue(label=label, setting=owner.label)
        self._values[label] = value
        self._settings[owner.label] = replace(owner, values=owner.values | {label})
        return value

    def add_platform(
        self,
        label: str,
        constraint_values: Iterable[str] = (),
        parent: Optional[str] = None,
    ) -> Platform:
        if label in self._platforms:
            raise ConfigurationError(f"Duplicate platform: {label}")

        # repeated listings of one value collapse; first position is kept
        values = tuple(dict.fromkeys(constraint_values))
        self._check_one_value_per_setting(label, values)

        platform = Platform(label=label, constraint_values=values, parent=parent)
        self._platforms[label] = platform
        return platform

    def _check_one_value_per_setting(self, platform: str, values: Iterable[str]) -> None:
        assigned: Dict[str, str] = {}
        for v in values:
            setting = self.setting_of(v).label
            if setting in assigned:
                raise ConfigurationError(
                    f"Platform {platform} assigns more than one value for {setting}: "
                    f"{assigned[setting]}, {v}"
                )
            assigned[setting] = v

    # ------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------
    def setting(self, label: str) -> ConstraintSetting:
        s = self._settings.get(label)
        if s is None:
            raise UnknownConstraintError("constraint_setting", label)
        return s

    def value(self, label: str) -> ConstraintValue:
        v = self._values.get(label)
        if v is None:
            raise UnknownConstraintError("constraint_value", label)
        return v

    def platform(self, label: str) -> Platform:
        p = self._platforms.get(label)
        if p is None:
            raise UnknownConstraintError("platform", label)
        return p

    def setting_of(self, value: str) -> ConstraintSetting:
        return self.setting(self.value(value).setting)

    def list_platforms(self) -> List[str]:
        return sorted(self._platforms.keys())

    # ------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------
    def resolve(self, platform: PlatformRef) -> FrozenSet[str]:
        start = self.platform(platform) if isinstance(platform, str) else platform

        cached = self._resolved.get(start.label)
        if cached is not None and self._platforms.get(start.label) is start:
            return cached

        # setting label -> value; the first assignment seen (closest to start) wins
        chosen: Dict[str, str] = {}
        chain: List[str] = []
        current: Optional[Platform] = start

        while current is not None:
            if current.label in chain:
                raise CycleError(chain + [current.label])
            chain.append(current.label)

            for v in current.constraint_values:
                chosen.setdefault(self.setting_of(v).label, v)

            current = self.platform(current.parent) if current.parent else None

        resolved = frozenset(chosen.values())
        log.debug("Resolved platform %s via %s -> %s", start.label, chain, sorted(resolved))

        # Unregistered Platform objects are resolved but never memoized.
        if self._platforms.get(start.label) is not start:
            return resolved
        return self._resolved.setdefault(start.label, resolved)
