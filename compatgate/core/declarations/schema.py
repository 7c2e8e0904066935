from __future__ import annotations

from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field


class ConstraintValueDecl(BaseModel):
    name: str
    constraint_setting: str


class PlatformDecl(BaseModel):
    name: str
    constraint_values: List[str] = Field(default_factory=list)
    parent: Optional[str] = None
    # build-file style; at most one entry
    parents: List[str] = Field(default_factory=list)


CompatibilityEntry = Union[str, Dict[str, List[str]]]


class TargetDecl(BaseModel):
    name: str
    target_compatible_with: List[CompatibilityEntry] = Field(default_factory=list)


class DeclarationDocument(BaseModel):
    package: str = "//"
    compatibility_package: Optional[str] = None

    constraint_settings: List[str] = Field(default_factory=list)
    constraint_values: List[ConstraintValueDecl] = Field(default_factory=list)
    platforms: List[PlatformDecl] = Field(default_factory=list)
    targets: List[TargetDecl] = Field(default_factory=list)
