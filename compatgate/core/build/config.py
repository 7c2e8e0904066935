from dataclasses import dataclass
from typing import Any, Optional

from compatgate.core.errors import ConfigurationError


@dataclass
class InvocationConfig:
    target_platform: str
    host_platform: Optional[str] = None
    skip_incompatible_targets: bool = False

    @classmethod
    def from_payload(cls, payload: Any) -> "InvocationConfig":
        """
        Accepts:
          - "//pkg:platform"
          - {"target_platform": "...", "host_platform": "...", "skip_incompatible_targets": true}
        Also tolerates {"platforms": "..."} as spelled on a build command line.
        """
        if isinstance(payload, str):
            return cls(target_platform=payload)

        if not isinstance(payload, dict):
            raise ConfigurationError("Invocation config must be a platform label or a mapping")

        target = payload.get("target_platform", payload.get("platforms"))
        if isinstance(target, list):
            # one target platform per invocation
            target = target[0] if len(target) == 1 else None
        if not isinstance(target, str) or not target.strip():
            raise ConfigurationError("target_platform is required")

        host = payload.get("host_platform")
        return cls(
            target_platform=target.strip(),
            host_platform=host.strip() if isinstance(host, str) and host.strip() else None,
            skip_incompatible_targets=bool(payload.get("skip_incompatible_targets", False)),
        )
