from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

# ---- sys.path bootstrap ----
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))
# ----------------------------

from compatgate.core.build import BuildGate, InvocationConfig  # noqa: E402
from compatgate.core.declarations import load_declarations_file  # noqa: E402
from compatgate.core.errors import CompatibilityError, ConfigurationError  # noqa: E402


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Check targets against a target platform")
    ap.add_argument("targets", nargs="+", help="Explicitly requested target labels")
    ap.add_argument("--declarations", default=None, help="Declaration file (default $COMPATGATE_DECLARATIONS_FILE)")
    ap.add_argument("--platforms", required=True, help="Target platform label")
    ap.add_argument("--host_platform", default=None, help="Host platform label")
    ap.add_argument(
        "--transitive",
        action="append",
        default=[],
        help="Target reached only as a dependency (repeatable)",
    )
    ap.add_argument("--skip_incompatible_targets", action="store_true")
    ap.add_argument("-v", "--verbose", action="store_true")
    args = ap.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        decls = load_declarations_file(Path(args.declarations) if args.declarations else None)
    except ConfigurationError as e:
        print(f"ERROR: {e}")
        return 2

    cfg = InvocationConfig(
        target_platform=args.platforms,
        host_platform=args.host_platform,
        skip_incompatible_targets=args.skip_incompatible_targets,
    )

    try:
        outcome = BuildGate(decls, cfg).run(args.targets, transitive=args.transitive)
    except CompatibilityError as e:
        print(f"ERROR: {e}")
        return 2

    for line in outcome.log_lines():
        print(line)
    return outcome.exit_code


if __name__ == "__main__":
    raise SystemExit(main())
