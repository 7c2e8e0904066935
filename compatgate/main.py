from __future__ import annotations

import logging
import os
from typing import Optional

import uvicorn

from compatgate.api.main import app
from compatgate.core.declarations import load_declarations_file

log = logging.getLogger("compatgate.main")


def serve(host: Optional[str] = None, port: Optional[int] = None) -> None:
    """Run the API with uvicorn.

    When COMPATGATE_DECLARATIONS_FILE is set the document is loaded once first,
    so a broken file stops startup instead of surfacing on the first request.
    """
    if os.getenv("COMPATGATE_DECLARATIONS_FILE"):
        decls = load_declarations_file()
        log.info(
            "Declarations OK: %d platform(s), %d target(s)",
            len(decls.model.list_platforms()),
            len(decls.list_targets()),
        )

    host = host or os.getenv("COMPATGATE_HOST", "0.0.0.0")
    port = port or int(os.getenv("COMPATGATE_PORT", "8001"))
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    serve()
