from __future__ import annotations

import logging
import traceback
from typing import Callable, Dict, Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse, Response

from compatgate.core.errors import CompatibilityError, CycleError, UnknownConstraintError

log = logging.getLogger("compatgate.errors")


def _request_id(request: Request) -> Optional[str]:
    return getattr(request.state, "request_id", None) or request.headers.get("x-request-id")


def _error_payload(detail: str, rid: Optional[str], **extra) -> Dict[str, object]:
    payload: Dict[str, object] = {"detail": detail, **extra}
    if rid:
        payload["request_id"] = rid
    return payload


class SafeErrorMiddleware(BaseHTTPMiddleware):
    """
    Shapes errors escaping the compatibility routers.

    - CompatibilityError (bad declarations, unknown labels, parent cycles) -> 400
      with the message, the error type and the request id
    - anything else -> 500 without a stack trace; traceback logged server-side
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except CompatibilityError as e:
            rid = _request_id(request)
            extra: Dict[str, object] = {"error": type(e).__name__}
            if isinstance(e, UnknownConstraintError):
                extra["label"] = e.label
            elif isinstance(e, CycleError):
                extra["chain"] = e.chain
            log.warning("Rejected %s rid=%s path=%s: %s", type(e).__name__, rid, request.url.path, e)
            return JSONResponse(status_code=400, content=_error_payload(str(e), rid, **extra))
        except Exception as e:
            rid = _request_id(request)
            log.error(
                "Unhandled error: %s rid=%s path=%s\n%s",
                str(e),
                rid,
                request.url.path,
                traceback.format_exc(),
            )
            return JSONResponse(status_code=500, content=_error_payload("Internal Server Error", rid))
