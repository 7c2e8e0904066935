from __future__ import annotations

from fastapi import FastAPI

from compatgate.api.endpoints import compatibility, health
from compatgate.api.endpoints import metrics as metrics_ep
from compatgate.api.middleware.error_shaping import SafeErrorMiddleware
from compatgate.api.middleware.request_context import RequestContextMiddleware

app = FastAPI(
    title="Target Compatibility Gate API",
    version="0.1.0",
)

# Starlette reverses add_middleware order: the LAST call is the OUTERMOST wrapper.
app.add_middleware(RequestContextMiddleware)
app.add_middleware(SafeErrorMiddleware)

app.include_router(health.router)
app.include_router(metrics_ep.router)
app.include_router(compatibility.router)
