"""FastAPI application for the Planscope plan service."""
from fastapi import FastAPI

from planscope.api.routes.plan import router as plan_router
from planscope.core.config import settings
from planscope.core.logging import configure_logging
from planscope.core.middleware import RequestIDMiddleware
from planscope.observability.client import init_opik
from planscope.observability.tracing import trace

configure_logging(log_level=settings.log_level)

app = FastAPI(title=settings.app_name, version="0.1.0", debug=settings.debug)
app.add_middleware(RequestIDMiddleware)
app.include_router(plan_router)


@app.on_event("startup")
async def start_tracing() -> None:
    init_opik()


@app.get("/health", tags=["health"], summary="Readiness probe")
async def health_check() -> dict[str, str]:
    with trace("http.health_check", metadata={"route": "/health"}):
        return {"status": "ok"}
