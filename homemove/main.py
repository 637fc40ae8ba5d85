import newrelic.agent
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import time
import logging

from homemove.core.config import get_settings
from homemove.routers import bookings, distance, quotes

settings = get_settings()

if settings.new_relic_license_key:
    newrelic.agent.initialize()

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)


app = FastAPI(
    title="HomeMove Pricing API",
    description="Distance resolution, itemized move quotes and booking lifecycle rules.",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# ─── Latency tracking middleware ──────────────────────────────────────────────
@app.middleware("http")
async def add_latency_header(request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    latency_ms = (time.perf_counter() - start) * 1000
    response.headers["X-Response-Time-Ms"] = f"{latency_ms:.2f}"
    if latency_ms > 500:
        logger.warning(f"SLOW REQUEST: {request.method} {request.url.path} — {latency_ms:.0f}ms")
    return response


# ─── Routers ──────────────────────────────────────────────────────────────────
app.include_router(distance.router)
app.include_router(quotes.router)
app.include_router(bookings.router)


@app.get("/health")
async def health():
    return {"status": "ok", "service": "HomeMove Pricing", "env": settings.app_env}
