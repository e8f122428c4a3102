# -*- coding: utf-8 -*-
"""
Corpus Review API
=================
FastAPI service exposing the corpus-wide review rules (citation checks,
answer/option consistency, quotation and punctuation normalization,
sentence-ending normalization, vocabulary integrity) as dry-run/apply
endpoints over the Oracle content store.
"""

import sys
import os
import uvicorn
import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Add backend dir to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

# Rate Limiting
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from config import settings
from infrastructure.db_manager import DatabaseManager
from middleware.rate_limit import limiter
from routes import review_routes
from services.monitoring import DB_POOL_UTILIZATION
from utils.logger import configure_logging

# Configure Logging (Structured JSON)
configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger("corpus_review_api")


def _validate_cors_origins(origins: list[str]) -> list[str]:
    normalized = [o.strip() for o in origins if str(o).strip()]
    if not normalized:
        raise ValueError("ALLOWED_ORIGINS cannot be empty")
    if "*" in normalized:
        raise ValueError("SECURITY: '*' is not allowed when allow_credentials=True")

    for origin in normalized:
        if origin.startswith("https://"):
            continue
        if settings.ENVIRONMENT == "development" and origin.startswith(
            ("http://localhost", "http://127.0.0.1", "http://0.0.0.0")
        ):
            continue
        raise ValueError(f"Invalid CORS origin: {origin}")
    return normalized


async def _pool_metrics_updater(interval_seconds: float = 10.0):
    """Periodically publishes DB pool utilization to Prometheus."""
    while True:
        try:
            stats = DatabaseManager.get_pool_stats()
            for pool_type in ("read", "write"):
                pool = stats[pool_type]
                DB_POOL_UTILIZATION.labels(pool_type=pool_type, metric_type="active").set(pool["active"])
                DB_POOL_UTILIZATION.labels(pool_type=pool_type, metric_type="opened").set(pool["opened"])
                DB_POOL_UTILIZATION.labels(pool_type=pool_type, metric_type="max").set(pool["max"])
            await asyncio.sleep(interval_seconds)
        except asyncio.CancelledError:
            break
        except Exception as e:
            logger.error(f"Error in metrics updater: {e}")
            await asyncio.sleep(interval_seconds)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("🚀 Startup: Initializing Corpus Review API...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")

    logger.info("Starting up: Initializing DB Pool...")
    DatabaseManager.init_pool()
    logger.info(f"✓ Database pools initialized (Read Max={settings.DB_READ_POOL_MAX}, Write Max={settings.DB_WRITE_POOL_MAX})")

    metrics_task = asyncio.create_task(_pool_metrics_updater())
    app.state.metrics_task = metrics_task
    logger.info("✓ Metrics updater started (10s interval)")

    yield

    logger.info("🛑 Shutdown: Cancelling background tasks...")
    metrics_task.cancel()
    await asyncio.gather(metrics_task, return_exceptions=True)

    logger.info("🛑 Shutdown: Closing DB Pool...")
    DatabaseManager.close_pool()


# Initialize FastAPI
app = FastAPI(
    title="Corpus Review API",
    description="Dry-run/apply text consistency review for generated learning content",
    version="1.0.0",
    lifespan=lifespan
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# CORS Configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=_validate_cors_origins(settings.ALLOWED_ORIGINS),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Review Routes (MUST BE BEFORE Instrumentator)
app.include_router(review_routes.router)

# Prometheus /metrics
from prometheus_fastapi_instrumentator import Instrumentator
Instrumentator().instrument(app).expose(app, endpoint="/metrics")


# ============================================================================
# HEALTH CHECK
# ============================================================================

@app.get("/")
async def health_check():
    return {
        "status": "online",
        "service": "Corpus Review API (FastAPI)",
        "timestamp": datetime.now().isoformat(),
    }


if __name__ == "__main__":
    logger.info("Starting FastAPI Server on port 8000 (DIRECT)...")
    uvicorn.run("app:app", host="0.0.0.0", port=8000, reload=True)
