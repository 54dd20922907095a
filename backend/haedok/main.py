import logging
import traceback
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

from haedok.config import settings
from haedok.routers import analysis, catalog, data_export, exchange_rate
from haedok.services.catalog import get_catalog


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Fail fast on a broken catalog file instead of on the first request
    loaded = get_catalog()
    logger.info(
        "%s starting with %d bundles, %d discount events, %d presets",
        settings.APP_NAME,
        len(loaded.bundles),
        len(loaded.discount_events),
        len(loaded.service_presets),
    )
    yield


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Savings engine
app.include_router(analysis.router, prefix="/api/v1")
app.include_router(catalog.router, prefix="/api/v1")

# Peripheral helpers
app.include_router(exchange_rate.router, prefix="/api/v1")
app.include_router(data_export.router, prefix="/api/v1")


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error: {exc}\n{traceback.format_exc()}")
    return JSONResponse(status_code=500, content={"detail": str(exc)})


@app.get("/health")
async def health_check():
    return {"status": "ok", "app": settings.APP_NAME}
