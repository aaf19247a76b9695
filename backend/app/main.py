# app/main.py
import asyncio
import datetime as dt
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Your configuration and DB
from app.config import settings
from app.core.db import init_db, close_db
from app.core.errors import ServiceError

from app.api.v1.routers import auth

from app.core.bootstrap import ensure_default_admin
from app.services.transfer_files import run_cleanup_loop
logger = logging.getLogger("uvicorn.error")

app = FastAPI(title=settings.APP_NAME)

# CORS (with Cookie)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    # Same envelope the routes use for validation failures
    return JSONResponse(status_code=exc.status_code, content={"success": False, "error": exc.to_dict()})

@app.on_event("startup")
async def on_startup():
    # Your DB initialization
    await init_db()
    # Ensure there's a default admin account on first run
    await ensure_default_admin()
    # Periodically drop upload records that stopped progressing
    retention = dt.timedelta(hours=settings.transfer_retention_hours)
    app.state.cleanup_task = asyncio.create_task(
        run_cleanup_loop(settings.transfer_cleanup_interval_seconds, retention)
    )
    logger.info("[cleanup] Transferring file sweep every %ss, retention %s",
                settings.transfer_cleanup_interval_seconds, retention)

@app.on_event("shutdown")
async def on_shutdown():
    task = getattr(app.state, "cleanup_task", None)
    if task is not None:
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
    await close_db()

# REST
app.include_router(auth.router, prefix="/api/v1")

@app.get("/healthz")
def healthz():
    return {"ok": True}
