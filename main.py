# main.py
from dotenv import load_dotenv
load_dotenv()

import os
import logging

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

# --- logging config HARUS di atas ---
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

from mediscan.presentation.routers import router as v1_router
from mediscan.presentation.health import router as health_router

APP_VERSION = os.getenv("APP_VERSION", "0.1.0")

app = FastAPI(
    title="MediScan Verify",
    version=APP_VERSION,
)

# gunakan logger aplikasi sendiri, bukan 'uvicorn.access'
app_logger = logging.getLogger("mediscan.request")

@app.middleware("http")
async def log_requests(request: Request, call_next):
    app_logger.info(f"➡️ Incoming {request.method} {request.url.path}")
    try:
        response = await call_next(request)
        app_logger.info(f"⬅️ Completed {request.method} {request.url.path} -> {response.status_code}")
        return response
    except Exception:
        app_logger.exception(f"❌ Unhandled error on {request.method} {request.url.path}")
        raise

# ─────────────────────────────────────────────────────────────
# CORS (atur via env: CORS_ALLOW_ORIGINS="https://foo.com,https://bar.com")
# ─────────────────────────────────────────────────────────────
raw_origins = os.getenv("CORS_ALLOW_ORIGINS", "*")
allow_origins = [o.strip().rstrip("/") for o in raw_origins.split(",") if o.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials="*" not in allow_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ─────────────────────────────────────────────────────────────
# Routes
# ─────────────────────────────────────────────────────────────
app.include_router(v1_router, tags=["api"])
app.include_router(health_router, tags=["health"])

@app.get("/")
async def root():
    return {
        "name": "MediScan Verify",
        "version": APP_VERSION,
        "ok": True,
    }

@app.options("/{rest_of_path:path}")
async def any_options(rest_of_path: str):
    return Response(status_code=204)
