# badge_api/main.py
"""
FastAPI application entry point.
Includes CORS, request timing, error handlers for the badge error taxonomy, and all routers.
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from badge_api.routers import health, movements, users
from badge_api.database import SessionLocal, create_tables
from badge_api.config import settings
from badge_api.exceptions import BadgeAPIError, StoreError
from badge_api.services.movement_service import MovementLog
from badge_api.utils.logger import get_logger
import time

logger = get_logger(__name__)

app = FastAPI(
    title="Badge API",
    description="Badge registrations and alternating IN/OUT movement log.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.state.movement_log = MovementLog(settings, session_factory=SessionLocal)

# ── CORS (badge readers and dashboards call from anywhere) ──────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Request Timing Middleware ────────────────────────────────────────────────
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    duration = round((time.time() - start) * 1000, 2)
    logger.debug(f"{request.method} {request.url.path} → {response.status_code} ({duration}ms)")
    return response


# ── Exception Handlers ───────────────────────────────────────────────────────
@app.exception_handler(BadgeAPIError)
async def badge_api_error_handler(request: Request, exc: BadgeAPIError):
    if isinstance(exc, StoreError):
        logger.error(f"Store error on {request.method} {request.url.path}: {exc.detail}")
    else:
        logger.info(f"{request.method} {request.url.path} → {exc.status_code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    logger.info(f"Rejected body on {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": "Invalid request body"},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Server error"},
    )


# ── Routers ──────────────────────────────────────────────────────────────────
@app.get("/", tags=["💚 Health"], summary="Liveness banner")
def root():
    return {"status": "OK", "message": "Badge API online"}


app.include_router(users.router,     prefix="/api", tags=["🪪 Users"])
app.include_router(movements.router, prefix="/api", tags=["🚪 Movements"])
app.include_router(health.router,    prefix="/api", tags=["💚 Health"])


# ── Startup ───────────────────────────────────────────────────────────────────
@app.on_event("startup")
async def startup():
    logger.info("🚀 Badge API starting up...")
    create_tables()
    logger.info("✅ Database tables ready")
    logger.info(f"🌐 Listening on http://{settings.BACKEND_HOST}:{settings.BACKEND_PORT}")
    logger.info("📖 API docs at /docs")


@app.on_event("shutdown")
async def shutdown():
    logger.info("🛑 Badge API shutting down...")
