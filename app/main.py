# app/main.py

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
import sys

# Import your core modules
from app.core.database import test_connection, init_db
from app.core.config import settings
from app.core.rate_limiter import limiter
from app.core.seeding_logic import seed_all

# Routers
from app.api.endpoints import (
    auth as auth_router,
    admin as admin_router,
    phone as phone_router,
    posts as posts_router,
    registration as registration_router,
    documents as documents_router,
    payments as payments_router,
    dashboard as dashboard_router,
    applications as applications_router,
    metrics as metrics_router,
)

# ------------------------------------------------------------
# LOGURU CONFIGURATION
# ------------------------------------------------------------
logger.remove()
logger.add(
    sys.stdout,
    format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
           "<level>{level}</level> | "
           "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
           "<level>{message}</level>",
    colorize=True,
    backtrace=True,
    diagnose=settings.ENV != "prod",
)

# ------------------------------------------------------------
# FASTAPI APP INIT
# ------------------------------------------------------------
app = FastAPI(
    title="Exam Registration Portal Backend",
    version="1.0.0",
    description="Backend service for candidate registration to government examination posts.",
)

# ------------------------------------------------------------
# RATE LIMITING
# ------------------------------------------------------------
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# ------------------------------------------------------------
# CORS CONFIGURATION
# ------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        settings.FRONTEND_URL,
        "http://localhost:5173",
    ],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "*"],
)

# ------------------------------------------------------------
# REGISTER ROUTERS
# ------------------------------------------------------------
app.include_router(auth_router.router)
app.include_router(admin_router.router)
app.include_router(phone_router.router)
app.include_router(posts_router.router)
app.include_router(registration_router.router)
app.include_router(documents_router.router)
app.include_router(payments_router.router)
app.include_router(dashboard_router.router)
app.include_router(applications_router.router)
app.include_router(metrics_router.router)

# ------------------------------------------------------------
# APPLICATION STARTUP EVENTS
# ------------------------------------------------------------
@app.on_event("startup")
async def on_startup():
    logger.info("Starting Exam Registration Portal Backend...")

    # 1) Database connection test
    try:
        await test_connection()
        db_status = "Connected"
        logger.success("Database connection established.")
    except Exception:
        db_status = "Error"
        logger.exception("Startup aborted: Database connection failed.")

    if db_status != "Connected":
        return

    # 2) Initialize database tables
    try:
        await init_db()
        logger.success("Database tables ready.")
    except Exception as e:
        logger.warning(f"Table initialization encountered an issue: {e}")

    # 3) Posts, category fees and the super admin
    await seed_all()

    logger.success("Backend startup completed successfully.\n")


# ------------------------------------------------------------
# ROOT HEALTH CHECK
# ------------------------------------------------------------
@app.get("/", tags=["System"])
async def root():
    return {
        "status": "ok",
        "service": "Exam Registration Portal Backend",
        "version": app.version,
        "message": "Backend running successfully",
        "metrics_url": "/api/metrics"
    }
