#app/api/endpoints/metrics.py

from fastapi import APIRouter, Depends
import redis.asyncio as redis
import time
import socket
import os
import psutil

from app.core.config import settings
from app.core.database import test_connection
from app.core.rbac import require_admin
from app.models.user import User

router = APIRouter(
    prefix="/api/metrics",
    tags=["System & Metrics"]
)

# Track when the module is loaded for uptime calculation
START_TIME = time.time()


# ===================================================================
# 1. HOST + DATABASE METRICS
# ===================================================================
@router.get("")
async def metrics():
    uptime_seconds = int(time.time() - START_TIME)
    cpu_usage = psutil.cpu_percent(interval=None)
    ram_usage = psutil.virtual_memory().percent
    try:
        disk_usage = psutil.disk_usage('/').percent
    except OSError:
        disk_usage = 0

    db_start = time.time()
    db_latency = 0
    try:
        await test_connection()
        db_status = "Connected"
        db_latency = round((time.time() - db_start) * 1000, 2)
    except Exception:
        db_status = "Error"

    return {
        "status": "Online",
        "cpu": cpu_usage,
        "ram": ram_usage,
        "disk": disk_usage,
        "uptime": uptime_seconds,
        "database": db_status,
        "db_latency": db_latency,
    }


# ===================================================================
# 2. SERVICE HEALTH
# ===================================================================
@router.get("/health")
async def system_health():
    db_status = "Disconnected"
    try:
        await test_connection()
        db_status = "Connected"
    except Exception:
        db_status = "Error"

    smtp_status = "Not Configured"
    if settings.SMTP_HOST:
        try:
            sock = socket.create_connection((settings.SMTP_HOST, settings.SMTP_PORT), timeout=2)
            sock.close()
            smtp_status = "Connected"
        except OSError:
            smtp_status = "Error"

    return {
        "status": "Online",
        "uptime_seconds": int(time.time() - START_TIME),
        "database": db_status,
        "smtp_server": smtp_status,
        "storage": "Configured" if settings.SUPABASE_URL and settings.SUPABASE_KEY else "Not Configured",
        "sms_gateway": "Configured" if settings.SMS_API_URL else "Not Configured",
        "environment": "Serverless (Vercel)" if os.environ.get("VERCEL") else settings.ENV,
    }


# ===================================================================
# 3. RATE LIMIT STORE (Admin Only)
# ===================================================================
@router.get("/redis-stats")
async def get_redis_statistics(
    _: User = Depends(require_admin),
):
    if not settings.REDIS_URL:
        return {"status": "Disabled", "message": "Redis is not configured."}

    client = None
    try:
        client = redis.from_url(
            settings.REDIS_URL,
            encoding="utf-8",
            decode_responses=True,
            socket_connect_timeout=2
        )

        info = await client.info()

        active_limits = []
        async for key in client.scan_iter(match="LIMITER/*", count=100):
            active_limits.append(key)
            if len(active_limits) >= 20:
                break

        return {
            "status": "Online",
            "metrics": {
                "redis_version": info.get("redis_version"),
                "connected_clients": info.get("connected_clients"),
                "used_memory": info.get("used_memory_human"),
                "active_rate_limit_windows": len(active_limits),
            }
        }

    except redis.ConnectionError:
        return {"status": "Offline", "detail": "Redis server unreachable."}
    finally:
        if client:
            await client.close()
