# app/core/rate_limiter.py

import hashlib
import os

from loguru import logger
from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.requests import Request

from app.core.config import settings

# ----------------------------------------------------------------
# LIMITS PER THROTTLED ROUTE
# ----------------------------------------------------------------
# POST /api/auth/signup, /api/auth/login, /api/admin/login
LOGIN_LIMIT = "10/minute"

# POST /api/phone/send-otp (each call sends an SMS)
OTP_SEND_LIMIT = "3/minute"

# POST /api/phone/verify-otp
OTP_VERIFY_LIMIT = "10/minute"

# POST /api/registration/documents
DOCUMENT_UPLOAD_LIMIT = "10/minute"

# GET /api/posts (public)
POST_LISTING_LIMIT = "20/minute"


# ----------------------------------------------------------------
# RATE LIMIT KEYS
# ----------------------------------------------------------------
def client_ip(request: Request) -> str:
    """Client address behind Vercel/Nginx (X-Forwarded-For) or Cloudflare (X-Real-IP)."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip

    return get_remote_address(request)


def candidate_key(request: Request) -> str:
    """
    Key for the OTP and upload routes: the hashed bearer token when present,
    otherwise the client address.
    """
    auth = request.headers.get("Authorization", "")
    if auth.lower().startswith("bearer "):
        digest = hashlib.sha256(auth[7:].encode()).hexdigest()[:32]
        return f"candidate:{digest}"
    return f"ip:{client_ip(request)}"


# ----------------------------------------------------------------
# STORAGE
# ----------------------------------------------------------------
def _storage_uri() -> str | None:
    uri = settings.REDIS_URL
    # managed Redis (Upstash, DigitalOcean) only accepts TLS
    if uri and uri.startswith("redis://") and not os.environ.get("DEV_MODE"):
        uri = uri.replace("redis://", "rediss://", 1)
    return uri or None


def build_limiter() -> Limiter:
    uri = _storage_uri()
    if not uri:
        logger.warning("REDIS_URL not set. Registration rate limits are kept in memory.")
        return Limiter(key_func=client_ip)

    try:
        logger.info("Registration rate limits stored in Redis")
        return Limiter(
            key_func=client_ip,
            storage_uri=uri,
            strategy="fixed-window",
            storage_options={"socket_connect_timeout": 5, "retry_on_timeout": True},
        )
    except Exception as e:
        logger.error(f"Redis unavailable for rate limiting, using memory: {e}")
        return Limiter(key_func=client_ip)


limiter = build_limiter()

# test runs send many OTPs and uploads from one client
if os.environ.get("TESTING"):
    limiter.enabled = False
