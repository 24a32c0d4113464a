"""
Security service for handling Rate Limiting.
"""
import os
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from imagesource.services.system.logger_service import get_logger

logger = get_logger(__name__)

def get_limiter_storage_uri():
    return os.getenv("RATE_LIMIT_STORAGE_URI") or "memory://"


def get_default_limits():
    # e.g. RATE_LIMIT="120 per minute;2000 per hour"
    raw = os.getenv("RATE_LIMIT", "")
    return [limit.strip() for limit in raw.split(';') if limit.strip()]


def configure_limiter(app) -> Limiter:
    """
    Create a limiter bound to the app instance.
    Limits come from RATE_LIMIT; without it no default limit is applied.
    """
    default_limits = get_default_limits()
    logger.info("Initializing Flask-Limiter for request rate limiting", extra={"default_limits": default_limits})
    return Limiter(
        get_remote_address,
        app=app,
        default_limits=default_limits,
        storage_uri=get_limiter_storage_uri(),
        strategy="fixed-window",
    )
