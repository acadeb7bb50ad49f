"""
Rate limiting middleware using slowapi with Redis support.
"""

from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
import redis

from core.config import get_settings
from core.logger import get_logger

logger = get_logger(__name__)
settings = get_settings()

# In development/localhost, use much higher limits
if settings.DEBUG or settings.ENVIRONMENT.lower() in ["development", "dev", "local"]:
    default_rate_limit = "10000/minute"
    logger.info(f"Rate limiting configured for development: {default_rate_limit}")
else:
    default_rate_limit = f"{settings.RATE_LIMIT_PER_MINUTE}/minute"
    logger.info(f"Rate limiting configured for production: {default_rate_limit}")

# Redis lets several API workers share counters; fall back to in-memory
try:
    redis_client = redis.from_url(settings.REDIS_URL, decode_responses=True, socket_connect_timeout=1)
    redis_client.ping()
    limiter = Limiter(
        key_func=get_remote_address,
        storage_uri=settings.REDIS_URL,
        default_limits=[default_rate_limit]
    )
    logger.info("Rate limiting initialized with Redis")
except redis.RedisError as e:
    limiter = Limiter(
        key_func=get_remote_address,
        default_limits=[default_rate_limit]
    )
    logger.warning(f"Rate limiting initialized with in-memory storage (Redis not available): {str(e)}")

__all__ = ['limiter', 'default_rate_limit', '_rate_limit_exceeded_handler', 'RateLimitExceeded']
