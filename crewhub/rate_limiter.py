"""
Hybrid in-memory + Redis rate limiting for write-heavy public actions
(gig applications, collab interest, RSVPs).

Counters live in process memory and are written through to Redis every few
seconds so that several API workers converge on the same window.
"""

import logging
import os
import time
from threading import Lock
from typing import Optional

import redis
from fastapi import HTTPException, Request, status

from .config import RATE_LIMIT_ENABLED

logger = logging.getLogger(__name__)

redis_client: Optional[redis.Redis] = None

# {key: {"count": int, "reset_time": int, "last_redis_sync": int}}
memory_cache: dict[str, dict] = {}
cache_lock = Lock()

MEMORY_CACHE_SYNC_INTERVAL = 10  # seconds between write-throughs to Redis
MEMORY_CACHE_CLEANUP_INTERVAL = 60
last_cleanup_time = 0


def get_redis_client() -> redis.Redis:
    """Get or create the shared Redis client (REDIS_URL, default localhost)"""
    global redis_client

    if redis_client is None:
        redis_url = os.getenv("REDIS_URL", "redis://localhost:6379/0")
        masked_url = redis_url.split("@")[-1] if "@" in redis_url else redis_url
        logger.info(f"📡 Connecting to Redis at {masked_url}")

        client = redis.from_url(
            redis_url,
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=10,
            retry_on_timeout=True,
            health_check_interval=30,
        )
        client.ping()
        redis_client = client
        logger.info("Redis connected successfully")

    return redis_client


def cleanup_expired_cache(now: Optional[int] = None) -> int:
    """Drop expired windows from the in-memory cache; returns how many were removed"""
    global last_cleanup_time
    now = now if now is not None else int(time.time())

    if now - last_cleanup_time < MEMORY_CACHE_CLEANUP_INTERVAL:
        return 0

    with cache_lock:
        expired = [k for k, v in memory_cache.items() if now >= v.get("reset_time", 0)]
        for k in expired:
            del memory_cache[k]

    last_cleanup_time = now
    if expired:
        logger.debug(f"🧹 Cleaned up {len(expired)} expired rate limit entries")
    return len(expired)


def _load_entry(key: str, window_seconds: int, client: redis.Redis, now: int) -> dict:
    try:
        stored_count = client.get(key)
        stored_ttl = client.ttl(key)
        if stored_count and stored_ttl and stored_ttl > 0:
            return {
                "count": int(stored_count),
                "reset_time": now + stored_ttl,
                "last_redis_sync": now,
            }
    except redis.RedisError as e:
        logger.warning(f"⚠️ Failed to load {key} from Redis, using memory only: {e}")
    return {"count": 0, "reset_time": now + window_seconds, "last_redis_sync": now}


def check_rate_limit(
    key: str, limit: int, window_seconds: int, client: redis.Redis
) -> tuple[bool, int, int]:
    """
    Count one request against ``key``.

    Returns:
        Tuple of (is_allowed, current_count, ttl_seconds)
    """
    now = int(time.time())
    cleanup_expired_cache(now)

    with cache_lock:
        entry = memory_cache.get(key)
        if entry is None:
            entry = memory_cache[key] = _load_entry(key, window_seconds, client, now)

        if now >= entry["reset_time"]:
            entry.update(count=0, reset_time=now + window_seconds, last_redis_sync=0)

        is_allowed = entry["count"] < limit
        if is_allowed:
            entry["count"] += 1

        if now - entry.get("last_redis_sync", 0) >= MEMORY_CACHE_SYNC_INTERVAL:
            try:
                client.set(key, entry["count"], ex=window_seconds)
                entry["last_redis_sync"] = now
            except redis.RedisError as e:
                logger.warning(f"⚠️ Failed to sync {key} to Redis: {e}")

        return is_allowed, entry["count"], max(0, entry["reset_time"] - now)


def client_ip(request: Request) -> str:
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def create_rate_limiter(limit: int, window_seconds: int, key_prefix: str = "rate_limit"):
    """
    Create a per-IP rate limiter dependency.

    Example:
        rate_limit_rsvp = create_rate_limiter(limit=20, window_seconds=3600, key_prefix="rsvp")

        @router.post("/{event_id}/rsvp")
        async def create_rsvp(..., _: None = Depends(rate_limit_rsvp)):
            ...
    """

    async def rate_limiter(request: Request):
        if not RATE_LIMIT_ENABLED:
            return

        key = f"{key_prefix}:{client_ip(request)}"
        try:
            is_allowed, current_count, ttl = check_rate_limit(
                key, limit, window_seconds, get_redis_client()
            )
        except Exception as e:
            logger.error(f"❌ Rate limiting error: {e}")
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Rate limiting service temporarily unavailable",
            ) from e

        if not is_allowed:
            logger.warning(f"🚫 Rate limit EXCEEDED for {key} - {current_count}/{limit}")
            raise HTTPException(
                status_code=429,
                detail=f"Rate limit exceeded. Maximum {limit} requests per {window_seconds} seconds.",
                headers={"Retry-After": str(ttl)},
            )

        request.state.rate_limit_remaining = limit - current_count

    return rate_limiter
