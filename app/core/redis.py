import logging
import redis.asyncio as redis
from redis.exceptions import RedisError
from app.core.config import REDIS_URL

logger = logging.getLogger("app.redis")


async def create_redis(url: str | None = REDIS_URL) -> redis.Redis | None:
    """Client for the audit stream. None when Redis is not configured or unreachable."""
    if not url:
        logger.info("REDIS_URL not set, audit records go to the log only")
        return None

    client = redis.from_url(
        url,
        encoding="utf-8",
        decode_responses=True,
        health_check_interval=30,
        retry_on_timeout=True,
        socket_connect_timeout=10,
        socket_keepalive=True
    )
    try:
        await client.ping()
    except RedisError:
        logger.warning("Redis unreachable at startup, audit records go to the log only", exc_info=True)
        await client.aclose()
        return None
    return client


async def close_redis(client: redis.Redis | None) -> None:
    if client is not None:
        await client.aclose()
