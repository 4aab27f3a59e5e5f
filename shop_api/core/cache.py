import redis.asyncio as redis
from typing import Optional
import logging

from . import config

logger = logging.getLogger(__name__)

redis_client = redis.from_url(config.REDIS_URL, decode_responses=True)


async def get_cache(key: str) -> Optional[str]:
    if not config.CACHE_ENABLED:
        return None
    try:
        return await redis_client.get(key)
    except Exception as e:
        logger.warning(f"Cache read failed for {key}: {str(e)}")
        return None


async def set_cache(key: str, value: str, expire: int = 300) -> bool:
    if not config.CACHE_ENABLED:
        return False
    try:
        await redis_client.set(key, value, ex=expire)
        return True
    except Exception as e:
        logger.warning(f"Cache write failed for {key}: {str(e)}")
        return False


async def delete_cache(key: str) -> bool:
    if not config.CACHE_ENABLED:
        return False
    try:
        await redis_client.delete(key)
        return True
    except Exception as e:
        logger.warning(f"Cache delete failed for {key}: {str(e)}")
        return False


async def close_cache():
    await redis_client.aclose()
