import logging
from typing import List, Optional
from . import cache, config

logger = logging.getLogger(__name__)

PRODUCT_RATING_PREFIX = "product_rating"


def product_rating_key(product_id: int) -> str:
    return f"{PRODUCT_RATING_PREFIX}:{product_id}"


async def invalidate_product_rating_cache(product_id: Optional[int] = None):
    """
    Drop cached rating summaries so the next read recomputes them.

    Args:
        product_id: Only this product's summary is removed; when None every
            `product_rating:*` key is scanned and deleted
    """
    if not config.CACHE_ENABLED:
        return False

    try:
        if product_id is not None:
            deleted = await cache.delete_cache(product_rating_key(product_id))
            if deleted:
                logger.info(f"Invalidated rating cache for product {product_id}")
            return deleted

        pattern = f"{PRODUCT_RATING_PREFIX}:*"
        cursor = 0
        while True:
            cursor, keys = await cache.redis_client.scan(cursor=cursor, match=pattern, count=100)
            if keys:
                logger.info(f"Invalidating {len(keys)} cache keys matching pattern: {pattern}")
                await cache.redis_client.delete(*keys)
            if cursor == 0:
                break
        logger.info("Product rating cache invalidated successfully")
        return True
    except Exception as e:
        logger.error(f"Error invalidating product rating cache: {str(e)}")
        return False


async def invalidate_specific_cache(cache_keys: List[str]):
    """
    Drop the given cache keys.

    Args:
        cache_keys: Keys to delete
    """
    if not config.CACHE_ENABLED:
        return False

    try:
        if cache_keys:
            await cache.redis_client.delete(*cache_keys)
            logger.info(f"Invalidated specific cache keys: {cache_keys}")
        return True
    except Exception as e:
        logger.error(f"Error invalidating specific cache keys: {str(e)}")
        return False
