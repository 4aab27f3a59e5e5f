import pytest
from unittest.mock import AsyncMock

from ..core import cache, config
from ..core.invalidation_helpers import (
    invalidate_product_rating_cache,
    invalidate_specific_cache,
    product_rating_key
)


@pytest.fixture
def fake_redis(monkeypatch):
    client = AsyncMock()
    monkeypatch.setattr(cache, "redis_client", client)
    monkeypatch.setattr(config, "CACHE_ENABLED", True)
    return client


@pytest.mark.asyncio
async def test_invalidate_single_product_rating(fake_redis):
    """Only the summary of the given product is dropped"""
    success = await invalidate_product_rating_cache(7)
    assert success is True
    fake_redis.delete.assert_awaited_once_with(product_rating_key(7))
    fake_redis.scan.assert_not_called()


@pytest.mark.asyncio
async def test_invalidate_all_product_ratings(fake_redis):
    """Scan walks every page until the cursor returns to 0"""
    fake_redis.scan.side_effect = [
        (42, ["product_rating:1", "product_rating:2"]),
        (0, ["product_rating:3"])
    ]

    success = await invalidate_product_rating_cache()
    assert success is True
    assert fake_redis.scan.await_count == 2
    fake_redis.delete.assert_any_await("product_rating:1", "product_rating:2")
    fake_redis.delete.assert_any_await("product_rating:3")


@pytest.mark.asyncio
async def test_invalidate_specific_cache(fake_redis):
    success = await invalidate_specific_cache(["test:key1", "test:key2"])
    assert success is True
    fake_redis.delete.assert_awaited_once_with("test:key1", "test:key2")


@pytest.mark.asyncio
async def test_invalidation_reports_redis_failure(fake_redis):
    fake_redis.delete.side_effect = ConnectionError("redis down")
    assert await invalidate_product_rating_cache(1) is False


@pytest.mark.asyncio
async def test_invalidation_skipped_when_cache_disabled(fake_redis, monkeypatch):
    monkeypatch.setattr(config, "CACHE_ENABLED", False)
    assert await invalidate_specific_cache(["a"]) is False
    fake_redis.delete.assert_not_called()


@pytest.mark.asyncio
async def test_get_cache_tolerates_redis_failure(fake_redis):
    fake_redis.get.side_effect = ConnectionError("redis down")
    assert await cache.get_cache("product_rating:1") is None


def test_rating_summary_served_from_cache(client, product, fake_redis):
    """A cached summary is returned without touching the database"""
    cached = (
        '{"product_id": %d, "product_name": "Cached", "total_ratings": 3, '
        '"average_rating": 4.33, "ratings": []}' % product["id"]
    )
    fake_redis.get.return_value = cached

    response = client.get(f"/api/products/{product['id']}/rating")
    assert response.status_code == 200
    assert response.json()["data"]["product_name"] == "Cached"
    fake_redis.get.assert_awaited_once_with(product_rating_key(product["id"]))


def test_rating_summary_is_cached_on_miss(client, product, fake_redis):
    fake_redis.get.return_value = None

    client.get(f"/api/products/{product['id']}/rating")
    key, value = fake_redis.set.await_args.args
    assert key == product_rating_key(product["id"])
    assert '"total_ratings":0' in value
    assert fake_redis.set.await_args.kwargs == {"ex": 300}


@pytest.fixture
def rating(client, user_headers, order, product, buyer_auth):
    response = client.post("/api/ratings", json={
        "order_id": order["id"],
        "product_id": product["id"],
        "buyer_id": buyer_auth["buyer"]["id"],
        "rating": 4
    }, headers=user_headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


def test_moving_rating_drops_both_summaries(client, admin_headers, user_headers, rating, fake_redis):
    other = client.post("/api/products", json={
        "product_code": "P2", "name": "Pen", "type": "stationery", "price": 3
    }, headers=admin_headers).json()["data"]

    response = client.put(f"/api/ratings/{rating['id']}", json={"product_id": other["id"]}, headers=user_headers)
    assert response.status_code == 200
    deleted = set(fake_redis.delete.await_args.args)
    assert deleted == {product_rating_key(rating["product_id"]), product_rating_key(other["id"])}


def test_deleting_order_drops_rated_summaries(client, admin_headers, order, rating, fake_redis):
    response = client.delete(f"/api/orders/{order['id']}", headers=admin_headers)
    assert response.status_code == 200
    fake_redis.delete.assert_awaited_once_with(product_rating_key(rating["product_id"]))


def test_deleting_rater_scans_all_summaries(client, admin_headers, buyer_auth, rating, fake_redis):
    fake_redis.scan.return_value = (0, [product_rating_key(rating["product_id"])])

    response = client.delete(f"/api/buyers/{buyer_auth['buyer']['id']}", headers=admin_headers)
    assert response.status_code == 200
    fake_redis.scan.assert_awaited_once_with(cursor=0, match="product_rating:*", count=100)
    fake_redis.delete.assert_awaited_once_with(product_rating_key(rating["product_id"]))
