from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

from docbook.core.rate_limit import (
    MemoryRateLimitStore, RateLimiter, RedisRateLimitStore, global_rate_limit
)

from .conftest import API


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


class TestMemoryRateLimitStore:

    def test_counts_within_window(self):
        store = MemoryRateLimitStore(clock=FakeClock())
        assert [store.hit("k", 60) for _ in range(3)] == [1, 2, 3]

    def test_window_resets_after_expiry(self):
        clock = FakeClock()
        store = MemoryRateLimitStore(clock=clock)
        store.hit("k", 60)
        store.hit("k", 60)

        clock.now += 61
        assert store.hit("k", 60) == 1

    def test_keys_are_independent(self):
        store = MemoryRateLimitStore(clock=FakeClock())
        store.hit("a", 60)
        assert store.hit("b", 60) == 1

    def test_reset(self):
        store = MemoryRateLimitStore(clock=FakeClock())
        store.hit("a", 60)
        store.hit("b", 60)
        store.reset("a")
        assert store.hit("a", 60) == 1
        store.reset()
        assert store.hit("b", 60) == 1


class FakePipeline:
    def __init__(self, client):
        self.client = client
        self.ops = []

    def incr(self, key):
        self.ops.append(("incr", key))

    def ttl(self, key):
        self.ops.append(("ttl", key))

    def execute(self):
        results = []
        for op, key in self.ops:
            if op == "incr":
                self.client.values[key] = self.client.values.get(key, 0) + 1
                results.append(self.client.values[key])
            else:
                results.append(self.client.ttls.get(key, -1))
        return results


class FakeRedis:
    def __init__(self):
        self.values = {}
        self.ttls = {}

    def pipeline(self):
        return FakePipeline(self)

    def expire(self, key, seconds):
        self.ttls[key] = seconds

    def delete(self, *keys):
        for key in keys:
            self.values.pop(key, None)
            self.ttls.pop(key, None)


def test_redis_store_sets_expiry_on_first_hit():
    redis_client = FakeRedis()
    store = RedisRateLimitStore(redis_client)

    assert store.hit("rate_limit:global:1.2.3.4", 900) == 1
    assert redis_client.ttls["rate_limit:global:1.2.3.4"] == 900
    assert store.hit("rate_limit:global:1.2.3.4", 900) == 2

    store.reset("rate_limit:global:1.2.3.4")
    assert store.hit("rate_limit:global:1.2.3.4", 900) == 1


def test_limiter_rejects_after_budget():
    limiter = RateLimiter("test", max_requests=2, window_seconds=60, store=MemoryRateLimitStore())
    app = FastAPI()

    @app.get("/ping", dependencies=[Depends(limiter)])
    def ping():
        return {"ok": True}

    with TestClient(app) as client:
        assert client.get("/ping").status_code == 200
        assert client.get("/ping").status_code == 200
        response = client.get("/ping")
        assert response.status_code == 429
        assert response.json()["detail"] == "Too many requests from this IP, please try again later"


def test_global_limit_on_api(client, monkeypatch):
    monkeypatch.setattr(global_rate_limit, "max_requests", 2)

    assert client.get(f"{API}/specializations").status_code == 200
    assert client.get(f"{API}/specializations").status_code == 200

    response = client.get(f"{API}/specializations")
    assert response.status_code == 429
    assert response.json()["success"] is False
    assert response.json()["message"] == "Too many requests from this IP, please try again later"
