from __future__ import annotations

from collections.abc import Generator

import pytest

pytest.importorskip("httpx")
from fastapi.testclient import TestClient

from api.main import app
from services.cache import RateCache, get_rate_cache
from tests.fixtures.clock import FakeClock
from tests.fixtures.fx import StubFetcher, make_rates


@pytest.fixture()
def stub_fetcher() -> StubFetcher:
    return StubFetcher(make_rates())


@pytest.fixture()
def rate_cache(stub_fetcher: StubFetcher, fake_clock: FakeClock) -> RateCache:
    return RateCache(stub_fetcher, ttl_seconds=300, clock=fake_clock)


@pytest.fixture()
def client(rate_cache: RateCache) -> Generator[TestClient, None, None]:
    app.dependency_overrides[get_rate_cache] = lambda: rate_cache
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()
