from __future__ import annotations

import pytest

from domain.models import ExchangeRateSet
from tests.fixtures.clock import FakeClock
from tests.fixtures.fx import make_rates
from tests.fixtures.time import FakeNow


@pytest.fixture
def fake_clock() -> FakeClock:
    """Provide a deterministic monotonic clock for TTL tests."""

    return FakeClock()


@pytest.fixture
def fake_now() -> FakeNow:
    return FakeNow()


@pytest.fixture
def sample_rates() -> ExchangeRateSet:
    return make_rates()
