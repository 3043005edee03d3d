from __future__ import annotations

import threading

import pytest

from infrastructure.fx.provider import (
    RATE_QUERY,
    CompletionRateLookup,
    ExtractedRates,
    RateFetcher,
    extract_rates,
)
from shared.errors import ExternalAPIError
from tests.fixtures.fx import StubCompletionClient
from tests.fixtures.time import FakeNow


class StubLookup:
    def __init__(self, reply: str | Exception) -> None:
        self.reply = reply
        self.queries: list[str] = []

    def lookup(self, query: str) -> str:
        self.queries.append(query)
        if isinstance(self.reply, Exception):
            raise self.reply
        return self.reply


class BlockingLookup:
    def __init__(self) -> None:
        self.release = threading.Event()

    def lookup(self, query: str) -> str:
        self.release.wait(timeout=5)
        return '{"oficial": 1000}'


def _fetcher(lookup, now: FakeNow, **kwargs) -> RateFetcher:
    params = {"timeout": 1.0, "ccl_multiplier": 1.95, "blue_multiplier": 2.0}
    params.update(kwargs)
    return RateFetcher(lookup, now=now, **params)


def test_official_only_reply_derives_ccl_and_blue(fake_now: FakeNow) -> None:
    lookup = StubLookup("El dólar oficial en Banco Nación cotiza a $1.050,50 para la venta.")
    fetcher = _fetcher(lookup, fake_now)

    rates = fetcher.fetch_rates()

    assert lookup.queries == [RATE_QUERY]
    assert rates.usd_official == pytest.approx(1050.5)
    assert rates.usd_ccl == pytest.approx(1050.5 * 1.95)
    assert rates.usd_blue == pytest.approx(1050.5 * 2.0)
    assert rates.retrieved_at == fake_now.now
    assert rates.source == "lookup"


def test_json_reply_uses_each_reported_rate(fake_now: FakeNow) -> None:
    reply = '```json\n{"oficial": 1000, "ccl": "1.180,25", "blue": {"compra": 1190, "venta": 1215}}\n```'
    rates = _fetcher(StubLookup(reply), fake_now).fetch_rates()

    assert rates.usd_official == 1000.0
    assert rates.usd_ccl == pytest.approx(1180.25)
    assert rates.usd_blue == 1215.0


@pytest.mark.parametrize(
    "reply",
    ["El dólar oficial cotiza a $1.050", '{"oficial": "1.050"}', '{"oficial": "$ 1.050"}'],
)
def test_thousands_without_decimals_are_read_as_thousands(reply: str, fake_now: FakeNow) -> None:
    rates = _fetcher(StubLookup(reply), fake_now).fetch_rates()

    assert rates.source == "lookup"
    assert rates.usd_official == 1050.0
    assert rates.usd_ccl == pytest.approx(1050.0 * 1.95)
    assert rates.usd_blue == pytest.approx(2100.0)


def test_json_reply_with_null_ccl_is_derived(fake_now: FakeNow) -> None:
    rates = _fetcher(StubLookup('{"oficial": 800, "ccl": null, "blue": 1500}'), fake_now).fetch_rates()

    assert rates.usd_ccl == pytest.approx(1560.0)
    assert rates.usd_blue == 1500.0


@pytest.mark.parametrize(
    "lookup",
    [
        StubLookup(ExternalAPIError("Completion API error 500")),
        StubLookup("No tengo información actualizada."),
        StubLookup('{"blue": 1200}'),
        StubLookup('{"oficial": -3}'),
    ],
)
def test_failures_yield_fixed_fallback(lookup: StubLookup, fake_now: FakeNow) -> None:
    rates = _fetcher(lookup, fake_now).fetch_rates()

    assert rates.usd_official == 365.50
    assert rates.usd_ccl == 720.80
    assert rates.usd_blue == 735.20
    assert rates.ars == 1.0
    assert rates.source == "fallback"
    assert rates.retrieved_at == fake_now.now


def test_slow_lookup_is_abandoned_after_timeout(fake_now: FakeNow) -> None:
    lookup = BlockingLookup()
    fetcher = _fetcher(lookup, fake_now, timeout=0.05)
    try:
        rates = fetcher.fetch_rates()
    finally:
        lookup.release.set()
        fetcher.close()

    assert rates.source == "fallback"
    assert rates.usd_official == 365.50


def test_close_is_idempotent_and_lookups_resume_afterwards(fake_now: FakeNow) -> None:
    fetcher = _fetcher(StubLookup('{"oficial": 1000}'), fake_now)

    assert fetcher.fetch_rates().source == "lookup"
    fetcher.close()
    fetcher.close()

    rates = fetcher.fetch_rates()
    fetcher.close()

    assert rates.source == "lookup"
    assert rates.usd_official == 1000.0


def test_build_rates_requires_official_figure(fake_now: FakeNow) -> None:
    fetcher = _fetcher(StubLookup(""), fake_now)

    with pytest.raises(ValueError):
        fetcher.build_rates(ExtractedRates(ccl=1200.0))


@pytest.mark.parametrize(
    ("reply", "expected"),
    [
        ('{"Oficial": 1000, "CCL": 1200, "Blue": 1250}', ExtractedRates(1000.0, 1200.0, 1250.0)),
        ('Respuesta: {"official": "1.050,00"} según BNA', ExtractedRates(official=1050.0)),
        ("1050.5", ExtractedRates(official=1050.5)),
        ("sin datos", ExtractedRates()),
        (None, ExtractedRates()),
    ],
)
def test_extract_rates(reply, expected) -> None:
    assert extract_rates(reply) == expected


def test_completion_lookup_asks_for_json_with_deterministic_settings() -> None:
    client = StubCompletionClient('{"oficial": 1000}')
    lookup = CompletionRateLookup(client, timeout=3)

    reply = lookup.lookup(RATE_QUERY)

    assert reply == '{"oficial": 1000}'
    call = client.calls[0]
    assert call["temperature"] == 0.0
    assert call["max_tokens"] == 200
    assert call["timeout"] == 3.0
    assert call["messages"][0]["role"] == "system"
    assert call["messages"][1] == {"role": "user", "content": RATE_QUERY}
