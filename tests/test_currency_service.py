from __future__ import annotations

import httpx
import pytest

from catalog_api.domain.currency import convert_price, is_valid_currency, normalize_currency
from catalog_api.repositories.sql_repository import SQLRepository
from catalog_api.services.currency_service import (
    CurrencyError,
    CurrencyService,
    ExchangeRateClient,
    UpstreamUnavailableError,
)
from catalog_api.services.product_service import ProductNotFoundError

RATES_URL = "https://rates.test/v4/latest/USD"


def _client(handler) -> ExchangeRateClient:
    return ExchangeRateClient(url=RATES_URL, timeout=1, client=httpx.Client(transport=httpx.MockTransport(handler)))


def _rates_handler(rates: dict, calls: list | None = None):
    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(str(request.url))
        return httpx.Response(200, json={"base": "USD", "rates": rates})

    return handler


@pytest.fixture()
def product(db_env):
    repo = SQLRepository()
    owner = repo.create_user("seller12", "seller@example.com", "hash")
    return repo.create_product(owner.id, name="iPhone 14 Pro", price=999, quantity=50, category="Electronics")


def test_currency_helpers():
    assert normalize_currency(" eur ") == "EUR"
    assert is_valid_currency("EUR")
    assert not is_valid_currency("EURO")
    assert not is_valid_currency("E1R")
    assert not is_valid_currency("")
    assert convert_price(999, 0.85) == 849.15
    assert convert_price(10, 0.3333) == 3.33
    assert convert_price(0.125, 1) == 0.13


def test_converts_with_live_rate(product):
    calls = []
    svc = CurrencyService(rates_client=_client(_rates_handler({"EUR": 0.85, "GBP": 0.79}, calls)))

    result = svc.convert_product_price(product.id, "eur")

    assert calls == [RATES_URL]
    assert result.currency == "EUR"
    assert result.original_price == 999
    assert result.exchange_rate == 0.85
    assert result.converted_price == 849.15
    assert result.product_name == "iPhone 14 Pro"


def test_base_currency_skips_http_call(product):
    calls = []
    svc = CurrencyService(rates_client=_client(_rates_handler({}, calls)))

    result = svc.convert_product_price(product.id, "USD")

    assert calls == []
    assert result.exchange_rate == 1
    assert result.converted_price == 999


def test_parity_currency_is_still_rounded(db_env):
    repo = SQLRepository()
    owner = repo.create_user("seller12", "seller@example.com", "hash")
    item = repo.create_product(owner.id, name="Cable", price=19.999, quantity=5, category="Electronics")
    svc = CurrencyService(rates_client=_client(_rates_handler({"PAB": 1})))

    result = svc.convert_product_price(item.id, "PAB")

    assert result.exchange_rate == 1
    assert result.converted_price == 20.0


def test_rejects_malformed_and_unsupported_codes(product):
    svc = CurrencyService(rates_client=_client(_rates_handler({"EUR": 0.85})))

    with pytest.raises(CurrencyError) as bad:
        svc.convert_product_price(product.id, "EURO")
    assert bad.value.status_code == 400
    assert "3 letters" in bad.value.message

    with pytest.raises(CurrencyError) as unsupported:
        svc.convert_product_price(product.id, "XYZ")
    assert unsupported.value.message == "Currency XYZ not supported"


def test_missing_product_is_reported_first(db_env):
    svc = CurrencyService(rates_client=_client(_rates_handler({"EUR": 0.85})))
    with pytest.raises(ProductNotFoundError):
        svc.convert_product_price("does-not-exist", "EURO")


def test_upstream_error_status_maps_to_unavailable(product):
    svc = CurrencyService(rates_client=_client(lambda request: httpx.Response(502, text="bad gateway")))

    with pytest.raises(UpstreamUnavailableError) as excinfo:
        svc.convert_product_price(product.id, "EUR")
    assert excinfo.value.status_code == 503
    assert excinfo.value.message == "Currency conversion service unavailable"


def test_unreachable_upstream_maps_to_unavailable(product):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    svc = CurrencyService(rates_client=_client(handler))

    with pytest.raises(UpstreamUnavailableError) as excinfo:
        svc.convert_product_price(product.id, "EUR")
    assert excinfo.value.message == "Unable to reach currency conversion service"


def test_payload_without_rates_maps_to_unavailable(product):
    svc = CurrencyService(rates_client=_client(lambda request: httpx.Response(200, json={"error": "quota"})))

    with pytest.raises(UpstreamUnavailableError):
        svc.convert_product_price(product.id, "EUR")
