"""Product price conversion backed by a live exchange-rate API."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from catalog_api.core.config import get_settings
from catalog_api.core.errors import ServiceError
from catalog_api.domain.currency import convert_price, is_valid_currency, normalize_currency
from catalog_api.services.product_service import ProductService

logger = logging.getLogger(__name__)


class CurrencyError(ServiceError):
    code = "invalid_currency"


class UpstreamUnavailableError(ServiceError):
    status_code = 503
    code = "upstream_unavailable"


@dataclass
class PriceConversion:
    product_id: str
    product_name: str
    original_price: float
    base_currency: str
    currency: str
    converted_price: float
    exchange_rate: float


class ExchangeRateClient:
    """Fetches the latest rates table (`{"base": ..., "rates": {...}}`)."""

    def __init__(self, url: Optional[str] = None, timeout: Optional[float] = None, client: Optional[httpx.Client] = None) -> None:
        settings = get_settings()
        self.url = url or settings.exchange_api_url
        self.timeout = timeout if timeout is not None else settings.exchange_timeout_seconds
        self._client = client

    def _get(self) -> httpx.Response:
        if self._client is not None:
            return self._client.get(self.url, timeout=self.timeout)
        with httpx.Client(timeout=self.timeout) as client:
            return client.get(self.url)

    def latest_rates(self) -> dict[str, float]:
        try:
            response = self._get()
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as exc:
            logger.error("Exchange-rate API answered %s", exc.response.status_code)
            raise UpstreamUnavailableError("Currency conversion service unavailable")
        except httpx.RequestError as exc:
            logger.error("Exchange-rate API unreachable: %s", exc)
            raise UpstreamUnavailableError("Unable to reach currency conversion service")
        except ValueError:
            logger.error("Exchange-rate API returned a non-JSON body")
            raise UpstreamUnavailableError("Currency conversion service unavailable")
        rates = payload.get("rates") if isinstance(payload, dict) else None
        if not isinstance(rates, dict):
            logger.error("Exchange-rate API payload has no rates table")
            raise UpstreamUnavailableError("Currency conversion service unavailable")
        return rates


class CurrencyService:
    def __init__(self, rates_client: Optional[ExchangeRateClient] = None, products: Optional[ProductService] = None) -> None:
        self.settings = get_settings()
        self.rates_client = rates_client or ExchangeRateClient()
        self.products = products or ProductService()

    def rate_for(self, currency: str) -> float:
        if currency == self.settings.base_currency:
            return 1.0
        rate = self.rates_client.latest_rates().get(currency)
        if isinstance(rate, bool) or not isinstance(rate, (int, float)) or rate <= 0:
            raise CurrencyError(f"Currency {currency} not supported", code="unsupported_currency")
        return float(rate)

    def convert_product_price(self, product_id: str, currency: str) -> PriceConversion:
        product = self.products.get_product(product_id)
        target = normalize_currency(currency)
        if not is_valid_currency(target):
            raise CurrencyError("Invalid currency code. Must be 3 letters (e.g., EUR, GBP)")
        rate = self.rate_for(target)
        price = float(product.price)
        return PriceConversion(
            product_id=product.id,
            product_name=product.name,
            original_price=price,
            base_currency=self.settings.base_currency,
            currency=target,
            converted_price=price if target == self.settings.base_currency else convert_price(price, rate),
            exchange_rate=rate,
        )
