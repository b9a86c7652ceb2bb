"""Exchange rate API HTTP client"""

import httpx
from datetime import date
from domainfolio.domain.currency import ExchangeRateTable
from domainfolio.domain.exceptions import ExchangeRateAPIError
from domainfolio.config import settings


class ExchangeRateClient:
    """Client for the external latest-rates API"""

    def __init__(self, base_url: str | None = None, timeout: float | None = None):
        self.base_url = base_url or settings.exchange_rate_api_base
        self.timeout = timeout or settings.http_timeout_seconds

    async def get_rates(self, base_currency: str) -> ExchangeRateTable:
        """
        Fetch latest quotes for base_currency.

        Raises:
            ExchangeRateAPIError: On timeout, HTTP errors, or invalid response
        """
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            try:
                response = await client.get(
                    f"{self.base_url}/rates/latest",
                    params={"base": base_currency.upper()},
                )
                response.raise_for_status()
                data = response.json()

                return ExchangeRateTable(
                    base_currency=data["base"].upper(),
                    rates={code.upper(): float(rate) for code, rate in data["rates"].items()},
                    as_of=date.fromisoformat(data["date"]) if data.get("date") else None,
                )

            except httpx.TimeoutException as e:
                raise ExchangeRateAPIError(f"Exchange rate API timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise ExchangeRateAPIError(f"Exchange rate API error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise ExchangeRateAPIError(f"Exchange rate API unreachable: {e}") from e
            except (KeyError, ValueError, TypeError, AttributeError) as e:
                raise ExchangeRateAPIError(f"Invalid rate data from exchange rate API: {e}") from e
