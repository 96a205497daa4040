"""Exchange rate sources used to value new properties."""

from property_ledger.rates.client import (
    ExchangeRateClient,
    FixedRateSource,
    RateSource,
    parse_rate,
)

__all__ = ["ExchangeRateClient", "FixedRateSource", "RateSource", "parse_rate"]
