"""HTTP client for the currency exchange rate oracle.

The oracle answers with a nested envelope whose keys carry numeric
prefixes::

    {"Realtime Currency Exchange Rate": {"5. Exchange Rate": "43250.12", ...}}

All knowledge of that wire format stays in this module.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

import requests

from property_ledger.config import RateOracleConfig
from property_ledger.exceptions import (
    RateEnvelopeError,
    RateParseError,
    RateTimeoutError,
    RateTransportError,
)

logger = logging.getLogger(__name__)

ENVELOPE_KEY = "Realtime Currency Exchange Rate"
RATE_KEY = "5. Exchange Rate"

# Keys the oracle uses instead of the envelope when it refuses a request
ORACLE_NOTICE_KEYS = ("Error Message", "Note", "Information")


class RateSource(Protocol):
    """Anything that can report the current exchange rate."""

    def get_rate(self) -> float:
        ...


class ExchangeRateClient:
    """Fetch the live exchange rate from the oracle.

    Each call issues exactly one request; there is no retry or caching.
    Failures raise a ``RateUnavailableError`` subclass naming the failure
    mode so callers can decide whether a retry makes sense.
    """

    def __init__(
        self,
        config: RateOracleConfig | None = None,
        session: requests.Session | None = None,
    ) -> None:
        """Initialize the client.

        Parameters
        ----------
        config : RateOracleConfig | None
            Oracle endpoint, currencies, credential and timeout.
        session : requests.Session | None
            Session to reuse; a new one is created when omitted.
        """
        self.config = config or RateOracleConfig()
        self.session = session or requests.Session()

    def get_rate(self) -> float:
        """Return the current exchange rate as reported by the oracle.

        Raises
        ------
        RateTimeoutError
            The oracle did not answer within ``timeout_seconds``.
        RateTransportError
            Connection, DNS or HTTP status failure.
        RateEnvelopeError
            The body is not the expected JSON envelope.
        RateParseError
            The rate field is not a number.
        """
        pair = f"{self.config.from_currency}->{self.config.to_currency}"
        try:
            response = self.session.get(
                self.config.url,
                params=self.config.params(),
                timeout=self.config.timeout_seconds,
            )
            response.raise_for_status()
        except requests.Timeout as e:
            raise RateTimeoutError(
                f"rate oracle timed out after {self.config.timeout_seconds}s"
            ) from e
        except requests.RequestException as e:
            # str(e) may embed the request URL, which carries the API key
            raise RateTransportError(
                f"rate oracle request failed: {type(e).__name__}"
            ) from e

        try:
            body = response.json()
        except ValueError as e:
            raise RateEnvelopeError("rate oracle response is not valid JSON") from e

        rate = parse_rate(body)
        logger.debug("Fetched %s rate %s", pair, rate)
        return rate


def parse_rate(body: Any) -> float:
    """Extract the exchange rate from a decoded oracle response."""
    if not isinstance(body, dict):
        raise RateEnvelopeError("rate oracle response is not a JSON object")

    envelope = body.get(ENVELOPE_KEY)
    if not isinstance(envelope, dict):
        for notice in ORACLE_NOTICE_KEYS:
            if notice in body:
                raise RateEnvelopeError(f"rate oracle refused request: {body[notice]}")
        raise RateEnvelopeError(f"rate oracle response has no {ENVELOPE_KEY!r} object")

    if RATE_KEY not in envelope:
        raise RateEnvelopeError(f"rate oracle response has no {RATE_KEY!r} field")

    raw = envelope[RATE_KEY]
    if isinstance(raw, bool) or not isinstance(raw, (str, int, float)):
        raise RateParseError(f"exchange rate {raw!r} is not a number")
    try:
        return float(raw)
    except ValueError as e:
        raise RateParseError(f"exchange rate {raw!r} is not a number") from e


class FixedRateSource:
    """Rate source that always reports the same rate."""

    def __init__(self, rate: float) -> None:
        self.rate = rate
        self.calls = 0

    def get_rate(self) -> float:
        self.calls += 1
        return self.rate
