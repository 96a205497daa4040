"""Tests for the exchange rate client."""

from unittest.mock import MagicMock

import pytest
import requests

from property_ledger.config import RateOracleConfig
from property_ledger.exceptions import (
    RateEnvelopeError,
    RateParseError,
    RateTimeoutError,
    RateTransportError,
    RateUnavailableError,
)
from property_ledger.rates import ExchangeRateClient, FixedRateSource, parse_rate


def oracle_body(rate: object = "43250.12") -> dict:
    return {
        "Realtime Currency Exchange Rate": {
            "1. From_Currency Code": "BTC",
            "2. From_Currency Name": "Bitcoin",
            "3. To_Currency Code": "USD",
            "4. To_Currency Name": "United States Dollar",
            "5. Exchange Rate": rate,
            "6. Last Refreshed": "2024-01-01 00:00:01",
            "7. Time Zone": "UTC",
            "8. Bid Price": "43250.11",
            "9. Ask Price": "43250.13",
        }
    }


def make_client(body: object = None, **config: object) -> tuple[ExchangeRateClient, MagicMock]:
    session = MagicMock()
    response = MagicMock()
    response.json.return_value = oracle_body() if body is None else body
    session.get.return_value = response
    return ExchangeRateClient(RateOracleConfig(**config), session=session), session


class TestExchangeRateClient:
    """Tests for ExchangeRateClient."""

    def test_get_rate(self) -> None:
        client, _ = make_client()

        assert client.get_rate() == 43250.12

    def test_request_parameters(self) -> None:
        client, session = make_client(api_key="k3y", timeout_seconds=3.0)

        client.get_rate()

        session.get.assert_called_once_with(
            "https://www.alphavantage.co/query",
            params={
                "function": "CURRENCY_EXCHANGE_RATE",
                "from_currency": "BTC",
                "to_currency": "USD",
                "apikey": "k3y",
            },
            timeout=3.0,
        )

    def test_fetches_every_call(self) -> None:
        client, session = make_client()

        client.get_rate()
        client.get_rate()

        assert session.get.call_count == 2

    def test_default_session(self) -> None:
        client = ExchangeRateClient()

        assert isinstance(client.session, requests.Session)

    def test_timeout(self) -> None:
        client, session = make_client()
        session.get.side_effect = requests.Timeout("read timed out")

        with pytest.raises(RateTimeoutError, match="timed out after 10.0s"):
            client.get_rate()

    def test_connection_error(self) -> None:
        client, session = make_client()
        session.get.side_effect = requests.ConnectionError("dns failure")

        with pytest.raises(RateTransportError) as exc_info:
            client.get_rate()

        assert not isinstance(exc_info.value, RateTimeoutError)

    def test_http_status_error(self) -> None:
        client, session = make_client()
        session.get.return_value.raise_for_status.side_effect = requests.HTTPError("503")

        with pytest.raises(RateTransportError):
            client.get_rate()

    def test_transport_error_hides_api_key(self) -> None:
        client, session = make_client(api_key="s3cret")
        session.get.side_effect = requests.ConnectionError(
            "https://www.alphavantage.co/query?apikey=s3cret"
        )

        with pytest.raises(RateTransportError) as exc_info:
            client.get_rate()

        assert "s3cret" not in str(exc_info.value)

    def test_body_not_json(self) -> None:
        client, session = make_client()
        session.get.return_value.json.side_effect = ValueError("Expecting value")

        with pytest.raises(RateEnvelopeError, match="not valid JSON"):
            client.get_rate()

    def test_unparseable_rate(self) -> None:
        client, _ = make_client(body=oracle_body("n/a"))

        with pytest.raises(RateParseError):
            client.get_rate()

    def test_all_failures_are_rate_unavailable(self) -> None:
        client, _ = make_client(body={})

        with pytest.raises(RateUnavailableError):
            client.get_rate()


class TestParseRate:
    """Tests for parse_rate."""

    def test_string_rate(self) -> None:
        assert parse_rate(oracle_body(" 50000.0 ")) == 50000.0

    def test_numeric_rate(self) -> None:
        assert parse_rate(oracle_body(50000)) == 50000.0

    def test_zero_passes_through(self) -> None:
        """Zero is a parseable rate; rejecting it is the registry's job."""
        assert parse_rate(oracle_body("0")) == 0.0

    @pytest.mark.parametrize("body", [[], "rate", None])
    def test_not_an_object(self, body: object) -> None:
        with pytest.raises(RateEnvelopeError, match="not a JSON object"):
            parse_rate(body)

    def test_missing_envelope(self) -> None:
        with pytest.raises(RateEnvelopeError, match="Realtime Currency Exchange Rate"):
            parse_rate({"Meta": {}})

    def test_envelope_not_object(self) -> None:
        with pytest.raises(RateEnvelopeError):
            parse_rate({"Realtime Currency Exchange Rate": "43250.12"})

    def test_oracle_notice(self) -> None:
        body = {"Note": "API call frequency is 5 calls per minute."}

        with pytest.raises(RateEnvelopeError, match="refused request: API call frequency"):
            parse_rate(body)

    def test_missing_rate_field(self) -> None:
        with pytest.raises(RateEnvelopeError, match="5. Exchange Rate"):
            parse_rate({"Realtime Currency Exchange Rate": {"1. From_Currency Code": "BTC"}})

    @pytest.mark.parametrize("raw", ["", "abc", "1,000.5", None, True, ["1"]])
    def test_unparseable(self, raw: object) -> None:
        with pytest.raises(RateParseError):
            parse_rate(oracle_body(raw))


class TestFixedRateSource:
    """Tests for FixedRateSource."""

    def test_returns_rate_and_counts_calls(self) -> None:
        source = FixedRateSource(42.0)

        assert source.get_rate() == 42.0
        assert source.get_rate() == 42.0
        assert source.calls == 2
