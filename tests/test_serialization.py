"""Tests for property serialization."""

import json
from datetime import datetime, timezone

import pytest

from property_ledger.exceptions import DecodeError
from property_ledger.models import Event, Property
from property_ledger.serialization import (
    decode_property,
    encode_property,
    event_to_dict,
    property_to_dict,
)


@pytest.fixture
def sample_property() -> Property:
    return Property(
        id="P1",
        name="Lot A",
        area=100,
        owner_name="Alice",
        value=50000,
        bitcoin_value=1.0,
    )


class TestEncodeProperty:
    """Tests for encode_property."""

    def test_ledger_keys(self, sample_property: Property) -> None:
        """Test stored JSON uses the ledger field names."""
        data = json.loads(encode_property(sample_property))

        assert data == {
            "id": "P1",
            "name": "Lot A",
            "area": 100,
            "ownerName": "Alice",
            "value": 50000,
            "BitcoinValue": 1.0,
        }

    def test_non_ascii_names(self) -> None:
        prop = Property(id="P2", name="Lote São João", area=1, owner_name="José", value=1)

        assert decode_property(encode_property(prop)).name == "Lote São João"

    def test_non_finite_value_refused(self, sample_property: Property) -> None:
        sample_property.bitcoin_value = float("inf")

        with pytest.raises(ValueError):
            encode_property(sample_property)


class TestDecodeProperty:
    """Tests for decode_property."""

    def test_decode(self) -> None:
        raw = b'{"id":"P1","name":"Lot A","area":100,"ownerName":"Alice","value":50000,"BitcoinValue":1.0}'

        prop = decode_property(raw)

        assert prop == Property("P1", "Lot A", 100, "Alice", 50000, 1.0)

    def test_missing_bitcoin_value_defaults_to_zero(self) -> None:
        raw = b'{"id":"P1","name":"Lot A","area":100,"ownerName":"Alice","value":50000}'

        assert decode_property(raw).bitcoin_value == 0.0

    def test_integer_bitcoin_value(self) -> None:
        raw = b'{"id":"P1","name":"Lot A","area":100,"ownerName":"Alice","value":50000,"BitcoinValue":2}'

        prop = decode_property(raw)

        assert prop.bitcoin_value == 2.0
        assert isinstance(prop.bitcoin_value, float)

    def test_ignores_unknown_fields(self) -> None:
        raw = b'{"id":"P1","name":"n","area":1,"ownerName":"o","value":1,"zoning":"R1"}'

        assert decode_property(raw).id == "P1"

    @pytest.mark.parametrize(
        "raw",
        [
            b"not json",
            b"\xff\xfe",
            b"[1, 2, 3]",
            b'"P1"',
        ],
    )
    def test_not_an_object(self, raw: bytes) -> None:
        with pytest.raises(DecodeError):
            decode_property(raw)

    def test_missing_fields_listed(self) -> None:
        with pytest.raises(DecodeError, match="ownerName, value"):
            decode_property(b'{"id":"P1","name":"n","area":1}', key="P1")

    def test_error_names_key(self) -> None:
        with pytest.raises(DecodeError, match="'P9'"):
            decode_property(b"{", key="P9")

    @pytest.mark.parametrize(
        "field,value",
        [
            ("id", 1),
            ("ownerName", None),
            ("area", "100"),
            ("area", 1.5),
            ("value", True),
            ("BitcoinValue", "1.0"),
        ],
    )
    def test_wrong_types(self, field: str, value: object) -> None:
        data = {"id": "P1", "name": "n", "area": 1, "ownerName": "o", "value": 1}
        data[field] = value

        with pytest.raises(DecodeError, match=field):
            decode_property(json.dumps(data).encode())


class TestDictConversion:
    """Tests for property and event dict conversion."""

    def test_property_to_dict(self) -> None:
        prop = Property("P1", "Lot A", 100, "Alice", 50000, 1.0)

        assert property_to_dict(prop)["ownerName"] == "Alice"
        assert property_to_dict(prop)["BitcoinValue"] == 1.0

    def test_event_to_dict(self) -> None:
        event = Event(
            event_id="e1",
            event_type="property.created",
            event_time=datetime(2024, 1, 1, tzinfo=timezone.utc),
            source="property-ledger",
            subject="P1",
            data={"ownerName": "Alice", "BitcoinValue": 1.0},
            metadata={"new_owner": "Alice"},
        )

        data = event_to_dict(event)

        assert data["event_time"] == "2024-01-01T00:00:00+00:00"
        assert data["data"] == {"ownerName": "Alice", "BitcoinValue": 1.0}
        assert data["metadata"] == {"new_owner": "Alice"}
        assert json.loads(json.dumps(data)) == data
