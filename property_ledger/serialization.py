"""Property <-> ledger bytes.

Records are stored as UTF-8 JSON objects. Key names are part of the
on-ledger format and must stay stable for external readers.
"""

import json
from dataclasses import asdict
from typing import Any

from property_ledger.exceptions import DecodeError
from property_ledger.models import Event, Property

# attribute name -> ledger JSON key
FIELD_KEYS = {
    "id": "id",
    "name": "name",
    "area": "area",
    "owner_name": "ownerName",
    "value": "value",
    "bitcoin_value": "BitcoinValue",
}

_REQUIRED = ("id", "name", "area", "ownerName", "value")


def property_to_dict(prop: Property) -> dict[str, Any]:
    """Convert a property to its ledger JSON mapping."""
    return {key: getattr(prop, attr) for attr, key in FIELD_KEYS.items()}


def encode_property(prop: Property) -> bytes:
    """Serialize a property for storage on the ledger."""
    return json.dumps(property_to_dict(prop), ensure_ascii=False, allow_nan=False).encode("utf-8")


def decode_property(raw: bytes, key: str | None = None) -> Property:
    """Deserialize ledger bytes into a property.

    Parameters
    ----------
    raw : bytes
        Stored record.
    key : str | None
        Ledger key the bytes were read from, used in error messages.

    Returns
    -------
    Property
        Decoded record.

    Raises
    ------
    DecodeError
        If the bytes are not a JSON object with the expected fields.
    """
    where = f" at key {key!r}" if key is not None else ""
    try:
        data = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise DecodeError(f"property record{where} is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise DecodeError(f"property record{where} is not a JSON object")

    missing = [k for k in _REQUIRED if k not in data]
    if missing:
        raise DecodeError(f"property record{where} is missing fields: {', '.join(missing)}")

    for k in ("id", "name", "ownerName"):
        if not isinstance(data[k], str):
            raise DecodeError(f"property record{where}: {k} must be a string")
    for k in ("area", "value"):
        if not _is_int(data[k]):
            raise DecodeError(f"property record{where}: {k} must be an integer")

    bitcoin_value = data.get("BitcoinValue", 0.0)
    if not (_is_int(bitcoin_value) or isinstance(bitcoin_value, float)):
        raise DecodeError(f"property record{where}: BitcoinValue must be a number")

    return Property(
        id=data["id"],
        name=data["name"],
        area=data["area"],
        owner_name=data["ownerName"],
        value=data["value"],
        bitcoin_value=float(bitcoin_value),
    )


def event_to_dict(event: Event) -> dict[str, Any]:
    """Convert a commit notification to a JSON-ready dict."""
    data = asdict(event)
    data["event_time"] = event.event_time.isoformat()
    return data


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
