"""Property model for the parcel registry."""

from dataclasses import dataclass


@dataclass
class Property:
    """Real-property parcel recorded on the ledger.

    ``id`` is the ledger key and never changes. ``owner_name`` is the only
    field a transfer may modify. ``bitcoin_value`` is stamped once at
    creation from the rate observed at that instant.
    """

    id: str
    name: str
    area: int
    owner_name: str
    value: int  # Base currency units (USD)
    bitcoin_value: float = 0.0
