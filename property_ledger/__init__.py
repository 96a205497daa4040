"""Property ledger: a registry of real-property parcels on a key-value ledger."""

from property_ledger.contract import PropertyTransferContract
from property_ledger.models import Property
from property_ledger.registry import PropertyRegistry

__version__ = "0.1.0"

__all__ = ["Property", "PropertyRegistry", "PropertyTransferContract", "__version__"]
