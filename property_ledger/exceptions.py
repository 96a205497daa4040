"""Custom exception hierarchy for property-ledger.

Every failure surfaced by the registry is a ``RegistryError`` subclass, so
entry points can report a distinguishable reason without catching broadly.
"""


class RegistryError(Exception):
    """Base exception for all property-ledger errors."""


class ValidationError(RegistryError):
    """Raised when caller-supplied arguments are malformed."""


class ConfigurationError(RegistryError):
    """Raised when configuration is invalid or missing."""


class LedgerError(RegistryError):
    """Base class for failures talking to the ledger."""


class ReadError(LedgerError):
    """Raised when the ledger cannot be read."""


class WriteError(LedgerError):
    """Raised when the ledger cannot be written."""


class ConcurrentModificationError(LedgerError):
    """Raised when a versioned write loses a race with another writer."""


class DuplicateIDError(RegistryError):
    """Raised when creating a property whose ID already exists."""


class NotFoundError(RegistryError):
    """Raised when a property ID is not on the ledger."""


class DecodeError(RegistryError):
    """Raised when stored bytes do not decode into a property."""


class RateUnavailableError(RegistryError):
    """Raised when the exchange rate cannot be obtained from the oracle."""


class RateTransportError(RateUnavailableError):
    """Raised on network, DNS or HTTP status failures."""


class RateTimeoutError(RateTransportError):
    """Raised when the oracle does not answer within the timeout."""


class RateEnvelopeError(RateUnavailableError):
    """Raised when the oracle response is not the expected JSON envelope."""


class RateParseError(RateUnavailableError):
    """Raised when the exchange rate field is not a number."""


class InvalidRateError(RegistryError):
    """Raised when a rate would make the valuation undefined."""


class EventPublishError(RegistryError):
    """Raised when a commit notification cannot be published."""
