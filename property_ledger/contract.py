"""Contract entry points exposed to the hosting runtime.

The runtime delivers every argument as a string. ``invoke`` dispatches a
function name and its arguments and turns registry errors into a
rejected response; the named methods can also be called directly.
"""

from __future__ import annotations

import inspect
import logging
import re
from dataclasses import dataclass
from typing import Any, Callable

from property_ledger.exceptions import RegistryError, ValidationError
from property_ledger.registry import PropertyRegistry
from property_ledger.serialization import property_to_dict

logger = logging.getLogger(__name__)

OK = 200
BAD_REQUEST = 400
ERROR = 500

DECIMAL_INT = re.compile(r"[+-]?[0-9]+")


@dataclass
class Response:
    """Outcome of one invocation."""

    status: int
    payload: Any = None
    message: str = ""
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == OK


def to_int(name: str, raw: Any) -> int:
    """Marshal an integer argument that may arrive as a string."""
    if isinstance(raw, bool):
        raise ValidationError(f"{name} must be an integer, got {raw!r}")
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str) and DECIMAL_INT.fullmatch(raw.strip()):
        return int(raw.strip())
    raise ValidationError(f"{name} must be an integer, got {raw!r}")


class PropertyTransferContract:
    """Property transfer contract."""

    def __init__(self, registry: PropertyRegistry) -> None:
        self.registry = registry
        self._functions: dict[str, Callable[..., Any]] = {
            "AddProperty": self.AddProperty,
            "QueryAllProperties": self.QueryAllProperties,
            "QueryPropertyByID": self.QueryPropertyByID,
            "TransferProperty": self.TransferProperty,
        }

    @property
    def functions(self) -> list[str]:
        """Names of the invokable transactions."""
        return sorted(self._functions)

    def AddProperty(self, id: str, name: str, area: Any, ownerName: str, value: Any) -> None:  # noqa: N802, N803
        self.registry.create_property(id, name, to_int("area", area), ownerName, to_int("value", value))

    def QueryAllProperties(self) -> list[dict]:  # noqa: N802
        return [property_to_dict(p) for p in self.registry.query_all_properties()]

    def QueryPropertyByID(self, id: str) -> dict:  # noqa: N802
        return property_to_dict(self.registry.query_property_by_id(id))

    def TransferProperty(self, id: str, newOwner: str) -> None:  # noqa: N802, N803
        self.registry.transfer_property(id, newOwner)

    def invoke(self, function: str, args: list[Any] | tuple[Any, ...] = ()) -> Response:
        """Run a transaction by name and report its outcome."""
        handler = self._functions.get(function)
        if handler is None:
            return Response(status=BAD_REQUEST, message=f"unknown function {function!r}")

        try:
            inspect.signature(handler).bind(*args)
        except TypeError as e:
            return Response(status=BAD_REQUEST, message=f"{function}: {e}")

        try:
            payload = handler(*args)
        except RegistryError as e:
            logger.warning("%s rejected: %s", function, e)
            return Response(status=ERROR, message=str(e), error=type(e).__name__)
        return Response(status=OK, payload=payload)
