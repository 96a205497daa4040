"""Command line interface for the property registry.

Usage::

    property-ledger add P1 "Lot A" 100 Alice 50000
    property-ledger get P1
    property-ledger list
    property-ledger transfer P1 Bob
    property-ledger --memory --rate 50000 seed 10
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Callable

from property_ledger.config import RegistryConfig
from property_ledger.contract import PropertyTransferContract, Response
from property_ledger.events import KafkaEventPublisher
from property_ledger.exceptions import RegistryError
from property_ledger.generators import PropertyGenerator
from property_ledger.ledger import InMemoryLedger, LedgerAccessor, PostgresLedger
from property_ledger.logging import setup_logging
from property_ledger.rates import ExchangeRateClient, FixedRateSource, RateSource
from property_ledger.registry import PropertyRegistry

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="property-ledger",
        description="Register, query and transfer real-property parcels on a ledger.",
    )
    parser.add_argument(
        "--memory",
        action="store_true",
        help="Use a throwaway in-memory ledger instead of PostgreSQL",
    )
    parser.add_argument(
        "--rate",
        type=float,
        default=None,
        help="Use a fixed BTC->USD rate instead of calling the oracle",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level (default: LOG_LEVEL env or INFO)",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    add = sub.add_parser("add", help="Register a new property")
    add.add_argument("id")
    add.add_argument("name")
    add.add_argument("area")
    add.add_argument("owner")
    add.add_argument("value")

    get = sub.add_parser("get", help="Show one property")
    get.add_argument("id")

    sub.add_parser("list", help="Show all properties")

    transfer = sub.add_parser("transfer", help="Transfer ownership of a property")
    transfer.add_argument("id")
    transfer.add_argument("new_owner")

    seed = sub.add_parser("seed", help="Register generated sample properties")
    seed.add_argument("count", type=int)
    seed.add_argument("--seed", type=int, default=None, help="Random seed")
    seed.add_argument("--prefix", default="P", help="ID prefix for generated properties")

    return parser


def build_registry(
    config: RegistryConfig,
    memory: bool = False,
    rate: float | None = None,
) -> tuple[PropertyRegistry, list[Callable[[], Any]]]:
    """Wire a registry from configuration.

    Returns
    -------
    tuple[PropertyRegistry, list[Callable[[], Any]]]
        The registry and the close callbacks of the resources it owns.
    """
    closers: list[Callable[[], Any]] = []

    ledger: LedgerAccessor
    if memory:
        ledger = InMemoryLedger()
    else:
        pg_ledger = PostgresLedger(config.postgres.connection_string)
        closers.append(pg_ledger.close)
        ledger = pg_ledger

    rates: RateSource
    if rate is not None:
        rates = FixedRateSource(rate)
    else:
        rates = ExchangeRateClient(config.oracle)

    publisher = None
    if config.publish_events:
        kafka = KafkaEventPublisher(config.kafka)
        closers.append(kafka.close)
        publisher = kafka

    registry = PropertyRegistry(
        ledger,
        rates,
        publisher=publisher,
        optimistic=config.optimistic_writes,
    )
    return registry, closers


def _emit(response: Response) -> int:
    if not response.ok:
        print(f"error: {response.message}", file=sys.stderr)
        return 1
    if response.payload is not None:
        print(json.dumps(response.payload, indent=2, ensure_ascii=False))
    return 0


def run(args: argparse.Namespace, contract: PropertyTransferContract) -> int:
    """Execute one parsed command against a contract."""
    if args.command == "add":
        return _emit(contract.invoke("AddProperty", [args.id, args.name, args.area, args.owner, args.value]))
    if args.command == "get":
        return _emit(contract.invoke("QueryPropertyByID", [args.id]))
    if args.command == "list":
        return _emit(contract.invoke("QueryAllProperties"))
    if args.command == "transfer":
        return _emit(contract.invoke("TransferProperty", [args.id, args.new_owner]))

    # seed
    generator = PropertyGenerator(seed=args.seed, prefix=args.prefix)
    failures = 0
    for spec in generator.generate_many(args.count):
        response = contract.invoke(
            "AddProperty", [spec.id, spec.name, spec.area, spec.owner_name, spec.value]
        )
        if not response.ok:
            failures += 1
            print(f"error: {response.message}", file=sys.stderr)
    logger.info("Seeded %d properties (%d failed)", args.count - failures, failures)
    if failures:
        return 1
    return _emit(contract.invoke("QueryAllProperties"))


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``property-ledger`` command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = RegistryConfig.from_env()
        setup_logging(args.log_level or config.log_level, config.log_format)
        registry, closers = build_registry(config, memory=args.memory, rate=args.rate)
    except RegistryError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    try:
        return run(args, PropertyTransferContract(registry))
    finally:
        for close in closers:
            close()


if __name__ == "__main__":
    sys.exit(main())
