"""Sample parcel generator for seeding a ledger."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Iterator

from faker import Faker


@dataclass
class PropertySpec:
    """Arguments for one property creation."""

    id: str
    name: str
    area: int
    owner_name: str
    value: int


class PropertyGenerator:
    """Generate synthetic parcels.

    Parameters
    ----------
    seed : int | None
        Random seed for reproducibility.
    locale : str
        Faker locale (default ``en_US``).
    prefix : str
        Prefix for generated property IDs.
    """

    LOT_KINDS = ("Lot", "Parcel", "Tract", "Plot")

    def __init__(self, seed: int | None = None, locale: str = "en_US", prefix: str = "P") -> None:
        self.fake = Faker(locale)
        self.rng = random.Random(seed)
        self.prefix = prefix
        self._counter = 0
        if seed is not None:
            self.fake.seed_instance(seed)

    def generate(self) -> PropertySpec:
        """Generate one parcel.

        IDs are sequential so a seeded generator is reproducible and
        never repeats an ID within its lifetime.
        """
        self._counter += 1
        return PropertySpec(
            id=f"{self.prefix}{self._counter:06d}",
            name=f"{self.rng.choice(self.LOT_KINDS)} {self.fake.street_name()}",
            area=self.rng.randint(40, 5000),  # Square meters
            owner_name=self.fake.name(),
            value=self.rng.randint(50, 2000) * 1000,
        )

    def generate_many(self, count: int) -> Iterator[PropertySpec]:
        """Yield ``count`` parcels."""
        for _ in range(count):
            yield self.generate()
