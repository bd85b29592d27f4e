"""
In-memory profile ledger for development and tests.

Stands in for the on-chain profile registry: append-only per address, the
timestamp is assigned by the ledger at write time (epoch seconds), and reads
return raw 10-element tuples exactly like a chain binding would, so they go
through the profile decoder. Not a chain client.
"""

from __future__ import annotations

import threading
import time
from typing import Any, Callable, Sequence

from credit_passport.passport_logging import bind_address

CHAIN_ARG_COUNT = 9


class InMemoryProfileLedger:
    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._rows: dict[str, list[tuple[Any, ...]]] = {}

    @staticmethod
    def _key(address: str) -> str:
        return address.strip().lower()

    def write_profile(self, address: str, args: Sequence[Any]) -> None:
        """Append one profile from the 9 chain-write arguments."""
        if len(args) != CHAIN_ARG_COUNT:
            raise ValueError(f"expected {CHAIN_ARG_COUNT} chain arguments, got {len(args)}")
        row = (*args, int(self._clock()))
        with self._lock:
            self._rows.setdefault(self._key(address), []).append(row)
        bind_address(address).info("ledger_profile_written", country=args[0])

    def get_profiles(self, address: str) -> list[tuple[Any, ...]]:
        """Raw tuples for address, oldest first; [] when none."""
        with self._lock:
            return list(self._rows.get(self._key(address), []))
