"""Scoped reentrancy lock for pool entry points."""

from collections.abc import Iterator
from contextlib import contextmanager

from lpengine.errors import ReentrancyError


class ReentrancyGuard:
    """Non-reentrant flag held across a whole mutating call.

    Outbound transfers run recipient hooks while the pool's reserves are
    still stale, so the flag must stay engaged from the optimistic transfer
    until the reserves are resynchronised. Re-entry fails instead of
    blocking; cross-thread callers are already serialized by the host.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._entered = False

    @property
    def locked(self) -> bool:
        return self._entered

    @contextmanager
    def hold(self) -> Iterator[None]:
        if self._entered:
            raise ReentrancyError(f"{self.name} is locked")
        self._entered = True
        try:
            yield
        finally:
            self._entered = False
