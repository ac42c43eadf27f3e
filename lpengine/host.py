"""Execution host for pool state transitions.

The host is the deterministic environment that ledgers, the pool and the
router run inside. It provides:
- Address allocation for components
- Serialized, all-or-nothing transactions with snapshot/rollback
- An event log that rolls back with the transaction that wrote it
- Committed-state publication for readers outside the writing thread
"""

from __future__ import annotations

import hashlib
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, Protocol, TypeVar

import structlog

from lpengine.models.events import Event, LoggedEvent

logger = structlog.get_logger()

T = TypeVar("T")


class Stateful(Protocol):
    """Component whose state is journaled by the host."""

    def snapshot(self) -> Any:
        """Return an opaque copy of the component's mutable state."""
        ...

    def restore(self, state: Any) -> None:
        """Reinstate a state previously returned by snapshot()."""
        ...

    def publish(self) -> None:
        """Expose the current state to readers outside the transaction."""
        ...


class Host:
    """Single-writer state machine host.

    Mutating calls enter `transaction()`. The host lock is re-entrant so a
    router call can nest pool and ledger calls on the same thread, while
    other threads block until the outermost transaction finishes.

    Args:
        label: Namespace mixed into allocated addresses, so two hosts never
               hand out the same address for the same component label.
    """

    def __init__(self, label: str = "lpengine") -> None:
        self.label = label
        self._lock = threading.RLock()
        self._owner: int | None = None
        self._depth = 0
        self._components: list[Stateful] = []
        self._events: list[LoggedEvent] = []
        self._published_events: tuple[LoggedEvent, ...] = ()
        self._nonce = 0

    def allocate_address(self, label: str) -> str:
        """Return a fresh deterministic address for a component."""
        with self._lock:
            self._nonce += 1
            seed = f"{self.label}:{label}:{self._nonce}".encode()
            return "0x" + hashlib.sha256(seed).hexdigest()[:40]

    def register(self, component: Stateful) -> None:
        """Journal a component's state in every subsequent transaction."""
        with self._lock:
            self._components.append(component)
            component.publish()

    def in_transaction(self) -> bool:
        """True if the calling thread owns the open transaction."""
        return self._owner == threading.get_ident()

    def view(self, live: T, committed: T) -> T:
        """Pick the live value for the writing thread, committed otherwise."""
        return live if self.in_transaction() else committed

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Run a block atomically.

        Every registered component is snapshotted on entry. If the block
        raises, each snapshot is restored and events written inside the
        block are discarded before the exception propagates. When the
        outermost block commits, components publish their state.
        """
        with self._lock:
            self._owner = threading.get_ident()
            self._depth += 1
            components = list(self._components)
            snapshots = [component.snapshot() for component in components]
            event_mark = len(self._events)
            try:
                yield
            except BaseException as exc:
                for component, state in zip(components, snapshots):
                    component.restore(state)
                del self._events[event_mark:]
                logger.debug(
                    "transaction_rolled_back",
                    depth=self._depth,
                    error=type(exc).__name__,
                )
                raise
            else:
                if self._depth == 1:
                    for component in self._components:
                        component.publish()
                    self._published_events = tuple(self._events)
            finally:
                self._depth -= 1
                if self._depth == 0:
                    self._owner = None

    def emit(self, emitter: str, event: Event) -> None:
        """Append an event to the log of the current transaction."""
        self._events.append(LoggedEvent(emitter=emitter, event=event))

    def events(
        self,
        emitter: str | None = None,
        kind: type | None = None,
    ) -> list[LoggedEvent]:
        """Return logged events, optionally filtered by emitter and event type."""
        log = self.view(tuple(self._events), self._published_events)
        return [
            entry
            for entry in log
            if (emitter is None or entry.emitter == emitter)
            and (kind is None or isinstance(entry.event, kind))
        ]
