"""
Deferred, cancellable callbacks driven by the host's clock.

The core never sleeps or talks to a platform timer. It arms entries
``{fire_at, action, token}`` here and the host calls ``tick(now)`` from its
own loop (or before serving each request); due entries run in fire order.
"""

import itertools
from dataclasses import dataclass, field
from typing import Callable, List, Optional


@dataclass(order=True)
class ScheduledCall:
    fire_at: float
    token: int
    action: Callable[[], None] = field(compare=False)
    name: str = field(default='', compare=False)


class Scheduler:
    """Ordered queue of pending callbacks, owned by one game state."""

    def __init__(self) -> None:
        self._pending: List[ScheduledCall] = []
        self._tokens = itertools.count(1)
        self.now = 0.0  # Last time seen by tick() or schedule()

    def schedule(self, delay: float, action: Callable[[], None], name: str = '',
                 now: Optional[float] = None) -> int:
        """
        Arm ``action`` to run ``delay`` seconds after ``now``.

        Args:
            delay: Seconds to wait
            action: Zero-argument callable
            name: Label used by pending() and the event log
            now: Current host time; defaults to the last time seen

        Returns:
            Token that can be passed to cancel()
        """
        if now is not None:
            self.now = max(self.now, now)
        token = next(self._tokens)
        self._pending.append(ScheduledCall(self.now + delay, token, action, name))
        self._pending.sort()
        return token

    def cancel(self, token: int) -> bool:
        """Disarm one entry. Returns False if it already fired or was cancelled."""
        for i, call in enumerate(self._pending):
            if call.token == token:
                del self._pending[i]
                return True
        return False

    def cancel_all(self) -> int:
        cancelled = len(self._pending)
        self._pending.clear()
        return cancelled

    def pending(self) -> List[str]:
        return [call.name for call in self._pending]

    def tick(self, now: float) -> int:
        """
        Run every entry due at or before ``now``.

        Entries armed by a callback are picked up in the same tick if they
        are already due.

        Returns:
            Number of callbacks run
        """
        self.now = max(self.now, now)
        fired = 0
        while self._pending and self._pending[0].fire_at <= self.now:
            call = self._pending.pop(0)
            call.action()
            fired += 1
        return fired
