"""
Game timer for Minesweeper.

Counts whole seconds of play. Ticks come either from a scheduler
(anything shaped like an asyncio event loop's ``call_later``) or from
the presentation layer calling ``tick()`` once per second.
"""
import logging
from typing import Any, Callable, Optional, Protocol

logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

TIMER_LIMIT = 999
TICK_INTERVAL = 1.0


# ============================================================================
# Scheduler Protocol
# ============================================================================

class Cancellable(Protocol):
    """Handle returned by a scheduler for a pending callback."""

    def cancel(self) -> Any:
        ...


class Scheduler(Protocol):
    """Anything that can run a callback after a delay (e.g. asyncio loop)."""

    def call_later(
        self, delay: float, callback: Callable[[], None]
    ) -> Cancellable:
        ...


# ============================================================================
# Game Timer
# ============================================================================

class GameTimer:
    """
    Cancellable once-per-second counter owned by a single game session.

    A stopped timer ignores ticks and has no pending scheduled callback,
    so a timer left over from a discarded session can never change state.
    """

    def __init__(
        self,
        scheduler: Optional[Scheduler] = None,
        on_tick: Optional[Callable[[int], None]] = None,
        interval: float = TICK_INTERVAL,
        limit: int = TIMER_LIMIT,
    ) -> None:
        """
        Initialize the timer.

        Args:
            scheduler: Source of scheduled ticks; None means ticks are
                delivered manually through tick().
            on_tick: Called with the elapsed seconds after every tick.
            interval: Seconds between scheduled ticks.
            limit: Value at which the timer stops itself.
        """
        self.scheduler = scheduler
        self.on_tick = on_tick
        self.interval = interval
        self.limit = limit
        self._elapsed = 0
        self._running = False
        self._handle: Optional[Cancellable] = None

    @property
    def elapsed_seconds(self) -> int:
        """Whole seconds counted so far."""
        return self._elapsed

    @property
    def is_running(self) -> bool:
        """Check if the timer is accepting ticks."""
        return self._running

    def start(self) -> None:
        """Start counting from zero. Does nothing if already running."""
        if self._running:
            return
        self._elapsed = 0
        self._running = True
        self._schedule()

    def stop(self) -> None:
        """Stop counting and cancel any pending scheduled tick."""
        self._running = False
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def tick(self) -> bool:
        """
        Advance the timer by one second.

        Returns:
            True if the tick was counted, False if the timer is stopped.
        """
        if not self._running:
            return False
        self._elapsed += 1
        if self._elapsed >= self.limit:
            logger.debug("Timer reached its limit of %d", self.limit)
            self.stop()
        if self.on_tick:
            self.on_tick(self._elapsed)
        return True

    def _schedule(self) -> None:
        """Ask the scheduler for the next tick."""
        if self.scheduler is None:
            return
        self._handle = self.scheduler.call_later(
            self.interval, self._on_scheduled_tick
        )

    def _on_scheduled_tick(self) -> None:
        self._handle = None
        if self.tick() and self._running:
            self._schedule()
