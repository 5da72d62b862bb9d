"""Client-side call budget for the incident feed.

Two independent gates must both pass before a call is allowed:

* the sliding window: fewer than ``max_calls`` calls in the trailing
  ``window_ms``, always recomputed from the full call log;
* the cooldown: armed for ``cooldown_seconds`` whenever a recorded call
  fills the window, counted down once per second.
"""

from __future__ import annotations

import logging

from pyroadwatch._scheduler import Scheduler, TimerHandle, cancel_timer
from pyroadwatch.config import RoadwatchConfig
from pyroadwatch.models.rate_limit import RateLimitState

_logger = logging.getLogger(__name__)

_COOLDOWN_TICK_MS = 1000


class CallBudgetLimiter:
    """Sliding-window plus cooldown gate for outbound fetches."""

    def __init__(self, scheduler: Scheduler, *, config: RoadwatchConfig | None = None) -> None:
        config = config or RoadwatchConfig()
        self._scheduler = scheduler
        self._max_calls = config.max_calls
        self._window_ms = config.call_window_ms
        self._cooldown_seconds = config.cooldown_seconds

        # Append-only for the session.
        self._calls: list[float] = []
        self._cooldown_remaining = 0
        self._generation = 0
        self._timer: TimerHandle | None = None

    @property
    def max_calls(self) -> int:
        return self._max_calls

    @property
    def call_log(self) -> tuple[float, ...]:
        return tuple(self._calls)

    def recent_call_count(self) -> int:
        """Calls recorded within the trailing window."""
        now = self._scheduler.now_ms()
        return sum(1 for ts in self._calls if now - ts < self._window_ms)

    def cooldown_remaining(self) -> int:
        """Seconds left on the cooldown, ``0`` when inactive."""
        return self._cooldown_remaining

    def can_call(self) -> bool:
        return self.recent_call_count() < self._max_calls and self._cooldown_remaining == 0

    def record_call(self) -> None:
        """Log a call made now; arm the cooldown if it filled the window."""
        self._calls.append(self._scheduler.now_ms())
        count = self.recent_call_count()
        _logger.debug("Incident call recorded (%d/%d in window)", count, self._max_calls)
        if count >= self._max_calls:
            _logger.info("Call budget exhausted; cooling down for %ds", self._cooldown_seconds)
            self._arm_cooldown()

    def state(self) -> RateLimitState:
        return RateLimitState(
            window_count=self.recent_call_count(),
            cooldown_remaining=self._cooldown_remaining,
            max_calls=self._max_calls,
        )

    def close(self) -> None:
        """Stop the cooldown countdown."""
        self._generation += 1
        cancel_timer(self._timer)
        self._timer = None

    def _arm_cooldown(self) -> None:
        self.close()
        self._cooldown_remaining = self._cooldown_seconds
        if self._cooldown_remaining > 0:
            self._schedule_tick()

    def _schedule_tick(self) -> None:
        generation = self._generation

        def _fire() -> None:
            if generation != self._generation:
                return
            self._timer = None
            self._cooldown_remaining = max(0, self._cooldown_remaining - 1)
            if self._cooldown_remaining > 0:
                self._schedule_tick()
            else:
                _logger.debug("Cooldown finished")

        self._timer = self._scheduler.call_later(_COOLDOWN_TICK_MS, _fire)
