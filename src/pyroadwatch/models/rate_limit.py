"""Call budget state model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class RateLimitState(BaseModel):
    """Point-in-time view of the incident call budget.

    ``window_count`` is recomputed from the call log on every read; it is
    never maintained incrementally.
    """

    model_config = ConfigDict(frozen=True)

    window_count: int = 0
    cooldown_remaining: int = 0
    max_calls: int = 10

    @property
    def is_blocked(self) -> bool:
        return self.window_count >= self.max_calls or self.cooldown_remaining > 0

    @property
    def usage_ratio(self) -> float:
        """Fraction of the window budget used, capped at 1."""
        if self.max_calls <= 0:
            return 1.0
        return min(1.0, self.window_count / self.max_calls)
