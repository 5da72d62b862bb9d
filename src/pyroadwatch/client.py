"""High-level async client tying position tracking to the incident feed."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

import aiohttp

from pyroadwatch import proximity
from pyroadwatch._scheduler import LoopScheduler, Scheduler
from pyroadwatch._transport import IncidentFeed, IncidentSource
from pyroadwatch.config import RoadwatchConfig
from pyroadwatch.exceptions import IncidentFetchError, RoadwatchError
from pyroadwatch.limiter import CallBudgetLimiter
from pyroadwatch.location import LocationSource
from pyroadwatch.models.incident import IncidentRecord, NearestRoad, RankedIncident
from pyroadwatch.models.location import PositionSnapshot, SimPath
from pyroadwatch.models.rate_limit import RateLimitState
from pyroadwatch.provider import UnifiedPositionProvider
from pyroadwatch.simulator import VirtualCarSimulator
from pyroadwatch.tracker import RealPositionTracker

_logger = logging.getLogger(__name__)


class RoadwatchClient:
    """Async client for position-aware traffic incidents.

    Usage::

        async with RoadwatchClient(config, location_source=source) as client:
            client.provider.activate()
            if await client.refresh_incidents():
                ahead = client.whats_ahead()

    Parameters
    ----------
    config : RoadwatchConfig or None
        Engine configuration.
    location_source : LocationSource or None
        Device location capability; ``None`` when the platform has none.
    session : aiohttp.ClientSession or None
        HTTP session to reuse.  One is created (and closed) otherwise.
    incident_source : IncidentSource or None
        Replaces the HTTP incident feed, e.g. with canned data.
    scheduler : Scheduler or None
        Timer provider.  Defaults to the running event loop.
    sim_path : SimPath or None
        Corridor for the virtual car.
    on_update : callable or None
        Receives a :class:`PositionSnapshot` on every position change.
    """

    def __init__(
        self,
        config: RoadwatchConfig | None = None,
        *,
        location_source: LocationSource | None = None,
        session: aiohttp.ClientSession | None = None,
        incident_source: IncidentSource | None = None,
        scheduler: Scheduler | None = None,
        sim_path: SimPath | None = None,
        on_update: Callable[[PositionSnapshot], None] | None = None,
    ) -> None:
        self._config = config or RoadwatchConfig()
        self._location_source = location_source
        self._external_session = session is not None
        self._http_session = session
        self._incident_source = incident_source
        self._scheduler = scheduler
        self._sim_path = sim_path
        self._on_update = on_update

        self._provider: UnifiedPositionProvider | None = None
        self._limiter: CallBudgetLimiter | None = None
        self._incidents: list[IncidentRecord] = []
        self._last_refresh: datetime | None = None
        self._refresh_task: asyncio.Task[None] | None = None
        # Serializes budget check, fetch and record across overlapping refreshes.
        self._refresh_lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> RoadwatchClient:
        scheduler = self._scheduler or LoopScheduler(asyncio.get_running_loop())
        self._scheduler = scheduler
        if self._incident_source is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._incident_source = IncidentFeed(self._config, self._http_session)

        tracker = RealPositionTracker(self._location_source, scheduler, config=self._config)
        simulator = VirtualCarSimulator(scheduler, path=self._sim_path, config=self._config)
        self._provider = UnifiedPositionProvider(
            tracker,
            simulator,
            mode=self._config.initial_mode,
            on_update=self._on_update,
        )
        self._limiter = CallBudgetLimiter(scheduler, config=self._config)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.stop_auto_refresh()
        if self._provider is not None:
            self._provider.close()
        if self._limiter is not None:
            self._limiter.close()
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def provider(self) -> UnifiedPositionProvider:
        if self._provider is None:
            raise RoadwatchError("Client not initialized. Use 'async with RoadwatchClient(...) as client:'")
        return self._provider

    @property
    def limiter(self) -> CallBudgetLimiter:
        if self._limiter is None:
            raise RoadwatchError("Client not initialized. Use 'async with RoadwatchClient(...) as client:'")
        return self._limiter

    @property
    def incidents(self) -> list[IncidentRecord]:
        """Incidents from the last successful refresh."""
        return list(self._incidents)

    @property
    def last_refresh(self) -> datetime | None:
        return self._last_refresh

    def rate_limit_state(self) -> RateLimitState:
        return self.limiter.state()

    # ------------------------------------------------------------------
    # Incidents
    # ------------------------------------------------------------------

    async def refresh_incidents(self) -> bool:
        """Fetch incidents if the call budget allows it.

        Returns ``False`` (without fetching) when the budget is exhausted.
        Only successful fetches count against the budget.

        Raises
        ------
        IncidentFetchError
            When the feed fails; previously fetched incidents are kept.
        """
        limiter = self.limiter
        async with self._refresh_lock:
            return await self._refresh_locked(limiter)

    async def _refresh_locked(self, limiter: CallBudgetLimiter) -> bool:
        if not limiter.can_call():
            state = limiter.state()
            _logger.info(
                "Incident refresh skipped: %d/%d calls in window, cooldown %ds",
                state.window_count,
                state.max_calls,
                state.cooldown_remaining,
            )
            return False

        source = self._incident_source
        if source is None:
            raise RoadwatchError("Client not initialized. Use 'async with RoadwatchClient(...) as client:'")
        records = await source.fetch_events()
        limiter.record_call()
        self._incidents = records
        self._last_refresh = datetime.now(UTC)
        _logger.debug("Fetched %d incidents", len(records))
        return True

    def nearest_road(self) -> NearestRoad | None:
        return proximity.nearest_road(self.provider.position, self._incidents)

    def whats_ahead(self) -> list[RankedIncident]:
        """Incidents ahead on the current road in the current direction."""
        provider = self.provider
        return proximity.whats_ahead(
            provider.position,
            provider.direction.cardinal,
            self._incidents,
            limit=self._config.max_results,
        )

    # ------------------------------------------------------------------
    # Auto refresh
    # ------------------------------------------------------------------

    def start_auto_refresh(self) -> None:
        """Refresh incidents periodically while a position is available."""
        if self._refresh_task is not None and not self._refresh_task.done():
            return
        self._refresh_task = asyncio.create_task(self._auto_refresh_loop())

    async def stop_auto_refresh(self) -> None:
        task = self._refresh_task
        self._refresh_task = None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def _auto_refresh_loop(self) -> None:
        while True:
            if self.provider.position is not None:
                try:
                    await self.refresh_incidents()
                except IncidentFetchError as exc:
                    _logger.warning("Auto refresh failed: %s", exc)
            await asyncio.sleep(self._config.auto_refresh_interval_s)
