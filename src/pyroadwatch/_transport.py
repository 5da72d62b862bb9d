"""HTTP transport for the roadway incident feed."""

from __future__ import annotations

import json
import logging
from typing import Any, Protocol

import aiohttp

from pyroadwatch._constants import ALERTS_ENDPOINT, EVENTS_ENDPOINT, USER_AGENT
from pyroadwatch.config import RoadwatchConfig
from pyroadwatch.exceptions import IncidentFetchError
from pyroadwatch.ingestion.incidents import parse_incidents
from pyroadwatch.models.incident import IncidentRecord

_logger = logging.getLogger(__name__)


class IncidentSource(Protocol):
    """Structural interface used by the client to obtain incidents.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (:class:`IncidentFeed`) concrete.
    """

    async def fetch_events(self) -> list[IncidentRecord]:
        ...


class IncidentFeed:
    """Fetches incident lists from the 511 Ontario style JSON API.

    The feed does not retry or cache; callers gate it through
    :class:`~pyroadwatch.limiter.CallBudgetLimiter`.
    """

    def __init__(self, config: RoadwatchConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session

    async def fetch_events(self) -> list[IncidentRecord]:
        """Current traffic events (incidents, closures, construction)."""
        return parse_incidents(await self._get_json(EVENTS_ENDPOINT), endpoint=EVENTS_ENDPOINT)

    async def fetch_alerts(self) -> list[IncidentRecord]:
        """Current traffic alerts."""
        return parse_incidents(await self._get_json(ALERTS_ENDPOINT), endpoint=ALERTS_ENDPOINT)

    async def _get_json(self, endpoint: str) -> Any:
        url = f"{self._config.incident_base_url}{endpoint}"
        headers = {
            "accept": "application/json",
            "user-agent": USER_AGENT,
        }
        timeout = aiohttp.ClientTimeout(total=self._config.request_timeout_s)

        _logger.debug("GET %s", url)

        try:
            async with self._http.get(url, headers=headers, timeout=timeout) as resp:
                text = await resp.text()
                if resp.status != 200:
                    raise IncidentFetchError(
                        f"HTTP {resp.status} from {endpoint}: {text[:200]}",
                        status_code=resp.status,
                        endpoint=endpoint,
                    )
        except IncidentFetchError:
            raise
        except TimeoutError as exc:
            raise IncidentFetchError(f"Request to {endpoint} timed out", endpoint=endpoint) from exc
        except aiohttp.ClientError as exc:
            raise IncidentFetchError(
                f"Request to {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc

        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise IncidentFetchError(
                f"Invalid JSON from {endpoint}: {text[:200]}",
                endpoint=endpoint,
            ) from exc
