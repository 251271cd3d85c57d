"""
HTTP client for the MotoGP (Pulselive) API.

The client is a thin, stateless wrapper around httpx: every component gets
one injected instead of sharing a module-level singleton. All transport
errors are translated into the pipeline's error taxonomy:

- httpx.TimeoutException -> UpstreamTimeout
- non-2xx / connection errors / bad JSON -> UpstreamUnavailable
"""

import logging
from typing import Any, Dict, List, Optional

import httpx
from django.conf import settings

from .exceptions import NotFound, UpstreamTimeout, UpstreamUnavailable

logger = logging.getLogger(__name__)


class MotoGPClient:
    """
    Read-only client for rider, calendar and results endpoints.

    Usage:
        with MotoGPClient.from_settings() as client:
            riders = client.get_riders()
    """

    def __init__(
        self,
        base_url: str,
        results_url: str,
        timeout: float = 10.0,
        user_agent: str = 'FantaMotoGP/1.0',
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url.rstrip('/')
        self.results_url = results_url.rstrip('/')
        self._http = httpx.Client(
            timeout=timeout,
            headers={
                'Accept': 'application/json',
                'User-Agent': user_agent,
            },
            transport=transport,
        )

    @classmethod
    def from_settings(cls, transport: Optional[httpx.BaseTransport] = None) -> 'MotoGPClient':
        return cls(
            base_url=settings.MOTOGP_API_BASE_URL,
            results_url=settings.MOTOGP_RESULTS_API_URL,
            timeout=settings.MOTOGP_API_TIMEOUT,
            user_agent=settings.MOTOGP_API_USER_AGENT,
            transport=transport,
        )

    def close(self):
        self._http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def _get(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        try:
            response = self._http.get(url, params=params)
            response.raise_for_status()
            return response.json()
        except httpx.TimeoutException as e:
            raise UpstreamTimeout(f"Timed out calling {url}: {e}") from e
        except httpx.HTTPStatusError as e:
            raise UpstreamUnavailable(
                f"{url} answered {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise UpstreamUnavailable(f"Request to {url} failed: {e}") from e
        except ValueError as e:
            raise UpstreamUnavailable(f"{url} returned invalid JSON: {e}") from e

    def _get_list(self, url: str, params: Optional[Dict[str, Any]] = None) -> List[Dict]:
        data = self._get(url, params)
        if data is None:
            return []
        if not isinstance(data, list):
            raise UpstreamUnavailable(f"{url} returned {type(data).__name__}, expected a list")
        return [item for item in data if isinstance(item, dict)]

    # Riders

    def get_riders(self) -> List[Dict]:
        return self._get_list(f"{self.base_url}/riders")

    # Calendar

    def get_seasons(self) -> List[Dict]:
        return self._get_list(f"{self.results_url}/seasons")

    def get_season(self, year: int) -> Dict:
        """Return the season payload for ``year``; NotFound when upstream doesn't know it."""
        for season in self.get_seasons():
            if season.get('year') == year:
                return season
        raise NotFound(f"Season {year} not found upstream")

    def get_events(self, season_uuid: str, finished_only: bool = False) -> List[Dict]:
        params = {'seasonUuid': season_uuid}
        if finished_only:
            params['isFinished'] = 'true'
        return self._get_list(f"{self.results_url}/events", params)

    # Results

    def get_sessions(self, event_uuid: str, category_uuid: str) -> List[Dict]:
        return self._get_list(
            f"{self.results_url}/sessions",
            {'eventUuid': event_uuid, 'categoryUuid': category_uuid},
        )

    def get_classification(self, session_uuid: str, test: bool = False) -> List[Dict]:
        data = self._get(
            f"{self.results_url}/session/{session_uuid}/classification",
            {'test': 'true' if test else 'false'},
        )
        if not isinstance(data, dict):
            return []
        classification = data.get('classification') or []
        return [entry for entry in classification if isinstance(entry, dict)]
