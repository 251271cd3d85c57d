"""
Typed views of MotoGP API payloads.

The upstream JSON is loosely typed: any field may be missing or null. Each
dataclass is built with ``from_api()`` at the ingestion boundary so the rest
of the pipeline works with explicit optional fields. ``from_api()`` raises
ValueError only when the identity field itself is missing.
"""

from dataclasses import dataclass
from datetime import datetime, timezone as dt_timezone
from typing import Any, Dict, Optional

from django.utils.dateparse import parse_datetime
from django.utils import timezone


def dig(payload: Any, *path: str) -> Any:
    """Walk nested dicts, returning None as soon as a level is missing or not a dict."""
    current = payload
    for key in path:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    return current


def as_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def as_str(value: Any) -> str:
    if value is None:
        return ''
    return str(value).strip()


def as_datetime(value: Any) -> Optional[datetime]:
    if not value or not isinstance(value, str):
        return None
    try:
        parsed = parse_datetime(value)
    except ValueError:
        return None
    if parsed is None:
        return None
    if timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed, dt_timezone.utc)
    return parsed


@dataclass
class RiderPayload:
    """
    A rider from the /riders endpoint.

    Career stats (championships, wins) feed the market value; the career step
    carries category, number, team and rider type.
    """
    external_id: str
    name: str
    surname: str = ''
    number: Optional[int] = None
    team_name: str = ''
    nationality: str = ''
    legacy_category_id: Optional[int] = None
    in_grid: bool = False
    career_type: str = ''
    photo_url: str = ''
    championships: int = 0
    wins: int = 0

    @property
    def full_name(self) -> str:
        return f"{self.name} {self.surname}".strip()

    @classmethod
    def from_api(cls, payload: Dict) -> 'RiderPayload':
        external_id = as_str(dig(payload, 'id'))
        if not external_id:
            raise ValueError("Rider payload without id")

        return cls(
            external_id=external_id,
            name=as_str(dig(payload, 'name')),
            surname=as_str(dig(payload, 'surname')),
            number=as_int(dig(payload, 'current_career_step', 'number')),
            team_name=as_str(dig(payload, 'current_career_step', 'sponsored_team')),
            nationality=as_str(dig(payload, 'country', 'iso'))[:3],
            legacy_category_id=as_int(dig(payload, 'current_career_step', 'category', 'legacy_id')),
            in_grid=bool(dig(payload, 'current_career_step', 'in_grid')),
            career_type=as_str(dig(payload, 'current_career_step', 'type')),
            photo_url=as_str(dig(payload, 'current_career_step', 'pictures', 'portrait')),
            championships=as_int(dig(payload, 'stats', 'championships')) or 0,
            wins=as_int(dig(payload, 'stats', 'wins')) or 0,
        )


@dataclass
class EventPayload:
    """An event (race weekend or test) from the results /events endpoint."""
    external_id: str
    name: str
    circuit: str = ''
    country: str = ''
    round_number: int = 0
    is_test: bool = False
    date_start: Optional[datetime] = None
    date_end: Optional[datetime] = None

    @classmethod
    def from_api(cls, payload: Dict) -> 'EventPayload':
        external_id = as_str(dig(payload, 'id'))
        if not external_id:
            raise ValueError("Event payload without id")

        return cls(
            external_id=external_id,
            name=as_str(dig(payload, 'sponsored_name')) or as_str(dig(payload, 'name')),
            circuit=as_str(dig(payload, 'circuit', 'name')),
            country=as_str(dig(payload, 'country', 'iso')) or as_str(dig(payload, 'country', 'name')),
            round_number=as_int(dig(payload, 'round')) or as_int(dig(payload, 'number')) or 0,
            is_test=bool(dig(payload, 'test')),
            date_start=as_datetime(dig(payload, 'date_start')),
            date_end=as_datetime(dig(payload, 'date_end')),
        )


@dataclass
class SessionPayload:
    """A session from the results /sessions endpoint (RAC, SPR, Q2, FP1, ...)."""
    external_id: str
    session_type: str = ''
    date: Optional[datetime] = None

    @classmethod
    def from_api(cls, payload: Dict) -> 'SessionPayload':
        external_id = as_str(dig(payload, 'id'))
        if not external_id:
            raise ValueError("Session payload without id")

        return cls(
            external_id=external_id,
            session_type=as_str(dig(payload, 'type')).upper(),
            date=as_datetime(dig(payload, 'date')),
        )


@dataclass
class ClassificationEntry:
    """One line of a session classification."""
    rider_external_id: str = ''
    rider_name: str = ''
    rider_number: Optional[int] = None
    position: Optional[int] = None
    status: str = ''

    @classmethod
    def from_api(cls, payload: Dict) -> 'ClassificationEntry':
        rider_external_id = (
            as_str(dig(payload, 'rider', 'riders_api_uuid'))
            or as_str(dig(payload, 'rider', 'id'))
        )
        rider_name = as_str(dig(payload, 'rider', 'full_name'))
        if not rider_external_id and not rider_name:
            raise ValueError("Classification entry without rider identity")

        position = as_int(dig(payload, 'position'))
        if position is not None and position <= 0:
            position = None

        return cls(
            rider_external_id=rider_external_id,
            rider_name=rider_name,
            rider_number=as_int(dig(payload, 'rider', 'number')),
            position=position,
            status=as_str(dig(payload, 'status')).upper(),
        )
