"""Time-ordered projection of rounds joined with their events and sports."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from django.conf import settings
from django.db.models import F, QuerySet
from django.utils import timezone

from olympics.models import EventRound, Status

__all__ = [
    "ScheduleFilters",
    "ScheduleEntry",
    "day_bounds",
    "parse_timezone",
    "filtered_rounds",
    "schedule",
    "live_rounds",
    "upcoming_rounds",
    "poll_interval_seconds",
]


def parse_timezone(value: str | None) -> ZoneInfo | None:
    """Return a ``ZoneInfo`` for an IANA name, or ``None`` when blank."""

    name = (value or "").strip()
    if not name:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"Unknown time zone: {name}.") from exc


def day_bounds(day: date, tz: ZoneInfo | None = None) -> tuple[datetime, datetime]:
    """UTC instants covering ``day`` from local midnight to the next midnight."""

    zone = tz or ZoneInfo(settings.TIME_ZONE)
    start = datetime.combine(day, time.min, tzinfo=zone)
    end = datetime.combine(day + timedelta(days=1), time.min, tzinfo=zone)
    utc = ZoneInfo("UTC")
    return start.astimezone(utc), end.astimezone(utc)


@dataclass(frozen=True)
class ScheduleFilters:
    """Conjunctive filters; ``None`` fields impose no constraint."""

    olympics_id: int | None = None
    day: date | None = None
    tz: ZoneInfo | None = None
    sport_id: int | None = None
    status: str | None = None
    medal_event_id: int | None = None
    medal_event_ids: frozenset[int] | None = None


@dataclass(frozen=True)
class ScheduleEntry:
    """One row of the schedule; times stay as UTC instants."""

    round: EventRound

    @property
    def medal_event(self):
        return self.round.medal_event

    @property
    def sport(self):
        return self.round.medal_event.sport


def _base_queryset() -> QuerySet[EventRound]:
    return EventRound.objects.select_related("medal_event", "medal_event__sport")


def _ordered(queryset: QuerySet[EventRound]) -> QuerySet[EventRound]:
    return queryset.order_by(
        "start_time",
        F("medal_event__sport__name").asc(nulls_last=True),
        "medal_event__name",
        "pk",
    )


def filtered_rounds(filters: ScheduleFilters) -> QuerySet[EventRound]:
    rounds = _base_queryset()
    if filters.olympics_id is not None:
        rounds = rounds.filter(medal_event__olympics_id=filters.olympics_id)
    if filters.day is not None:
        start, end = day_bounds(filters.day, filters.tz)
        rounds = rounds.filter(start_time__gte=start, start_time__lt=end)
    if filters.sport_id is not None:
        rounds = rounds.filter(medal_event__sport_id=filters.sport_id)
    if filters.status is not None:
        rounds = rounds.filter(status=filters.status)
    if filters.medal_event_id is not None:
        rounds = rounds.filter(medal_event_id=filters.medal_event_id)
    if filters.medal_event_ids is not None:
        rounds = rounds.filter(medal_event_id__in=filters.medal_event_ids)
    return _ordered(rounds)


def schedule(filters: ScheduleFilters | None = None) -> list[ScheduleEntry]:
    """Rounds matching every provided filter.

    Ordered by start time, then sport name, then event name.
    """

    return [ScheduleEntry(event_round) for event_round in filtered_rounds(filters or ScheduleFilters())]


def live_rounds(olympics_id: int | None = None, *, sport_id: int | None = None) -> list[ScheduleEntry]:
    return schedule(ScheduleFilters(olympics_id=olympics_id, sport_id=sport_id, status=Status.LIVE))


def upcoming_rounds(olympics_id: int | None = None, *, limit: int = 10, now: datetime | None = None) -> list[ScheduleEntry]:
    """Rounds starting at or after ``now``, soonest first."""

    now = now or timezone.now()
    rounds = _base_queryset().filter(start_time__gte=now)
    if olympics_id is not None:
        rounds = rounds.filter(medal_event__olympics_id=olympics_id)
    return [ScheduleEntry(event_round) for event_round in _ordered(rounds)[:limit]]


def poll_interval_seconds() -> int:
    return int(getattr(settings, "OLYMPICS_LIVE_POLL_SECONDS", 30))
