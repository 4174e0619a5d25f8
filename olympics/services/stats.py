"""Landing dashboard snapshot."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from olympics.models import Country, EventRound, Medal, MedalEvent, Sport, Status

from . import registry
from .schedule import ScheduleEntry, live_rounds, upcoming_rounds
from .standings import StandingRow, standings

TOP_COUNTRIES = 5
UPCOMING_LIMIT = 10


@dataclass(frozen=True)
class StatsSnapshot:
    olympics_id: int | None
    counts: dict[str, int]
    top_countries: list[StandingRow] = field(default_factory=list)
    upcoming: list[ScheduleEntry] = field(default_factory=list)
    live: list[ScheduleEntry] = field(default_factory=list)


def build_stats(explicit_olympics=None, *, now: datetime | None = None) -> StatsSnapshot:
    """Counts, top of the medal table, upcoming and live rounds.

    Countries and sports are counted globally. Everything else is scoped to
    the resolved Olympics and left empty when none resolves.
    """

    olympics_id = registry.get_active(explicit_olympics)
    counts = {
        "countries": Country.objects.count(),
        "sports": Sport.objects.count(),
        "medal_events": 0,
        "rounds": 0,
        "medals": 0,
        "live_rounds": 0,
    }
    if olympics_id is None:
        return StatsSnapshot(olympics_id=None, counts=counts)

    counts["medal_events"] = MedalEvent.objects.filter(olympics_id=olympics_id).count()
    scoped_rounds = EventRound.objects.filter(medal_event__olympics_id=olympics_id)
    counts["rounds"] = scoped_rounds.count()
    counts["live_rounds"] = scoped_rounds.filter(status=Status.LIVE).count()
    counts["medals"] = Medal.objects.filter(medal_event__olympics_id=olympics_id).count()

    return StatsSnapshot(
        olympics_id=olympics_id,
        counts=counts,
        top_countries=standings(olympics_id, limit=TOP_COUNTRIES),
        upcoming=upcoming_rounds(olympics_id, limit=UPCOMING_LIMIT, now=now),
        live=live_rounds(olympics_id),
    )
