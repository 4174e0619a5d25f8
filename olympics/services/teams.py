"""Per-country schedule combining head-to-head matches and entered events."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime

from olympics.models import Country, Match, Status

from .catalog import matches, participants
from .schedule import ScheduleEntry, ScheduleFilters, schedule
from .standings import country_medals


def match_outcome(match: Match, country_id: int) -> str | None:
    """``win``/``loss``/``draw`` for a completed match, otherwise ``None``."""

    if match.status != Status.COMPLETED:
        return None
    if match.winner_country_id is None:
        return "draw"
    if match.winner_country_id == country_id:
        return "win"
    return "loss"


@dataclass(frozen=True)
class CountryScheduleItem:
    kind: str
    start_time: datetime | None
    status: str
    match: Match | None = None
    entry: ScheduleEntry | None = None


@dataclass
class CountrySchedule:
    country: Country
    olympics_id: int | None
    items: list[CountryScheduleItem] = field(default_factory=list)
    medals: dict[str, int] = field(default_factory=dict)
    event_ids: list[int] = field(default_factory=list)

    @property
    def status_counts(self) -> dict[str, int]:
        tally = Counter(item.status for item in self.items)
        return {
            "all": len(self.items),
            "live": tally[Status.LIVE],
            "upcoming": tally[Status.SCHEDULED],
            "results": tally[Status.COMPLETED],
            "events": len(self.event_ids),
        }


def _start_key(item: CountryScheduleItem) -> tuple[int, datetime | None]:
    # missing start times sort last
    return (item.start_time is None, item.start_time)


def country_schedule(country: Country, olympics_id: int | None = None) -> CountrySchedule:
    """Everything ``country`` takes part in.

    Events where the country already has a match are represented by those
    matches only; other entered events contribute their rounds.
    """

    country_matches = list(matches(olympics_id=olympics_id, country_id=country.pk))
    events_with_matches = {match.event_round.medal_event_id for match in country_matches}
    entered = {
        row.medal_event_id
        for row in participants(country_id=country.pk, olympics_id=olympics_id)
    }
    round_events = entered - events_with_matches

    items = [
        CountryScheduleItem(
            kind="match",
            start_time=match.start_time or match.event_round.start_time,
            status=match.status,
            match=match,
        )
        for match in country_matches
    ]
    if round_events:
        entered_rounds = ScheduleFilters(olympics_id=olympics_id, medal_event_ids=frozenset(round_events))
        for entry in schedule(entered_rounds):
            items.append(
                CountryScheduleItem(
                    kind="round",
                    start_time=entry.round.start_time,
                    status=entry.round.status,
                    entry=entry,
                )
            )
    items.sort(key=_start_key)

    return CountrySchedule(
        country=country,
        olympics_id=olympics_id,
        items=items,
        medals=country_medals(country, olympics_id),
        event_ids=sorted(round_events),
    )
