"""Medal event catalog, participants and cascading deletes."""

from __future__ import annotations

import logging
from typing import Iterable

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Count, Q, QuerySet

from olympics.models import Country, EventParticipant, Match, Medal, MedalEvent

logger = logging.getLogger(__name__)

COMPLETE_MEDAL_COUNT = 3


def medal_status(medal_count: int) -> str:
    """Progress of an event judged from how many medals have been awarded."""

    if medal_count >= COMPLETE_MEDAL_COUNT:
        return "completed"
    if medal_count > 0:
        return "in_progress"
    return "upcoming"


def medal_events(
    *,
    olympics_id: int | None = None,
    sport_id: int | None = None,
    gender: str | None = None,
) -> QuerySet[MedalEvent]:
    """Medal events annotated with ``medal_count``."""

    events = MedalEvent.objects.select_related("sport", "olympics").annotate(
        medal_count=Count("medals", distinct=True)
    )
    if olympics_id is not None:
        events = events.filter(olympics_id=olympics_id)
    if sport_id is not None:
        events = events.filter(sport_id=sport_id)
    if gender:
        if gender not in MedalEvent.Gender.values:
            raise ValidationError({"gender": "Gender must be men, women or mixed."})
        events = events.filter(gender=gender)
    return events


def delete_medal_event(medal_event: MedalEvent) -> dict[str, int]:
    """Delete an event with its rounds, matches, results, participants and medals."""

    pk = medal_event.pk
    with transaction.atomic():
        _, removed = medal_event.delete()
    logger.info("Deleted medal event %s: %s", pk, removed)
    return removed


def set_participants(medal_event: MedalEvent, country_ids: Iterable[int]) -> list[EventParticipant]:
    """Replace the set of countries entered in ``medal_event``."""

    wanted = {int(country_id) for country_id in country_ids}
    known = set(Country.objects.filter(pk__in=wanted).values_list("pk", flat=True))
    missing = sorted(wanted - known)
    if missing:
        raise ValidationError(
            {"country_ids": f"Unknown countries: {', '.join(str(pk) for pk in missing)}."}
        )

    with transaction.atomic():
        medal_event.participants.exclude(country_id__in=wanted).delete()
        existing = set(medal_event.participants.values_list("country_id", flat=True))
        EventParticipant.objects.bulk_create(
            [
                EventParticipant(medal_event=medal_event, country_id=country_id)
                for country_id in sorted(wanted - existing)
            ]
        )
    logger.info("Medal event %s now has %d participants", medal_event.pk, len(wanted))
    return list(medal_event.participants.select_related("country"))


def participants(
    *,
    medal_event_id: int | None = None,
    country_id: int | None = None,
    olympics_id: int | None = None,
) -> QuerySet[EventParticipant]:
    rows = EventParticipant.objects.select_related("country", "medal_event", "medal_event__sport")
    if medal_event_id is not None:
        rows = rows.filter(medal_event_id=medal_event_id)
    if country_id is not None:
        rows = rows.filter(country_id=country_id)
    if olympics_id is not None:
        rows = rows.filter(medal_event__olympics_id=olympics_id)
    return rows


def award_medal(**fields) -> Medal:
    medal = Medal.objects.create(**fields)
    logger.info(
        "Awarded %s to %s (%s) in medal event %s",
        medal.medal_type,
        medal.athlete_name,
        medal.country.code,
        medal.medal_event_id,
    )
    return medal


def matches(
    *,
    olympics_id: int | None = None,
    event_round_id: int | None = None,
    medal_event_id: int | None = None,
    country_id: int | None = None,
    status: str | None = None,
) -> QuerySet[Match]:
    rows = Match.objects.select_related(
        "event_round",
        "event_round__medal_event",
        "event_round__medal_event__sport",
        "team_a_country",
        "team_b_country",
        "winner_country",
    )
    if olympics_id is not None:
        rows = rows.filter(event_round__medal_event__olympics_id=olympics_id)
    if event_round_id is not None:
        rows = rows.filter(event_round_id=event_round_id)
    if medal_event_id is not None:
        rows = rows.filter(event_round__medal_event_id=medal_event_id)
    if country_id is not None:
        rows = rows.filter(Q(team_a_country_id=country_id) | Q(team_b_country_id=country_id))
    if status:
        rows = rows.filter(status=status)
    return rows
