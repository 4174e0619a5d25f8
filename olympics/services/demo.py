"""Demo dataset used by the ``olympics_demo_data`` command."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from django.db import transaction
from django.utils import timezone

from olympics.models import (
    Country,
    EventParticipant,
    EventRound,
    Match,
    Medal,
    MedalEvent,
    Olympics,
    RoundResult,
    Sport,
    Status,
)

from . import registry

logger = logging.getLogger(__name__)

DEMO_OLYMPICS_NAME = "Demo Summer Games"
FLAG_URL_TEMPLATE = "https://flagcdn.com/{alpha2}.svg"

DEMO_COUNTRIES = [
    # name, alpha-3, alpha-2
    ("United States", "USA", "us"),
    ("China", "CHN", "cn"),
    ("Japan", "JPN", "jp"),
    ("France", "FRA", "fr"),
    ("Great Britain", "GBR", "gb"),
    ("Australia", "AUS", "au"),
    ("Kenya", "KEN", "ke"),
    ("Serbia", "SRB", "rs"),
]

DEMO_SPORTS = [
    ("Swimming", "swimming"),
    ("Athletics", "athletics"),
    ("Basketball", "basketball"),
]

DEMO_EVENTS = [
    # sport, name, gender, event_type, venue, day offset, entrants
    ("Swimming", "100m Freestyle", "men", "individual", "Aquatics Centre", 0, ["USA", "AUS", "CHN", "FRA"]),
    ("Athletics", "1500m", "women", "individual", "Olympic Stadium", 1, ["KEN", "GBR", "AUS", "USA"]),
    ("Basketball", "Basketball", "men", "team", "Arena Bercy", 0, ["USA", "FRA", "SRB", "JPN"]),
]


def _countries() -> dict[str, Country]:
    rows = {}
    for name, code, alpha2 in DEMO_COUNTRIES:
        rows[code], _ = Country.objects.update_or_create(
            code=code,
            defaults={"name": name, "flag_url": FLAG_URL_TEMPLATE.format(alpha2=alpha2)},
        )
    return rows


def _sports() -> dict[str, Sport]:
    rows = {}
    for name, icon in DEMO_SPORTS:
        rows[name], _ = Sport.objects.get_or_create(name=name, defaults={"icon": icon})
    return rows


def _swimming(event: MedalEvent, countries: dict[str, Country], start: datetime) -> None:
    heat = EventRound.objects.create(
        medal_event=event,
        round_type=EventRound.RoundType.HEAT,
        start_time=start,
        end_time=start + timedelta(hours=1),
        status=Status.COMPLETED,
    )
    final = EventRound.objects.create(
        medal_event=event,
        round_type=EventRound.RoundType.FINAL,
        start_time=start + timedelta(hours=10),
        status=Status.COMPLETED,
    )
    podium = [
        ("USA", "Alex Carter", Medal.MedalType.GOLD, "46.40", Medal.RecordType.OLYMPIC),
        ("AUS", "Kyle Brennan", Medal.MedalType.SILVER, "46.71", ""),
        ("CHN", "Pan Lei", Medal.MedalType.BRONZE, "46.92", ""),
    ]
    for position, (code, athlete, medal_type, result, record) in enumerate(podium, start=1):
        RoundResult.objects.create(
            event_round=heat, country=countries[code], athlete_name=athlete, score=result, final_position=position
        )
        Medal.objects.create(
            medal_event=event,
            country=countries[code],
            athlete_name=athlete,
            medal_type=medal_type,
            result_value=result,
            record_type=record,
        )
    RoundResult.objects.create(
        event_round=final, country=countries["USA"], athlete_name="Alex Carter", score="46.40", final_position=1
    )


def _athletics(event: MedalEvent, now: datetime) -> None:
    EventRound.objects.create(
        medal_event=event,
        round_type=EventRound.RoundType.HEAT,
        round_number=1,
        start_time=now - timedelta(minutes=20),
        status=Status.LIVE,
    )
    EventRound.objects.create(
        medal_event=event,
        round_type=EventRound.RoundType.HEAT,
        round_number=2,
        start_time=now + timedelta(minutes=40),
    )
    EventRound.objects.create(
        medal_event=event,
        round_type=EventRound.RoundType.FINAL,
        start_time=now + timedelta(days=2),
    )


def _basketball(event: MedalEvent, countries: dict[str, Country], now: datetime) -> None:
    semifinal = EventRound.objects.create(
        medal_event=event,
        round_type=EventRound.RoundType.SEMIFINAL,
        start_time=now - timedelta(days=1),
        status=Status.COMPLETED,
    )
    Match.objects.create(
        event_round=semifinal,
        team_a_country=countries["USA"],
        team_b_country=countries["SRB"],
        team_a_score="95",
        team_b_score="91",
        winner_country=countries["USA"],
        start_time=semifinal.start_time,
        status=Status.COMPLETED,
    )
    Match.objects.create(
        event_round=semifinal,
        team_a_country=countries["FRA"],
        team_b_country=countries["JPN"],
        team_a_score="88",
        team_b_score="74",
        winner_country=countries["FRA"],
        start_time=semifinal.start_time + timedelta(hours=3),
        status=Status.COMPLETED,
    )
    final = EventRound.objects.create(
        medal_event=event,
        round_type=EventRound.RoundType.FINAL,
        start_time=now + timedelta(days=1),
        venue="Arena Bercy Court 1",
    )
    Match.objects.create(
        event_round=final,
        match_name="Gold medal game",
        team_a_country=countries["USA"],
        team_b_country=countries["FRA"],
        start_time=final.start_time,
    )


@transaction.atomic
def _build(now: datetime) -> Olympics:
    countries = _countries()
    sports = _sports()
    olympics, _ = Olympics.objects.update_or_create(
        name=DEMO_OLYMPICS_NAME,
        defaults={
            "year": now.year,
            "type": Olympics.Type.SUMMER,
            "city": "Paris",
            "country": "France",
            "start_date": (now - timedelta(days=3)).date(),
            "end_date": (now + timedelta(days=13)).date(),
        },
    )
    # Reseeding replaces the previous demo programme.
    olympics.medal_events.all().delete()

    day_start = now.replace(hour=8, minute=0, second=0, microsecond=0)
    for sport, name, gender, event_type, venue, offset, entrants in DEMO_EVENTS:
        event = MedalEvent.objects.create(
            olympics=olympics,
            sport=sports[sport],
            name=name,
            gender=gender,
            event_type=event_type,
            venue=venue,
            scheduled_date=(day_start + timedelta(days=offset)).date(),
        )
        EventParticipant.objects.bulk_create(
            [EventParticipant(medal_event=event, country=countries[code]) for code in entrants]
        )
        if sport == "Swimming":
            _swimming(event, countries, day_start - timedelta(days=1))
        elif sport == "Athletics":
            _athletics(event, now)
        else:
            _basketball(event, countries, now)
    return olympics


def seed_demo_olympics(*, now: datetime | None = None, activate: bool = True) -> Olympics:
    """Create (or rebuild) a small demo Olympics and optionally activate it."""

    olympics = _build(now or timezone.now())
    if activate:
        olympics = registry.activate(olympics.pk)
    logger.info("Seeded demo olympics %s", olympics.pk)
    return olympics
