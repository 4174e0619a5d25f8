from datetime import date, timedelta
from unittest import mock
from zoneinfo import ZoneInfo

from django.core.exceptions import ValidationError
from django.db import DatabaseError
from django.test import SimpleTestCase, TestCase, override_settings

from olympics import models
from olympics.models import Medal, Status
from olympics.services import catalog, registry, stats, status, teams
from olympics.services.schedule import (
    ScheduleFilters,
    day_bounds,
    parse_timezone,
    poll_interval_seconds,
    schedule,
    upcoming_rounds,
)
from olympics.services.standings import StandingRow, country_medals, rank_rows, standings

from .factories import award, make_country, make_event, make_olympics, make_round, make_sport, utc

GOLD, SILVER, BRONZE = Medal.MedalType.GOLD, Medal.MedalType.SILVER, Medal.MedalType.BRONZE


class StandingsTests(TestCase):
    def setUp(self):
        self.olympics = make_olympics()
        self.event = make_event(self.olympics)
        self.usa = make_country("USA", "United States")
        self.chn = make_country("CHN", "China")
        self.aus = make_country("AUS", "Australia")

    def test_two_golds_outrank_three_silvers(self):
        award(self.event, self.chn, GOLD)
        award(self.event, self.chn, GOLD)
        for _ in range(3):
            award(self.event, self.usa, SILVER)

        rows = standings(self.olympics.pk)

        self.assertEqual([row.code for row in rows], ["CHN", "USA"])
        self.assertEqual([row.rank for row in rows], [1, 2])
        self.assertEqual(rows[0].total, 2)
        self.assertEqual(rows[1].total, 3)

    def test_totals_and_absent_countries(self):
        award(self.event, self.usa, GOLD)
        award(self.event, self.usa, SILVER)
        award(self.event, self.usa, BRONZE)

        rows = standings(self.olympics.pk)

        self.assertEqual(len(rows), 1)
        row = rows[0]
        self.assertEqual((row.gold, row.silver, row.bronze, row.total), (1, 1, 1, 3))
        self.assertNotIn("AUS", [r.code for r in rows])

    def test_equal_counts_share_a_rank(self):
        award(self.event, self.usa, GOLD)
        award(self.event, self.chn, GOLD)
        award(self.event, self.aus, SILVER)

        rows = standings(self.olympics.pk)

        self.assertEqual([row.rank for row in rows], [1, 1, 3])
        self.assertEqual(rows[2].code, "AUS")

    def test_name_is_not_an_ordering_key(self):
        rows = rank_rows(
            [
                StandingRow(country_id=1, name="Zambia", code="ZAM", flag_url="", gold=0, silver=0, bronze=2),
                StandingRow(country_id=2, name="Albania", code="ALB", flag_url="", gold=0, silver=0, bronze=1),
                StandingRow(country_id=3, name="Bhutan", code="BHU", flag_url="", gold=0, silver=1, bronze=0),
            ]
        )
        self.assertEqual([row.code for row in rows], ["BHU", "ZAM", "ALB"])

    def test_scope_and_limit(self):
        other = make_olympics(name="Tokyo 2020", year=2021)
        other_event = make_event(other)
        award(other_event, self.aus, GOLD)
        award(self.event, self.usa, GOLD)
        award(self.event, self.chn, SILVER)

        self.assertEqual([row.code for row in standings(self.olympics.pk)], ["USA", "CHN"])
        self.assertEqual([row.code for row in standings(self.olympics.pk, limit=1)], ["USA"])
        self.assertEqual(len(standings()), 3)

    def test_country_medals_defaults_to_zero(self):
        award(self.event, self.usa, BRONZE)
        self.assertEqual(
            country_medals(self.usa, self.olympics.pk),
            {"gold": 0, "silver": 0, "bronze": 1, "total": 1},
        )
        self.assertEqual(country_medals(self.aus)["total"], 0)


class RegistryTests(TestCase):
    def setUp(self):
        self.paris = make_olympics(is_active=True)
        self.milan = make_olympics(name="Milano Cortina 2026", year=2026, type="winter")

    def test_activation_leaves_exactly_one_active(self):
        registry.activate(self.milan.pk)

        active = list(models.Olympics.objects.filter(is_active=True))
        self.assertEqual(active, [self.milan])
        self.assertEqual(
            models.Setting.get_value(models.Setting.ACTIVE_OLYMPICS_ID), str(self.milan.pk)
        )

    def test_activation_is_idempotent(self):
        registry.activate(self.milan.pk)
        registry.activate(self.milan.pk)
        self.assertEqual(models.Olympics.objects.filter(is_active=True).count(), 1)

    def test_activating_unknown_olympics(self):
        with self.assertRaises(models.Olympics.DoesNotExist):
            registry.activate(9999)
        with self.assertRaises(ValidationError):
            registry.activate("abc")

    @override_settings(OLYMPICS_ACTIVATION_ATTEMPTS=3)
    def test_activation_replays_after_database_error(self):
        real = registry._activate_once
        calls = []

        def flaky(pk):
            calls.append(pk)
            if len(calls) == 1:
                raise DatabaseError("connection reset")
            return real(pk)

        with mock.patch.object(registry, "_activate_once", side_effect=flaky), mock.patch.object(
            registry.time, "sleep"
        ):
            registry.activate(self.milan.pk)

        self.assertEqual(len(calls), 2)
        self.milan.refresh_from_db()
        self.assertTrue(self.milan.is_active)

    @override_settings(OLYMPICS_ACTIVATION_ATTEMPTS=2)
    def test_activation_gives_up(self):
        with mock.patch.object(
            registry, "_activate_once", side_effect=DatabaseError("down")
        ) as attempt, mock.patch.object(registry.time, "sleep"):
            with self.assertRaises(DatabaseError):
                registry.activate(self.milan.pk)
        self.assertEqual(attempt.call_count, 2)

    def test_resolution_order(self):
        self.assertEqual(registry.get_active(), self.paris.pk)

        models.Setting.put(models.Setting.ACTIVE_OLYMPICS_ID, str(self.milan.pk))
        self.assertEqual(registry.get_active(), self.milan.pk)

        self.assertEqual(registry.get_active(str(self.paris.pk)), self.paris.pk)

    def test_stale_setting_is_ignored(self):
        models.Setting.put(models.Setting.ACTIVE_OLYMPICS_ID, "4242")
        self.assertEqual(registry.get_active(), self.paris.pk)

    def test_nothing_to_resolve(self):
        models.Olympics.objects.update(is_active=False)
        self.assertIsNone(registry.get_active())
        self.assertIsNone(registry.get_active_olympics())

    def test_deleting_selected_olympics_clears_setting(self):
        registry.activate(self.milan.pk)
        registry.delete_olympics(self.milan)
        self.assertIsNone(models.Setting.get_value(models.Setting.ACTIVE_OLYMPICS_ID))
        self.assertEqual(registry.get_active(), None)


class StatusTests(SimpleTestCase):
    def test_permissive_by_default(self):
        current = Status.SCHEDULED
        for new in (Status.LIVE, Status.COMPLETED, Status.SCHEDULED):
            current = status.validate_transition(current, new)
        self.assertEqual(current, Status.SCHEDULED)

    @override_settings(OLYMPICS_STRICT_STATUS_TRANSITIONS=True)
    def test_strict_mode_follows_the_graph(self):
        self.assertEqual(status.validate_transition(Status.SCHEDULED, "live"), Status.LIVE)
        self.assertEqual(status.validate_transition(Status.LIVE, "delayed"), Status.DELAYED)
        self.assertEqual(status.validate_transition(Status.COMPLETED, "completed"), Status.COMPLETED)
        with self.assertRaises(ValidationError):
            status.validate_transition(Status.COMPLETED, Status.SCHEDULED)
        with self.assertRaises(ValidationError):
            status.validate_transition(Status.CANCELLED, Status.LIVE)

    def test_unknown_status_rejected(self):
        with self.assertRaises(ValidationError):
            status.validate_transition(None, "postponed")

    def test_terminal_states(self):
        self.assertTrue(status.is_terminal(Status.COMPLETED))
        self.assertTrue(status.is_terminal(Status.CANCELLED))
        self.assertFalse(status.is_terminal(Status.DELAYED))
        for state in Status.values:
            if not status.is_terminal(state):
                self.assertTrue(status.can_transition(state, Status.CANCELLED))


class ScheduleTests(TestCase):
    def setUp(self):
        self.olympics = make_olympics()
        self.swimming = make_sport("Swimming")
        self.archery = make_sport("Archery")
        self.freestyle = make_event(self.olympics, "100m Freestyle", sport=self.swimming)
        self.butterfly = make_event(self.olympics, "200m Butterfly", sport=self.swimming)
        self.recurve = make_event(self.olympics, "Individual Recurve", sport=self.archery)

    def test_sport_and_status_filters(self):
        later = make_round(self.freestyle, utc(2024, 7, 28, 12), status=Status.LIVE)
        earlier = make_round(self.butterfly, utc(2024, 7, 28, 9), status=Status.LIVE)
        make_round(self.freestyle, utc(2024, 7, 28, 8), status=Status.SCHEDULED)
        make_round(self.recurve, utc(2024, 7, 28, 10), status=Status.LIVE)

        entries = schedule(ScheduleFilters(sport_id=self.swimming.pk, status=Status.LIVE))

        self.assertEqual([entry.round for entry in entries], [earlier, later])

    def test_ties_break_on_sport_then_event_name(self):
        start = utc(2024, 7, 28, 10)
        butterfly = make_round(self.butterfly, start)
        freestyle = make_round(self.freestyle, start)
        recurve = make_round(self.recurve, start)

        entries = schedule(ScheduleFilters(olympics_id=self.olympics.pk))

        self.assertEqual([entry.round for entry in entries], [recurve, freestyle, butterfly])

    def test_events_without_a_sport_sort_last(self):
        start = utc(2024, 7, 28, 10)
        unassigned = make_round(make_event(self.olympics, "Breaking"), start)
        freestyle = make_round(self.freestyle, start)

        entries = schedule(ScheduleFilters(olympics_id=self.olympics.pk))

        self.assertEqual([entry.round for entry in entries], [freestyle, unassigned])

    def test_event_set_filter(self):
        freestyle = make_round(self.freestyle, utc(2024, 7, 28, 9))
        recurve = make_round(self.recurve, utc(2024, 7, 28, 10))
        make_round(self.butterfly, utc(2024, 7, 28, 11))

        entries = schedule(ScheduleFilters(medal_event_ids=frozenset({self.freestyle.pk, self.recurve.pk})))

        self.assertEqual([entry.round for entry in entries], [freestyle, recurve])
        self.assertEqual(schedule(ScheduleFilters(medal_event_ids=frozenset())), [])

    def test_day_filter_honours_time_zone(self):
        late_evening = make_round(self.freestyle, utc(2024, 7, 27, 23, 30))

        paris_day = schedule(ScheduleFilters(day=date(2024, 7, 28), tz=ZoneInfo("Europe/Paris")))
        utc_day = schedule(ScheduleFilters(day=date(2024, 7, 28)))

        self.assertEqual([entry.round for entry in paris_day], [late_evening])
        self.assertEqual(utc_day, [])

    def test_day_bounds(self):
        start, end = day_bounds(date(2024, 7, 28), ZoneInfo("Asia/Tokyo"))
        self.assertEqual(start, utc(2024, 7, 27, 15))
        self.assertEqual(end, utc(2024, 7, 28, 15))

    def test_parse_timezone(self):
        self.assertIsNone(parse_timezone(""))
        self.assertEqual(parse_timezone("Europe/Paris").key, "Europe/Paris")
        with self.assertRaises(ValueError):
            parse_timezone("Mars/Olympus_Mons")

    def test_upcoming_rounds(self):
        now = utc(2024, 7, 28, 10)
        make_round(self.freestyle, now - timedelta(hours=1))
        soon = make_round(self.recurve, now + timedelta(hours=1))
        later = make_round(self.butterfly, now + timedelta(hours=3))

        entries = upcoming_rounds(self.olympics.pk, limit=1, now=now)
        self.assertEqual([entry.round for entry in entries], [soon])
        entries = upcoming_rounds(self.olympics.pk, now=now)
        self.assertEqual([entry.round for entry in entries], [soon, later])

    @override_settings(OLYMPICS_LIVE_POLL_SECONDS=15)
    def test_poll_interval_from_settings(self):
        self.assertEqual(poll_interval_seconds(), 15)


class CatalogTests(TestCase):
    def setUp(self):
        self.olympics = make_olympics()
        self.event = make_event(self.olympics)
        self.usa = make_country("USA")
        self.fra = make_country("FRA")
        self.jpn = make_country("JPN")

    def test_medal_status_thresholds(self):
        self.assertEqual(catalog.medal_status(0), "upcoming")
        self.assertEqual(catalog.medal_status(2), "in_progress")
        self.assertEqual(catalog.medal_status(3), "completed")
        self.assertEqual(catalog.medal_status(4), "completed")

    def test_medal_events_are_annotated(self):
        award(self.event, self.usa, GOLD)
        award(self.event, self.fra, SILVER)
        empty = make_event(self.olympics, "Marathon", gender=models.MedalEvent.Gender.WOMEN)

        counts = {event.pk: event.medal_count for event in catalog.medal_events(olympics_id=self.olympics.pk)}

        self.assertEqual(counts, {self.event.pk: 2, empty.pk: 0})
        women = catalog.medal_events(gender="women")
        self.assertEqual(list(women), [empty])
        with self.assertRaises(ValidationError):
            catalog.medal_events(gender="other")

    def test_set_participants_replaces_the_set(self):
        catalog.set_participants(self.event, [self.usa.pk, self.fra.pk])
        rows = catalog.set_participants(self.event, [self.fra.pk, self.jpn.pk])

        self.assertEqual({row.country.code for row in rows}, {"FRA", "JPN"})
        self.assertEqual(self.event.participants.count(), 2)

    def test_set_participants_rejects_unknown_countries(self):
        catalog.set_participants(self.event, [self.usa.pk])
        with self.assertRaises(ValidationError):
            catalog.set_participants(self.event, [self.fra.pk, 9999])
        self.assertEqual(list(self.event.participants.values_list("country__code", flat=True)), ["USA"])

    def test_deleting_event_cascades(self):
        event_round = make_round(self.event, utc(2024, 7, 28, 10))
        models.Match.objects.create(event_round=event_round, team_a_country=self.usa, team_b_country=self.fra)
        models.RoundResult.objects.create(event_round=event_round, country=self.usa, final_position=1)
        catalog.set_participants(self.event, [self.usa.pk, self.fra.pk])
        award(self.event, self.usa, GOLD)

        catalog.delete_medal_event(self.event)

        self.assertFalse(models.EventRound.objects.exists())
        self.assertFalse(models.Match.objects.exists())
        self.assertFalse(models.RoundResult.objects.exists())
        self.assertFalse(models.EventParticipant.objects.exists())
        self.assertFalse(models.Medal.objects.exists())
        self.assertEqual(standings(self.olympics.pk), [])
        self.assertEqual(models.Country.objects.count(), 3)

    def test_match_filters(self):
        event_round = make_round(self.event, utc(2024, 7, 28, 10))
        first = models.Match.objects.create(event_round=event_round, team_a_country=self.usa, team_b_country=self.fra)
        second = models.Match.objects.create(event_round=event_round, team_a_country=self.jpn, team_b_country=self.usa)
        models.Match.objects.create(event_round=event_round, team_a_country=self.fra, team_b_country=self.jpn)

        self.assertEqual(set(catalog.matches(country_id=self.usa.pk)), {first, second})
        self.assertEqual(catalog.matches(olympics_id=self.olympics.pk).count(), 3)


class StatsTests(TestCase):
    def test_no_olympics_gives_empty_scoped_figures(self):
        make_country("USA")
        make_sport()

        snapshot = stats.build_stats()

        self.assertIsNone(snapshot.olympics_id)
        self.assertEqual(snapshot.counts["countries"], 1)
        self.assertEqual(snapshot.counts["sports"], 1)
        self.assertEqual(snapshot.counts["medals"], 0)
        self.assertEqual(snapshot.top_countries, [])
        self.assertEqual(snapshot.upcoming, [])

    def test_snapshot_is_scoped_to_the_active_olympics(self):
        now = utc(2024, 7, 28, 10)
        olympics = make_olympics()
        registry.activate(olympics.pk)
        other_event = make_event(make_olympics(name="Tokyo 2020", year=2021))
        event = make_event(olympics)
        usa = make_country("USA")
        award(event, usa, GOLD)
        award(other_event, usa, GOLD)
        live = make_round(event, now - timedelta(minutes=30), status=Status.LIVE)
        upcoming = make_round(event, now + timedelta(hours=2))
        make_round(other_event, now + timedelta(hours=1))

        snapshot = stats.build_stats(now=now)

        self.assertEqual(snapshot.olympics_id, olympics.pk)
        self.assertEqual(snapshot.counts["medal_events"], 1)
        self.assertEqual(snapshot.counts["rounds"], 2)
        self.assertEqual(snapshot.counts["live_rounds"], 1)
        self.assertEqual(snapshot.counts["medals"], 1)
        self.assertEqual([row.code for row in snapshot.top_countries], ["USA"])
        self.assertEqual([entry.round for entry in snapshot.upcoming], [upcoming])
        self.assertEqual([entry.round for entry in snapshot.live], [live])


class CountryScheduleTests(TestCase):
    def setUp(self):
        self.olympics = make_olympics()
        self.usa = make_country("USA")
        self.fra = make_country("FRA")
        self.basketball = make_event(self.olympics, "Basketball", event_type="team")
        self.sprint = make_event(self.olympics, "100m")
        catalog.set_participants(self.basketball, [self.usa.pk, self.fra.pk])
        catalog.set_participants(self.sprint, [self.usa.pk])

        final = make_round(self.basketball, utc(2024, 8, 10, 10), status=Status.COMPLETED)
        self.match = models.Match.objects.create(
            event_round=final,
            team_a_country=self.usa,
            team_b_country=self.fra,
            winner_country=self.usa,
            status=Status.COMPLETED,
        )
        self.heat = make_round(self.sprint, utc(2024, 8, 10, 9))
        self.sprint_final = make_round(self.sprint, utc(2024, 8, 10, 12), status=Status.LIVE)
        award(self.sprint, self.usa, GOLD)

    def test_matches_and_rounds_are_merged_by_time(self):
        plan = teams.country_schedule(self.usa, self.olympics.pk)

        self.assertEqual([item.kind for item in plan.items], ["round", "match", "round"])
        self.assertEqual(plan.items[0].entry.round, self.heat)
        self.assertEqual(plan.items[1].match, self.match)
        self.assertEqual(plan.items[2].entry.round, self.sprint_final)
        self.assertEqual(plan.event_ids, [self.sprint.pk])
        self.assertEqual(
            plan.status_counts,
            {"all": 3, "live": 1, "upcoming": 1, "results": 1, "events": 1},
        )
        self.assertEqual(plan.medals["gold"], 1)

    def test_rounds_of_events_not_entered_are_left_out(self):
        relay = make_event(self.olympics, "4x100m Relay")
        make_round(relay, utc(2024, 8, 10, 11))

        plan = teams.country_schedule(self.usa, self.olympics.pk)

        self.assertNotIn(relay.pk, {item.entry.round.medal_event_id for item in plan.items if item.kind == "round"})
        self.assertEqual(len(plan.items), 3)

    def test_match_outcome_per_side(self):
        self.assertEqual(teams.match_outcome(self.match, self.usa.pk), "win")
        self.assertEqual(teams.match_outcome(self.match, self.fra.pk), "loss")
        self.match.winner_country = None
        self.assertEqual(teams.match_outcome(self.match, self.fra.pk), "draw")
        self.match.status = Status.LIVE
        self.assertIsNone(teams.match_outcome(self.match, self.fra.pk))
