from django.core.exceptions import ValidationError
from django.test import SimpleTestCase, TestCase

from olympics import models

from .factories import make_country, make_event, make_olympics, make_round, utc


class LabelTests(SimpleTestCase):
    def test_custom_round_name_wins(self):
        self.assertEqual(models.round_label("heat", 3, "Heat 3A"), "Heat 3A")

    def test_round_number_suffix_only_above_one(self):
        self.assertEqual(models.round_label("semifinal", 2), "Semifinal 2")
        self.assertEqual(models.round_label("semifinal", 1), "Semifinal")
        self.assertEqual(models.round_label("bronze_final", 1, "   "), "Bronze Final")

    def test_every_round_type_has_a_label(self):
        for value in models.EventRound.RoundType.values:
            self.assertIn(value, models.ROUND_TYPE_LABELS)

    def test_event_display_name(self):
        self.assertEqual(models.event_display_name("100m", "men"), "Men's 100m")
        self.assertEqual(models.event_display_name("100m", "women"), "Women's 100m")
        self.assertEqual(models.event_display_name("Relay", "mixed"), "Relay")
        self.assertEqual(models.event_display_name("Relay", None), "Relay")


class CountryTests(TestCase):
    def test_code_is_upper_cased_on_save(self):
        country = models.Country.objects.create(name="Japan", code="jpn")
        country.refresh_from_db()
        self.assertEqual(country.code, "JPN")

    def test_clean_rejects_bad_codes(self):
        with self.assertRaises(ValidationError):
            models.Country(name="Nowhere", code="N1").full_clean()


class RoundAndMatchTests(TestCase):
    def setUp(self):
        self.olympics = make_olympics()
        self.event = make_event(self.olympics, venue="Aquatics Centre")
        self.round = make_round(self.event, utc(2024, 7, 27, 10))
        self.usa = make_country("USA")
        self.fra = make_country("FRA")
        self.jpn = make_country("JPN")

    def test_effective_venue_falls_back_to_event(self):
        self.assertEqual(self.round.effective_venue, "Aquatics Centre")
        self.round.venue = "Warm-up Pool"
        self.assertEqual(self.round.effective_venue, "Warm-up Pool")

    def test_round_end_before_start_is_invalid(self):
        self.round.end_time = utc(2024, 7, 27, 9)
        with self.assertRaises(ValidationError):
            self.round.full_clean()

    def test_side_labels(self):
        match = models.Match(event_round=self.round, team_a_country=self.usa, team_b_name="Refugee Team")
        self.assertEqual(match.team_a_label, "USA")
        self.assertEqual(match.team_b_label, "Refugee Team")
        self.assertEqual(str(models.Match(event_round=self.round)), "TBD vs TBD")

    def test_winner_must_be_a_side(self):
        match = models.Match(
            event_round=self.round,
            team_a_country=self.usa,
            team_b_country=self.fra,
            winner_country=self.jpn,
        )
        with self.assertRaises(ValidationError):
            match.full_clean()
        match.winner_country = self.fra
        match.full_clean()


class SettingTests(TestCase):
    def test_default_timezone_seeded(self):
        self.assertEqual(models.Setting.get_value(models.Setting.DEFAULT_TIMEZONE), "UTC")

    def test_put_overwrites(self):
        models.Setting.put("default_timezone", "Europe/Paris")
        models.Setting.put("default_timezone", "Asia/Tokyo")
        self.assertEqual(models.Setting.get_value("default_timezone"), "Asia/Tokyo")
        self.assertIsNone(models.Setting.get_value("missing"))
