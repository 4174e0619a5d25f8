"""Database models for the Olympics tracker."""
from __future__ import annotations

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import F


ROUND_TYPE_LABELS: dict[str, str] = {
    "qualification": "Qualification",
    "preliminary": "Preliminary",
    "heat": "Heat",
    "repechage": "Repechage",
    "round_robin": "Round Robin",
    "group_stage": "Group Stage",
    "knockout": "Knockout",
    "quarterfinal": "Quarterfinal",
    "semifinal": "Semifinal",
    "bronze_final": "Bronze Final",
    "final": "Final",
}

GENDER_PREFIXES: dict[str, str] = {
    "men": "Men's ",
    "women": "Women's ",
}


def round_label(round_type: str, round_number: int | None = 1, round_name: str | None = None) -> str:
    """Return the display label for a round.

    A custom ``round_name`` always wins. Otherwise the round type label is used,
    suffixed with the round number when it is greater than one.
    """

    custom = (round_name or "").strip()
    if custom:
        return custom
    label = ROUND_TYPE_LABELS.get(round_type, round_type or "")
    if round_number and round_number > 1:
        return f"{label} {round_number}"
    return label


def event_display_name(name: str, gender: str | None) -> str:
    """Prefix an event name with its gender qualifier (mixed events get none)."""

    return f"{GENDER_PREFIXES.get(gender or '', '')}{name}"


class Status(models.TextChoices):
    """Lifecycle shared by rounds and matches."""

    SCHEDULED = "scheduled", "Scheduled"
    DELAYED = "delayed", "Delayed"
    LIVE = "live", "Live"
    COMPLETED = "completed", "Completed"
    CANCELLED = "cancelled", "Cancelled"


class Country(models.Model):
    """A participating nation."""

    name = models.CharField(max_length=120)
    code = models.CharField(max_length=3, unique=True)
    flag_url = models.CharField(max_length=255, blank=True)

    class Meta:
        ordering = ("name",)
        verbose_name_plural = "countries"

    def __str__(self) -> str:
        return f"{self.name} ({self.code})"

    def clean(self) -> None:
        super().clean()
        code = (self.code or "").strip().upper()
        if len(code) != 3 or not code.isalpha():
            raise ValidationError({"code": "Country code must be three letters."})
        self.code = code

    def save(self, *args, **kwargs):
        self.code = (self.code or "").strip().upper()
        return super().save(*args, **kwargs)


class Sport(models.Model):
    name = models.CharField(max_length=120)
    icon = models.CharField(max_length=255, blank=True)

    class Meta:
        ordering = ("name",)

    def __str__(self) -> str:
        return self.name


class Olympics(models.Model):
    """A single edition of the games (e.g. Paris 2024)."""

    class Type(models.TextChoices):
        SUMMER = "summer", "Summer Olympics"
        WINTER = "winter", "Winter Olympics"
        YOUTH = "youth", "Youth Olympics"
        PARALYMPICS = "paralympics", "Paralympics"

    name = models.CharField(max_length=160)
    year = models.PositiveIntegerField()
    type = models.CharField(max_length=12, choices=Type.choices, default=Type.SUMMER)
    city = models.CharField(max_length=120, blank=True)
    country = models.CharField(max_length=120, blank=True)
    logo_url = models.CharField(max_length=255, blank=True)
    start_date = models.DateField(blank=True, null=True)
    end_date = models.DateField(blank=True, null=True)
    is_active = models.BooleanField(default=False)

    class Meta:
        ordering = ("-year", "name")
        verbose_name_plural = "olympics"

    def __str__(self) -> str:
        return self.name

    def clean(self) -> None:
        super().clean()
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValidationError({"end_date": "End date cannot be before the start date."})


class MedalEvent(models.Model):
    """A medal-awarding competition within a sport, e.g. Men's 100m Freestyle."""

    class Gender(models.TextChoices):
        MEN = "men", "Men"
        WOMEN = "women", "Women"
        MIXED = "mixed", "Mixed"

    class EventType(models.TextChoices):
        INDIVIDUAL = "individual", "Individual"
        TEAM = "team", "Team"

    olympics = models.ForeignKey(Olympics, on_delete=models.CASCADE, related_name="medal_events")
    sport = models.ForeignKey(
        Sport,
        on_delete=models.SET_NULL,
        blank=True,
        null=True,
        related_name="medal_events",
    )
    name = models.CharField(max_length=160)
    gender = models.CharField(max_length=8, choices=Gender.choices, default=Gender.MIXED)
    event_type = models.CharField(max_length=12, choices=EventType.choices, default=EventType.INDIVIDUAL)
    venue = models.CharField(max_length=160, blank=True)
    scheduled_date = models.DateField(blank=True, null=True)

    class Meta:
        ordering = (F("scheduled_date").asc(nulls_last=True), "name", "pk")

    def __str__(self) -> str:
        return self.display_name

    @property
    def display_name(self) -> str:
        return event_display_name(self.name, self.gender)


class EventRound(models.Model):
    """A scheduled stage of a medal event (heat, semifinal, final...)."""

    class RoundType(models.TextChoices):
        QUALIFICATION = "qualification", "Qualification"
        PRELIMINARY = "preliminary", "Preliminary"
        HEAT = "heat", "Heat"
        REPECHAGE = "repechage", "Repechage"
        ROUND_ROBIN = "round_robin", "Round Robin"
        GROUP_STAGE = "group_stage", "Group Stage"
        KNOCKOUT = "knockout", "Knockout"
        QUARTERFINAL = "quarterfinal", "Quarterfinal"
        SEMIFINAL = "semifinal", "Semifinal"
        BRONZE_FINAL = "bronze_final", "Bronze Final"
        FINAL = "final", "Final"

    medal_event = models.ForeignKey(MedalEvent, on_delete=models.CASCADE, related_name="rounds")
    round_type = models.CharField(max_length=16, choices=RoundType.choices, default=RoundType.HEAT)
    round_number = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    round_name = models.CharField(max_length=120, blank=True)
    start_time = models.DateTimeField()
    end_time = models.DateTimeField(blank=True, null=True)
    venue = models.CharField(max_length=160, blank=True)
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.SCHEDULED)
    notes = models.TextField(blank=True)

    class Meta:
        ordering = ("start_time", "pk")

    def __str__(self) -> str:
        return f"{self.medal_event}: {self.label}"

    @property
    def label(self) -> str:
        return round_label(self.round_type, self.round_number, self.round_name)

    @property
    def effective_venue(self) -> str:
        """Round venue when set, otherwise the venue of the medal event."""

        return self.venue or self.medal_event.venue

    def clean(self) -> None:
        super().clean()
        if self.start_time and self.end_time and self.end_time < self.start_time:
            raise ValidationError({"end_time": "End time cannot be before the start time."})


class Match(models.Model):
    """A two-sided contest inside a round (team and head-to-head sports)."""

    event_round = models.ForeignKey(EventRound, on_delete=models.CASCADE, related_name="matches")
    match_name = models.CharField(max_length=120, blank=True)
    team_a_country = models.ForeignKey(
        Country,
        on_delete=models.PROTECT,
        blank=True,
        null=True,
        related_name="matches_as_team_a",
    )
    team_b_country = models.ForeignKey(
        Country,
        on_delete=models.PROTECT,
        blank=True,
        null=True,
        related_name="matches_as_team_b",
    )
    team_a_name = models.CharField(max_length=120, blank=True)
    team_b_name = models.CharField(max_length=120, blank=True)
    # Scores are free text ("3-2", "21-19, 18-21"), never compared numerically.
    team_a_score = models.CharField(max_length=60, blank=True)
    team_b_score = models.CharField(max_length=60, blank=True)
    winner_country = models.ForeignKey(
        Country,
        on_delete=models.PROTECT,
        blank=True,
        null=True,
        related_name="matches_won",
    )
    start_time = models.DateTimeField(blank=True, null=True)
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.SCHEDULED)
    notes = models.TextField(blank=True)

    class Meta:
        ordering = (F("start_time").asc(nulls_last=True), "pk")
        verbose_name_plural = "matches"

    def __str__(self) -> str:
        return f"{self.team_a_label} vs {self.team_b_label}"

    @staticmethod
    def side_label(country: Country | None, name: str) -> str:
        if country is not None:
            return country.code
        return name or "TBD"

    @property
    def team_a_label(self) -> str:
        return self.side_label(self.team_a_country, self.team_a_name)

    @property
    def team_b_label(self) -> str:
        return self.side_label(self.team_b_country, self.team_b_name)

    def involves(self, country_id: int) -> bool:
        return country_id in (self.team_a_country_id, self.team_b_country_id)

    def clean(self) -> None:
        super().clean()
        if self.winner_country_id and not self.involves(self.winner_country_id):
            raise ValidationError(
                {"winner_country": "Winner must be one of the two competing countries."}
            )


class EventParticipant(models.Model):
    """Marks a country as entered in a medal event."""

    medal_event = models.ForeignKey(MedalEvent, on_delete=models.CASCADE, related_name="participants")
    country = models.ForeignKey(Country, on_delete=models.CASCADE, related_name="event_entries")

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["medal_event", "country"], name="unique_event_participant"),
        ]
        ordering = ("medal_event", "country__name")

    def __str__(self) -> str:
        return f"{self.country} in {self.medal_event}"


class Medal(models.Model):
    """An awarded medal. Ties and shared medals are simply extra rows."""

    class MedalType(models.TextChoices):
        GOLD = "gold", "Gold"
        SILVER = "silver", "Silver"
        BRONZE = "bronze", "Bronze"

    class RecordType(models.TextChoices):
        WORLD = "WR", "World record"
        OLYMPIC = "OR", "Olympic record"
        PERSONAL = "PB", "Personal best"

    medal_event = models.ForeignKey(MedalEvent, on_delete=models.CASCADE, related_name="medals")
    country = models.ForeignKey(Country, on_delete=models.PROTECT, related_name="medals")
    athlete_name = models.CharField(max_length=160)
    medal_type = models.CharField(max_length=6, choices=MedalType.choices)
    result_value = models.CharField(max_length=60, blank=True)
    record_type = models.CharField(max_length=2, choices=RecordType.choices, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("-created_at", "-pk")

    def __str__(self) -> str:
        return f"{self.get_medal_type_display()} - {self.athlete_name} ({self.country.code})"


class RoundResult(models.Model):
    """Placing of an athlete or team within a non-match round."""

    event_round = models.ForeignKey(EventRound, on_delete=models.CASCADE, related_name="results")
    country = models.ForeignKey(
        Country,
        on_delete=models.SET_NULL,
        blank=True,
        null=True,
        related_name="round_results",
    )
    athlete_name = models.CharField(max_length=160, blank=True)
    score = models.CharField(max_length=60, blank=True)
    final_position = models.PositiveIntegerField(blank=True, null=True, validators=[MinValueValidator(1)])
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = (F("final_position").asc(nulls_last=True), "-updated_at", "pk")

    def __str__(self) -> str:
        who = self.athlete_name or (self.country.code if self.country else "Unknown")
        return f"{who} - {self.event_round}"


class Setting(models.Model):
    """Process-wide key/value configuration."""

    DEFAULT_TIMEZONE = "default_timezone"
    ACTIVE_OLYMPICS_ID = "active_olympics_id"

    key = models.CharField(max_length=64, primary_key=True)
    value = models.TextField(blank=True)

    class Meta:
        ordering = ("key",)

    def __str__(self) -> str:
        return f"{self.key}={self.value}"

    @classmethod
    def get_value(cls, key: str, default: str | None = None) -> str | None:
        row = cls.objects.filter(key=key).first()
        return row.value if row else default

    @classmethod
    def put(cls, key: str, value: str) -> "Setting":
        setting, _ = cls.objects.update_or_create(key=key, defaults={"value": value})
        return setting
