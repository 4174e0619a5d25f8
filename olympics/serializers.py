"""Serializers for the Olympics tracker REST endpoints."""

from __future__ import annotations

from typing import Any, Dict

from rest_framework import serializers

from .models import (
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
from .services import registry
from .services.catalog import award_medal, medal_status
from .services.schedule import ScheduleFilters, parse_timezone
from .services.status import validate_transition
from .services.teams import match_outcome


def _current(serializer: serializers.Serializer, attrs: Dict[str, Any], field: str):
    """Value of ``field`` after the write: incoming when present, else stored."""

    if field in attrs:
        return attrs[field]
    if serializer.instance is not None:
        return getattr(serializer.instance, field)
    return None


def _apply_status(serializer: serializers.Serializer, attrs: Dict[str, Any]) -> None:
    if "status" in attrs:
        current = serializer.instance.status if serializer.instance is not None else None
        attrs["status"] = validate_transition(current, attrs["status"])


# ---------------------- Reference data ----------------------

class CountrySerializer(serializers.ModelSerializer):
    code = serializers.CharField(min_length=3, max_length=3)

    class Meta:
        model = Country
        fields = ["id", "name", "code", "flag_url"]

    def validate_code(self, value: str) -> str:
        code = value.upper()
        if not code.isalpha():
            raise serializers.ValidationError("Country code must be three letters.")
        clash = Country.objects.filter(code=code)
        if self.instance is not None:
            clash = clash.exclude(pk=self.instance.pk)
        if clash.exists():
            raise serializers.ValidationError(f"Country code {code} is already in use.")
        return code


class SportSerializer(serializers.ModelSerializer):
    class Meta:
        model = Sport
        fields = ["id", "name", "icon"]


class OlympicsSerializer(serializers.ModelSerializer):
    class Meta:
        model = Olympics
        fields = [
            "id",
            "name",
            "year",
            "type",
            "city",
            "country",
            "logo_url",
            "start_date",
            "end_date",
            "is_active",
        ]
        read_only_fields = ["is_active"]

    def validate(self, attrs: Dict[str, Any]) -> Dict[str, Any]:
        start = _current(self, attrs, "start_date")
        end = _current(self, attrs, "end_date")
        if start and end and end < start:
            raise serializers.ValidationError({"end_date": "End date cannot be before the start date."})
        return attrs


# ---------------------- Catalog ----------------------

class MedalEventSerializer(serializers.ModelSerializer):
    olympics_id = serializers.PrimaryKeyRelatedField(
        source="olympics", queryset=Olympics.objects.all(), required=False
    )
    sport_id = serializers.PrimaryKeyRelatedField(
        source="sport", queryset=Sport.objects.all(), required=False, allow_null=True
    )
    sport_name = serializers.CharField(source="sport.name", read_only=True, allow_null=True)
    sport_icon = serializers.CharField(source="sport.icon", read_only=True, allow_null=True)
    display_name = serializers.CharField(read_only=True)
    medal_count = serializers.SerializerMethodField()
    medal_status = serializers.SerializerMethodField()

    class Meta:
        model = MedalEvent
        fields = [
            "id",
            "olympics_id",
            "sport_id",
            "sport_name",
            "sport_icon",
            "name",
            "display_name",
            "gender",
            "event_type",
            "venue",
            "scheduled_date",
            "medal_count",
            "medal_status",
        ]

    def get_medal_count(self, obj: MedalEvent) -> int:
        count = getattr(obj, "medal_count", None)
        if count is None:
            count = obj.medals.count()
        return count

    def get_medal_status(self, obj: MedalEvent) -> str:
        return medal_status(self.get_medal_count(obj))

    def validate(self, attrs: Dict[str, Any]) -> Dict[str, Any]:
        if self.instance is None and attrs.get("olympics") is None:
            olympics = registry.get_active_olympics()
            if olympics is None:
                raise serializers.ValidationError(
                    {"olympics_id": "No Olympics is active; pass olympics_id explicitly."}
                )
            attrs["olympics"] = olympics
        return attrs


class EventParticipantSerializer(serializers.ModelSerializer):
    medal_event_id = serializers.PrimaryKeyRelatedField(
        source="medal_event", queryset=MedalEvent.objects.all()
    )
    country_id = serializers.PrimaryKeyRelatedField(source="country", queryset=Country.objects.all())
    country = CountrySerializer(read_only=True)
    event_name = serializers.CharField(source="medal_event.display_name", read_only=True)

    class Meta:
        model = EventParticipant
        fields = ["id", "medal_event_id", "event_name", "country_id", "country"]


class ParticipantSetSerializer(serializers.Serializer):
    country_ids = serializers.ListField(
        child=serializers.IntegerField(min_value=1),
        allow_empty=True,
        max_length=300,
    )


# ---------------------- Rounds and matches ----------------------

class EventRoundSerializer(serializers.ModelSerializer):
    medal_event_id = serializers.PrimaryKeyRelatedField(
        source="medal_event", queryset=MedalEvent.objects.all()
    )
    event_name = serializers.CharField(source="medal_event.display_name", read_only=True)
    sport_name = serializers.CharField(source="medal_event.sport.name", read_only=True, allow_null=True)
    label = serializers.CharField(read_only=True)
    effective_venue = serializers.CharField(read_only=True)

    class Meta:
        model = EventRound
        fields = [
            "id",
            "medal_event_id",
            "event_name",
            "sport_name",
            "round_type",
            "round_number",
            "round_name",
            "label",
            "start_time",
            "end_time",
            "venue",
            "effective_venue",
            "status",
            "notes",
        ]

    def validate(self, attrs: Dict[str, Any]) -> Dict[str, Any]:
        start = _current(self, attrs, "start_time")
        end = _current(self, attrs, "end_time")
        if start and end and end < start:
            raise serializers.ValidationError({"end_time": "End time cannot be before the start time."})
        _apply_status(self, attrs)
        return attrs


class MatchSerializer(serializers.ModelSerializer):
    event_round_id = serializers.PrimaryKeyRelatedField(
        source="event_round", queryset=EventRound.objects.all()
    )
    medal_event_id = serializers.IntegerField(source="event_round.medal_event_id", read_only=True)
    event_name = serializers.CharField(source="event_round.medal_event.display_name", read_only=True)
    round_label = serializers.CharField(source="event_round.label", read_only=True)
    team_a_country_id = serializers.PrimaryKeyRelatedField(
        source="team_a_country", queryset=Country.objects.all(), required=False, allow_null=True
    )
    team_b_country_id = serializers.PrimaryKeyRelatedField(
        source="team_b_country", queryset=Country.objects.all(), required=False, allow_null=True
    )
    winner_country_id = serializers.PrimaryKeyRelatedField(
        source="winner_country", queryset=Country.objects.all(), required=False, allow_null=True
    )
    team_a_label = serializers.CharField(read_only=True)
    team_b_label = serializers.CharField(read_only=True)
    team_a_flag_url = serializers.CharField(source="team_a_country.flag_url", read_only=True, allow_null=True)
    team_b_flag_url = serializers.CharField(source="team_b_country.flag_url", read_only=True, allow_null=True)

    class Meta:
        model = Match
        fields = [
            "id",
            "event_round_id",
            "medal_event_id",
            "event_name",
            "round_label",
            "match_name",
            "team_a_country_id",
            "team_a_name",
            "team_a_label",
            "team_a_flag_url",
            "team_a_score",
            "team_b_country_id",
            "team_b_name",
            "team_b_label",
            "team_b_flag_url",
            "team_b_score",
            "winner_country_id",
            "start_time",
            "status",
            "notes",
        ]

    def validate(self, attrs: Dict[str, Any]) -> Dict[str, Any]:
        team_a = _current(self, attrs, "team_a_country")
        team_b = _current(self, attrs, "team_b_country")
        winner = _current(self, attrs, "winner_country")
        if team_a is not None and team_b is not None and team_a.pk == team_b.pk:
            raise serializers.ValidationError({"team_b_country_id": "A country cannot play itself."})
        sides = {side.pk for side in (team_a, team_b) if side is not None}
        if winner is not None and winner.pk not in sides:
            raise serializers.ValidationError(
                {"winner_country_id": "Winner must be one of the two competing countries."}
            )
        _apply_status(self, attrs)
        return attrs


class RoundResultSerializer(serializers.ModelSerializer):
    event_round_id = serializers.PrimaryKeyRelatedField(
        source="event_round", queryset=EventRound.objects.all()
    )
    country_id = serializers.PrimaryKeyRelatedField(
        source="country", queryset=Country.objects.all(), required=False, allow_null=True
    )
    country = CountrySerializer(read_only=True)

    class Meta:
        model = RoundResult
        fields = [
            "id",
            "event_round_id",
            "country_id",
            "country",
            "athlete_name",
            "score",
            "final_position",
            "updated_at",
        ]
        read_only_fields = ["updated_at"]


# ---------------------- Medals and standings ----------------------

class MedalSerializer(serializers.ModelSerializer):
    medal_event_id = serializers.PrimaryKeyRelatedField(
        source="medal_event", queryset=MedalEvent.objects.all()
    )
    country_id = serializers.PrimaryKeyRelatedField(source="country", queryset=Country.objects.all())
    olympics_id = serializers.IntegerField(source="medal_event.olympics_id", read_only=True)
    event_name = serializers.CharField(source="medal_event.display_name", read_only=True)
    sport_name = serializers.CharField(source="medal_event.sport.name", read_only=True, allow_null=True)
    country = CountrySerializer(read_only=True)

    class Meta:
        model = Medal
        fields = [
            "id",
            "medal_event_id",
            "olympics_id",
            "event_name",
            "sport_name",
            "country_id",
            "country",
            "athlete_name",
            "medal_type",
            "result_value",
            "record_type",
            "created_at",
        ]
        read_only_fields = ["created_at"]

    def create(self, validated_data: Dict[str, Any]) -> Medal:
        return award_medal(**validated_data)


class StandingSerializer(serializers.Serializer):
    rank = serializers.IntegerField()
    country_id = serializers.IntegerField()
    name = serializers.CharField()
    code = serializers.CharField()
    flag_url = serializers.CharField()
    gold = serializers.IntegerField()
    silver = serializers.IntegerField()
    bronze = serializers.IntegerField()
    total = serializers.IntegerField()


# ---------------------- Schedule ----------------------

class ScheduleQuerySerializer(serializers.Serializer):
    date = serializers.DateField(required=False)
    tz = serializers.CharField(required=False, allow_blank=True)
    sport = serializers.IntegerField(required=False, min_value=1)
    status = serializers.ChoiceField(choices=Status.choices, required=False)
    event = serializers.IntegerField(required=False, min_value=1)

    def validate_tz(self, value: str):
        try:
            return parse_timezone(value)
        except ValueError as exc:
            raise serializers.ValidationError(str(exc)) from exc

    def to_filters(self, olympics_id: int | None) -> ScheduleFilters:
        data = self.validated_data
        return ScheduleFilters(
            olympics_id=olympics_id,
            day=data.get("date"),
            tz=data.get("tz"),
            sport_id=data.get("sport"),
            status=data.get("status"),
            medal_event_id=data.get("event"),
        )


class ScheduleEntrySerializer(serializers.Serializer):
    id = serializers.IntegerField(source="round.pk")
    medal_event_id = serializers.IntegerField(source="round.medal_event_id")
    olympics_id = serializers.IntegerField(source="medal_event.olympics_id")
    event_name = serializers.CharField(source="medal_event.name")
    event_display_name = serializers.CharField(source="medal_event.display_name")
    gender = serializers.CharField(source="medal_event.gender")
    event_type = serializers.CharField(source="medal_event.event_type")
    sport_id = serializers.IntegerField(source="medal_event.sport_id", allow_null=True)
    sport_name = serializers.CharField(source="sport.name", allow_null=True)
    sport_icon = serializers.CharField(source="sport.icon", allow_null=True)
    round_type = serializers.CharField(source="round.round_type")
    round_number = serializers.IntegerField(source="round.round_number")
    round_name = serializers.CharField(source="round.round_name")
    round_label = serializers.CharField(source="round.label")
    start_time = serializers.DateTimeField(source="round.start_time")
    end_time = serializers.DateTimeField(source="round.end_time", allow_null=True)
    venue = serializers.CharField(source="round.effective_venue")
    status = serializers.CharField(source="round.status")
    notes = serializers.CharField(source="round.notes")


class StatsSerializer(serializers.Serializer):
    olympics_id = serializers.IntegerField(allow_null=True)
    counts = serializers.DictField(child=serializers.IntegerField())
    top_countries = StandingSerializer(many=True)
    upcoming = ScheduleEntrySerializer(many=True)
    live = ScheduleEntrySerializer(many=True)


class CountryScheduleItemSerializer(serializers.Serializer):
    kind = serializers.CharField()
    start_time = serializers.DateTimeField(allow_null=True)
    status = serializers.CharField()
    outcome = serializers.SerializerMethodField()
    match = MatchSerializer(allow_null=True)
    round = ScheduleEntrySerializer(source="entry", allow_null=True)

    def get_outcome(self, item) -> str | None:
        if item.match is None:
            return None
        return match_outcome(item.match, self.context["country_id"])


class CountryScheduleSerializer(serializers.Serializer):
    country = CountrySerializer()
    olympics_id = serializers.IntegerField(allow_null=True)
    medals = serializers.DictField(child=serializers.IntegerField())
    status_counts = serializers.DictField(child=serializers.IntegerField())
    event_ids = serializers.ListField(child=serializers.IntegerField())
    items = CountryScheduleItemSerializer(many=True)


# ---------------------- Settings ----------------------

class SettingsUpdateSerializer(serializers.Serializer):
    default_timezone = serializers.CharField(required=False, max_length=64)

    def validate_default_timezone(self, value: str) -> str:
        try:
            zone = parse_timezone(value)
        except ValueError as exc:
            raise serializers.ValidationError(str(exc)) from exc
        if zone is None:
            raise serializers.ValidationError("A time zone name is required.")
        return zone.key
