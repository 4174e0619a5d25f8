"""REST API views for the Olympics tracker."""

from __future__ import annotations

import logging
from typing import Optional

from rest_framework import mixins, permissions, serializers, status, views, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import AuthenticationFailed
from rest_framework.response import Response

from .authentication import bearer_token, token_matches
from .models import Country, EventRound, Medal, Olympics, RoundResult, Setting, Sport
from .serializers import (
    CountryScheduleSerializer,
    CountrySerializer,
    EventParticipantSerializer,
    EventRoundSerializer,
    MatchSerializer,
    MedalEventSerializer,
    MedalSerializer,
    OlympicsSerializer,
    ParticipantSetSerializer,
    RoundResultSerializer,
    ScheduleEntrySerializer,
    ScheduleQuerySerializer,
    SettingsUpdateSerializer,
    SportSerializer,
    StandingSerializer,
    StatsSerializer,
)
from .services import catalog, registry
from .services.schedule import filtered_rounds, live_rounds, poll_interval_seconds, schedule
from .services.standings import standings
from .services.stats import build_stats
from .services.teams import CountrySchedule, country_schedule

logger = logging.getLogger(__name__)

# Sentinel for "no Olympics resolves"; listings are then empty.
UNRESOLVED = object()
NO_MEDALS = {"gold": 0, "silver": 0, "bronze": 0, "total": 0}


def olympics_scope(request):
    """Olympics id a listing is restricted to.

    ``?scope=all`` lifts the restriction and yields ``None``. Otherwise the
    ``olympics`` (or ``olympics_id``) parameter wins, then the active
    Olympics; ``UNRESOLVED`` when neither exists.
    """

    params = request.query_params
    if params.get("scope") == "all":
        return None
    olympics_id = registry.get_active(params.get("olympics") or params.get("olympics_id"))
    return UNRESOLVED if olympics_id is None else olympics_id


def query_int(request, *names: str) -> Optional[int]:
    for name in names:
        raw = request.query_params.get(name)
        if raw in (None, ""):
            continue
        try:
            value = int(raw)
        except ValueError as exc:
            raise serializers.ValidationError({name: "Expected an integer."}) from exc
        if value < 1:
            raise serializers.ValidationError({name: "Expected a positive integer."})
        return value
    return None


class ScopedListMixin:
    """Restrict the ``list`` action to the resolved Olympics."""

    scope_lookup = ""

    def scope_list(self, queryset):
        if self.action != "list":
            return queryset
        scope = olympics_scope(self.request)
        if scope is UNRESOLVED:
            return queryset.none()
        if scope is None:
            return queryset
        return queryset.filter(**{self.scope_lookup: scope})


# ---------------------- Reference data ----------------------

class CountryViewSet(viewsets.ModelViewSet):
    queryset = Country.objects.all()
    serializer_class = CountrySerializer

    def perform_destroy(self, instance):
        code = instance.code
        instance.delete()
        logger.info("Deleted country %s", code)

    @action(detail=True, methods=["get"])
    def schedule(self, request, pk=None):
        country = self.get_object()
        scope = olympics_scope(request)
        if scope is UNRESOLVED:
            plan = CountrySchedule(country=country, olympics_id=None, medals=dict(NO_MEDALS))
        else:
            plan = country_schedule(country, scope)
        serializer = CountryScheduleSerializer(plan, context={"country_id": country.pk})
        return Response(serializer.data)


class SportViewSet(viewsets.ModelViewSet):
    queryset = Sport.objects.all()
    serializer_class = SportSerializer


class OlympicsViewSet(viewsets.ModelViewSet):
    queryset = Olympics.objects.all()
    serializer_class = OlympicsSerializer

    def perform_destroy(self, instance):
        registry.delete_olympics(instance)

    @action(detail=True, methods=["post"])
    def activate(self, request, pk=None):
        olympics = registry.activate(pk)
        return Response(OlympicsSerializer(olympics).data)

    @action(detail=False, methods=["get"])
    def active(self, request):
        """``{"olympics": ...}``, null when no Olympics is active."""
        olympics = registry.get_active_olympics(request.query_params.get("olympics"))
        data = OlympicsSerializer(olympics).data if olympics is not None else None
        return Response({"olympics": data})


# ---------------------- Catalog ----------------------

class MedalEventViewSet(viewsets.ModelViewSet):
    serializer_class = MedalEventSerializer

    def get_queryset(self):
        if self.action != "list":
            return catalog.medal_events()
        scope = olympics_scope(self.request)
        events = catalog.medal_events(
            olympics_id=None if scope is UNRESOLVED else scope,
            sport_id=query_int(self.request, "sport", "sport_id"),
            gender=self.request.query_params.get("gender"),
        )
        return events.none() if scope is UNRESOLVED else events

    def perform_destroy(self, instance):
        catalog.delete_medal_event(instance)

    @action(detail=True, methods=["get", "post"])
    def participants(self, request, pk=None):
        medal_event = self.get_object()
        if request.method == "POST":
            payload = ParticipantSetSerializer(data=request.data)
            payload.is_valid(raise_exception=True)
            rows = catalog.set_participants(medal_event, payload.validated_data["country_ids"])
        else:
            rows = catalog.participants(medal_event_id=medal_event.pk)
        return Response(EventParticipantSerializer(rows, many=True).data)


class EventParticipantViewSet(
    ScopedListMixin,
    mixins.ListModelMixin,
    mixins.CreateModelMixin,
    mixins.RetrieveModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    serializer_class = EventParticipantSerializer
    scope_lookup = "medal_event__olympics_id"

    def get_queryset(self):
        rows = catalog.participants(
            medal_event_id=query_int(self.request, "event", "medal_event_id"),
            country_id=query_int(self.request, "country", "country_id"),
        )
        return self.scope_list(rows)


# ---------------------- Rounds and matches ----------------------

class EventRoundViewSet(viewsets.ModelViewSet):
    serializer_class = EventRoundSerializer

    def get_queryset(self):
        if self.action != "list":
            return EventRound.objects.select_related("medal_event", "medal_event__sport")
        query = ScheduleQuerySerializer(data=self.request.query_params)
        query.is_valid(raise_exception=True)
        scope = olympics_scope(self.request)
        rounds = filtered_rounds(query.to_filters(None if scope is UNRESOLVED else scope))
        return rounds.none() if scope is UNRESOLVED else rounds


class RoundResultViewSet(ScopedListMixin, viewsets.ModelViewSet):
    serializer_class = RoundResultSerializer
    scope_lookup = "event_round__medal_event__olympics_id"

    def get_queryset(self):
        results = RoundResult.objects.select_related("country", "event_round")
        round_id = query_int(self.request, "round", "event_round_id")
        if round_id is not None:
            results = results.filter(event_round_id=round_id)
        return self.scope_list(results)


class MatchViewSet(ScopedListMixin, viewsets.ModelViewSet):
    serializer_class = MatchSerializer
    scope_lookup = "event_round__medal_event__olympics_id"

    def get_queryset(self):
        if self.action != "list":
            return catalog.matches()
        rows = catalog.matches(
            event_round_id=query_int(self.request, "round", "event_round_id"),
            medal_event_id=query_int(self.request, "event", "medal_event_id"),
            country_id=query_int(self.request, "country", "country_id"),
            status=self.request.query_params.get("status"),
        )
        return self.scope_list(rows)


# ---------------------- Medals ----------------------

class MedalViewSet(
    mixins.CreateModelMixin,
    mixins.RetrieveModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    """``list`` is the medal table; ``all`` lists the individual medals."""

    serializer_class = MedalSerializer

    def get_queryset(self):
        return Medal.objects.select_related("country", "medal_event", "medal_event__sport")

    def list(self, request, *args, **kwargs):
        scope = olympics_scope(request)
        if scope is UNRESOLVED:
            return Response([])
        rows = standings(scope, limit=query_int(request, "limit"))
        return Response(StandingSerializer(rows, many=True).data)

    @action(detail=False, methods=["get"], url_path="all")
    def all_medals(self, request):
        scope = olympics_scope(request)
        if scope is UNRESOLVED:
            return Response([])
        medals = self.get_queryset()
        if scope is not None:
            medals = medals.filter(medal_event__olympics_id=scope)
        country_id = query_int(request, "country", "country_id")
        if country_id is not None:
            medals = medals.filter(country_id=country_id)
        event_id = query_int(request, "event", "medal_event_id")
        if event_id is not None:
            medals = medals.filter(medal_event_id=event_id)
        return Response(MedalSerializer(medals, many=True).data)

    def perform_destroy(self, instance):
        pk = instance.pk
        instance.delete()
        logger.info("Deleted medal %s", pk)


# ---------------------- Read models ----------------------

class ScheduleViewSet(viewsets.ViewSet):
    def list(self, request):
        query = ScheduleQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        scope = olympics_scope(request)
        if scope is UNRESOLVED:
            return Response([])
        entries = schedule(query.to_filters(scope))
        return Response(ScheduleEntrySerializer(entries, many=True).data)

    @action(detail=False, methods=["get"])
    def live(self, request):
        scope = olympics_scope(request)
        entries = []
        if scope is not UNRESOLVED:
            entries = live_rounds(scope, sport_id=query_int(request, "sport", "sport_id"))
        return Response(
            {
                "poll_interval_seconds": poll_interval_seconds(),
                "rounds": ScheduleEntrySerializer(entries, many=True).data,
            }
        )


class StatsView(views.APIView):
    def get(self, request):
        snapshot = build_stats(request.query_params.get("olympics"))
        return Response(StatsSerializer(snapshot).data)


class SettingsView(views.APIView):
    def get(self, request):
        return Response(self._payload())

    def put(self, request):
        payload = SettingsUpdateSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        for key, value in payload.validated_data.items():
            Setting.put(key, value)
            logger.info("Setting %s updated to %s", key, value)
        return Response(self._payload())

    @staticmethod
    def _payload():
        data = dict(Setting.objects.values_list("key", "value"))
        data["poll_interval_seconds"] = poll_interval_seconds()
        return data


class AuthCheckView(views.APIView):
    """Report whether the presented Bearer token is the admin token."""

    authentication_classes = []
    permission_classes = [permissions.AllowAny]

    def post(self, request):
        try:
            token = bearer_token(request)
        except AuthenticationFailed:
            token = None
        return Response({"authenticated": token_matches(token or "")}, status=status.HTTP_200_OK)
