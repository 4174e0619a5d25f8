"""Admin registrations for the Olympics tracker."""
from django.contrib import admin

from . import models


@admin.register(models.Country)
class CountryAdmin(admin.ModelAdmin):
    list_display = ("name", "code")
    search_fields = ("name", "code")


@admin.register(models.Sport)
class SportAdmin(admin.ModelAdmin):
    list_display = ("name", "icon")
    search_fields = ("name",)


@admin.register(models.Olympics)
class OlympicsAdmin(admin.ModelAdmin):
    list_display = ("name", "year", "type", "city", "start_date", "end_date", "is_active")
    list_filter = ("type", "is_active")
    search_fields = ("name", "city", "country")
    readonly_fields = ("is_active",)


class EventRoundInline(admin.TabularInline):
    model = models.EventRound
    extra = 0
    fields = ("round_type", "round_number", "round_name", "start_time", "venue", "status")


@admin.register(models.MedalEvent)
class MedalEventAdmin(admin.ModelAdmin):
    list_display = ("name", "gender", "event_type", "sport", "olympics", "scheduled_date")
    list_filter = ("olympics", "sport", "gender", "event_type")
    search_fields = ("name", "venue")
    inlines = [EventRoundInline]


@admin.register(models.EventRound)
class EventRoundAdmin(admin.ModelAdmin):
    list_display = ("medal_event", "round_type", "round_number", "start_time", "status")
    list_filter = ("status", "round_type", "medal_event__olympics")
    search_fields = ("medal_event__name", "round_name", "venue")
    list_select_related = ("medal_event",)


@admin.register(models.Match)
class MatchAdmin(admin.ModelAdmin):
    list_display = ("__str__", "event_round", "team_a_score", "team_b_score", "winner_country", "status")
    list_filter = ("status",)
    search_fields = ("match_name", "team_a_name", "team_b_name")
    autocomplete_fields = ("team_a_country", "team_b_country", "winner_country")


@admin.register(models.EventParticipant)
class EventParticipantAdmin(admin.ModelAdmin):
    list_display = ("medal_event", "country")
    list_filter = ("medal_event__olympics",)
    autocomplete_fields = ("country",)


@admin.register(models.Medal)
class MedalAdmin(admin.ModelAdmin):
    list_display = ("athlete_name", "country", "medal_type", "medal_event", "record_type", "created_at")
    list_filter = ("medal_type", "record_type", "medal_event__olympics")
    search_fields = ("athlete_name", "country__name", "country__code")
    autocomplete_fields = ("country",)


@admin.register(models.RoundResult)
class RoundResultAdmin(admin.ModelAdmin):
    list_display = ("event_round", "athlete_name", "country", "score", "final_position", "updated_at")
    search_fields = ("athlete_name", "country__code")


@admin.register(models.Setting)
class SettingAdmin(admin.ModelAdmin):
    list_display = ("key", "value")
