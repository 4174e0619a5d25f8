from django.urls import path
from rest_framework.routers import DefaultRouter

from .api import (
    AuthCheckView,
    CountryViewSet,
    EventParticipantViewSet,
    EventRoundViewSet,
    MatchViewSet,
    MedalEventViewSet,
    MedalViewSet,
    OlympicsViewSet,
    RoundResultViewSet,
    ScheduleViewSet,
    SettingsView,
    SportViewSet,
    StatsView,
)

router = DefaultRouter()
router.register(r'countries', CountryViewSet, basename='country')
router.register(r'sports', SportViewSet, basename='sport')
router.register(r'olympics', OlympicsViewSet, basename='olympics')
router.register(r'medal-events', MedalEventViewSet, basename='medal-event')
router.register(r'event-participants', EventParticipantViewSet, basename='event-participant')
router.register(r'rounds', EventRoundViewSet, basename='round')
router.register(r'round-results', RoundResultViewSet, basename='round-result')
router.register(r'matches', MatchViewSet, basename='match')
router.register(r'medals', MedalViewSet, basename='medal')
router.register(r'schedule', ScheduleViewSet, basename='schedule')

urlpatterns = [
    path('stats/', StatsView.as_view(), name='stats'),
    path('settings/', SettingsView.as_view(), name='settings'),
    path('auth/check/', AuthCheckView.as_view(), name='auth-check'),
]
urlpatterns += router.urls
