from django.apps import AppConfig


class OlympicsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "olympics"
    verbose_name = "Olympics Tracker"
