from django.conf import settings
from django.db import migrations


def seed_settings(apps, schema_editor):
    Setting = apps.get_model("olympics", "Setting")  # historical model, not direct import
    Setting.objects.get_or_create(
        key="default_timezone",
        defaults={"value": getattr(settings, "OLYMPICS_DEFAULT_TIMEZONE", "UTC")},
    )


def unseed_settings(apps, schema_editor):
    Setting = apps.get_model("olympics", "Setting")
    Setting.objects.filter(key="default_timezone").delete()


class Migration(migrations.Migration):

    dependencies = [
        ("olympics", "0001_initial"),
    ]

    operations = [
        migrations.RunPython(seed_settings, unseed_settings),
    ]
