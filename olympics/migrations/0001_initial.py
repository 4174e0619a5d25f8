import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Country",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=120)),
                ("code", models.CharField(max_length=3, unique=True)),
                ("flag_url", models.CharField(blank=True, max_length=255)),
            ],
            options={
                "ordering": ("name",),
                "verbose_name_plural": "countries",
            },
        ),
        migrations.CreateModel(
            name="Sport",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=120)),
                ("icon", models.CharField(blank=True, max_length=255)),
            ],
            options={
                "ordering": ("name",),
            },
        ),
        migrations.CreateModel(
            name="Olympics",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=160)),
                ("year", models.PositiveIntegerField()),
                (
                    "type",
                    models.CharField(
                        choices=[
                            ("summer", "Summer Olympics"),
                            ("winter", "Winter Olympics"),
                            ("youth", "Youth Olympics"),
                            ("paralympics", "Paralympics"),
                        ],
                        default="summer",
                        max_length=12,
                    ),
                ),
                ("city", models.CharField(blank=True, max_length=120)),
                ("country", models.CharField(blank=True, max_length=120)),
                ("logo_url", models.CharField(blank=True, max_length=255)),
                ("start_date", models.DateField(blank=True, null=True)),
                ("end_date", models.DateField(blank=True, null=True)),
                ("is_active", models.BooleanField(default=False)),
            ],
            options={
                "ordering": ("-year", "name"),
                "verbose_name_plural": "olympics",
            },
        ),
        migrations.CreateModel(
            name="Setting",
            fields=[
                ("key", models.CharField(max_length=64, primary_key=True, serialize=False)),
                ("value", models.TextField(blank=True)),
            ],
            options={
                "ordering": ("key",),
            },
        ),
        migrations.CreateModel(
            name="MedalEvent",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=160)),
                (
                    "gender",
                    models.CharField(
                        choices=[("men", "Men"), ("women", "Women"), ("mixed", "Mixed")],
                        default="mixed",
                        max_length=8,
                    ),
                ),
                (
                    "event_type",
                    models.CharField(
                        choices=[("individual", "Individual"), ("team", "Team")],
                        default="individual",
                        max_length=12,
                    ),
                ),
                ("venue", models.CharField(blank=True, max_length=160)),
                ("scheduled_date", models.DateField(blank=True, null=True)),
                (
                    "olympics",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="medal_events",
                        to="olympics.olympics",
                    ),
                ),
                (
                    "sport",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="medal_events",
                        to="olympics.sport",
                    ),
                ),
            ],
            options={
                "ordering": (models.F("scheduled_date").asc(nulls_last=True), "name", "pk"),
            },
        ),
        migrations.CreateModel(
            name="EventRound",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "round_type",
                    models.CharField(
                        choices=[
                            ("qualification", "Qualification"),
                            ("preliminary", "Preliminary"),
                            ("heat", "Heat"),
                            ("repechage", "Repechage"),
                            ("round_robin", "Round Robin"),
                            ("group_stage", "Group Stage"),
                            ("knockout", "Knockout"),
                            ("quarterfinal", "Quarterfinal"),
                            ("semifinal", "Semifinal"),
                            ("bronze_final", "Bronze Final"),
                            ("final", "Final"),
                        ],
                        default="heat",
                        max_length=16,
                    ),
                ),
                (
                    "round_number",
                    models.PositiveIntegerField(default=1, validators=[django.core.validators.MinValueValidator(1)]),
                ),
                ("round_name", models.CharField(blank=True, max_length=120)),
                ("start_time", models.DateTimeField()),
                ("end_time", models.DateTimeField(blank=True, null=True)),
                ("venue", models.CharField(blank=True, max_length=160)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("scheduled", "Scheduled"),
                            ("delayed", "Delayed"),
                            ("live", "Live"),
                            ("completed", "Completed"),
                            ("cancelled", "Cancelled"),
                        ],
                        default="scheduled",
                        max_length=10,
                    ),
                ),
                ("notes", models.TextField(blank=True)),
                (
                    "medal_event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="rounds",
                        to="olympics.medalevent",
                    ),
                ),
            ],
            options={
                "ordering": ("start_time", "pk"),
            },
        ),
        migrations.CreateModel(
            name="Match",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("match_name", models.CharField(blank=True, max_length=120)),
                ("team_a_name", models.CharField(blank=True, max_length=120)),
                ("team_b_name", models.CharField(blank=True, max_length=120)),
                ("team_a_score", models.CharField(blank=True, max_length=60)),
                ("team_b_score", models.CharField(blank=True, max_length=60)),
                ("start_time", models.DateTimeField(blank=True, null=True)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("scheduled", "Scheduled"),
                            ("delayed", "Delayed"),
                            ("live", "Live"),
                            ("completed", "Completed"),
                            ("cancelled", "Cancelled"),
                        ],
                        default="scheduled",
                        max_length=10,
                    ),
                ),
                ("notes", models.TextField(blank=True)),
                (
                    "event_round",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="matches",
                        to="olympics.eventround",
                    ),
                ),
                (
                    "team_a_country",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="matches_as_team_a",
                        to="olympics.country",
                    ),
                ),
                (
                    "team_b_country",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="matches_as_team_b",
                        to="olympics.country",
                    ),
                ),
                (
                    "winner_country",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="matches_won",
                        to="olympics.country",
                    ),
                ),
            ],
            options={
                "ordering": (models.F("start_time").asc(nulls_last=True), "pk"),
                "verbose_name_plural": "matches",
            },
        ),
        migrations.CreateModel(
            name="EventParticipant",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "country",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="event_entries",
                        to="olympics.country",
                    ),
                ),
                (
                    "medal_event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="participants",
                        to="olympics.medalevent",
                    ),
                ),
            ],
            options={
                "ordering": ("medal_event", "country__name"),
                "constraints": [
                    models.UniqueConstraint(fields=("medal_event", "country"), name="unique_event_participant"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Medal",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("athlete_name", models.CharField(max_length=160)),
                (
                    "medal_type",
                    models.CharField(
                        choices=[("gold", "Gold"), ("silver", "Silver"), ("bronze", "Bronze")],
                        max_length=6,
                    ),
                ),
                ("result_value", models.CharField(blank=True, max_length=60)),
                (
                    "record_type",
                    models.CharField(
                        blank=True,
                        choices=[("WR", "World record"), ("OR", "Olympic record"), ("PB", "Personal best")],
                        max_length=2,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "country",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="medals",
                        to="olympics.country",
                    ),
                ),
                (
                    "medal_event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="medals",
                        to="olympics.medalevent",
                    ),
                ),
            ],
            options={
                "ordering": ("-created_at", "-pk"),
            },
        ),
        migrations.CreateModel(
            name="RoundResult",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("athlete_name", models.CharField(blank=True, max_length=160)),
                ("score", models.CharField(blank=True, max_length=60)),
                (
                    "final_position",
                    models.PositiveIntegerField(
                        blank=True,
                        null=True,
                        validators=[django.core.validators.MinValueValidator(1)],
                    ),
                ),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "country",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="round_results",
                        to="olympics.country",
                    ),
                ),
                (
                    "event_round",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="results",
                        to="olympics.eventround",
                    ),
                ),
            ],
            options={
                "ordering": (models.F("final_position").asc(nulls_last=True), "-updated_at", "pk"),
            },
        ),
    ]
