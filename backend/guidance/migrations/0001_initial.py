import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("masterdata", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="GuidanceSchedule",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "title",
                    models.CharField(
                        help_text="Judul/topik bimbingan. Misal: Bimbingan Bab 2",
                        max_length=200,
                    ),
                ),
                ("scheduled_at", models.DateTimeField(verbose_name="Jadwal")),
                (
                    "notes",
                    models.TextField(blank=True, help_text="Catatan atau agenda bimbingan."),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("scheduled", "Terjadwal"),
                            ("completed", "Selesai"),
                            ("cancelled", "Dibatalkan"),
                            ("rescheduled", "Dijadwal Ulang"),
                        ],
                        default="scheduled",
                        max_length=12,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "lecturer",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="guidance_as_lecturer",
                        to="masterdata.profile",
                    ),
                ),
                (
                    "student",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="guidance_as_student",
                        to="masterdata.profile",
                    ),
                ),
                (
                    "thesis",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="guidance_schedules",
                        to="masterdata.thesis",
                    ),
                ),
            ],
            options={
                "verbose_name": "Jadwal Bimbingan",
                "verbose_name_plural": "Jadwal Bimbingan",
                "ordering": ["scheduled_at", "id"],
            },
        ),
    ]
