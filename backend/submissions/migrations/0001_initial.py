import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models

import submissions.models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("masterdata", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Submission",
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
                    "type",
                    models.CharField(
                        choices=[
                            ("proposal", "Proposal"),
                            ("chapter", "Bab"),
                            ("final", "Final"),
                            ("revision", "Revisi"),
                        ],
                        max_length=10,
                        verbose_name="Jenis dokumen",
                    ),
                ),
                (
                    "chapter",
                    models.PositiveSmallIntegerField(
                        choices=[
                            (0, "-"),
                            (1, "Bab 1"),
                            (2, "Bab 2"),
                            (3, "Bab 3"),
                            (4, "Bab 4"),
                            (5, "Bab 5"),
                        ],
                        default=0,
                        help_text="Nomor bab (1-5) untuk jenis dokumen Bab, 0 untuk jenis lain.",
                        verbose_name="Bab",
                    ),
                ),
                ("title", models.CharField(max_length=255, verbose_name="Judul dokumen")),
                ("comments", models.TextField(blank=True, verbose_name="Komentar")),
                (
                    "file",
                    models.FileField(
                        help_text="PDF/DOC/DOCX, maks. 10 MB.",
                        max_length=255,
                        upload_to=submissions.models.submission_upload_to,
                        validators=[submissions.models.validate_thesis_document],
                    ),
                ),
                ("file_name", models.CharField(blank=True, max_length=255)),
                ("version", models.PositiveIntegerField(default=1)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("submitted", "Menunggu Review"),
                            ("under_review", "Sedang Direview"),
                            ("approved", "Disetujui"),
                            ("revision_needed", "Perlu Revisi"),
                            ("rejected", "Ditolak"),
                        ],
                        default="submitted",
                        max_length=20,
                    ),
                ),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "student",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="submissions",
                        to="masterdata.profile",
                    ),
                ),
                (
                    "thesis",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="submissions",
                        to="masterdata.thesis",
                    ),
                ),
            ],
            options={
                "verbose_name": "Pengumpulan File",
                "verbose_name_plural": "Pengumpulan File",
                "ordering": ["-created_at", "-id"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("thesis", "type", "chapter", "version"),
                        name="unique_submission_version_per_lineage",
                    )
                ],
            },
        ),
    ]
