import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Profile",
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
                ("full_name", models.CharField(max_length=150, verbose_name="Nama lengkap")),
                ("email", models.EmailField(max_length=254)),
                (
                    "role",
                    models.CharField(
                        choices=[
                            ("student", "Mahasiswa"),
                            ("lecturer", "Dosen"),
                            ("admin", "Admin"),
                        ],
                        default="student",
                        help_text="Peran tidak dapat diubah setelah akun dibuat.",
                        max_length=10,
                    ),
                ),
                (
                    "nim_nidn",
                    models.CharField(
                        blank=True,
                        help_text="NIM untuk mahasiswa, NIDN untuk dosen.",
                        max_length=20,
                        verbose_name="NIM/NIDN",
                    ),
                ),
                (
                    "department",
                    models.CharField(
                        blank=True,
                        max_length=100,
                        verbose_name="Jurusan/Program Studi",
                    ),
                ),
                ("phone", models.CharField(blank=True, max_length=20, verbose_name="No. HP/WA")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "user",
                    models.OneToOneField(
                        help_text="User akun untuk login.",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="profile",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Profil",
                "verbose_name_plural": "Profil",
                "ordering": ["full_name"],
            },
        ),
        migrations.CreateModel(
            name="Thesis",
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
                ("title", models.CharField(max_length=255, verbose_name="Judul")),
                ("description", models.TextField(blank=True, verbose_name="Deskripsi")),
                (
                    "keywords",
                    models.JSONField(blank=True, default=list, verbose_name="Kata kunci"),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("draft", "Draft"),
                            ("submitted", "Diajukan"),
                            ("under_review", "Sedang Direview"),
                            ("approved", "Disetujui"),
                            ("rejected", "Ditolak"),
                            ("revision_needed", "Perlu Revisi"),
                        ],
                        default="draft",
                        max_length=20,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("submitted_at", models.DateTimeField(blank=True, null=True)),
                ("approved_at", models.DateTimeField(blank=True, null=True)),
                (
                    "lecturer",
                    models.ForeignKey(
                        blank=True,
                        help_text="Kosongkan agar skripsi terlihat oleh semua dosen (belum ada pembimbing).",
                        limit_choices_to={"role": "lecturer"},
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="supervised_theses",
                        to="masterdata.profile",
                    ),
                ),
                (
                    "student",
                    models.OneToOneField(
                        limit_choices_to={"role": "student"},
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="thesis",
                        to="masterdata.profile",
                    ),
                ),
            ],
            options={
                "verbose_name": "Skripsi",
                "verbose_name_plural": "Skripsi",
                "ordering": ["-created_at"],
            },
        ),
    ]
