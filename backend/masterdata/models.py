# backend/masterdata/models.py
from django.contrib.auth.models import User
from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone


class Profile(models.Model):
    ROLE_STUDENT = "student"
    ROLE_LECTURER = "lecturer"
    ROLE_ADMIN = "admin"

    ROLE_CHOICES = (
        (ROLE_STUDENT, "Mahasiswa"),
        (ROLE_LECTURER, "Dosen"),
        (ROLE_ADMIN, "Admin"),
    )

    user = models.OneToOneField(
        User,
        on_delete=models.CASCADE,
        related_name="profile",
        help_text="User akun untuk login.",
    )
    full_name = models.CharField("Nama lengkap", max_length=150)
    email = models.EmailField()
    role = models.CharField(
        max_length=10,
        choices=ROLE_CHOICES,
        default=ROLE_STUDENT,
        help_text="Peran tidak dapat diubah setelah akun dibuat.",
    )
    nim_nidn = models.CharField(
        "NIM/NIDN",
        max_length=20,
        blank=True,
        help_text="NIM untuk mahasiswa, NIDN untuk dosen.",
    )
    department = models.CharField(
        "Jurusan/Program Studi",
        max_length=100,
        blank=True,
    )
    phone = models.CharField("No. HP/WA", max_length=20, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Profil"
        verbose_name_plural = "Profil"
        ordering = ["full_name"]

    def __str__(self) -> str:
        if self.nim_nidn:
            return f"{self.full_name} ({self.nim_nidn})"
        return self.full_name

    @property
    def is_student(self) -> bool:
        return self.role == self.ROLE_STUDENT

    @property
    def is_lecturer(self) -> bool:
        return self.role == self.ROLE_LECTURER

    @property
    def is_admin(self) -> bool:
        return self.role == self.ROLE_ADMIN

    def save(self, *args, **kwargs):
        if self.pk:
            old_role = (
                Profile.objects.filter(pk=self.pk)
                .values_list("role", flat=True)
                .first()
            )
            if old_role is not None and old_role != self.role:
                raise ValidationError("Peran akun tidak dapat diubah.")
        super().save(*args, **kwargs)


class Thesis(models.Model):
    STATUS_DRAFT = "draft"
    STATUS_SUBMITTED = "submitted"
    STATUS_UNDER_REVIEW = "under_review"
    STATUS_APPROVED = "approved"
    STATUS_REJECTED = "rejected"
    STATUS_REVISION_NEEDED = "revision_needed"

    STATUS_CHOICES = (
        (STATUS_DRAFT, "Draft"),
        (STATUS_SUBMITTED, "Diajukan"),
        (STATUS_UNDER_REVIEW, "Sedang Direview"),
        (STATUS_APPROVED, "Disetujui"),
        (STATUS_REJECTED, "Ditolak"),
        (STATUS_REVISION_NEEDED, "Perlu Revisi"),
    )

    student = models.OneToOneField(
        Profile,
        on_delete=models.PROTECT,
        related_name="thesis",
        limit_choices_to={"role": Profile.ROLE_STUDENT},
    )
    lecturer = models.ForeignKey(
        Profile,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="supervised_theses",
        limit_choices_to={"role": Profile.ROLE_LECTURER},
        help_text="Kosongkan agar skripsi terlihat oleh semua dosen (belum ada pembimbing).",
    )

    title = models.CharField("Judul", max_length=255)
    description = models.TextField("Deskripsi", blank=True)
    keywords = models.JSONField("Kata kunci", default=list, blank=True)

    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=STATUS_DRAFT,
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    submitted_at = models.DateTimeField(null=True, blank=True)
    approved_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        verbose_name = "Skripsi"
        verbose_name_plural = "Skripsi"
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.title} - {self.student.full_name}"

    @property
    def is_unassigned(self) -> bool:
        return self.lecturer_id is None

    def mark_status(self, status, now=None):
        """Ganti status dan isi waktu pengajuan/persetujuan bila relevan."""
        now = now or timezone.now()
        self.status = status
        if status == self.STATUS_SUBMITTED:
            self.submitted_at = now
        elif status == self.STATUS_APPROVED:
            self.approved_at = now
