# backend/submissions/models.py
import os

from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

from masterdata.models import Profile, Thesis

ALLOWED_EXTENSIONS = (".pdf", ".doc", ".docx")
ALLOWED_CONTENT_TYPES = (
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
)
MAX_FILE_SIZE_MB = 10


def validate_thesis_document(file_obj):
    ext = os.path.splitext(file_obj.name or "")[1].lower()
    content_type = getattr(file_obj, "content_type", None)
    if ext not in ALLOWED_EXTENSIONS or (
        content_type and content_type not in ALLOWED_CONTENT_TYPES
    ):
        raise ValidationError("Hanya file PDF, DOC, dan DOCX yang diizinkan.")

    if file_obj.size > MAX_FILE_SIZE_MB * 1024 * 1024:
        raise ValidationError(f"Ukuran file maksimal {MAX_FILE_SIZE_MB} MB.")


def submission_upload_to(instance, filename):
    return "thesis-files/{}/{}-{}-v{}-{}".format(
        instance.thesis_id,
        instance.type,
        instance.chapter,
        instance.version,
        os.path.basename(filename),
    )


class SubmissionQuerySet(models.QuerySet):
    def lineage(self, thesis, type, chapter=0):
        return self.filter(thesis=thesis, type=type, chapter=chapter).order_by("version")

    def pending(self):
        return self.filter(status=Submission.STATUS_SUBMITTED)


class Submission(models.Model):
    TYPE_PROPOSAL = "proposal"
    TYPE_CHAPTER = "chapter"
    TYPE_FINAL = "final"
    TYPE_REVISION = "revision"

    TYPE_CHOICES = (
        (TYPE_PROPOSAL, "Proposal"),
        (TYPE_CHAPTER, "Bab"),
        (TYPE_FINAL, "Final"),
        (TYPE_REVISION, "Revisi"),
    )

    STATUS_SUBMITTED = "submitted"
    STATUS_UNDER_REVIEW = "under_review"
    STATUS_APPROVED = "approved"
    STATUS_REJECTED = "rejected"
    STATUS_REVISION_NEEDED = "revision_needed"

    STATUS_CHOICES = (
        (STATUS_SUBMITTED, "Menunggu Review"),
        (STATUS_UNDER_REVIEW, "Sedang Direview"),
        (STATUS_APPROVED, "Disetujui"),
        (STATUS_REVISION_NEEDED, "Perlu Revisi"),
        (STATUS_REJECTED, "Ditolak"),
    )

    CHAPTER_CHOICES = [(0, "-")] + [(n, f"Bab {n}") for n in range(1, 6)]

    thesis = models.ForeignKey(
        Thesis,
        on_delete=models.PROTECT,
        related_name="submissions",
    )
    student = models.ForeignKey(
        Profile,
        on_delete=models.PROTECT,
        related_name="submissions",
    )

    type = models.CharField("Jenis dokumen", max_length=10, choices=TYPE_CHOICES)
    chapter = models.PositiveSmallIntegerField(
        "Bab",
        choices=CHAPTER_CHOICES,
        default=0,
        help_text="Nomor bab (1-5) untuk jenis dokumen Bab, 0 untuk jenis lain.",
    )
    title = models.CharField("Judul dokumen", max_length=255)
    comments = models.TextField("Komentar", blank=True)

    file = models.FileField(
        upload_to=submission_upload_to,
        validators=[validate_thesis_document],
        max_length=255,
        help_text="PDF/DOC/DOCX, maks. 10 MB.",
    )
    file_name = models.CharField(max_length=255, blank=True)

    version = models.PositiveIntegerField(default=1)
    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=STATUS_SUBMITTED,
    )

    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    objects = SubmissionQuerySet.as_manager()

    class Meta:
        verbose_name = "Pengumpulan File"
        verbose_name_plural = "Pengumpulan File"
        ordering = ["-created_at", "-id"]
        constraints = [
            models.UniqueConstraint(
                fields=["thesis", "type", "chapter", "version"],
                name="unique_submission_version_per_lineage",
            ),
        ]

    def __str__(self):
        return f"{self.title} v{self.version} ({self.get_status_display()})"

    @property
    def lineage_key(self):
        return (self.thesis_id, self.type, self.chapter)

    @property
    def stage_label(self) -> str:
        if self.type == self.TYPE_CHAPTER:
            return f"Bab {self.chapter}"
        return self.get_type_display()
