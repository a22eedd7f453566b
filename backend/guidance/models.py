from django.db import models

from masterdata.models import Profile, Thesis


class GuidanceSchedule(models.Model):
    STATUS_SCHEDULED = "scheduled"
    STATUS_COMPLETED = "completed"
    STATUS_CANCELLED = "cancelled"
    STATUS_RESCHEDULED = "rescheduled"

    STATUS_CHOICES = (
        (STATUS_SCHEDULED, "Terjadwal"),
        (STATUS_COMPLETED, "Selesai"),
        (STATUS_CANCELLED, "Dibatalkan"),
        (STATUS_RESCHEDULED, "Dijadwal Ulang"),
    )

    thesis = models.ForeignKey(
        Thesis,
        on_delete=models.CASCADE,
        related_name="guidance_schedules",
    )
    student = models.ForeignKey(
        Profile,
        on_delete=models.CASCADE,
        related_name="guidance_as_student",
    )
    lecturer = models.ForeignKey(
        Profile,
        on_delete=models.CASCADE,
        related_name="guidance_as_lecturer",
    )

    title = models.CharField(
        max_length=200,
        help_text="Judul/topik bimbingan. Misal: Bimbingan Bab 2",
    )
    scheduled_at = models.DateTimeField("Jadwal")
    notes = models.TextField(
        blank=True,
        help_text="Catatan atau agenda bimbingan.",
    )

    status = models.CharField(
        max_length=12,
        choices=STATUS_CHOICES,
        default=STATUS_SCHEDULED,
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def save(self, *args, **kwargs):
        # Auto-fill mahasiswa & dosen dari skripsi kalau belum diisi
        if self.thesis_id:
            if self.student_id is None:
                self.student_id = self.thesis.student_id
            if self.lecturer_id is None and self.thesis.lecturer_id:
                self.lecturer_id = self.thesis.lecturer_id

        super().save(*args, **kwargs)

    class Meta:
        verbose_name = "Jadwal Bimbingan"
        verbose_name_plural = "Jadwal Bimbingan"
        ordering = ["scheduled_at", "id"]

    def __str__(self):
        return f"{self.student.full_name} - {self.title} ({self.scheduled_at:%Y-%m-%d %H:%M})"
