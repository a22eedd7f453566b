# backend/guidance/services.py
"""
Jadwal bimbingan: daftar per peran, pembuatan oleh dosen, dan perubahan
status. Tidak ada deteksi bentrok jadwal.
"""

import logging

from django.core.exceptions import ValidationError
from django.db.models import Q
from django.utils import timezone

from masterdata.capabilities import capability_for
from masterdata.exceptions import Forbidden, InvalidTransition, NotFound
from masterdata.models import Profile, Thesis

from .models import GuidanceSchedule

logger = logging.getLogger(__name__)

SCHEDULE_TRANSITIONS = {
    GuidanceSchedule.STATUS_SCHEDULED: {
        GuidanceSchedule.STATUS_COMPLETED,
        GuidanceSchedule.STATUS_CANCELLED,
        GuidanceSchedule.STATUS_RESCHEDULED,
    },
    GuidanceSchedule.STATUS_RESCHEDULED: {
        GuidanceSchedule.STATUS_SCHEDULED,
        GuidanceSchedule.STATUS_COMPLETED,
        GuidanceSchedule.STATUS_CANCELLED,
    },
    GuidanceSchedule.STATUS_COMPLETED: set(),
    GuidanceSchedule.STATUS_CANCELLED: set(),
}


def schedules_for(profile: Profile):
    qs = GuidanceSchedule.objects.select_related("thesis", "student", "lecturer")

    if profile.is_student:
        qs = qs.filter(student=profile)
    elif profile.is_lecturer:
        qs = qs.filter(
            Q(lecturer=profile)
            | Q(thesis__lecturer=profile)
            | Q(thesis__lecturer__isnull=True)
        )

    return qs.order_by("scheduled_at", "id")


def upcoming_for(profile: Profile, now=None):
    now = now or timezone.now()
    return schedules_for(profile).filter(scheduled_at__gte=now)


def create_schedule(lecturer: Profile, student_id, title, scheduled_at, notes=""):
    if not lecturer.is_lecturer:
        raise Forbidden("Hanya dosen yang dapat membuat jadwal bimbingan.")

    errors = {}
    if not (title or "").strip():
        errors["title"] = "Judul bimbingan wajib diisi."
    if not scheduled_at:
        errors["scheduled_at"] = "Tanggal dan waktu bimbingan wajib diisi."
    if errors:
        raise ValidationError(errors)

    thesis = (
        Thesis.objects.filter(student_id=student_id, lecturer=lecturer)
        .select_related("student")
        .first()
    )
    if thesis is None:
        raise NotFound("Skripsi mahasiswa bimbingan ini tidak ditemukan.")

    schedule = GuidanceSchedule.objects.create(
        thesis=thesis,
        student=thesis.student,
        lecturer=lecturer,
        title=title.strip(),
        scheduled_at=scheduled_at,
        notes=(notes or "").strip(),
        status=GuidanceSchedule.STATUS_SCHEDULED,
    )
    logger.info("Schedule %s created for thesis %s", schedule.pk, thesis.pk)
    return schedule


def _get_schedule_for_lecturer(lecturer: Profile, schedule_id) -> GuidanceSchedule:
    try:
        schedule = GuidanceSchedule.objects.select_related("thesis").get(pk=schedule_id)
    except (GuidanceSchedule.DoesNotExist, ValueError, TypeError):
        raise NotFound("Jadwal bimbingan tidak ditemukan.")

    cap = capability_for(lecturer)
    cap.require(
        cap.can_manage_schedule(schedule),
        "Hanya dosen pembimbing yang dapat mengubah jadwal ini.",
    )
    return schedule


def update_schedule_status(lecturer: Profile, schedule_id, status) -> GuidanceSchedule:
    if status not in SCHEDULE_TRANSITIONS:
        raise ValidationError({"status": "Status jadwal tidak dikenal."})

    schedule = _get_schedule_for_lecturer(lecturer, schedule_id)

    if schedule.status == status:
        return schedule

    if status not in SCHEDULE_TRANSITIONS[schedule.status]:
        raise InvalidTransition(
            f"Jadwal berstatus {schedule.get_status_display()} tidak dapat diubah lagi."
        )

    schedule.status = status
    schedule.save(update_fields=["status", "updated_at"])
    logger.info("Schedule %s status -> %s", schedule.pk, status)
    return schedule


def reschedule(lecturer: Profile, schedule_id, scheduled_at) -> GuidanceSchedule:
    if not scheduled_at:
        raise ValidationError({"scheduled_at": "Tanggal dan waktu bimbingan wajib diisi."})

    schedule = _get_schedule_for_lecturer(lecturer, schedule_id)
    if not SCHEDULE_TRANSITIONS[schedule.status]:
        raise InvalidTransition(
            f"Jadwal berstatus {schedule.get_status_display()} tidak dapat dijadwal ulang."
        )

    schedule.scheduled_at = scheduled_at
    schedule.status = GuidanceSchedule.STATUS_RESCHEDULED
    schedule.save(update_fields=["scheduled_at", "status", "updated_at"])
    logger.info("Schedule %s moved to %s", schedule.pk, scheduled_at)
    return schedule
