# backend/masterdata/services.py
"""
Operasi pada agregat Skripsi: pendaftaran judul, edit judul selama draft,
adopsi oleh dosen, penetapan pembimbing, dan status skripsi.

Status skripsi selalu diubah manual oleh dosen/admin; tidak ada promosi
otomatis dari status pengumpulan file.
"""

import logging

from django.core.exceptions import ValidationError
from django.db import transaction

from .capabilities import capability_for
from .exceptions import Forbidden, InvalidTransition, NotFound
from .models import Profile, Thesis

logger = logging.getLogger(__name__)


def get_thesis(thesis_id, for_update=False) -> Thesis:
    qs = Thesis.objects.select_related("student", "lecturer")
    if for_update:
        qs = qs.select_for_update()
    try:
        return qs.get(pk=thesis_id)
    except (Thesis.DoesNotExist, ValueError, TypeError):
        raise NotFound("Skripsi tidak ditemukan.")


def get_profile(profile_id) -> Profile:
    try:
        return Profile.objects.get(pk=profile_id)
    except (Profile.DoesNotExist, ValueError, TypeError):
        raise NotFound("Pengguna tidak ditemukan.")


def normalize_keywords(keywords):
    if not keywords:
        return []
    if isinstance(keywords, str):
        keywords = keywords.split(",")
    return [k.strip() for k in keywords if k and k.strip()]


def register_thesis(student: Profile, title, description="", keywords=()):
    if not student.is_student:
        raise Forbidden("Hanya mahasiswa yang dapat mendaftarkan judul skripsi.")

    title = (title or "").strip()
    if not title:
        raise ValidationError({"title": "Judul skripsi wajib diisi."})
    if Thesis.objects.filter(student=student).exists():
        raise ValidationError("Anda sudah memiliki skripsi terdaftar.")

    thesis = Thesis.objects.create(
        student=student,
        title=title,
        description=(description or "").strip(),
        keywords=normalize_keywords(keywords),
    )
    logger.info("Thesis %s registered by student %s", thesis.pk, student.pk)
    return thesis


def update_thesis(student: Profile, thesis_id, title, description="", keywords=()):
    thesis = get_thesis(thesis_id)
    if thesis.student_id != student.pk:
        raise Forbidden("Anda tidak berhak mengubah skripsi ini.")
    if thesis.status != Thesis.STATUS_DRAFT:
        raise InvalidTransition("Judul hanya bisa diubah selama skripsi masih draft.")

    title = (title or "").strip()
    if not title:
        raise ValidationError({"title": "Judul skripsi wajib diisi."})

    thesis.title = title
    thesis.description = (description or "").strip()
    thesis.keywords = normalize_keywords(keywords)
    thesis.save()
    return thesis


def claim_thesis(lecturer: Profile, thesis_id) -> Thesis:
    """
    Dosen mengambil skripsi yang belum punya pembimbing.
    Yang pertama menyimpan yang menang; klaim kedua oleh dosen lain ditolak.
    """
    if not lecturer.is_lecturer:
        raise Forbidden("Hanya dosen yang dapat menjadi pembimbing.")

    with transaction.atomic():
        thesis = get_thesis(thesis_id, for_update=True)
        if thesis.lecturer_id == lecturer.pk:
            return thesis
        capability_for(lecturer).require(
            thesis.lecturer_id is None,
            "Skripsi ini sudah memiliki dosen pembimbing.",
        )
        thesis.lecturer = lecturer
        thesis.save(update_fields=["lecturer", "updated_at"])

    logger.info("Thesis %s claimed by lecturer %s", thesis.pk, lecturer.pk)
    return thesis


def assign_lecturer(actor: Profile, thesis_id, lecturer_id) -> Thesis:
    cap = capability_for(actor)
    cap.require(
        cap.can_assign_lecturer(),
        "Hanya admin yang dapat menetapkan dosen pembimbing.",
    )
    thesis = get_thesis(thesis_id)

    if lecturer_id in (None, ""):
        thesis.lecturer = None
    else:
        lecturer = get_profile(lecturer_id)
        if not lecturer.is_lecturer:
            raise ValidationError({"lecturer": "Pengguna yang dipilih bukan dosen."})
        thesis.lecturer = lecturer

    thesis.save(update_fields=["lecturer", "updated_at"])
    logger.info("Thesis %s lecturer set to %s by %s", thesis.pk, thesis.lecturer_id, actor.pk)
    return thesis


def set_thesis_status(actor: Profile, thesis_id, status) -> Thesis:
    valid = {value for value, _ in Thesis.STATUS_CHOICES}
    if status not in valid:
        raise ValidationError({"status": "Status skripsi tidak dikenal."})

    thesis = get_thesis(thesis_id)
    cap = capability_for(actor)
    cap.require(
        cap.can_set_thesis_status(thesis),
        "Anda tidak berhak mengubah status skripsi ini.",
    )

    thesis.mark_status(status)
    thesis.save()

    logger.info("Thesis %s status -> %s by %s", thesis.pk, status, actor.pk)
    return thesis
