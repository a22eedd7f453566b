# backend/submissions/workflow.py
"""
Alur kerja pengumpulan file skripsi.

Tabel transisi status (aktor di kolom kanan):

    (baru)                     -> submitted         mahasiswa (upload)
    submitted                  -> under_review      dosen
    submitted, under_review    -> approved          dosen
    submitted, under_review    -> revision_needed   dosen
    submitted, under_review    -> rejected          dosen
    revision_needed            -> submitted         mahasiswa (versi baru)

Setiap upload ulang untuk lineage yang sama (skripsi, jenis, bab) membuat
record baru dengan versi = versi maksimum + 1; versi lama tidak diubah.
"""

import logging

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.db.models import Max

from masterdata.capabilities import capability_for
from masterdata.exceptions import Forbidden, InvalidTransition, NotFound, UpstreamError
from masterdata.models import Profile
from masterdata.services import get_thesis

from .models import Submission, validate_thesis_document

logger = logging.getLogger(__name__)

STUDENT = Profile.ROLE_STUDENT
LECTURER = Profile.ROLE_LECTURER

SUBMISSION_TRANSITIONS = {
    (None, Submission.STATUS_SUBMITTED): STUDENT,
    (Submission.STATUS_SUBMITTED, Submission.STATUS_UNDER_REVIEW): LECTURER,
    (Submission.STATUS_SUBMITTED, Submission.STATUS_APPROVED): LECTURER,
    (Submission.STATUS_UNDER_REVIEW, Submission.STATUS_APPROVED): LECTURER,
    (Submission.STATUS_SUBMITTED, Submission.STATUS_REVISION_NEEDED): LECTURER,
    (Submission.STATUS_UNDER_REVIEW, Submission.STATUS_REVISION_NEEDED): LECTURER,
    (Submission.STATUS_SUBMITTED, Submission.STATUS_REJECTED): LECTURER,
    (Submission.STATUS_UNDER_REVIEW, Submission.STATUS_REJECTED): LECTURER,
    (Submission.STATUS_REVISION_NEEDED, Submission.STATUS_SUBMITTED): STUDENT,
}

STATUS_LABELS = dict(Submission.STATUS_CHOICES)
VALID_TYPES = dict(Submission.TYPE_CHOICES)


def _label(status):
    if status is None:
        return "(baru)"
    return STATUS_LABELS.get(status, status)


def allowed_targets(current, role):
    return [
        target
        for (source, target), actor in SUBMISSION_TRANSITIONS.items()
        if source == current and actor == role
    ]


def check_transition(current, target, role):
    actor = SUBMISSION_TRANSITIONS.get((current, target))
    if actor is None:
        raise InvalidTransition(
            f"Status tidak dapat diubah dari {_label(current)} ke {_label(target)}."
        )
    if actor != role:
        raise Forbidden(
            f"Peran Anda tidak dapat mengubah status ke {_label(target)}."
        )


def _clean_chapter(type, chapter, errors):
    if type != Submission.TYPE_CHAPTER:
        return 0
    try:
        number = int(chapter)
    except (TypeError, ValueError):
        number = 0
    if not 1 <= number <= 5:
        errors["chapter"] = "Nomor bab harus 1 sampai 5."
    return number


def submit_document(
    student: Profile,
    thesis_id,
    type,
    title,
    file,
    chapter=None,
    comments="",
) -> Submission:
    errors = {}
    if not file:
        errors["file"] = "File wajib diunggah."
    if type not in VALID_TYPES:
        errors["type"] = "Jenis dokumen wajib dipilih."
    if not (title or "").strip():
        errors["title"] = "Judul dokumen wajib diisi."
    chapter = _clean_chapter(type, chapter, errors)
    if errors:
        raise ValidationError(errors)

    # tipe & ukuran file dicek sebelum menyentuh database/storage
    validate_thesis_document(file)

    with transaction.atomic():
        # kunci baris skripsi supaya baca-versi-lalu-tulis tidak balapan
        thesis = get_thesis(thesis_id, for_update=True)
        cap = capability_for(student)
        cap.require(
            cap.can_upload_to(thesis),
            "Anda hanya dapat mengunggah file untuk skripsi Anda sendiri.",
        )

        lineage = Submission.objects.lineage(thesis, type, chapter)
        latest = lineage.order_by("-version").first()
        check_transition(
            latest.status if latest else None,
            Submission.STATUS_SUBMITTED,
            student.role,
        )

        max_version = lineage.aggregate(v=Max("version"))["v"] or 0
        submission = Submission(
            thesis=thesis,
            student=student,
            type=type,
            chapter=chapter,
            title=title.strip(),
            comments=(comments or "").strip(),
            file_name=getattr(file, "name", "") or "",
            version=max_version + 1,
            status=Submission.STATUS_SUBMITTED,
        )
        submission.file = file
        try:
            with transaction.atomic():
                submission.save()
        except IntegrityError:
            logger.warning(
                "Version conflict on thesis=%s type=%s chapter=%s",
                thesis.pk, type, chapter,
            )
            raise UpstreamError(
                "Versi dokumen bentrok dengan unggahan lain. Silakan unggah ulang."
            )

    logger.info(
        "Submission %s uploaded: thesis=%s %s v%s",
        submission.pk, thesis.pk, submission.stage_label, submission.version,
    )
    return submission


def get_submission(submission_id, for_update=False) -> Submission:
    qs = Submission.objects.select_related("thesis", "student")
    if for_update:
        qs = qs.select_for_update()
    try:
        return qs.get(pk=submission_id)
    except (Submission.DoesNotExist, ValueError, TypeError):
        raise NotFound("File tidak ditemukan.")


def get_submission_for(profile: Profile, submission_id) -> Submission:
    submission = get_submission(submission_id)
    cap = capability_for(profile)
    cap.require(
        cap.can_view_thesis(submission.thesis),
        "Anda tidak berhak mengakses file ini.",
    )
    return submission


def review_submission(lecturer: Profile, submission_id, status, comments=None) -> Submission:
    if status not in STATUS_LABELS:
        raise ValidationError({"status": "Status review tidak dikenal."})

    with transaction.atomic():
        submission = get_submission(submission_id, for_update=True)
        cap = capability_for(lecturer)
        cap.require(
            cap.can_review(submission.thesis),
            "Anda bukan dosen pembimbing skripsi ini.",
        )
        check_transition(submission.status, status, lecturer.role)

        submission.status = status
        if comments is not None:
            submission.comments = comments.strip()
        submission.save(update_fields=["status", "comments", "updated_at"])

    logger.info(
        "Submission %s reviewed by %s: %s", submission.pk, lecturer.pk, status
    )
    return submission


def lineage_history(submission: Submission):
    return list(
        Submission.objects.lineage(
            submission.thesis_id, submission.type, submission.chapter
        )
    )
