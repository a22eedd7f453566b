import csv

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.core.exceptions import ValidationError
from django.http import HttpResponse
from django.shortcuts import redirect, render
from django.views.decorators.http import require_POST

from guidance.services import create_schedule, reschedule, schedules_for, update_schedule_status
from masterdata.capabilities import capability_for
from masterdata.exceptions import SiskripsiError
from masterdata.services import claim_thesis, get_thesis, set_thesis_status
from submissions.models import Submission
from submissions.progress import summarize_thesis
from submissions.workflow import get_submission_for, lineage_history, review_submission

from .forms import (
    GuidanceScheduleForm,
    InsightRequestForm,
    RescheduleForm,
    ScheduleStatusForm,
    SubmissionReviewForm,
    ThesisStatusForm,
)
from .views_base import (
    _apply_validation_error,
    _flash_validation_error,
    _require_dosen,
)


def _student_summaries(dosen, theses=None):
    if theses is None:
        theses = capability_for(dosen).visible_theses()
    theses = theses.select_related("student", "lecturer").prefetch_related("submissions")
    return [summarize_thesis(t, t.submissions.all()) for t in theses]


# =========================
# Dosen – dashboard & skripsi
# =========================

@login_required
def dosen_dashboard(request):
    dosen, error = _require_dosen(request)
    if error:
        return error

    summaries = _student_summaries(dosen)
    supervised = [s for s in summaries if s.thesis.lecturer_id == dosen.pk]
    pool = [s for s in summaries if s.thesis.lecturer_id is None]

    pending_reviews = (
        Submission.objects.pending()
        .filter(thesis__lecturer=dosen)
        .select_related("thesis", "student")
        .order_by("created_at", "id")
    )

    status_counts = {}
    for s in supervised:
        status_counts[s.status] = status_counts.get(s.status, 0) + 1

    context = {
        "dosen": dosen,
        "supervised": supervised,
        "pool": pool,
        "pending_reviews": pending_reviews,
        "status_counts": status_counts,
        "insight_form": InsightRequestForm(initial={"kind": "student_performance"}),
        "realtime_tables": "thesis,submissions",
    }
    return render(request, "portal/dosen_dashboard.html", context)


@login_required
def dosen_thesis_detail(request, thesis_id: int):
    dosen, error = _require_dosen(request)
    if error:
        return error

    try:
        thesis = get_thesis(thesis_id)
        cap = capability_for(dosen)
        cap.require(cap.can_view_thesis(thesis), "Anda bukan dosen pembimbing skripsi ini.")
    except SiskripsiError as exc:
        messages.error(request, exc.message)
        return redirect("portal:dosen_dashboard")

    submissions = list(thesis.submissions.all())
    context = {
        "dosen": dosen,
        "thesis": thesis,
        "summary": summarize_thesis(thesis, submissions),
        "submissions": submissions,
        "schedules": thesis.guidance_schedules.all(),
        "status_form": ThesisStatusForm(initial={"status": thesis.status}),
        "realtime_tables": "thesis,submissions,guidance_schedule",
        "realtime_thesis": thesis.pk,
    }
    return render(request, "portal/dosen_thesis_detail.html", context)


@login_required
@require_POST
def dosen_claim_thesis(request, thesis_id: int):
    dosen, error = _require_dosen(request)
    if error:
        return error

    try:
        thesis = claim_thesis(dosen, thesis_id)
    except SiskripsiError as exc:
        messages.error(request, exc.message)
        return redirect("portal:dosen_dashboard")

    messages.success(request, f"Anda sekarang pembimbing skripsi {thesis.student.full_name}.")
    return redirect("portal:dosen_thesis_detail", thesis_id=thesis.pk)


@login_required
@require_POST
def dosen_thesis_status(request, thesis_id: int):
    dosen, error = _require_dosen(request)
    if error:
        return error

    form = ThesisStatusForm(request.POST)
    if not form.is_valid():
        messages.error(request, "Status skripsi tidak dikenal.")
        return redirect("portal:dosen_thesis_detail", thesis_id=thesis_id)

    try:
        set_thesis_status(dosen, thesis_id, form.cleaned_data["status"])
    except ValidationError as exc:
        _flash_validation_error(request, exc)
    except SiskripsiError as exc:
        messages.error(request, exc.message)
    else:
        messages.success(request, "Status skripsi berhasil diperbarui.")
    return redirect("portal:dosen_thesis_detail", thesis_id=thesis_id)


# =========================
# Dosen – review file
# =========================

@login_required
def dosen_review(request, pk: int):
    dosen, error = _require_dosen(request)
    if error:
        return error

    try:
        submission = get_submission_for(dosen, pk)
    except SiskripsiError as exc:
        messages.error(request, exc.message)
        return redirect("portal:dosen_dashboard")

    if request.method == "POST":
        form = SubmissionReviewForm(request.POST, submission=submission, role=dosen.role)
        if form.is_valid():
            try:
                review_submission(
                    dosen,
                    submission.pk,
                    form.cleaned_data["status"],
                    form.cleaned_data["comments"],
                )
            except ValidationError as exc:
                _apply_validation_error(form, exc)
            except SiskripsiError as exc:
                messages.error(request, exc.message)
                return redirect("portal:dosen_review", pk=submission.pk)
            else:
                messages.success(request, "Review berhasil disimpan")
                return redirect("portal:dosen_thesis_detail", thesis_id=submission.thesis_id)
        messages.error(request, "Silakan periksa kembali isian review.")
    else:
        form = SubmissionReviewForm(submission=submission, role=dosen.role)

    context = {
        "dosen": dosen,
        "submission": submission,
        "history": lineage_history(submission),
        "form": form,
        "insight_form": InsightRequestForm(
            initial={"kind": "file_review", "submission_id": submission.pk}
        ),
    }
    return render(request, "portal/dosen_review.html", context)


# =========================
# Dosen – jadwal bimbingan
# =========================

@login_required
def dosen_schedule_list(request):
    dosen, error = _require_dosen(request)
    if error:
        return error

    context = {
        "dosen": dosen,
        "schedules": schedules_for(dosen),
        "reschedule_form": RescheduleForm(),
        "insight_form": InsightRequestForm(initial={"kind": "schedule_optimization"}),
        "realtime_tables": "guidance_schedule",
    }
    return render(request, "portal/dosen_schedule_list.html", context)


@login_required
def dosen_schedule_create(request):
    dosen, error = _require_dosen(request)
    if error:
        return error

    if request.method == "POST":
        form = GuidanceScheduleForm(request.POST, lecturer=dosen)
        if form.is_valid():
            data = form.cleaned_data
            try:
                create_schedule(
                    dosen,
                    data["student"].pk,
                    data["title"],
                    data["scheduled_at"],
                    data["notes"],
                )
            except ValidationError as exc:
                _apply_validation_error(form, exc)
            except SiskripsiError as exc:
                messages.error(request, exc.message)
                return redirect("portal:dosen_schedule_list")
            else:
                messages.success(request, "Jadwal berhasil dibuat")
                return redirect("portal:dosen_schedule_list")
        messages.error(request, "Silakan periksa kembali isian formulir.")
    else:
        form = GuidanceScheduleForm(lecturer=dosen)

    context = {"dosen": dosen, "form": form}
    return render(request, "portal/dosen_schedule_form.html", context)


@login_required
@require_POST
def dosen_schedule_status(request, pk: int):
    dosen, error = _require_dosen(request)
    if error:
        return error

    form = ScheduleStatusForm(request.POST)
    if not form.is_valid():
        messages.error(request, "Status jadwal tidak dikenal.")
        return redirect("portal:dosen_schedule_list")

    try:
        update_schedule_status(dosen, pk, form.cleaned_data["status"])
    except ValidationError as exc:
        _flash_validation_error(request, exc)
    except SiskripsiError as exc:
        messages.error(request, exc.message)
    else:
        messages.success(request, "Status jadwal berhasil diperbarui.")
    return redirect("portal:dosen_schedule_list")


@login_required
@require_POST
def dosen_schedule_reschedule(request, pk: int):
    dosen, error = _require_dosen(request)
    if error:
        return error

    form = RescheduleForm(request.POST)
    if not form.is_valid():
        messages.error(request, "Tanggal dan waktu bimbingan wajib diisi.")
        return redirect("portal:dosen_schedule_list")

    try:
        reschedule(dosen, pk, form.cleaned_data["scheduled_at"])
    except ValidationError as exc:
        _flash_validation_error(request, exc)
    except SiskripsiError as exc:
        messages.error(request, exc.message)
    else:
        messages.success(request, "Jadwal bimbingan berhasil diubah.")
    return redirect("portal:dosen_schedule_list")


# =========================
# Dosen – export
# =========================

@login_required
def dosen_progress_export(request):
    dosen, error = _require_dosen(request)
    if error:
        return error

    summaries = _student_summaries(
        dosen,
        capability_for(dosen).visible_theses().filter(lecturer=dosen),
    )
    summaries.sort(key=lambda s: s.thesis.student.nim_nidn)

    response = HttpResponse(content_type="text/csv")
    filename = f"progress_bimbingan_{dosen.nim_nidn or dosen.pk}.csv"
    response["Content-Disposition"] = f'attachment; filename="{filename}"'

    writer = csv.writer(response)
    writer.writerow(
        [
            "NIM",
            "Nama Mahasiswa",
            "Judul Skripsi",
            "Status Skripsi",
            "Progress (%)",
            "Tahap",
            "Status Aktivitas",
            "Hari Sejak Aktivitas Terakhir",
            "Jumlah File",
            "Menunggu Review",
        ]
    )

    for s in summaries:
        thesis = s.thesis
        writer.writerow(
            [
                thesis.student.nim_nidn,
                thesis.student.full_name,
                thesis.title,
                thesis.get_status_display(),
                s.progress,
                s.stage,
                s.status_label,
                "" if s.days_since_last_activity is None else s.days_since_last_activity,
                s.total_submissions,
                s.pending_reviews,
            ]
        )

    return response
