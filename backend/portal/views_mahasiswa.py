from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.core.exceptions import ValidationError
from django.shortcuts import redirect, render

from guidance.services import schedules_for, upcoming_for
from masterdata.exceptions import SiskripsiError
from masterdata.models import Thesis
from masterdata.services import register_thesis, update_thesis
from submissions.models import Submission
from submissions.progress import latest_by_lineage, summarize_thesis
from submissions.workflow import submit_document

from .forms import InsightRequestForm, SubmissionUploadForm, ThesisForm
from .views_base import _apply_validation_error, _require_mahasiswa


def _thesis_of(mhs):
    return Thesis.objects.select_related("lecturer").filter(student=mhs).first()


@login_required
def mahasiswa_dashboard(request):
    mhs, error = _require_mahasiswa(request)
    if error:
        return error

    thesis = _thesis_of(mhs)
    summary = None
    recent_submissions = []
    if thesis is not None:
        submissions = list(thesis.submissions.all())
        summary = summarize_thesis(thesis, submissions)
        recent_submissions = submissions[:5]

    context = {
        "mahasiswa": mhs,
        "thesis": thesis,
        "summary": summary,
        "recent_submissions": recent_submissions,
        "upcoming_schedules": upcoming_for(mhs)[:5],
        "insight_form": InsightRequestForm(initial={"kind": "thesis_analysis"}),
        "realtime_tables": "thesis,submissions,guidance_schedule",
        "realtime_thesis": thesis.pk if thesis else "",
    }
    return render(request, "portal/mahasiswa_dashboard.html", context)


@login_required
def mahasiswa_thesis(request):
    """
    Daftar judul skripsi (pertama kali) atau edit judul selama masih draft.
    """
    mhs, error = _require_mahasiswa(request)
    if error:
        return error

    thesis = _thesis_of(mhs)
    if thesis is not None and thesis.status != Thesis.STATUS_DRAFT:
        messages.info(request, "Judul skripsi sudah tidak dapat diubah.")
        return redirect("portal:mahasiswa_dashboard")

    if request.method == "POST":
        form = ThesisForm(request.POST, instance=thesis)
        if form.is_valid():
            data = form.cleaned_data
            try:
                if thesis is None:
                    register_thesis(mhs, data["title"], data["description"], data["keywords"])
                    messages.success(request, "Judul skripsi berhasil didaftarkan.")
                else:
                    update_thesis(
                        mhs, thesis.pk, data["title"], data["description"], data["keywords"]
                    )
                    messages.success(request, "Data skripsi berhasil diperbarui.")
            except ValidationError as exc:
                _apply_validation_error(form, exc)
            except SiskripsiError as exc:
                messages.error(request, exc.message)
                return redirect("portal:mahasiswa_dashboard")
            else:
                return redirect("portal:mahasiswa_dashboard")
        messages.error(request, "Silakan periksa kembali isian formulir.")
    else:
        form = ThesisForm(instance=thesis)

    context = {"mahasiswa": mhs, "thesis": thesis, "form": form}
    return render(request, "portal/mahasiswa_thesis_form.html", context)


@login_required
def mahasiswa_upload(request):
    mhs, error = _require_mahasiswa(request)
    if error:
        return error

    thesis = _thesis_of(mhs)
    if thesis is None:
        messages.error(request, "Daftarkan judul skripsi terlebih dahulu.")
        return redirect("portal:mahasiswa_thesis")

    if request.method == "POST":
        form = SubmissionUploadForm(request.POST, request.FILES)
        if form.is_valid():
            data = form.cleaned_data
            try:
                submission = submit_document(
                    mhs,
                    thesis.pk,
                    data["type"],
                    data["title"],
                    data["file"],
                    chapter=data["chapter"],
                    comments=data["comments"],
                )
            except ValidationError as exc:
                _apply_validation_error(form, exc)
            except SiskripsiError as exc:
                messages.error(request, exc.message)
                return redirect("portal:mahasiswa_submissions")
            else:
                messages.success(
                    request,
                    f"File {submission.stage_label} versi {submission.version} berhasil diupload.",
                )
                return redirect("portal:mahasiswa_submissions")
        messages.error(request, "Silakan periksa kembali isian formulir.")
    else:
        form = SubmissionUploadForm()

    context = {"mahasiswa": mhs, "thesis": thesis, "form": form}
    return render(request, "portal/mahasiswa_upload.html", context)


@login_required
def mahasiswa_submissions(request):
    mhs, error = _require_mahasiswa(request)
    if error:
        return error

    thesis = _thesis_of(mhs)
    submissions = []
    latest_ids = set()
    if thesis is not None:
        submissions = list(
            Submission.objects.filter(thesis=thesis).order_by(
                "type", "chapter", "-version"
            )
        )
        latest_ids = {s.pk for s in latest_by_lineage(submissions).values()}

    context = {
        "mahasiswa": mhs,
        "thesis": thesis,
        "submissions": submissions,
        "latest_ids": latest_ids,
        "revision_needed": Submission.STATUS_REVISION_NEEDED,
        "realtime_tables": "submissions",
        "realtime_thesis": thesis.pk if thesis else "",
    }
    return render(request, "portal/mahasiswa_submissions.html", context)


@login_required
def mahasiswa_schedule_list(request):
    mhs, error = _require_mahasiswa(request)
    if error:
        return error

    context = {
        "mahasiswa": mhs,
        "schedules": schedules_for(mhs),
        "realtime_tables": "guidance_schedule",
    }
    return render(request, "portal/mahasiswa_schedule_list.html", context)
