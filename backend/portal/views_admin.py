from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.core.exceptions import ValidationError
from django.shortcuts import redirect, render
from django.views.decorators.http import require_POST

from masterdata.exceptions import SiskripsiError
from masterdata.models import Profile, Thesis
from masterdata.services import assign_lecturer, set_thesis_status
from submissions.models import Submission

from .forms import AssignLecturerForm, ThesisStatusForm
from .views_base import _flash_validation_error, _require_admin


@login_required
def admin_dashboard(request):
    admin_profile, error = _require_admin(request)
    if error:
        return error

    theses = Thesis.objects.select_related("student", "lecturer").order_by(
        "lecturer", "student__full_name"
    )

    stats = {
        "total_lecturers": Profile.objects.filter(role=Profile.ROLE_LECTURER).count(),
        "total_students": Profile.objects.filter(role=Profile.ROLE_STUDENT).count(),
        "total_theses": theses.count(),
        "completed_theses": theses.filter(status=Thesis.STATUS_APPROVED).count(),
        "pending_reviews": Submission.objects.pending().count(),
    }

    recent_submissions = Submission.objects.select_related(
        "thesis", "student"
    ).order_by("-created_at", "-id")[:5]

    rows = [
        {
            "thesis": thesis,
            "assign_form": AssignLecturerForm(
                initial={"lecturer": thesis.lecturer_id},
                prefix=f"t{thesis.pk}",
            ),
            "status_form": ThesisStatusForm(
                initial={"status": thesis.status},
                prefix=f"t{thesis.pk}",
            ),
        }
        for thesis in theses
    ]

    context = {
        "admin_profile": admin_profile,
        "stats": stats,
        "recent_submissions": recent_submissions,
        "rows": rows,
        "realtime_tables": "profiles,thesis,submissions",
    }
    return render(request, "portal/admin_dashboard.html", context)


@login_required
@require_POST
def admin_assign_lecturer(request, thesis_id: int):
    admin_profile, error = _require_admin(request)
    if error:
        return error

    form = AssignLecturerForm(request.POST, prefix=f"t{thesis_id}")
    if not form.is_valid():
        messages.error(request, "Dosen yang dipilih tidak valid.")
        return redirect("portal:admin_dashboard")

    lecturer = form.cleaned_data["lecturer"]
    try:
        thesis = assign_lecturer(admin_profile, thesis_id, lecturer.pk if lecturer else None)
    except ValidationError as exc:
        _flash_validation_error(request, exc)
    except SiskripsiError as exc:
        messages.error(request, exc.message)
    else:
        if thesis.lecturer is None:
            messages.success(request, f"Skripsi {thesis.student.full_name} dikembalikan ke pool.")
        else:
            messages.success(
                request,
                f"{thesis.lecturer.full_name} ditetapkan sebagai pembimbing {thesis.student.full_name}.",
            )
    return redirect("portal:admin_dashboard")


@login_required
@require_POST
def admin_thesis_status(request, thesis_id: int):
    admin_profile, error = _require_admin(request)
    if error:
        return error

    form = ThesisStatusForm(request.POST, prefix=f"t{thesis_id}")
    if not form.is_valid():
        messages.error(request, "Status skripsi tidak dikenal.")
        return redirect("portal:admin_dashboard")

    try:
        set_thesis_status(admin_profile, thesis_id, form.cleaned_data["status"])
    except ValidationError as exc:
        _flash_validation_error(request, exc)
    except SiskripsiError as exc:
        messages.error(request, exc.message)
    else:
        messages.success(request, "Status skripsi berhasil diperbarui.")
    return redirect("portal:admin_dashboard")
