"""
View yang dipakai lebih dari satu peran: chat, unduh file, asisten AI,
dan endpoint polling perubahan data.
"""

import logging
import os

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.core.exceptions import ValidationError
from django.http import FileResponse, JsonResponse
from django.shortcuts import redirect, render
from django.views.decorators.http import require_GET, require_POST

from chat.services import chat_list, messages_for, post_message
from guidance.services import schedules_for
from insight import prompts
from insight.client import generate_insight
from insight.services import (
    file_review_context,
    schedule_optimization_context,
    student_performance_context,
    thesis_analysis_context,
)
from masterdata.capabilities import capability_for
from masterdata.exceptions import Forbidden, SiskripsiError, UpstreamError
from masterdata.services import get_thesis
from submissions.progress import summarize_thesis
from submissions.workflow import get_submission_for

from . import realtime
from .forms import InsightRequestForm, MessageForm
from .views_base import _apply_validation_error, _require_profile

logger = logging.getLogger(__name__)


# =========================
# Chat
# =========================

@login_required
def chat_index(request):
    profile, error = _require_profile(request)
    if error:
        return error

    context = {
        "profile": profile,
        "chats": chat_list(profile),
        "realtime_tables": "messages",
    }
    return render(request, "portal/chat_list.html", context)


@login_required
def chat_detail(request, thesis_id: int):
    profile, error = _require_profile(request)
    if error:
        return error

    try:
        thesis = get_thesis(thesis_id)
        chat_messages = messages_for(profile, thesis.pk)
    except SiskripsiError as exc:
        messages.error(request, exc.message)
        return redirect("portal:chat_index")

    form = MessageForm()
    if request.method == "POST":
        form = MessageForm(request.POST)
        if form.is_valid():
            try:
                post_message(profile, thesis.pk, form.cleaned_data["content"])
            except ValidationError as exc:
                _apply_validation_error(form, exc)
            except SiskripsiError as exc:
                messages.error(request, exc.message)
                return redirect("portal:chat_detail", thesis_id=thesis.pk)
            else:
                return redirect("portal:chat_detail", thesis_id=thesis.pk)

    context = {
        "profile": profile,
        "thesis": thesis,
        "chat_messages": chat_messages,
        "can_write": capability_for(profile).can_chat(thesis),
        "form": form,
        "realtime_tables": "messages",
        "realtime_thesis": thesis.pk,
    }
    return render(request, "portal/chat_detail.html", context)


# =========================
# File
# =========================

@login_required
def submission_download(request, pk: int):
    profile, error = _require_profile(request)
    if error:
        return error

    try:
        submission = get_submission_for(profile, pk)
        try:
            handle = submission.file.open("rb")
        except (OSError, ValueError) as exc:
            logger.error("Cannot open file for submission %s: %s", submission.pk, exc)
            raise UpstreamError("File tidak dapat diunduh. Silakan coba lagi.")
    except SiskripsiError as exc:
        messages.error(request, exc.message)
        return redirect("portal:after_login")

    filename = submission.file_name or os.path.basename(submission.file.name)
    return FileResponse(handle, as_attachment=True, filename=filename)


# =========================
# Asisten AI
# =========================

def _insight_context(profile, data):
    kind = data["kind"]
    cap = capability_for(profile)

    if kind == prompts.KIND_THESIS_ANALYSIS:
        thesis = cap.visible_theses().filter(student=profile).first()
        if thesis is None:
            raise Forbidden(
                "Analisis progress hanya tersedia untuk mahasiswa "
                "yang sudah mendaftarkan skripsi."
            )
        return thesis_analysis_context(summarize_thesis(thesis))

    if kind == prompts.KIND_STUDENT_PERFORMANCE:
        cap.require(profile.is_lecturer, "Analisis performa hanya tersedia untuk dosen.")
        theses = cap.visible_theses().filter(lecturer=profile).prefetch_related("submissions")
        return student_performance_context(
            summarize_thesis(t, t.submissions.all()) for t in theses
        )

    if kind == prompts.KIND_SCHEDULE_OPTIMIZATION:
        return schedule_optimization_context(schedules_for(profile))

    if kind == prompts.KIND_FILE_REVIEW:
        return file_review_context(get_submission_for(profile, data["submission_id"]))

    return prompts.GeneralContext(message=data["message"].strip())


@login_required
@require_POST
def insight_request(request):
    profile, error = _require_profile(request)
    if error:
        return error

    form = InsightRequestForm(request.POST)
    if not form.is_valid():
        for errors in form.errors.values():
            for message in errors:
                messages.error(request, message)
        return redirect("portal:after_login")

    try:
        context = _insight_context(profile, form.cleaned_data)
    except SiskripsiError as exc:
        messages.error(request, exc.message)
        return redirect("portal:after_login")

    result = generate_insight(profile.role, context)
    if not result.ok:
        messages.warning(request, "Asisten AI sedang tidak tersedia.")

    context = {
        "profile": profile,
        "result": result,
        "form": InsightRequestForm(initial={"kind": prompts.KIND_GENERAL}),
    }
    return render(request, "portal/insight_result.html", context)


# =========================
# Realtime
# =========================

@login_required
@require_GET
def changes(request):
    """
    Angka revisi untuk tabel yang dipantau halaman. Halaman memuat ulang
    dirinya sendiri saat angka ini berubah.
    """
    profile, error = _require_profile(request)
    if error:
        return error

    tables = [t for t in request.GET.get("tables", "").split(",") if t in realtime.TABLES]

    thesis_id = request.GET.get("thesis") or None
    if thesis_id is not None:
        try:
            thesis = get_thesis(thesis_id)
        except SiskripsiError:
            return JsonResponse({"error": "Skripsi tidak ditemukan."}, status=404)
        if not capability_for(profile).can_view_thesis(thesis):
            return JsonResponse({"error": "Akses ditolak."}, status=403)
        thesis_id = thesis.pk

    return JsonResponse(
        {"tables": tables, "revision": realtime.hub.revision(tables, thesis_id)}
    )
