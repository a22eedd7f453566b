from .views_auth import after_login, portal_login, portal_logout, portal_register
from .views_mahasiswa import (
    mahasiswa_dashboard,
    mahasiswa_thesis,
    mahasiswa_upload,
    mahasiswa_submissions,
    mahasiswa_schedule_list,
)
from .views_dosen import (
    dosen_dashboard,
    dosen_thesis_detail,
    dosen_claim_thesis,
    dosen_thesis_status,
    dosen_review,
    dosen_schedule_list,
    dosen_schedule_create,
    dosen_schedule_status,
    dosen_schedule_reschedule,
    dosen_progress_export,
)
from .views_admin import admin_dashboard, admin_assign_lecturer, admin_thesis_status
from .views_shared import (
    chat_index,
    chat_detail,
    submission_download,
    insight_request,
    changes,
)

__all__ = [
    # Auth
    "portal_login",
    "portal_register",
    "portal_logout",
    "after_login",
    # Mahasiswa
    "mahasiswa_dashboard",
    "mahasiswa_thesis",
    "mahasiswa_upload",
    "mahasiswa_submissions",
    "mahasiswa_schedule_list",
    # Dosen
    "dosen_dashboard",
    "dosen_thesis_detail",
    "dosen_claim_thesis",
    "dosen_thesis_status",
    "dosen_review",
    "dosen_schedule_list",
    "dosen_schedule_create",
    "dosen_schedule_status",
    "dosen_schedule_reschedule",
    "dosen_progress_export",
    # Admin
    "admin_dashboard",
    "admin_assign_lecturer",
    "admin_thesis_status",
    # Bersama
    "chat_index",
    "chat_detail",
    "submission_download",
    "insight_request",
    "changes",
]
