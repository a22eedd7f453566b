# backend/portal/urls.py
from django.urls import path

from . import views

app_name = "portal"

urlpatterns = [
    # Auth
    path("login/", views.portal_login, name="login"),
    path("register/", views.portal_register, name="register"),
    path("logout/", views.portal_logout, name="logout"),
    path("after-login/", views.after_login, name="after_login"),

    # Mahasiswa
    path("mhs/dashboard/", views.mahasiswa_dashboard, name="mahasiswa_dashboard"),
    path("mhs/skripsi/", views.mahasiswa_thesis, name="mahasiswa_thesis"),
    path("mhs/upload/", views.mahasiswa_upload, name="mahasiswa_upload"),
    path("mhs/file/", views.mahasiswa_submissions, name="mahasiswa_submissions"),
    path("mhs/jadwal/", views.mahasiswa_schedule_list, name="mahasiswa_schedule_list"),

    # Dosen
    path("dosen/dashboard/", views.dosen_dashboard, name="dosen_dashboard"),
    path(
        "dosen/skripsi/<int:thesis_id>/",
        views.dosen_thesis_detail,
        name="dosen_thesis_detail",
    ),
    path(
        "dosen/skripsi/<int:thesis_id>/klaim/",
        views.dosen_claim_thesis,
        name="dosen_claim_thesis",
    ),
    path(
        "dosen/skripsi/<int:thesis_id>/status/",
        views.dosen_thesis_status,
        name="dosen_thesis_status",
    ),
    path("dosen/file/<int:pk>/review/", views.dosen_review, name="dosen_review"),
    path("dosen/jadwal/", views.dosen_schedule_list, name="dosen_schedule_list"),
    path(
        "dosen/jadwal/tambah/",
        views.dosen_schedule_create,
        name="dosen_schedule_create",
    ),
    path(
        "dosen/jadwal/<int:pk>/status/",
        views.dosen_schedule_status,
        name="dosen_schedule_status",
    ),
    path(
        "dosen/jadwal/<int:pk>/reschedule/",
        views.dosen_schedule_reschedule,
        name="dosen_schedule_reschedule",
    ),
    path(
        "dosen/export/progress/",
        views.dosen_progress_export,
        name="dosen_progress_export",
    ),

    # Admin
    path("adm/dashboard/", views.admin_dashboard, name="admin_dashboard"),
    path(
        "adm/skripsi/<int:thesis_id>/pembimbing/",
        views.admin_assign_lecturer,
        name="admin_assign_lecturer",
    ),
    path(
        "adm/skripsi/<int:thesis_id>/status/",
        views.admin_thesis_status,
        name="admin_thesis_status",
    ),

    # Bersama
    path("chat/", views.chat_index, name="chat_index"),
    path("chat/<int:thesis_id>/", views.chat_detail, name="chat_detail"),
    path("file/<int:pk>/unduh/", views.submission_download, name="submission_download"),
    path("ai/", views.insight_request, name="insight_request"),
    path("changes/", views.changes, name="changes"),
]
