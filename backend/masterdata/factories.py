# backend/masterdata/factories.py
"""
Pembuat data contoh untuk test (user + profil, skripsi, file).
"""

import itertools

from django.contrib.auth.models import User
from django.core.files.uploadedfile import SimpleUploadedFile
from django.utils import timezone

from .models import Profile, Thesis

PASSWORD = "rahasia123"

_sequence = itertools.count(1)


def make_profile(role=Profile.ROLE_STUDENT, full_name=None, email=None, **extra):
    n = next(_sequence)
    email = email or f"user{n}@kampus.ac.id"
    user = User.objects.create_user(username=email, email=email, password=PASSWORD)
    return Profile.objects.create(
        user=user,
        full_name=full_name or f"Pengguna {n}",
        email=email,
        role=role,
        nim_nidn=extra.pop("nim_nidn", f"2100{n:04d}"),
        department=extra.pop("department", "Sains Data"),
        **extra,
    )


def make_student(**kwargs):
    return make_profile(Profile.ROLE_STUDENT, **kwargs)


def make_lecturer(**kwargs):
    return make_profile(Profile.ROLE_LECTURER, **kwargs)


def make_admin(**kwargs):
    return make_profile(Profile.ROLE_ADMIN, **kwargs)


def make_thesis(student=None, lecturer=None, title="Klasifikasi Citra Daun Padi", **kwargs):
    return Thesis.objects.create(
        student=student or make_student(),
        lecturer=lecturer,
        title=title,
        **kwargs,
    )


def make_submission(thesis, type="proposal", chapter=0, version=1, status="submitted", **kwargs):
    # file cukup berupa path; tidak ada yang ditulis ke storage
    from submissions.models import Submission

    kwargs.setdefault("created_at", timezone.now())
    return Submission.objects.create(
        thesis=thesis,
        student=thesis.student,
        type=type,
        chapter=chapter,
        version=version,
        status=status,
        title=kwargs.pop("title", f"Dokumen {type} {chapter}"),
        file=kwargs.pop("file", f"thesis-files/{thesis.pk}/{type}-{chapter}-v{version}.pdf"),
        file_name=kwargs.pop("file_name", "dokumen.pdf"),
        **kwargs,
    )


def pdf_file(name="dokumen.pdf", content=b"%PDF-1.4 dummy"):
    return SimpleUploadedFile(name, content, content_type="application/pdf")
