# backend/portal/views_base.py

from django.contrib import messages
from django.http import HttpResponseForbidden

from masterdata.auth import get_profile_or_none
from masterdata.models import Profile


# =========================
# Helper role
# =========================

def _require_profile(request):
    profile = get_profile_or_none(request.user)
    if profile is None:
        return None, HttpResponseForbidden(
            "Akun ini belum dihubungkan ke profil SISKRIPSI."
        )
    return profile, None


def _require_role(request, role, message):
    profile, error = _require_profile(request)
    if error:
        return None, error
    if profile.role != role:
        return None, HttpResponseForbidden(message)
    return profile, None


def _require_mahasiswa(request):
    return _require_role(
        request, Profile.ROLE_STUDENT, "Akun ini tidak terhubung dengan data Mahasiswa."
    )


def _require_dosen(request):
    return _require_role(
        request, Profile.ROLE_LECTURER, "Akun ini tidak terhubung dengan data Dosen."
    )


def _require_admin(request):
    return _require_role(request, Profile.ROLE_ADMIN, "Halaman ini khusus admin.")


def _apply_validation_error(form, exc):
    """Pasang ValidationError dari service ke field form yang sesuai."""
    if hasattr(exc, "error_dict"):
        for field, errors in exc.message_dict.items():
            form.add_error(field if field in form.fields else None, errors)
    else:
        form.add_error(None, exc.messages)


def _flash_validation_error(request, exc):
    for message in exc.messages:
        messages.error(request, message)
