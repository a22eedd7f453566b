# backend/masterdata/auth.py
"""
Registrasi akun, login/logout, dan pemetaan pesan error autentikasi ke
pesan yang ramah pengguna.
"""

import logging

from django.contrib.auth import authenticate, login, logout
from django.contrib.auth.models import User
from django.core.exceptions import ValidationError
from django.core.validators import validate_email
from django.db import IntegrityError, transaction

from .exceptions import AuthError
from .models import Profile

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6

INVALID_CREDENTIALS = "Invalid login credentials"
ALREADY_REGISTERED = "User already registered"
EMAIL_NOT_CONFIRMED = "Email not confirmed"
WEAK_PASSWORD = "Password should be at least"
INVALID_EMAIL = "Invalid email"

AUTH_ERROR_MESSAGES = (
    (INVALID_CREDENTIALS, "Email atau password salah"),
    (ALREADY_REGISTERED, "Email sudah terdaftar"),
    (EMAIL_NOT_CONFIRMED, "Silakan verifikasi email Anda terlebih dahulu"),
    (WEAK_PASSWORD, "Password minimal 6 karakter"),
    (INVALID_EMAIL, "Format email tidak valid"),
)


def auth_error_message(error) -> str:
    text = str(error or "")
    for marker, message in AUTH_ERROR_MESSAGES:
        if marker in text:
            return message
    return text or "Terjadi kesalahan tidak terduga"


def validate_registration(email, password, full_name, role, nim_nidn, department):
    """Kembalikan dict field -> pesan error; dict kosong berarti valid."""
    errors = {}

    if not email:
        errors["email"] = "Email wajib diisi"
    else:
        try:
            validate_email(email)
        except ValidationError:
            errors["email"] = auth_error_message(INVALID_EMAIL)

    if not password:
        errors["password"] = "Password wajib diisi"
    elif len(password) < MIN_PASSWORD_LENGTH:
        errors["password"] = auth_error_message(WEAK_PASSWORD)

    if not (full_name or "").strip():
        errors["full_name"] = "Nama lengkap wajib diisi"

    if role not in dict(Profile.ROLE_CHOICES):
        errors["role"] = "Peran tidak dikenal"

    if not (nim_nidn or "").strip():
        label = "NIM" if role == Profile.ROLE_STUDENT else "NIDN"
        errors["nim_nidn"] = f"{label} wajib diisi"

    if not (department or "").strip():
        errors["department"] = "Jurusan/Program Studi wajib diisi"

    return errors


def register_account(
    email,
    password,
    full_name,
    role,
    nim_nidn,
    department,
    phone="",
) -> Profile:
    email = (email or "").strip().lower()
    errors = validate_registration(email, password, full_name, role, nim_nidn, department)
    if errors:
        raise ValidationError(errors)

    if User.objects.filter(username=email).exists():
        raise AuthError(auth_error_message(ALREADY_REGISTERED))

    try:
        with transaction.atomic():
            user = User.objects.create_user(
                username=email,
                email=email,
                password=password,
            )
            profile = Profile.objects.create(
                user=user,
                full_name=full_name.strip(),
                email=email,
                role=role,
                nim_nidn=nim_nidn.strip(),
                department=department.strip(),
                phone=(phone or "").strip(),
            )
    except IntegrityError:
        raise AuthError(auth_error_message(ALREADY_REGISTERED))

    logger.info("Account registered: profile=%s role=%s", profile.pk, role)
    return profile


def sign_in(request, email, password) -> User:
    email = (email or "").strip().lower()

    # akun nonaktif diperlakukan sebagai email yang belum diverifikasi
    user = User.objects.filter(username=email).first()
    if user is not None and not user.is_active and user.check_password(password or ""):
        raise AuthError(auth_error_message(EMAIL_NOT_CONFIRMED))

    user = authenticate(request, username=email, password=password)
    if user is None:
        raise AuthError(auth_error_message(INVALID_CREDENTIALS))

    login(request, user)
    return user


def sign_out(request):
    logout(request)


def get_profile_or_none(user):
    if not getattr(user, "is_authenticated", False):
        return None
    return getattr(user, "profile", None)
