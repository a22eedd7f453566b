# backend/masterdata/exceptions.py
"""
Jenis-jenis error domain SISKRIPSI.

Semua error membawa pesan singkat berbahasa Indonesia yang siap ditampilkan
ke pengguna (lewat django.contrib.messages). Untuk input yang tidak valid
dipakai langsung django.core.exceptions.ValidationError.
"""

from django.core.exceptions import PermissionDenied
from django.http import Http404


class SiskripsiError(Exception):
    default_message = "Terjadi kesalahan tidak terduga"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class AuthError(SiskripsiError):
    default_message = "Autentikasi gagal"


class Forbidden(SiskripsiError, PermissionDenied):
    default_message = "Anda tidak berhak melakukan aksi ini."


class NotFound(SiskripsiError, Http404):
    default_message = "Data tidak ditemukan."


class InvalidTransition(SiskripsiError):
    default_message = "Perubahan status tidak diizinkan."


class UpstreamError(SiskripsiError):
    default_message = "Layanan sedang bermasalah. Silakan coba lagi."
