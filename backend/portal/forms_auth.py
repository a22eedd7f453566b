# backend/portal/forms_auth.py

from django import forms

from masterdata.auth import MIN_PASSWORD_LENGTH
from masterdata.models import Profile


class SignInForm(forms.Form):
    email = forms.EmailField(
        widget=forms.EmailInput(attrs={"class": "form-control", "autofocus": True}),
        error_messages={"invalid": "Format email tidak valid"},
    )
    password = forms.CharField(
        widget=forms.PasswordInput(attrs={"class": "form-control"}),
    )


class SignUpForm(forms.Form):
    """
    Registrasi akun mahasiswa atau dosen.
    Akun admin dibuat lewat Django admin / createsuperuser.
    """

    ROLE_CHOICES = (
        (Profile.ROLE_STUDENT, "Mahasiswa"),
        (Profile.ROLE_LECTURER, "Dosen"),
    )

    full_name = forms.CharField(
        label="Nama lengkap",
        max_length=150,
        widget=forms.TextInput(attrs={"class": "form-control"}),
    )
    email = forms.EmailField(
        widget=forms.EmailInput(attrs={"class": "form-control"}),
        error_messages={"invalid": "Format email tidak valid"},
    )
    password = forms.CharField(
        min_length=MIN_PASSWORD_LENGTH,
        widget=forms.PasswordInput(attrs={"class": "form-control"}),
        error_messages={"min_length": "Password minimal 6 karakter"},
    )
    role = forms.ChoiceField(
        label="Peran",
        choices=ROLE_CHOICES,
        widget=forms.Select(attrs={"class": "form-select"}),
    )
    nim_nidn = forms.CharField(
        label="NIM/NIDN",
        max_length=20,
        widget=forms.TextInput(attrs={"class": "form-control"}),
    )
    department = forms.CharField(
        label="Jurusan/Program Studi",
        max_length=100,
        widget=forms.TextInput(attrs={"class": "form-control"}),
    )
    phone = forms.CharField(
        label="No. HP/WA",
        max_length=20,
        required=False,
        widget=forms.TextInput(attrs={"class": "form-control"}),
    )
