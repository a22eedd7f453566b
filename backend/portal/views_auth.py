from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.core.exceptions import ValidationError
from django.shortcuts import redirect, render
from django.utils.http import url_has_allowed_host_and_scheme

from masterdata.auth import register_account, sign_in, sign_out
from masterdata.exceptions import AuthError

from .forms import SignInForm, SignUpForm
from .views_base import _apply_validation_error, _require_profile

DASHBOARD_BY_ROLE = {
    "student": "portal:mahasiswa_dashboard",
    "lecturer": "portal:dosen_dashboard",
    "admin": "portal:admin_dashboard",
}


def portal_login(request):
    if request.user.is_authenticated:
        return redirect("portal:after_login")

    if request.method == "POST":
        form = SignInForm(request.POST)
        if form.is_valid():
            try:
                sign_in(
                    request,
                    form.cleaned_data["email"],
                    form.cleaned_data["password"],
                )
            except AuthError as exc:
                form.add_error(None, exc.message)
            else:
                next_url = request.GET.get("next")
                if next_url and url_has_allowed_host_and_scheme(
                    next_url, allowed_hosts={request.get_host()}
                ):
                    return redirect(next_url)
                return redirect("portal:after_login")
    else:
        form = SignInForm()

    return render(request, "portal/login.html", {"form": form})


def portal_register(request):
    if request.method == "POST":
        form = SignUpForm(request.POST)
        if form.is_valid():
            try:
                register_account(**form.cleaned_data)
            except ValidationError as exc:
                _apply_validation_error(form, exc)
            except AuthError as exc:
                form.add_error("email", exc.message)
            else:
                messages.success(request, "Registrasi berhasil. Silakan login.")
                return redirect("portal:login")
    else:
        form = SignUpForm()

    return render(request, "portal/register.html", {"form": form})


def portal_logout(request):
    sign_out(request)
    return redirect("portal:login")


@login_required
def after_login(request):
    profile, error = _require_profile(request)
    if error:
        return error
    return redirect(DASHBOARD_BY_ROLE[profile.role])
