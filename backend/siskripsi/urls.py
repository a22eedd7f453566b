# backend/siskripsi/urls.py
from django.contrib import admin
from django.urls import include, path
from django.views.generic import RedirectView

# file skripsi tidak disajikan langsung dari MEDIA_URL; unduhan lewat
# portal:submission_download yang memeriksa hak akses
urlpatterns = [
    path("admin/", admin.site.urls),
    path("portal/", include("portal.urls")),
    path("", RedirectView.as_view(pattern_name="portal:after_login", permanent=False)),
]
