from django.contrib import admin

from .models import Submission


class LatestVersionFilter(admin.SimpleListFilter):
    title = "Versi"
    parameter_name = "versi"

    def lookups(self, request, model_admin):
        return (
            ("PERTAMA", "Hanya versi pertama"),
            ("REVISI", "Hanya versi revisi (v2 ke atas)"),
        )

    def queryset(self, request, queryset):
        if self.value() == "PERTAMA":
            return queryset.filter(version=1)
        if self.value() == "REVISI":
            return queryset.filter(version__gt=1)
        return queryset


@admin.register(Submission)
class SubmissionAdmin(admin.ModelAdmin):
    list_display = (
        "title",
        "thesis",
        "student",
        "type",
        "chapter",
        "version",
        "status",
        "created_at",
    )
    list_filter = ("status", "type", "chapter", LatestVersionFilter)
    search_fields = (
        "title",
        "file_name",
        "student__full_name",
        "student__nim_nidn",
        "thesis__title",
    )
    date_hierarchy = "created_at"

    # riwayat dan status hanya berubah lewat alur upload/review di portal
    readonly_fields = (
        "thesis",
        "student",
        "type",
        "chapter",
        "title",
        "version",
        "status",
        "comments",
        "file",
        "file_name",
        "created_at",
        "updated_at",
    )

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
