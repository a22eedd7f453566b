from django import forms
from django.contrib import admin
from django.utils import timezone

from .models import GuidanceSchedule

OPEN_STATUSES = (GuidanceSchedule.STATUS_SCHEDULED, GuidanceSchedule.STATUS_RESCHEDULED)


class GuidanceScheduleAdminForm(forms.ModelForm):
    class Meta:
        model = GuidanceSchedule
        fields = "__all__"
        widgets = {
            "scheduled_at": forms.DateTimeInput(
                format="%Y-%m-%dT%H:%M",
                attrs={"type": "datetime-local", "step": "900"},
            ),
        }


class UpcomingFilter(admin.SimpleListFilter):
    title = "Waktu"
    parameter_name = "waktu"

    def lookups(self, request, model_admin):
        return (
            ("YA", "Hanya jadwal mendatang"),
        )

    def queryset(self, request, queryset):
        if self.value() == "YA":
            return queryset.filter(scheduled_at__gte=timezone.now())
        return queryset


def _close_schedules(queryset, status):
    # hanya jadwal yang masih terbuka; save() per baris agar sinyal realtime terkirim
    updated = 0
    for schedule in queryset.filter(status__in=OPEN_STATUSES):
        schedule.status = status
        schedule.save(update_fields=["status", "updated_at"])
        updated += 1
    return updated


@admin.action(description="Tandai sebagai selesai")
def mark_completed(modeladmin, request, queryset):
    updated = _close_schedules(queryset, GuidanceSchedule.STATUS_COMPLETED)
    modeladmin.message_user(
        request, f"{updated} jadwal bimbingan ditandai sebagai selesai."
    )


@admin.action(description="Tandai sebagai dibatalkan")
def mark_cancelled(modeladmin, request, queryset):
    updated = _close_schedules(queryset, GuidanceSchedule.STATUS_CANCELLED)
    modeladmin.message_user(
        request, f"{updated} jadwal bimbingan ditandai sebagai dibatalkan."
    )


@admin.register(GuidanceSchedule)
class GuidanceScheduleAdmin(admin.ModelAdmin):
    form = GuidanceScheduleAdminForm

    list_display = (
        "scheduled_at",
        "student",
        "lecturer",
        "title",
        "status",
    )
    list_filter = (
        "status",
        "lecturer",
        UpcomingFilter,
    )
    search_fields = (
        "student__full_name",
        "student__nim_nidn",
        "lecturer__full_name",
        "title",
    )
    autocomplete_fields = ("thesis", "student", "lecturer")
    date_hierarchy = "scheduled_at"

    actions = [mark_completed, mark_cancelled]

    def get_readonly_fields(self, request, obj=None):
        # status jadwal yang sudah ada hanya diubah lewat action
        if obj is not None:
            return ("status",)
        return ()
