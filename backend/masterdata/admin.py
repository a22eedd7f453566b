from django.contrib import admin

from .models import Profile, Thesis

# import dari app lain untuk ringkasan di daftar skripsi
from submissions.progress import summarize_thesis


class SupervisedThesisInline(admin.TabularInline):
    model = Thesis
    fk_name = "lecturer"
    extra = 0
    fields = ("title", "student", "status")
    readonly_fields = ("title", "student", "status")
    can_delete = False
    show_change_link = True
    verbose_name = "Skripsi bimbingan"
    verbose_name_plural = "Skripsi bimbingan"


@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    list_display = (
        "full_name",
        "nim_nidn",
        "role",
        "department",
        "email",
        "jumlah_bimbingan",
    )
    search_fields = ("full_name", "nim_nidn", "email")
    list_filter = ("role", "department")

    def get_readonly_fields(self, request, obj=None):
        # peran hanya ditentukan saat akun dibuat
        if obj is not None:
            return ("role",)
        return ()

    def get_inlines(self, request, obj):
        if obj is not None and obj.is_lecturer:
            return [SupervisedThesisInline]
        return []

    def jumlah_bimbingan(self, obj):
        if not obj.is_lecturer:
            return "-"
        return obj.supervised_theses.count()
    jumlah_bimbingan.short_description = "Jml. Bimbingan"


@admin.action(description="Lepas dosen pembimbing (kembalikan ke pool)")
def release_to_pool(modeladmin, request, queryset):
    # disimpan satu per satu supaya sinyal perubahan ikut terkirim
    updated = 0
    for thesis in queryset.filter(lecturer__isnull=False):
        thesis.lecturer = None
        thesis.save(update_fields=["lecturer", "updated_at"])
        updated += 1
    modeladmin.message_user(
        request, f"{updated} skripsi dikembalikan ke pool tanpa pembimbing."
    )


class PembimbingFilter(admin.SimpleListFilter):
    title = "Pembimbing"
    parameter_name = "pembimbing"

    def lookups(self, request, model_admin):
        return (
            ("BELUM", "Belum ada pembimbing"),
            ("SUDAH", "Sudah ada pembimbing"),
        )

    def queryset(self, request, queryset):
        if self.value() == "BELUM":
            return queryset.filter(lecturer__isnull=True)
        if self.value() == "SUDAH":
            return queryset.filter(lecturer__isnull=False)
        return queryset


@admin.register(Thesis)
class ThesisAdmin(admin.ModelAdmin):
    list_display = (
        "title",
        "student",
        "lecturer",
        "status",
        "progress",
        "stage",
        "created_at",
    )
    list_filter = ("status", PembimbingFilter, "lecturer")
    list_select_related = ("student", "lecturer")
    search_fields = (
        "title",
        "student__full_name",
        "student__nim_nidn",
        "lecturer__full_name",
    )
    autocomplete_fields = ("student", "lecturer")
    readonly_fields = ("created_at", "updated_at", "submitted_at", "approved_at")
    date_hierarchy = "created_at"

    actions = [release_to_pool]

    def get_queryset(self, request):
        return super().get_queryset(request).prefetch_related("submissions")

    def save_model(self, request, obj, form, change):
        # waktu pengajuan/persetujuan mengikuti perubahan status
        if "status" in form.changed_data:
            obj.mark_status(obj.status)
        super().save_model(request, obj, form, change)

    def progress(self, obj):
        return f"{summarize_thesis(obj).progress}%"
    progress.short_description = "Progress"

    def stage(self, obj):
        return summarize_thesis(obj).stage
    stage.short_description = "Tahap"
