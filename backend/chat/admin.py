from django.contrib import admin

from .models import Message


@admin.register(Message)
class MessageAdmin(admin.ModelAdmin):
    list_display = ("created_at", "thesis", "sender", "short_content")
    list_filter = ("sender__role",)
    search_fields = ("content", "sender__full_name", "thesis__title")
    date_hierarchy = "created_at"
    readonly_fields = ("thesis", "sender", "content", "created_at")

    def short_content(self, obj):
        return obj.content[:60]
    short_content.short_description = "Pesan"

    # percakapan hanya bisa ditambah dari portal, tidak diubah atau dihapus
    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
