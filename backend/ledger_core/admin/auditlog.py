from django.contrib import admin

from ledger_core.models import AuditLog
from .readonly import ReadOnlyAdmin


@admin.register(AuditLog)
class AuditLogAdmin(ReadOnlyAdmin):
    list_display = ("created_at", "user", "action", "object_type", "object_id")
    list_filter = ("action", "object_type")
    search_fields = ("object_type", "object_id", "user__username")
    date_hierarchy = "created_at"
