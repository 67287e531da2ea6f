"""
apps.workspace.admin
"""
from django.contrib import admin

from .models import WorkspaceSettings


@admin.register(WorkspaceSettings)
class WorkspaceSettingsAdmin(admin.ModelAdmin):
    list_display = ["id", "name", "setup_complete", "super_admin_id", "updated_at"]
    readonly_fields = ["id", "super_admin_id", "created_at", "updated_at"]

    def has_add_permission(self, request):
        # Singleton: rows are created by the service layer on first read.
        return False
