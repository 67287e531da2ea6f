"""
apps.environments.admin
"""
from django.contrib import admin

from .models import Environment, EnvironmentSecret


class EnvironmentSecretInline(admin.TabularInline):
    model = EnvironmentSecret
    extra = 0
    readonly_fields = ["key_value", "created_at"]


@admin.register(Environment)
class EnvironmentAdmin(admin.ModelAdmin):
    list_display = ["name", "slug", "is_prod", "created_at"]
    list_filter = ["is_prod"]
    search_fields = ["name", "slug"]
    readonly_fields = ["id", "created_at", "updated_at"]
    inlines = [EnvironmentSecretInline]

    def get_readonly_fields(self, request, obj=None):
        """``is_prod`` is only settable when the environment is created."""
        if obj is not None:
            return list(self.readonly_fields) + ["is_prod"]
        return self.readonly_fields
