"""
apps.providers.admin
"""
from django.contrib import admin

from .models import ProviderConfig


@admin.register(ProviderConfig)
class ProviderConfigAdmin(admin.ModelAdmin):
    list_display = ["slug", "provider_id", "name", "enabled", "created_at"]
    list_filter = ["enabled", "provider_id"]
    search_fields = ["slug", "provider_id", "name"]
    readonly_fields = ["id", "created_at", "updated_at"]
