"""
apps.requests.admin
"""
from django.contrib import admin

from .models import LLMRequest


@admin.register(LLMRequest)
class LLMRequestAdmin(admin.ModelAdmin):
    list_display = ["request_id", "provider", "model", "status_code", "cost", "latency_ms", "created_at"]
    list_filter = ["provider", "is_streaming"]
    search_fields = ["request_id", "model", "endpoint"]
    readonly_fields = ["id", "created_at", "updated_at"]
    ordering = ["-created_at"]
