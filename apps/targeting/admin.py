"""
apps.targeting.admin
~~~~~~~~~~~~~~~~~~~~
Django admin registration for targeting rules.
"""
from django.contrib import admin

from .models import TargetingRule


@admin.register(TargetingRule)
class TargetingRuleAdmin(admin.ModelAdmin):
    list_display = ["config", "environment", "config_variant", "priority", "weight", "enabled", "created_at"]
    list_filter = ["enabled", "environment"]
    search_fields = ["config__name", "config__slug", "environment__slug"]
    raw_id_fields = ["config_variant", "variant_version"]
    readonly_fields = ["id", "created_at", "updated_at"]
