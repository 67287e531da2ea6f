"""
apps.variants.admin
~~~~~~~~~~~~~~~~~~~
Django admin registrations for variants.  Versions are read-only: they are
immutable once created.
"""
from django.contrib import admin

from .models import ConfigVariant, Variant, VariantVersion


class VariantVersionInline(admin.TabularInline):
    model = VariantVersion
    extra = 0
    can_delete = False
    readonly_fields = ["version", "provider", "model_name", "json_data", "created_at"]
    ordering = ["-version"]

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Variant)
class VariantAdmin(admin.ModelAdmin):
    list_display = ["name", "id", "version_counter", "created_at"]
    search_fields = ["name"]
    readonly_fields = ["id", "version_counter", "created_at", "updated_at"]
    inlines = [VariantVersionInline]


@admin.register(VariantVersion)
class VariantVersionAdmin(admin.ModelAdmin):
    list_display = ["variant", "version", "provider", "model_name", "created_at"]
    list_filter = ["provider"]
    search_fields = ["variant__name", "model_name"]
    ordering = ["variant", "-version"]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False


@admin.register(ConfigVariant)
class ConfigVariantAdmin(admin.ModelAdmin):
    list_display = ["config", "variant", "created_at"]
    search_fields = ["config__name", "variant__name"]
