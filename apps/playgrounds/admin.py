"""
apps.playgrounds.admin
"""
from django.contrib import admin

from .models import Playground


@admin.register(Playground)
class PlaygroundAdmin(admin.ModelAdmin):
    list_display = ["name", "id", "created_at", "updated_at"]
    search_fields = ["name", "description"]
    readonly_fields = ["id", "created_at", "updated_at"]
