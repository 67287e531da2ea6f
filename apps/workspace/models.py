"""
apps.workspace.models
~~~~~~~~~~~~~~~~~~~~~
WorkspaceSettings – the tenant-wide singleton record.
"""
import uuid

from django.db import models


class WorkspaceSettings(models.Model):
    """
    Singleton-style workspace record.

    At most one row is expected.  It is created lazily on first read by
    :func:`apps.workspace.services.get_workspace_settings`; that read-then-
    insert is not atomic, so two racing first reads may both insert.  Every
    reader picks the oldest row, which makes the extra row harmless.

    Fields
    ------
    name
        Optional display name of the workspace.
    setup_complete
        Flipped once the first user has been created through the setup flow.
    super_admin_id
        Primary key (as a string) of the user that owns the workspace.  Stored
        as plain text rather than a foreign key so that this app does not
        depend on the auth user table layout.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255, null=True, blank=True)
    setup_complete = models.BooleanField(default=False)
    super_admin_id = models.CharField(max_length=64, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["created_at"]
        verbose_name = "Workspace Settings"
        verbose_name_plural = "Workspace Settings"

    def __str__(self) -> str:
        return self.name or f"Workspace {self.id}"
