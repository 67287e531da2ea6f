"""
common.lookups
~~~~~~~~~~~~~~
Primary-key lookups that fail with :class:`~common.exceptions.NotFoundError`.
"""
from __future__ import annotations

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db.models import Model, QuerySet

from common.exceptions import NotFoundError


def get_or_not_found(queryset: QuerySet | type[Model], pk, label: str):
    """
    Return the row with primary key *pk*.

    Malformed keys (e.g. a non-UUID string for a UUID primary key) are
    treated the same as missing rows.

    Raises:
        NotFoundError: ``"<label> '<pk>' not found."``
    """
    if not isinstance(queryset, QuerySet):
        queryset = queryset._default_manager.all()
    try:
        return queryset.get(pk=pk)
    except (queryset.model.DoesNotExist, ValueError, TypeError, DjangoValidationError):
        raise NotFoundError(f"{label} '{pk}' not found.")
