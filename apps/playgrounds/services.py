"""
apps.playgrounds.services
~~~~~~~~~~~~~~~~~~~~~~~~~
All business logic for playgrounds.  Views must call only these functions.
"""
from __future__ import annotations

from collections.abc import Mapping

import structlog

from common.exceptions import ValidationError
from common.lookups import get_or_not_found
from .models import Playground

logger = structlog.get_logger(__name__)

_UNCHANGED = object()


def _require_name(name: str) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationError(
            "Playground name must not be empty.",
            errors=[{"field": "name", "message": "This field may not be blank."}],
        )
    return name


def _require_state(state) -> dict:
    if not isinstance(state, Mapping):
        raise ValidationError(
            "Invalid playground state.",
            errors=[{"field": "state", "message": "Must be a JSON object."}],
        )
    return dict(state)


def create_playground(*, name: str, description: str | None = None, state=None) -> Playground:
    """Create a playground; a missing *state* is stored as ``{}``."""
    playground = Playground.objects.create(
        name=_require_name(name),
        description=description,
        state=_require_state(state if state is not None else {}),
    )
    logger.info("playground_created", playground_id=str(playground.id))
    return playground


def list_playgrounds(*, limit: int = 100, offset: int = 0) -> list[Playground]:
    """Most recently created first."""
    return list(Playground.objects.all()[offset:offset + limit])


def get_playground(playground_id) -> Playground:
    return get_or_not_found(Playground, playground_id, "Playground")


def update_playground(
    playground_id,
    *,
    name=_UNCHANGED,
    description=_UNCHANGED,
    state=_UNCHANGED,
) -> Playground:
    """Patch a playground; only the keyword arguments passed are applied."""
    playground = get_playground(playground_id)
    if name is not _UNCHANGED:
        playground.name = _require_name(name)
    if description is not _UNCHANGED:
        playground.description = description
    if state is not _UNCHANGED:
        playground.state = _require_state(state)
    playground.save()
    logger.info("playground_updated", playground_id=str(playground.id))
    return playground


def delete_playground(playground_id) -> None:
    get_playground(playground_id).delete()
    logger.info("playground_deleted", playground_id=str(playground_id))
