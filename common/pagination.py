"""
common.pagination
~~~~~~~~~~~~~~~~~
``?limit=&offset=`` parsing shared by the list endpoints.
"""
from common.exceptions import ValidationError

DEFAULT_LIMIT = 100
MAX_LIMIT = 1000


def _parse_int(raw: str, name: str, minimum: int) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        value = None
    if value is None or value < minimum:
        raise ValidationError(
            f"Invalid '{name}' query parameter.",
            errors=[{"field": name, "message": f"Must be an integer >= {minimum}."}],
        )
    return value


def get_limit_offset(request) -> tuple[int, int]:
    """Return ``(limit, offset)`` from the query string, with defaults."""
    params = request.query_params
    limit = DEFAULT_LIMIT
    offset = 0
    if params.get("limit") is not None:
        limit = min(_parse_int(params["limit"], "limit", 1), MAX_LIMIT)
    if params.get("offset") is not None:
        offset = _parse_int(params["offset"], "offset", 0)
    return limit, offset
