"""
apps.workspace.state
~~~~~~~~~~~~~~~~~~~~
Process-wide cache of the workspace super-admin id.

The permission check on every ``/v1/`` request needs the super-admin id;
reading it from the database each time is wasteful, so it is cached here.

Lifecycle
---------
- **init**: lazy.  The first :meth:`SuperAdminCache.get` loads the value.
- **refresh**: entries older than ``ttl`` seconds are reloaded, so a value
  written by another process is picked up without any explicit call.
- **invalidate**: :func:`apps.workspace.services.set_super_admin_id` calls
  :meth:`SuperAdminCache.invalidate` after writing, so the writing process
  sees the new admin immediately.
"""
from __future__ import annotations

import threading
import time
from typing import Callable

from django.conf import settings

_UNSET = object()


class SuperAdminCache:
    """Thread-safe, TTL-bounded holder for a single value."""

    def __init__(self, loader: Callable[[], str | None], ttl: float | None = None) -> None:
        self._loader = loader
        self._ttl = ttl
        self._lock = threading.Lock()
        self._value: object = _UNSET
        self._loaded_at = 0.0

    @property
    def ttl(self) -> float:
        if self._ttl is not None:
            return self._ttl
        return float(getattr(settings, "LLMOPS_SUPER_ADMIN_CACHE_TTL", 30))

    def get(self) -> str | None:
        with self._lock:
            expired = time.monotonic() - self._loaded_at >= self.ttl
            if self._value is _UNSET or expired:
                self._value = self._loader()
                self._loaded_at = time.monotonic()
            return self._value  # type: ignore[return-value]

    def invalidate(self) -> None:
        with self._lock:
            self._value = _UNSET
            self._loaded_at = 0.0


def _load_super_admin_id() -> str | None:
    # Imported lazily: this module is imported by common.permissions at
    # URLconf load time, before the app registry is necessarily ready.
    from apps.workspace import services  # noqa: PLC0415

    return services.get_super_admin_id()


super_admin_cache = SuperAdminCache(_load_super_admin_id)
