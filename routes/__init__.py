"""JSON API routes."""

from __future__ import annotations

from .base import api_bp

_routes_registered = False


def register_routes() -> None:
    """Import route modules so the blueprint picks up their handlers."""
    global _routes_registered
    if _routes_registered:
        return
    _routes_registered = True

    from . import auth  # noqa: F401
    from . import games  # noqa: F401
    from . import meta  # noqa: F401
    from . import play_sessions  # noqa: F401
    from . import results  # noqa: F401
    from . import scoreboards  # noqa: F401
    from . import users  # noqa: F401


__all__ = ["api_bp", "register_routes"]
