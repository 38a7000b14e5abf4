"""Library backend: authentication and session core.

Expose :func:`biblio.factory.create_app` so callers can ``from biblio import
create_app``.
"""

from __future__ import annotations

from .factory import create_app

__all__ = ["create_app"]
