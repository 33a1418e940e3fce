"""Session-based authentication and role checks."""

from pika_docs.auth.middleware import get_user, require_authenticated_user, require_role

__all__ = ["get_user", "require_authenticated_user", "require_role"]
