"""Session state for fragsh."""

from fragsh.session.context import SessionContext

__all__ = ["SessionContext"]
