"""SQL backend for popups: engine/session helpers and the ``popups`` table."""

from .models import PopupRecord
from .session import Base, get_engine, get_session

__all__ = ["Base", "PopupRecord", "get_engine", "get_session"]
