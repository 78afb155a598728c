"""SQLAlchemy model mirroring the JSON popup array."""
from __future__ import annotations

from sqlalchemy import JSON, Column, Integer, String

from .session import Base


class PopupRecord(Base):
    __tablename__ = "popups"

    # insertion order of the JSON array
    position = Column(Integer, primary_key=True, autoincrement=True)
    popup_key = Column(String(255), index=True, nullable=False)
    payload = Column(JSON, nullable=False)
