"""Key/value application state (data version, current session)."""
from sqlalchemy import Column, String
from sqlalchemy.sql import func

from flashcards.db.base import Base
from flashcards.db.types import JSONDocument, UTCDateTime

DATA_VERSION_KEY = "dataVersion"
CURRENT_SESSION_KEY = "currentSession"


class AppState(Base):
    __tablename__ = "app_state"

    id = Column(String(50), primary_key=True)
    value = Column(JSONDocument, nullable=False, default=dict)
    updated_at = Column(UTCDateTime, server_default=func.now(), onupdate=func.now())
