from sqlalchemy import Boolean, Column, String, DateTime, ForeignKey, Index, Text
from datetime import datetime, timezone
import uuid
from keeper.db.base import Base


def _utcnow():
    return datetime.now(timezone.utc)


class Secret(Base):
    __tablename__ = "user_data"
    __table_args__ = (Index("ix_user_data_owner_type", "owner_id", "secret_type"),)

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    owner_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    secret_type = Column(String(32), nullable=False)
    ciphertext = Column(Text, nullable=False)  # base64 AES-GCM, never plaintext
    meta = Column(Text, nullable=False, default="")
    is_deleted = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)
