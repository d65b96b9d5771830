"""
Notificaciones internas para usuarios
"""
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Text

from gestion.core.database import Base, new_uuid, utcnow


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True, default=new_uuid)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    type = Column(String(50), nullable=False)
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    related_id = Column(String(36))
    related_type = Column(String(50))

    is_read = Column(Boolean, default=False, nullable=False, index=True)
    read_at = Column(DateTime)

    created_at = Column(DateTime, default=utcnow, index=True)
