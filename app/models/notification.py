"""
Notification Model.
One row per message shown to a user; workflows (leave decisions, payroll)
write here and the UI polls the unread count.
"""
from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.database import Base


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    type = Column(String(50), default="info", nullable=False)  # info | leave_status | payroll
    link = Column(String(255), nullable=True)  # page the UI opens on click
    payload = Column(JSON, nullable=True)  # e.g. {"leaveId": 3, "action": "approved"}
    is_read = Column(Boolean, default=False, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", back_populates="notifications")

    def __repr__(self):
        return f"<Notification {self.id} to user {self.user_id} read={self.is_read}>"
