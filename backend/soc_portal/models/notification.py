from sqlalchemy import Column, String, DateTime, Text, Integer
from datetime import datetime

from soc_portal.core.database import Base


class NotificationStatus:
    UNREAD = "Unread"
    READ = "Read"


class AdminNotification(Base):
    """Notifications shown to every admin"""
    __tablename__ = "admin_notification_details"

    serial = Column(Integer, primary_key=True, autoincrement=True)
    notification_id = Column(String(20), unique=True, nullable=False)  # AN0001SOCP
    title = Column(Text, nullable=False)
    status = Column(String(10), default=NotificationStatus.UNREAD, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<AdminNotification {self.notification_id}>"


class UserNotification(Base):
    """Notifications owned by a single user"""
    __tablename__ = "user_notification_details"

    serial = Column(Integer, primary_key=True, autoincrement=True)
    notification_id = Column(String(20), unique=True, nullable=False)  # UN0001SOCP
    soc_portal_id = Column(String(20), nullable=False, index=True)
    title = Column(Text, nullable=False)
    status = Column(String(10), default=NotificationStatus.UNREAD, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<UserNotification {self.notification_id} for {self.soc_portal_id}>"
