from sqlalchemy import Column, String, DateTime, Integer, Boolean
from datetime import datetime

from soc_portal.core.database import Base


class LoginTrackerMixin:
    soc_portal_id = Column(String(20), primary_key=True)
    last_login_time = Column(DateTime, nullable=True)
    last_logout_time = Column(DateTime, nullable=True)
    total_login_count = Column(Integer, default=0, nullable=False)
    current_login_status = Column(String(20), default="Idle", nullable=False)  # Active / Idle
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class AdminLoginTracker(LoginTrackerMixin, Base):
    __tablename__ = "admin_login_tracker"

    def __repr__(self):
        return f"<AdminLoginTracker {self.soc_portal_id} {self.current_login_status}>"


class UserLoginTracker(LoginTrackerMixin, Base):
    __tablename__ = "user_login_tracker"

    welcome_shown = Column(Boolean, default=False, nullable=False)

    def __repr__(self):
        return f"<UserLoginTracker {self.soc_portal_id} {self.current_login_status}>"
