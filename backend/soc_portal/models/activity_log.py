from sqlalchemy import Column, String, DateTime, Text, Integer
from datetime import datetime

from soc_portal.core.database import Base


class ActivityLog(Base):
    """Append-only record of actions performed by portal identities"""
    __tablename__ = "user_activity_log"

    serial = Column(Integer, primary_key=True, autoincrement=True)
    soc_portal_id = Column(String(20), nullable=False, index=True)

    action = Column(String(50), nullable=False, index=True)  # LOGIN_SUCCESS, LOGOUT, SHIFT_EXCHANGE, ...
    description = Column(Text, nullable=True)

    # Request metadata
    ip_address = Column(String(45), nullable=True)
    device_info = Column(Text, nullable=True)
    eid = Column(String(20), nullable=True)
    sid = Column(String(64), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    def __repr__(self):
        return f"<ActivityLog {self.action} by {self.soc_portal_id}>"


class AuthAuditLog(Base):
    """One row per auth gate decision"""
    __tablename__ = "auth_audit_log"

    id = Column(Integer, primary_key=True, autoincrement=True)
    event = Column(String(50), nullable=False, index=True)  # check_auth, login, logout, unauthorized_access
    outcome = Column(String(50), nullable=False)  # success, missing_credentials, expired, ...
    severity = Column(String(10), nullable=False, default="LOW")

    email = Column(String(255), nullable=True, index=True)
    soc_portal_id = Column(String(20), nullable=True)
    session_id = Column(String(64), nullable=True)
    eid = Column(String(20), nullable=True)
    ip_address = Column(String(45), nullable=True)
    message = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    def __repr__(self):
        return f"<AuthAuditLog {self.event}:{self.outcome} {self.email}>"
