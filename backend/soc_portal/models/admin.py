from sqlalchemy import Column, String, DateTime
from datetime import datetime
import enum

from soc_portal.core.database import Base


class AccountStatus(str, enum.Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"
    RESIGNED = "Resigned"


class AdminInfo(Base):
    """Admin identity store"""
    __tablename__ = "admin_info"

    soc_portal_id = Column(String(20), primary_key=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=False)  # bcrypt hash; legacy rows may be plaintext

    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    short_name = Column(String(20), nullable=True)

    role_type = Column(String(50), nullable=False, default="Admin")  # e.g. Super Admin, Admin
    status = Column(String(20), nullable=False, default=AccountStatus.ACTIVE.value)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<AdminInfo {self.soc_portal_id} {self.email}>"
