from sqlalchemy import Column, String, DateTime, Date
from datetime import datetime

from soc_portal.core.database import Base
from soc_portal.models.admin import AccountStatus


USER_ROLE_TYPES = ("SOC", "OPS", "INTERN", "CTO")


class UserInfo(Base):
    """User identity store"""
    __tablename__ = "user_info"

    soc_portal_id = Column(String(20), primary_key=True)  # U01SOCP
    ngd_id = Column(String(20), unique=True, index=True, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=False)

    # Profile
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    short_name = Column(String(20), nullable=True, index=True)  # roster column key
    phone = Column(String(20), nullable=True)
    emergency_contact = Column(String(20), nullable=True)
    designation = Column(String(100), nullable=True)
    blood_group = Column(String(5), nullable=True)
    gender = Column(String(20), nullable=True)
    profile_photo_url = Column(String(500), nullable=True)

    date_of_birth = Column(Date, nullable=True)
    joining_date = Column(Date, nullable=True)
    resign_date = Column(Date, nullable=True)

    role_type = Column(String(20), nullable=False)  # SOC, OPS, INTERN, CTO
    status = Column(String(20), nullable=False, default=AccountStatus.ACTIVE.value)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def __repr__(self):
        return f"<UserInfo {self.soc_portal_id} {self.email}>"
