from sqlalchemy import Column, String, Boolean, Integer, DateTime
from datetime import datetime

from soc_portal.core.database import Base


class RolePermission(Base):
    """
    Menu path permission.

    Rows with soc_portal_id NULL are the role default; a row carrying a
    soc_portal_id overrides the default for that user.
    """
    __tablename__ = "role_permissions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    role_type = Column(String(20), nullable=False, index=True)
    soc_portal_id = Column(String(20), nullable=True, index=True)
    menu_path = Column(String(255), nullable=False)
    menu_label = Column(String(100), nullable=True)
    parent_menu = Column(String(255), nullable=True)
    is_allowed = Column(Boolean, default=True, nullable=False)

    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<RolePermission {self.role_type}:{self.menu_path}={self.is_allowed}>"
