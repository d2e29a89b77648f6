from sqlalchemy import Column, String, DateTime, Date, Text, Integer, UniqueConstraint
from datetime import datetime

from soc_portal.core.database import Base


class RosterEntry(Base):
    """One member's shift on one day"""
    __tablename__ = "roster_schedule"
    __table_args__ = (
        UniqueConstraint("roster_date", "short_name", name="uq_roster_date_member"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    roster_date = Column(Date, nullable=False, index=True)
    short_name = Column(String(20), nullable=False, index=True)
    shift = Column(String(20), nullable=True)  # MORNING, EVENING, NIGHT, OFF, ...

    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<RosterEntry {self.roster_date} {self.short_name}={self.shift}>"


class RosterScheduleNote(Base):
    """Record of a shift exchange between two members"""
    __tablename__ = "roster_schedule_note"

    id = Column(Integer, primary_key=True, autoincrement=True)
    roster_date = Column(Date, nullable=False, index=True)
    requested_by = Column(String(20), nullable=False)  # soc_portal_id
    requester_short_name = Column(String(20), nullable=False)
    assigned_to = Column(String(20), nullable=False)  # short name of exchange partner
    requester_old_shift = Column(String(20), nullable=True)
    requester_new_shift = Column(String(20), nullable=True)
    reason = Column(Text, nullable=False)
    communicated_person = Column(String(100), nullable=False)
    handover_task = Column(Text, nullable=False, default="No Dependency")

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<RosterScheduleNote {self.roster_date} {self.requester_short_name}<->{self.assigned_to}>"
