from pydantic import BaseModel
from typing import Optional


class ShiftExchangeRequest(BaseModel):
    """Fields are optional here so missing ones get a 400 with a readable message"""
    date: Optional[str] = None
    assignedTo: Optional[str] = None
    reason: Optional[str] = None
    communicatedPerson: Optional[str] = None
    handoverTask: Optional[str] = None
