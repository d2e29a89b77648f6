from pydantic import BaseModel


class NotificationOut(BaseModel):
    id: str
    title: str
    time: str
    read: bool
    icon: str
