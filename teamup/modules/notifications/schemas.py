from enum import Enum
from pydantic import BaseModel


class NotificationType(str, Enum):
    EMAIL = "email"


class NotificationMessage(BaseModel):
    """Queue payload consumed by the notification worker. Never persisted."""
    type: NotificationType = NotificationType.EMAIL
    to: str
    subject: str
    message: str
