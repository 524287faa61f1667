from dataclasses import dataclass
from typing import Union

NotificationId = Union[str, int]


@dataclass
class Notification:
    id: NotificationId
    title: str
    message: str
    type: str               # 'info' | 'warning' | 'success' | 'error'
    timestamp: str          # ISO-8601, UTC
    is_read: bool = False

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "message": self.message,
            "type": self.type,
            "timestamp": self.timestamp,
            "isRead": self.is_read,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Notification":
        return cls(
            id=data["id"],
            title=str(data.get("title", "")),
            message=str(data.get("message", "")),
            type=str(data.get("type") or "info"),
            timestamp=str(data.get("timestamp", "")),
            is_read=bool(data.get("isRead", data.get("is_read", False))),
        )
