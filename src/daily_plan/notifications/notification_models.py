# src/daily_plan/notifications/notification_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Flag, auto

NOTIFICATION_TITLE = "Task Starting Now!"


class PresentationOptions(Flag):
    """How a notification arriving while the app is active should be shown."""

    NONE = 0
    BANNER = auto()
    SOUND = auto()
    BADGE = auto()

    @classmethod
    def full(cls) -> PresentationOptions:
        return cls.BANNER | cls.SOUND | cls.BADGE


@dataclass(slots=True, frozen=True)
class TriggerComponents:
    """Calendar trigger: fires once at year/month/day hour:minute (no seconds)."""

    year: int
    month: int
    day: int
    hour: int
    minute: int

    @classmethod
    def from_datetime(cls, dt: datetime) -> TriggerComponents:
        return cls(year=dt.year, month=dt.month, day=dt.day, hour=dt.hour, minute=dt.minute)

    def to_datetime(self) -> datetime:
        return datetime(self.year, self.month, self.day, self.hour, self.minute)


@dataclass(slots=True, frozen=True)
class NotificationRequest:
    identifier: str
    title: str
    body: str
    trigger: TriggerComponents
    sound: bool = True
    badge: int = 1

    @property
    def fire_at(self) -> datetime:
        return self.trigger.to_datetime()
