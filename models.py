from __future__ import annotations
from enum import Enum
from typing import Any, List, Optional
from pydantic import BaseModel, ConfigDict, Field, model_serializer, model_validator


DAY_FORMAT = "%Y-%m-%d"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


class PeriodKind(str, Enum):
    ONE_DAY = "OneDay"
    THREE_DAYS = "ThreeDays"
    ONE_WEEK = "OneWeek"
    CUSTOM = "Custom"


PRESET_DAYS = {
    PeriodKind.ONE_DAY: 1,
    PeriodKind.THREE_DAYS: 3,
    PeriodKind.ONE_WEEK: 7,
}


class NotificationPeriod(BaseModel):
    """
    Lead time before a reminder's due date.
    Stored as "OneDay" / "ThreeDays" / "OneWeek" or {"Custom": n}.
    """
    model_config = ConfigDict(frozen=True)

    kind: PeriodKind
    days: Optional[int] = Field(default=None, ge=0)

    @model_validator(mode="before")
    @classmethod
    def _from_tagged(cls, value: Any) -> Any:
        if isinstance(value, str):
            return {"kind": value}
        if isinstance(value, dict) and set(value) == {"Custom"}:
            return {"kind": PeriodKind.CUSTOM, "days": value["Custom"]}
        return value

    @model_validator(mode="after")
    def _check_days(self) -> NotificationPeriod:
        if self.kind is PeriodKind.CUSTOM and self.days is None:
            raise ValueError("Custom notification period needs a day count.")
        if self.kind is not PeriodKind.CUSTOM and self.days is not None:
            raise ValueError(f"{self.kind.value} does not take a day count.")
        return self

    @model_serializer
    def _to_tagged(self) -> Any:
        if self.kind is PeriodKind.CUSTOM:
            return {"Custom": self.days}
        return self.kind.value

    @property
    def days_before(self) -> int:
        if self.kind is PeriodKind.CUSTOM:
            return int(self.days or 0)
        return PRESET_DAYS[self.kind]

    @property
    def label(self) -> str:
        if self.kind is PeriodKind.ONE_DAY:
            return "1 day before"
        if self.kind is PeriodKind.THREE_DAYS:
            return "3 days before"
        if self.kind is PeriodKind.ONE_WEEK:
            return "1 week before"
        return f"{self.days} days before"

    @classmethod
    def one_day(cls) -> NotificationPeriod:
        return cls(kind=PeriodKind.ONE_DAY)

    @classmethod
    def three_days(cls) -> NotificationPeriod:
        return cls(kind=PeriodKind.THREE_DAYS)

    @classmethod
    def one_week(cls) -> NotificationPeriod:
        return cls(kind=PeriodKind.ONE_WEEK)

    @classmethod
    def custom(cls, days: int) -> NotificationPeriod:
        return cls(kind=PeriodKind.CUSTOM, days=days)


class StudySession(BaseModel):
    date: str  # YYYY-MM-DD, kept as text so bad values survive a round trip
    minutes: float = Field(ge=0)
    description: Optional[str] = None


class Todo(BaseModel):
    id: int = Field(gt=0)
    text: str
    completed: bool = False
    created_at: str


class Reminder(BaseModel):
    id: int = Field(gt=0)
    title: str
    description: Optional[str] = None
    due_date: str
    created_at: str
    notification_periods: List[NotificationPeriod] = Field(default_factory=list)
    is_completed: bool = False


class StudyData(BaseModel):
    model_config = ConfigDict(extra="forbid")

    sessions: List[StudySession] = Field(default_factory=list)
    todos: List[Todo] = Field(default_factory=list)
    reminders: List[Reminder] = Field(default_factory=list)

    @model_validator(mode="after")
    def _unique_ids(self) -> StudyData:
        for name, items in (("todo", self.todos), ("reminder", self.reminders)):
            ids = [item.id for item in items]
            if len(ids) != len(set(ids)):
                raise ValueError(f"Duplicate {name} ids in stored data.")
        return self


def format_periods(periods: List[NotificationPeriod]) -> str:
    """Render periods as editable text, e.g. "OneWeek, OneDay, 5"."""
    return ", ".join(
        str(p.days) if p.kind is PeriodKind.CUSTOM else p.kind.value for p in periods
    )


def parse_periods(text: str) -> List[NotificationPeriod]:
    """
    Parse the format_periods text back into periods, keeping order and duplicates.
    Tags are case-insensitive; a bare number is a custom day count.
    """
    tags = {k.value.lower(): k for k in PeriodKind if k is not PeriodKind.CUSTOM}
    periods: List[NotificationPeriod] = []
    for token in text.split(","):
        token = token.strip()
        if not token:
            continue
        if token.isdigit():
            periods.append(NotificationPeriod.custom(int(token)))
        elif token.lower() in tags:
            periods.append(NotificationPeriod(kind=tags[token.lower()]))
        else:
            raise ValueError(f"Unknown notification period: {token!r}")
    return periods
