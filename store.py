"""
StudyStore: in-memory study data with whole-file persistence.

Every mutating call rewrites the data file before returning. Unknown ids are
silent no-ops; persistence failures propagate as PersistenceError and leave
the in-memory change in place.
"""

from __future__ import annotations
import logging
from datetime import date, datetime
from pathlib import Path
from typing import List, Optional
from pydantic import ValidationError
from models import (
    TIMESTAMP_FORMAT,
    NotificationPeriod,
    Reminder,
    StudyData,
    StudySession,
    Todo,
)
from storage import PersistenceReadError, load_json, save_json
import summary


logger = logging.getLogger(__name__)


class SystemClock:
    """Local wall clock."""

    def today(self) -> date:
        return date.today()

    def now(self) -> datetime:
        return datetime.now()


class StudyStore:
    def __init__(
        self,
        path: Path | str,
        data: StudyData | None = None,
        clock=None,
    ):
        self.path = Path(path)
        self.data = data if data is not None else StudyData()
        self.clock = clock or SystemClock()

    # persistence ---------------------------------------------------------

    @classmethod
    def load(cls, path: Path | str, clock=None) -> StudyStore:
        """
        Load the store from path. A missing file gives an empty store;
        an unreadable or malformed file raises PersistenceReadError.
        """
        if not Path(path).exists():
            logger.info("Starting with empty study data at %s", path)
            return cls(path, clock=clock)
        raw = load_json(path)
        try:
            data = StudyData.model_validate(raw)
        except ValidationError as e:
            logger.error("Malformed study data in %s", path)
            raise PersistenceReadError(f"Malformed study data in {path}: {e}", path) from e
        logger.debug(
            "Loaded %d sessions, %d todos, %d reminders from %s",
            len(data.sessions), len(data.todos), len(data.reminders), path,
        )
        return cls(path, data=data, clock=clock)

    def save(self) -> None:
        save_json(self.path, self.data.model_dump(mode="json"))

    @property
    def sessions(self) -> List[StudySession]:
        return self.data.sessions

    @property
    def todos(self) -> List[Todo]:
        return self.data.todos

    @property
    def reminders(self) -> List[Reminder]:
        return self.data.reminders

    def _timestamp(self) -> str:
        return self.clock.now().strftime(TIMESTAMP_FORMAT)

    # sessions ------------------------------------------------------------

    def add_session(self, date: str, minutes: float, description: Optional[str] = None) -> None:
        """
        Add study minutes for (date, description), merging into an existing
        session with the same pair. Non-positive minutes change nothing and
        do not save.
        """
        if minutes <= 0:
            return

        for session in self.data.sessions:
            if session.date == date and session.description == description:
                session.minutes += minutes
                break
        else:
            self.data.sessions.append(
                StudySession(date=date, minutes=minutes, description=description)
            )
        logger.debug("Logged %.1f minutes on %s (%s)", minutes, date, description)
        self.save()

    def get_today_minutes(self) -> float:
        return summary.minutes_on_day(self.data.sessions, self.clock.today())

    def get_total_minutes(self) -> float:
        return summary.total_minutes(self.data.sessions)

    def get_last_n_days_minutes(self, days: int) -> float:
        return summary.minutes_in_last_n_days(self.data.sessions, self.clock.today(), days)

    # todos ---------------------------------------------------------------

    def get_next_todo_id(self) -> int:
        return max((t.id for t in self.data.todos), default=0) + 1

    def find_todo(self, id: int) -> Optional[Todo]:
        return next((t for t in self.data.todos if t.id == id), None)

    def add_todo(self, text: str) -> None:
        todo = Todo(
            id=self.get_next_todo_id(),
            text=text,
            completed=False,
            created_at=self._timestamp(),
        )
        self.data.todos.append(todo)
        logger.debug("Added todo %d", todo.id)
        self.save()

    def toggle_todo(self, id: int) -> bool:
        """
        Flip completion and return the new value. Returns False when no todo
        matches; use find_todo to tell that apart from "now open".
        """
        completed = False
        todo = self.find_todo(id)
        if todo is not None:
            todo.completed = not todo.completed
            completed = todo.completed
        self.save()
        return completed

    def update_todo_text(self, id: int, text: str) -> None:
        todo = self.find_todo(id)
        if todo is None:
            return
        todo.text = text
        self.save()

    def delete_todo(self, id: int) -> None:
        self.data.todos = [t for t in self.data.todos if t.id != id]
        self.save()

    def clear_todos(self) -> None:
        self.data.todos = []
        self.save()

    def clear_completed_todos(self) -> None:
        self.data.todos = [t for t in self.data.todos if not t.completed]
        self.save()

    # reminders -----------------------------------------------------------

    def get_next_reminder_id(self) -> int:
        return max((r.id for r in self.data.reminders), default=0) + 1

    def find_reminder(self, id: int) -> Optional[Reminder]:
        return next((r for r in self.data.reminders if r.id == id), None)

    def add_reminder(
        self,
        title: str,
        description: Optional[str],
        due_date: str,
        notification_periods: List[NotificationPeriod],
    ) -> None:
        reminder = Reminder(
            id=self.get_next_reminder_id(),
            title=title,
            description=description,
            due_date=due_date,
            created_at=self._timestamp(),
            notification_periods=list(notification_periods),
            is_completed=False,
        )
        self.data.reminders.append(reminder)
        logger.debug("Added reminder %d due %s", reminder.id, due_date)
        self.save()

    def update_reminder(
        self,
        id: int,
        title: str,
        description: Optional[str],
        due_date: str,
        notification_periods: List[NotificationPeriod],
    ) -> None:
        reminder = self.find_reminder(id)
        if reminder is None:
            return
        reminder.title = title
        reminder.description = description
        reminder.due_date = due_date
        reminder.notification_periods = list(notification_periods)
        self.save()

    def toggle_reminder(self, id: int) -> bool:
        completed = False
        reminder = self.find_reminder(id)
        if reminder is not None:
            reminder.is_completed = not reminder.is_completed
            completed = reminder.is_completed
        self.save()
        return completed

    def delete_reminder(self, id: int) -> None:
        self.data.reminders = [r for r in self.data.reminders if r.id != id]
        self.save()

    def clear_reminders(self) -> None:
        self.data.reminders = []
        self.save()

    def clear_completed_reminders(self) -> None:
        self.data.reminders = [r for r in self.data.reminders if not r.is_completed]
        self.save()
