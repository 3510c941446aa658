"""
Tests for the PDF study report.
"""

from datetime import date
from models import NotificationPeriod, Reminder, StudySession, Todo
from pdf_export import study_report_to_pdf


def test_report_is_pdf():
    sessions = [
        StudySession(date="2024-03-15", minutes=30.0),
        StudySession(date="2024-03-14", minutes=45.0, description="chemistry"),
        StudySession(date="bad date", minutes=5.0),
    ]
    todos = [
        Todo(id=1, text="Revise notes", created_at="2024-03-14 10:00:00"),
        Todo(id=2, text="Done item", completed=True, created_at="2024-03-14 10:00:00"),
    ]
    reminders = [
        Reminder(
            id=1,
            title="Exam",
            due_date="2024-03-20",
            created_at="2024-03-01 00:00:00",
            notification_periods=[NotificationPeriod.one_day()],
        )
    ]
    pdf = study_report_to_pdf(sessions, todos, reminders, date(2024, 3, 15))
    assert pdf.startswith(b"%PDF")


def test_empty_report_is_pdf():
    pdf = study_report_to_pdf([], [], [], date(2024, 3, 15), days=0)
    assert pdf.startswith(b"%PDF")
