"""
Tests for reminder calendar export and import.
"""

from icalendar import Calendar
from models import NotificationPeriod, Reminder
from calendar_export import reminders_to_ics
from calendar_import import parse_ics_bytes


def _reminder(id, title, due, periods=(), done=False, description=None):
    return Reminder(
        id=id,
        title=title,
        description=description,
        due_date=due,
        created_at="2024-03-01 12:00:00",
        notification_periods=list(periods),
        is_completed=done,
    )


class TestExport:

    def test_open_reminders_become_events(self):
        reminders = [
            _reminder(1, "Exam", "2024-04-01", [NotificationPeriod.one_day(), NotificationPeriod.one_week()]),
            _reminder(2, "Done already", "2024-04-02", done=True),
        ]
        data, warnings = reminders_to_ics(reminders)
        cal = Calendar.from_ical(data)
        events = [c for c in cal.walk() if c.name == "VEVENT"]
        assert warnings == []
        assert len(events) == 1
        assert str(events[0].get("SUMMARY")) == "Exam"
        alarms = [c for c in events[0].subcomponents if c.name == "VALARM"]
        assert len(alarms) == 2

    def test_unparseable_due_date_warns(self):
        data, warnings = reminders_to_ics([_reminder(1, "Essay", "next week")])
        assert len(warnings) == 1
        assert "Essay" in warnings[0]
        cal = Calendar.from_ical(data)
        assert [c for c in cal.walk() if c.name == "VEVENT"] == []

    def test_duplicate_periods_share_one_alarm(self):
        data, _ = reminders_to_ics([
            _reminder(1, "Exam", "2024-04-01", [NotificationPeriod.three_days(), NotificationPeriod.custom(3)])
        ])
        event = next(c for c in Calendar.from_ical(data).walk() if c.name == "VEVENT")
        assert len([c for c in event.subcomponents if c.name == "VALARM"]) == 1


class TestImport:

    def test_export_then_import_recovers_drafts(self):
        reminders = [
            _reminder(2, "Essay", "2024-04-10", [NotificationPeriod.custom(5)], description="2000 words"),
            _reminder(1, "Exam", "2024-04-01", [NotificationPeriod.one_week(), NotificationPeriod.one_day()]),
        ]
        data, _ = reminders_to_ics(reminders)
        drafts = parse_ics_bytes(data)
        assert [d.title for d in drafts] == ["Exam", "Essay"]
        assert drafts[0].due_date == "2024-04-01"
        assert drafts[0].description is None
        assert drafts[0].notification_periods == [NotificationPeriod.one_day(), NotificationPeriod.one_week()]
        assert drafts[1].description == "2000 words"
        assert drafts[1].notification_periods == [NotificationPeriod.custom(5)]

    def test_timed_event_without_alarms(self):
        data = (
            b"BEGIN:VCALENDAR\r\nVERSION:2.0\r\nPRODID:-//test//EN\r\n"
            b"BEGIN:VEVENT\r\nUID:1@test\r\nSUMMARY:Lab\r\n"
            b"DTSTART:20240502T140000\r\nDTEND:20240502T160000\r\n"
            b"END:VEVENT\r\nEND:VCALENDAR\r\n"
        )
        drafts = parse_ics_bytes(data)
        assert len(drafts) == 1
        assert drafts[0].title == "Lab"
        assert drafts[0].due_date == "2024-05-02"
        assert drafts[0].notification_periods == []

    def test_partial_day_trigger_rounds_up(self):
        data = (
            b"BEGIN:VCALENDAR\r\nVERSION:2.0\r\nPRODID:-//test//EN\r\n"
            b"BEGIN:VEVENT\r\nUID:1@test\r\nSUMMARY:Quiz\r\nDTSTART;VALUE=DATE:20240510\r\n"
            b"BEGIN:VALARM\r\nACTION:DISPLAY\r\nDESCRIPTION:Quiz\r\nTRIGGER:-PT12H\r\nEND:VALARM\r\n"
            b"END:VEVENT\r\nEND:VCALENDAR\r\n"
        )
        drafts = parse_ics_bytes(data)
        assert drafts[0].notification_periods == [NotificationPeriod.one_day()]
