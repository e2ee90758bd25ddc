"""
src/tools/office.py — reminder and email tools for the OfficeAutomation worker

Provides:
- ReminderService.set_reminder(task, due_date, reminder_date=None)
- EmailService.send_email(subject, body)
- OfficeTools: SetReminder / SendEmail / SendFallbackNotification handlers

The services only describe and log what was done. Real backends are plugged in by
passing other service objects to OfficeTools.
"""


import logging
from datetime import datetime
from typing import Optional

from tools import results
from tools.base import Tool, Toolbox, tool_spec


LOGGER = logging.getLogger(__name__)


# --- Services ------------------------------------------------------------------
class ReminderService:

    def set_reminder(self, task: str, due_date: datetime, reminder_date: Optional[datetime] = None) -> str:

        msg = f"Reminder set for task '{task}' due at {due_date.isoformat()}."

        if reminder_date is not None:
            msg += f" Reminder will trigger at {reminder_date.isoformat()}."

        LOGGER.info(msg)

        return msg


class EmailService:

    def send_email(self, subject: str, body: str) -> str:

        LOGGER.info("Email sent: %s", subject)

        return f"Email sent with subject '{subject}' and body '{body}'"


# --- Helpers -------------------------------------------------------------------
def _parse_date(value: Optional[str], field: str) -> Optional[datetime]:
    """Accept ISO dates/datetimes ('2025-10-10', '2025-10-10T09:00:00Z')."""

    if value is None or not str(value).strip():
        return None

    text = str(value).strip()

    if text.endswith("Z"):
        text = text[:-1] + "+00:00"

    try:
        return datetime.fromisoformat(text)
    except ValueError as e:
        raise ValueError(f"Invalid {field} '{value}'. Use ISO 8601.") from e


# --- Tool handlers -------------------------------------------------------------
class OfficeTools:

    CAPABILITIES = (
        "SetReminder(task, dueDate, reminderDate?)",
        "SendEmail(subject, body)",
        "SendFallbackNotification(subject, body)",
    )

    def __init__(self, reminders: ReminderService, email: EmailService):

        self.reminders = reminders
        self.email = email

    def set_reminder(self, task: str, dueDate: str, reminderDate: Optional[str] = None) -> str:

        if not (task or "").strip():
            raise ValueError("Task empty.")

        due = _parse_date(dueDate, "dueDate")

        if due is None:
            raise ValueError("dueDate is required.")

        remind = _parse_date(reminderDate, "reminderDate")
        message = self.reminders.set_reminder(task, due, remind)

        data = {"task": task, "dueDate": due.isoformat(), "message": message}

        if remind is not None:
            data["reminderDate"] = remind.isoformat()

        return results.ok("Reminder", data)

    def send_email(self, subject: str, body: str) -> str:

        message = self.email.send_email(subject, body)

        return results.ok("Email", {"subject": subject, "message": message})

    def send_fallback_notification(self, subject: str, body: str) -> str:
        """Email the user when no reminder/email could be derived from the recording."""

        if not (body or "").strip():
            return results.error("INVALID_ARGUMENT", "Notification body is empty.", type="FallbackNotification")

        message = self.email.send_email(subject or "Voice command", body)

        return results.ok("FallbackNotification", {"subject": subject, "message": message})

    def toolbox(self) -> Toolbox:

        return Toolbox([
            Tool(
                name="SetReminder",
                handler=self.set_reminder,
                result_type="Reminder",
                spec=tool_spec(
                    "SetReminder",
                    "Set a reminder for the given task at the specified date and optional earlier reminder time.",
                    {
                        "properties": {
                            "task": {"type": "string", "description": "Task to be reminded of."},
                            "dueDate": {"type": "string", "description": "Due date for the task (ISO 8601)."},
                            "reminderDate": {"type": "string", "description": "Optional reminder date/time before the due date (ISO 8601)."},
                        },
                        "required": ["task", "dueDate"],
                    },
                ),
            ),
            Tool(
                name="SendEmail",
                handler=self.send_email,
                result_type="Email",
                spec=tool_spec(
                    "SendEmail",
                    "Send an email with the given subject and body to the user.",
                    {
                        "properties": {
                            "subject": {"type": "string", "description": "Email subject."},
                            "body": {"type": "string", "description": "Email body."},
                        },
                        "required": ["subject", "body"],
                    },
                ),
            ),
            Tool(
                name="SendFallbackNotification",
                handler=self.send_fallback_notification,
                result_type="FallbackNotification",
                spec=tool_spec(
                    "SendFallbackNotification",
                    "Notify the user by email when the recording did not lead to a reminder or email.",
                    {
                        "properties": {
                            "subject": {"type": "string", "description": "Notification subject."},
                            "body": {"type": "string", "description": "What was understood and why nothing was done."},
                        },
                        "required": ["subject", "body"],
                    },
                ),
            ),
        ])
