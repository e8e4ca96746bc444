"""
Scheduling Validators

Input validation for the whitelisted scheduling endpoints.
"""

import re
from datetime import datetime

import frappe
from frappe import _

# Appointment names ("APT-00042") and the draft names the desk assigns
DOCNAME_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.\- ]*$")
DOCNAME_MAX_LENGTH = 140


def validate_date_string(date_str: str, field_name: str = "date") -> str:
    """
    Validate a calendar day (YYYY-MM-DD) sent by the calendar views.

    The day must exist: "2026-02-30" is rejected here instead of failing
    later inside the slot grid.

    Raises:
        frappe.ValidationError: If the day is missing, malformed or not a real date
    """
    if not date_str:
        frappe.throw(_("{0} is required").format(field_name), frappe.ValidationError)

    date_str = str(date_str).strip()

    try:
        datetime.strptime(date_str, "%Y-%m-%d")
    except ValueError:
        frappe.throw(
            _("{0} must be a calendar day as YYYY-MM-DD, got {1}").format(field_name, date_str),
            frappe.ValidationError,
        )

    return date_str


def validate_datetime_string(datetime_str: str, field_name: str = "datetime") -> str:
    """
    Validate datetime string format (YYYY-MM-DD HH:MM[:SS]).

    ISO 8601 with "T" and an optional UTC offset is accepted as well,
    drag-and-drop clients send instants in that form.

    Raises:
        frappe.ValidationError: If datetime format is invalid
    """
    if not datetime_str:
        frappe.throw(_("{0} is required").format(field_name), frappe.ValidationError)

    datetime_str = str(datetime_str).strip()

    pattern = r"^\d{4}-\d{2}-\d{2}[ T]\d{2}:\d{2}(:\d{2}(\.\d+)?)?(Z|[+-]\d{2}:?\d{2})?$"
    if not re.match(pattern, datetime_str):
        frappe.throw(
            _("Invalid {0} format. Use YYYY-MM-DD HH:MM:SS").format(field_name),
            frappe.ValidationError,
        )

    return datetime_str


def validate_time_string(time_str: str, field_name: str = "time") -> str:
    """Validate time string format (HH:MM)."""
    if not time_str:
        frappe.throw(_("{0} is required").format(field_name), frappe.ValidationError)

    time_str = str(time_str).strip()

    match = re.match(r"^(\d{2}):(\d{2})$", time_str)
    if not match or int(match.group(1)) > 23 or int(match.group(2)) > 59:
        frappe.throw(_("Invalid {0} format. Use HH:MM").format(field_name), frappe.ValidationError)

    return time_str


def validate_docname(name: str, field_name: str = "name") -> str:
    """
    Validate an Appointment name passed by the calendar.

    Only letters, digits, spaces and "-", "_", "." are allowed, which covers
    the APT-##### series and desk draft names.

    Raises:
        frappe.ValidationError: If name is empty, too long or has other characters
    """
    if not name:
        frappe.throw(_("{0} is required").format(field_name), frappe.ValidationError)

    name = str(name).strip()

    if len(name) > DOCNAME_MAX_LENGTH:
        frappe.throw(
            _("{0} must be at most {1} characters").format(field_name, DOCNAME_MAX_LENGTH),
            frappe.ValidationError,
        )

    if not DOCNAME_PATTERN.match(name):
        frappe.throw(_("{0} is not a valid appointment name").format(field_name), frappe.ValidationError)

    return name


def validate_room(room: str, rooms, field_name: str = "room") -> str:
    """
    Validate a room against the configured room list.

    Raises:
        frappe.ValidationError: If the room is empty or not configured
    """
    if not room:
        frappe.throw(_("{0} is required").format(field_name), frappe.ValidationError)

    room = str(room).strip()

    if room not in rooms:
        frappe.throw(_("Room {0} is not configured").format(room), frappe.ValidationError)

    return room
