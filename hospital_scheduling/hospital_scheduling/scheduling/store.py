"""
Appointment Store

Frappe-backed implementation of the operations the scheduling engines
rely on:
- list_appointments: snapshot of appointments, optionally by date range
- get_appointment: one appointment record
- update_appointment_time: persist a rescheduled time range
"""

from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional, Union

import frappe
from frappe import _
from frappe.utils import get_datetime, getdate
import pytz

from .config import SchedulingConfig, get_scheduling_config

APPOINTMENT_FIELDS = [
	"name",
	"patient",
	"patient_name",
	"room",
	"start_datetime",
	"end_datetime",
	"status",
	"reason"
]

INACTIVE_STATUSES = ["Cancelled"]


def list_appointments(
	filters: Optional[Dict[str, Any]] = None,
	from_date: Optional[Union[date, str]] = None,
	to_date: Optional[Union[date, str]] = None,
	include_cancelled: bool = False
) -> List[Dict[str, Any]]:
	"""
	Snapshot of appointments for the scheduling engines.

	Args:
		filters: extra frappe filters (e.g. {"room": "X-Ray"})
		from_date: first day of the range (inclusive)
		to_date: last day of the range (inclusive)
		include_cancelled: keep Cancelled appointments

	Returns:
		list[frappe._dict]: appointments ordered by start_datetime

	Range condition (intersection with [from_date, to_date + 1 day)):
		start_datetime < to_date + 1 day AND end_datetime > from_date
	"""
	query_filters = dict(filters or {})

	if not include_cancelled:
		query_filters["status"] = ["not in", INACTIVE_STATUSES]

	if from_date:
		query_filters["end_datetime"] = [">", datetime.combine(getdate(from_date), datetime.min.time())]
	if to_date:
		range_end = datetime.combine(getdate(to_date) + timedelta(days=1), datetime.min.time())
		query_filters["start_datetime"] = ["<", range_end]

	return frappe.get_all(
		"Appointment",
		filters=query_filters,
		fields=APPOINTMENT_FIELDS,
		order_by="start_datetime asc"
	)


def get_appointment(appointment_name: str) -> Optional[Dict[str, Any]]:
	"""Single appointment record, or None if it does not exist."""
	records = frappe.get_all(
		"Appointment",
		filters={"name": appointment_name},
		fields=APPOINTMENT_FIELDS,
		limit=1
	)
	return records[0] if records else None


def update_appointment_time(
	appointment_name: str,
	new_start: Union[datetime, str],
	new_end: Union[datetime, str],
	config: Optional[SchedulingConfig] = None
) -> Dict[str, Any]:
	"""
	Stores the new time range of an appointment.

	The document is saved normally so Appointment.validate runs. Concurrent
	moves are not arbitrated: the last save wins.

	Args:
		appointment_name: Appointment docname
		new_start / new_end: aware instants, or naive on the hospital clock
		config: hospital clock; read from Scheduling Settings when omitted

	Returns:
		dict: {
			"success": bool,
			"message": str
		}
	"""
	try:
		tz = (config or get_scheduling_config()).tz
		appointment = frappe.get_doc("Appointment", appointment_name)
		appointment.start_datetime = _to_db_datetime(new_start, tz)
		appointment.end_datetime = _to_db_datetime(new_end, tz)
		appointment.save()

		frappe.logger("hospital_scheduling").info(
			f"Appointment {appointment_name} moved to "
			f"{appointment.start_datetime} - {appointment.end_datetime}"
		)

		return {
			"success": True,
			"message": _("Appointment moved successfully")
		}

	except frappe.DoesNotExistError:
		return {
			"success": False,
			"message": _("Appointment {0} does not exist").format(appointment_name)
		}
	except frappe.ValidationError as e:
		return {
			"success": False,
			"message": str(e)
		}
	except Exception as e:
		frappe.log_error(
			f"Error updating time of {appointment_name}: {str(e)}",
			"Appointment Reschedule"
		)
		return {
			"success": False,
			"message": _("Failed to move appointment")
		}


def _to_db_datetime(value: Union[datetime, str], tz: pytz.BaseTzInfo) -> datetime:
	"""Datetime fields are stored naive on the hospital clock, the one to_instant reads them on."""
	value = get_datetime(value)
	if value.tzinfo is not None:
		value = value.astimezone(tz).replace(tzinfo=None)
	return value
