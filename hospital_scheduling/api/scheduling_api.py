"""
Scheduling API Endpoints

Whitelisted functions used by the appointment calendar:
- Room availability (free slots, end-time options)
- Lane layout for day / week / month views
- Drag-and-drop move preview and commit
- Patient-grouped list view
"""

import frappe
from frappe import _
from frappe.utils import getdate
from typing import Any, Dict, List, Optional

from hospital_scheduling.hospital_scheduling.scheduling import availability, reschedule, views
from hospital_scheduling.hospital_scheduling.scheduling.config import get_rooms as get_configured_rooms
from hospital_scheduling.hospital_scheduling.scheduling.config import get_scheduling_config
from hospital_scheduling.hospital_scheduling.scheduling.errors import SchedulingError
from hospital_scheduling.hospital_scheduling.scheduling.records import to_instant
from hospital_scheduling.hospital_scheduling.scheduling.store import (
	get_appointment,
	list_appointments,
	update_appointment_time,
)

from hospital_scheduling.api.shared import (
	validate_date_string,
	validate_datetime_string,
	validate_docname,
	validate_room,
	validate_time_string,
)

LAYOUT_VIEWS = ("day", "week", "month_cell")
DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"


@frappe.whitelist(methods=["GET"])
def get_rooms() -> List[str]:
	"""
	Rooms that can be booked.

	Example Response:
		```json
		["Labor", "Bloodtest", "X-Ray", ...]
		```
	"""
	return list(get_configured_rooms())


@frappe.whitelist(methods=["GET"])
def get_available_slots(room: str, date: str) -> List[Dict[str, Any]]:
	"""
	Free slots of a room for one day.

	Args:
		room: room identifier
		date: day (YYYY-MM-DD)

	Returns:
		list[dict]: [
			{
				"date": "2026-01-20",
				"time": "09:30",
				"start": "2026-01-20 09:30:00",
				"end": "2026-01-20 10:00:00",
				"is_available": True
			},
			...
		]

	Example:
		```javascript
		frappe.call({
			method: "hospital_scheduling.api.scheduling_api.get_available_slots",
			args: {room: "X-Ray", date: "2026-01-20"},
			callback: function(r) {
				console.log(r.message);
			}
		});
		```
	"""
	rooms = get_configured_rooms()
	room = validate_room(room, rooms)
	date = validate_date_string(date, "date")

	config = get_scheduling_config()
	appointments = list_appointments(filters={"room": room}, from_date=date, to_date=date)

	slots = availability.get_available_slots(room, getdate(date), appointments, config, rooms)
	return [_serialize_slot(slot, config) for slot in slots]


@frappe.whitelist(methods=["GET"])
def get_day_slots(room: str, date: str) -> List[Dict[str, Any]]:
	"""Full slot grid of a room for one day, occupied slots flagged is_available=False."""
	rooms = get_configured_rooms()
	room = validate_room(room, rooms)
	date = validate_date_string(date, "date")

	config = get_scheduling_config()
	appointments = list_appointments(filters={"room": room}, from_date=date, to_date=date)

	slots = availability.get_day_slots(room, getdate(date), appointments, config, rooms)
	return [_serialize_slot(slot, config) for slot in slots]


@frappe.whitelist(methods=["GET"])
def get_available_end_times(room: str, date: str, start_time: str) -> List[str]:
	"""
	End-time options ("HH:MM") for a booking starting at start_time.

	Every option keeps the booking inside consecutive free slots.
	"""
	rooms = get_configured_rooms()
	room = validate_room(room, rooms)
	date = validate_date_string(date, "date")
	start_time = validate_time_string(start_time, "start_time")

	config = get_scheduling_config()
	appointments = list_appointments(filters={"room": room}, from_date=date, to_date=date)

	return availability.get_available_end_times(room, getdate(date), start_time, appointments, config)


@frappe.whitelist(methods=["GET"])
def get_lane_layout(date: str, view: str = "day", room: Optional[str] = None) -> Any:
	"""
	Appointments of a calendar view with their display lanes.

	Args:
		date: day of the view (YYYY-MM-DD); any day of the week for "week"
		view: "day", "week" or "month_cell"
		room: optional room column

	Returns:
		day / month_cell: list[dict] appointments with "lane" and "total_lanes"
		week: dict {"YYYY-MM-DD": [...], ...} for the seven days
	"""
	date = validate_date_string(date, "date")
	if view not in LAYOUT_VIEWS:
		frappe.throw(_("Invalid view {0}. Use one of: {1}").format(view, ", ".join(LAYOUT_VIEWS)))

	filters = {}
	if room:
		filters["room"] = validate_room(room, get_configured_rooms())

	config = get_scheduling_config()
	target_date = getdate(date)

	if view == "week":
		week = views.get_week_dates(target_date)
		appointments = list_appointments(filters=filters, from_date=week[0], to_date=week[-1])
		return views.layout_week(appointments, target_date, config)

	appointments = list_appointments(filters=filters, from_date=target_date, to_date=target_date)
	if view == "month_cell":
		return views.layout_month_cell(appointments, target_date, config)

	return views.layout_day(appointments, target_date, config)


@frappe.whitelist(methods=["GET", "POST"])
def propose_move(appointment_name: str, new_start: str) -> Dict[str, Any]:
	"""
	Preview of a drag-and-drop move, nothing is saved.

	Returns:
		dict: {
			"appointment": "APT-00001",
			"new_start": "2026-01-20 11:00:00",
			"new_end": "2026-01-20 11:30:00",
			"valid": True,
			"reason": None,
			"conflicts": ["APT-00007"],
			"has_conflict": True
		}
	"""
	appointment_name = validate_docname(appointment_name, "appointment_name")
	new_start = validate_datetime_string(new_start, "new_start")

	config = get_scheduling_config()
	appointment = _get_appointment_or_throw(appointment_name)
	return _serialize_proposal(appointment, _preview(appointment, new_start, config), config)


@frappe.whitelist(methods=["POST"])
def move_appointment(appointment_name: str, new_start: str) -> Dict[str, Any]:
	"""
	Commits a drag-and-drop move.

	The original duration is kept. Conflicts are reported but do not block
	the move; the last write wins.

	Returns:
		dict: propose_move result plus
			"success": bool,
			"message": str
	"""
	appointment_name = validate_docname(appointment_name, "appointment_name")
	new_start = validate_datetime_string(new_start, "new_start")

	config = get_scheduling_config()
	appointment = _get_appointment_or_throw(appointment_name)
	return _commit_move(appointment, new_start, config)


@frappe.whitelist(methods=["POST"])
def drop_appointment(
	appointment_name: str,
	target_date: str,
	target_time: Optional[str] = None
) -> Dict[str, Any]:
	"""
	Commits a drop onto a calendar cell.

	Hour cells pass target_time ("HH:MM"); month day cells omit it and the
	appointment keeps its time of day.
	"""
	appointment_name = validate_docname(appointment_name, "appointment_name")
	target_date = validate_date_string(target_date, "target_date")
	if target_time:
		target_time = validate_time_string(target_time, "target_time")

	config = get_scheduling_config()
	appointment = _get_appointment_or_throw(appointment_name)

	try:
		new_start = reschedule.resolve_drop_target(appointment, target_date, target_time, config)
	except SchedulingError as e:
		frappe.throw(str(e))

	return _commit_move(appointment, new_start, config)


@frappe.whitelist(methods=["GET"])
def get_patient_groups(
	search: Optional[str] = None,
	from_date: Optional[str] = None,
	to_date: Optional[str] = None
) -> List[Dict[str, Any]]:
	"""List view: appointments grouped by patient, optionally filtered by a search term."""
	if from_date:
		from_date = validate_date_string(from_date, "from_date")
	if to_date:
		to_date = validate_date_string(to_date, "to_date")

	appointments = list_appointments(from_date=from_date, to_date=to_date)
	return views.group_by_patient(views.search_appointments(appointments, search))


# ===== HELPERS =====

def _get_appointment_or_throw(appointment_name: str) -> Dict[str, Any]:
	appointment = get_appointment(appointment_name)
	if not appointment:
		frappe.throw(
			_("Appointment {0} does not exist").format(appointment_name),
			frappe.DoesNotExistError
		)
	return appointment


def _preview(appointment: Dict[str, Any], new_start: Any, config) -> Dict[str, Any]:
	"""Move preview against the appointments of the same room around the new range."""
	try:
		# the new range decides which days of the room are loaded
		proposal = reschedule.propose_move(appointment, new_start, config)
	except SchedulingError as e:
		frappe.throw(str(e))

	same_room = list_appointments(
		filters={"room": appointment.get("room")},
		from_date=proposal["new_start"].astimezone(config.tz).date(),
		to_date=proposal["new_end"].astimezone(config.tz).date()
	)
	return reschedule.preview_move(appointment, new_start, same_room, config)


def _commit_move(appointment: Dict[str, Any], new_start: Any, config) -> Dict[str, Any]:
	proposal = _preview(appointment, new_start, config)
	result = _serialize_proposal(appointment, proposal, config)

	if not proposal["valid"]:
		result.update({"success": False, "message": proposal["reason"]})
		return result

	result.update(update_appointment_time(
		appointment.get("name"),
		proposal["new_start"],
		proposal["new_end"],
		config
	))
	return result


def _serialize_slot(slot: Dict[str, Any], config) -> Dict[str, Any]:
	return {
		"date": slot["date"],
		"time": slot["time"],
		"start": _format_instant(slot["start"], config),
		"end": _format_instant(slot["end"], config),
		"is_available": slot["is_available"]
	}


def _serialize_proposal(appointment: Dict[str, Any], proposal: Dict[str, Any], config) -> Dict[str, Any]:
	return {
		"appointment": appointment.get("name"),
		"new_start": _format_instant(proposal["new_start"], config),
		"new_end": _format_instant(proposal["new_end"], config),
		"valid": proposal["valid"],
		"reason": proposal["reason"],
		"conflicts": proposal.get("conflicts", []),
		"has_conflict": proposal.get("has_conflict", False)
	}


def _format_instant(value: Any, config) -> str:
	return to_instant(value, config.tz).astimezone(config.tz).strftime(DATETIME_FORMAT)
