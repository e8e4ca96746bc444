"""
Calendar View Windows

Picks the appointments of a display window and decides how each view lays
them out. Day, week and month cells are lane-packed with layout_lanes; the
list view groups by patient instead.
"""

from datetime import date, timedelta
from typing import Any, Dict, Iterable, List, Optional, Union

from .config import SchedulingConfig, resolve_config
from .lanes import layout_lanes
from .records import coerce_date, day_bounds, get_field, intervals_overlap, valid_intervals

MONTH_CELL_LIMIT = 6
UNKNOWN_PATIENT = "Unknown Patient"


def filter_by_day(
	appointments: Iterable[Any],
	target_date: Union[date, str],
	config: Optional[SchedulingConfig] = None
) -> List[Any]:
	"""Appointments whose interval intersects the local calendar day, in input order."""
	config = resolve_config(config)
	day_start, day_end = day_bounds(coerce_date(target_date), config.tz)

	return [
		record
		for record, start, end in valid_intervals(appointments, config.tz, "Day filter")
		if intervals_overlap(day_start, day_end, start, end)
	]


def get_week_dates(target_date: Union[date, str]) -> List[date]:
	"""The seven days of the Sunday-started week containing target_date."""
	target_date = coerce_date(target_date)
	# date.weekday(): Monday=0 ... Sunday=6
	sunday = target_date - timedelta(days=(target_date.weekday() + 1) % 7)
	return [sunday + timedelta(days=offset) for offset in range(7)]


def get_month_grid_dates(year: int, month: int) -> List[date]:
	"""42 days (6 weeks) starting on the Sunday on or before the 1st of the month."""
	first = date(year, month, 1)
	start = first - timedelta(days=(first.weekday() + 1) % 7)
	return [start + timedelta(days=offset) for offset in range(42)]


def layout_day(
	appointments: Iterable[Any],
	target_date: Union[date, str],
	config: Optional[SchedulingConfig] = None
) -> List[Dict[str, Any]]:
	"""Day view: appointments of the day with their lanes."""
	return layout_lanes(filter_by_day(appointments, target_date, config), config=config)


def layout_week(
	appointments: Iterable[Any],
	target_date: Union[date, str],
	config: Optional[SchedulingConfig] = None
) -> Dict[str, List[Dict[str, Any]]]:
	"""
	Week view: one lane layout per day column.

	Returns:
		dict: {"2026-01-18": [...], ..., "2026-01-24": [...]}
	"""
	appointments = list(appointments)
	return {
		day.strftime("%Y-%m-%d"): layout_day(appointments, day, config)
		for day in get_week_dates(target_date)
	}


def layout_month_cell(
	appointments: Iterable[Any],
	target_date: Union[date, str],
	config: Optional[SchedulingConfig] = None,
	limit: int = MONTH_CELL_LIMIT
) -> List[Dict[str, Any]]:
	"""Month view cell: the first `limit` appointments of the day, lane-packed."""
	config = resolve_config(config)
	day_items = valid_intervals(filter_by_day(appointments, target_date, config), config.tz, "Month cell")
	day_items.sort(key=lambda item: item[1])
	return layout_lanes([record for record, _start, _end in day_items[:limit]], config=config)


def search_appointments(appointments: Iterable[Any], term: Optional[str]) -> List[Any]:
	"""Case-insensitive match on patient name, room and reason."""
	appointments = list(appointments)
	if not term:
		return appointments

	term = term.strip().lower()
	return [
		appt for appt in appointments
		if any(
			term in (get_field(appt, fieldname) or "").lower()
			for fieldname in ("patient_name", "room", "reason")
		)
	]


def group_by_patient(appointments: Iterable[Any]) -> List[Dict[str, Any]]:
	"""
	List view grouping, no lane packing.

	Returns:
		list[dict]: [
			{
				"patient": "PAT-0001",
				"patient_name": "Jane Doe",
				"appointments": [records sorted by start_datetime]
			},
			...
		]
		Groups keep the order in which each patient first appears.
	"""
	groups: Dict[str, Dict[str, Any]] = {}

	for appt in appointments:
		patient_name = get_field(appt, "patient_name") or UNKNOWN_PATIENT
		key = get_field(appt, "patient") or patient_name
		if key not in groups:
			groups[key] = {
				"patient": get_field(appt, "patient"),
				"patient_name": patient_name,
				"appointments": []
			}
		groups[key]["appointments"].append(appt)

	for group in groups.values():
		group["appointments"].sort(key=lambda appt: str(get_field(appt, "start_datetime") or ""))

	return list(groups.values())
