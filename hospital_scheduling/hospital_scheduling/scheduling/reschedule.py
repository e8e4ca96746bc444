"""
Reschedule Service

Pure arithmetic behind drag-and-drop rescheduling:
- propose_move: new time range preserving the original duration
- resolve_drop_target: new start for a drop onto a day / time cell
- find_conflicts: advisory double-booking check in the same room

Nothing here persists; committing a move is done by the API through
store.update_appointment_time.
"""

from datetime import date, datetime, time
from typing import Any, Dict, Iterable, List, Optional, Union

from .config import SchedulingConfig, resolve_config
from .records import (
	DateTimeLike,
	coerce_date,
	get_field,
	get_interval,
	intervals_overlap,
	to_instant,
	valid_intervals,
)


def propose_move(
	appointment: Any,
	new_start: DateTimeLike,
	config: Optional[SchedulingConfig] = None
) -> Dict[str, Any]:
	"""
	Computes the time range of an appointment moved to `new_start`.

	Args:
		appointment: record with start_datetime / end_datetime
		new_start: proposed start (naive values are on the hospital clock)
		config: hospital clock

	Returns:
		dict: {
			"new_start": datetime,
			"new_end": datetime,
			"valid": bool,
			"reason": str or None
		}

	Raises:
		InvalidDuration: the appointment's own end is not after its start
	"""
	config = resolve_config(config)
	start, end = get_interval(appointment, config.tz)
	duration = end - start

	new_start = to_instant(new_start, config.tz)
	new_end = new_start + duration

	if new_end <= new_start:
		return {
			"new_start": new_start,
			"new_end": new_end,
			"valid": False,
			"reason": "End must be after start"
		}

	return {
		"new_start": new_start,
		"new_end": new_end,
		"valid": True,
		"reason": None
	}


def resolve_drop_target(
	appointment: Any,
	target_date: Union[date, str],
	target_time: Optional[str] = None,
	config: Optional[SchedulingConfig] = None
) -> datetime:
	"""
	Start instant for an appointment dropped on a calendar cell.

	Dropping on an hour cell ("HH:MM") starts it there; dropping on a day cell
	(month view, no time) keeps its original time of day.
	"""
	config = resolve_config(config)
	tz = config.tz
	target_date = coerce_date(target_date)

	if target_time:
		hours, minutes = (int(part) for part in target_time.split(":")[:2])
		start_time = time(hours, minutes)
	else:
		original_start, _end = get_interval(appointment, tz)
		start_time = original_start.astimezone(tz).time().replace(tzinfo=None)

	return tz.localize(datetime.combine(target_date, start_time))


def find_conflicts(
	appointment: Any,
	new_start: DateTimeLike,
	new_end: DateTimeLike,
	appointments: Iterable[Any],
	config: Optional[SchedulingConfig] = None
) -> List[str]:
	"""
	Names of other appointments in the same room overlapping the new range.

	Advisory only: the UI highlights these, the move is not blocked.
	"""
	config = resolve_config(config)
	tz = config.tz
	name = get_field(appointment, "name")
	room = get_field(appointment, "room")
	new_start = to_instant(new_start, tz)
	new_end = to_instant(new_end, tz)

	candidates = [
		other for other in appointments
		if get_field(other, "room") == room and (name is None or get_field(other, "name") != name)
	]

	return [
		get_field(other, "name")
		for other, start, end in valid_intervals(candidates, tz, "Conflict check")
		if intervals_overlap(new_start, new_end, start, end)
	]


def preview_move(
	appointment: Any,
	new_start: DateTimeLike,
	appointments: Iterable[Any],
	config: Optional[SchedulingConfig] = None
) -> Dict[str, Any]:
	"""
	propose_move plus the advisory conflicts of the proposed range.

	Returns:
		dict: propose_move result with
			"conflicts": [appointment names],
			"has_conflict": bool
	"""
	proposal = propose_move(appointment, new_start, config)
	conflicts = []
	if proposal["valid"]:
		conflicts = find_conflicts(
			appointment,
			proposal["new_start"],
			proposal["new_end"],
			appointments,
			config
		)

	proposal["conflicts"] = conflicts
	proposal["has_conflict"] = bool(conflicts)
	return proposal
