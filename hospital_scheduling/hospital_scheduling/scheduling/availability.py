"""
Availability Service

Computes which slots of a room's operating window are free on a given day,
considering:
- The slot grid of the operating window (SchedulingConfig)
- Existing appointments booked in that room
- Half-open intervals: an appointment ending on a slot boundary leaves the
  next slot free; partial coverage occupies the whole slot
"""

from datetime import date, datetime, time, timedelta
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from .config import SchedulingConfig, resolve_config
from .errors import UnknownRoomError
from .records import coerce_date, get_field, intervals_overlap, to_instant, valid_intervals


def generate_slot_grid(
	target_date: Union[date, str],
	config: Optional[SchedulingConfig] = None
) -> List[Dict[str, Any]]:
	"""
	Generates the canonical slot grid of the operating window for one day.

	Args:
		target_date: day (date object or string YYYY-MM-DD)
		config: operating window; defaults to 08:00-18:00 every 30 minutes

	Returns:
		list[dict]: [
			{
				"date": "2026-01-20",
				"time": "08:00",
				"start": datetime,
				"end": datetime,
				"is_available": True
			},
			...
		]
	"""
	config = resolve_config(config)
	target_date = coerce_date(target_date)
	tz = config.tz

	window_start = datetime.combine(target_date, time(config.start_hour))
	step = timedelta(minutes=config.slot_minutes)

	slots = []
	for index in range(config.slots_per_day):
		naive_start = window_start + step * index
		slots.append({
			"date": target_date.strftime("%Y-%m-%d"),
			"time": naive_start.strftime("%H:%M"),
			"start": tz.localize(naive_start),
			"end": tz.localize(naive_start + step),
			"is_available": True
		})

	return slots


def get_day_slots(
	room: Optional[str],
	target_date: Union[date, str],
	appointments: Iterable[Any],
	config: Optional[SchedulingConfig] = None,
	rooms: Optional[Sequence[str]] = None
) -> List[Dict[str, Any]]:
	"""
	Full slot grid of a room for one day with the is_available flag set.

	Algorithm:
		1. Generate the slot grid for target_date
		2. Keep only appointments booked in `room` (others never block it)
		3. Mark every slot that openly overlaps an appointment as occupied
	"""
	if not room:
		return []

	if rooms is not None and room not in rooms:
		raise UnknownRoomError(f"Room '{room}' is not configured")

	config = resolve_config(config)
	slots = generate_slot_grid(target_date, config)

	room_appointments = [appt for appt in appointments if get_field(appt, "room") == room]
	intervals = valid_intervals(room_appointments, config.tz, "Availability")

	for slot in slots:
		for _appt, start, end in intervals:
			if intervals_overlap(slot["start"], slot["end"], start, end):
				slot["is_available"] = False
				break

	return slots


def get_available_slots(
	room: Optional[str],
	target_date: Union[date, str],
	appointments: Iterable[Any],
	config: Optional[SchedulingConfig] = None,
	rooms: Optional[Sequence[str]] = None
) -> List[Dict[str, Any]]:
	"""
	Bookable slots of a room for one day, in chronological order.

	Args:
		room: room identifier; empty/None means no room selected
		target_date: day to evaluate
		appointments: full appointment list, unfiltered
		config: operating window
		rooms: configured rooms; when given, an unknown room raises

	Returns:
		list[dict]: free slots only (see generate_slot_grid)

	Raises:
		UnknownRoomError: room is not one of `rooms`
	"""
	return [
		slot for slot in get_day_slots(room, target_date, appointments, config, rooms)
		if slot["is_available"]
	]


def get_available_end_times(
	room: Optional[str],
	target_date: Union[date, str],
	start_time: Union[str, datetime],
	appointments: Iterable[Any],
	config: Optional[SchedulingConfig] = None
) -> List[str]:
	"""
	End-time options for an appointment starting at `start_time`.

	Returns the "HH:MM" end boundaries of consecutive free slots from the
	chosen start, stopping at the first occupied slot or the window end.
	An occupied or off-grid start yields no options.
	"""
	config = resolve_config(config)
	slots = get_day_slots(room, target_date, appointments, config)
	if not slots:
		return []

	if isinstance(start_time, datetime):
		start_time = to_instant(start_time, config.tz).astimezone(config.tz).strftime("%H:%M")

	start_index = next(
		(index for index, slot in enumerate(slots) if slot["time"] == start_time),
		None
	)
	if start_index is None:
		return []

	end_times = []
	for slot in slots[start_index:]:
		if not slot["is_available"]:
			break
		end_times.append(slot["end"].strftime("%H:%M"))

	return end_times


def get_room_availability(
	target_date: Union[date, str],
	appointments: Iterable[Any],
	rooms: Sequence[str],
	config: Optional[SchedulingConfig] = None
) -> Dict[str, List[Dict[str, Any]]]:
	"""
	Free slots of every configured room for one day.

	Returns:
		dict: {
			"X-Ray": [slot, ...],
			"Labor": [...],
			...
		}
	"""
	appointments = list(appointments)
	return {
		room: get_available_slots(room, target_date, appointments, config)
		for room in rooms
	}
