"""
Appointment Records

Helpers to read the time range of appointment records handed to the engines.

Records are plain mappings (frappe._dict from frappe.get_all, dicts from the
API, or Appointment docs) carrying at least:
	name, room, start_datetime, end_datetime
Timestamps may be datetimes or strings; naive values are read on the
hospital clock of the SchedulingConfig.
"""

from datetime import date, datetime, timedelta
from typing import Any, Iterable, List, Optional, Tuple, Union

import frappe
from frappe.utils import get_datetime, getdate
import pytz

from .errors import InvalidDuration


DateTimeLike = Union[datetime, str]


def get_field(record: Any, fieldname: str, default: Any = None) -> Any:
	"""Read a field from a dict-like record or a Document."""
	if isinstance(record, dict):
		return record.get(fieldname, default)
	return getattr(record, fieldname, default)


def to_instant(value: DateTimeLike, tz: pytz.BaseTzInfo) -> datetime:
	"""
	Converts a timestamp to an aware datetime on the given clock.

	Raises:
		ValueError: empty or unparseable value
	"""
	# get_datetime(None) returns now()
	if value is None or value == "":
		raise ValueError("Empty timestamp")

	if isinstance(value, datetime):
		dt = value
	else:
		dt = get_datetime(value)
		if dt is None:
			raise ValueError(f"Cannot parse timestamp {value!r}")

	if dt.tzinfo is None:
		return tz.localize(dt)
	return dt


def get_interval(record: Any, tz: pytz.BaseTzInfo) -> Tuple[datetime, datetime]:
	"""
	Returns the (start, end) instants of an appointment record.

	Raises:
		InvalidDuration: missing/unparseable timestamps or end <= start
	"""
	name = get_field(record, "name")
	try:
		start = to_instant(get_field(record, "start_datetime"), tz)
		end = to_instant(get_field(record, "end_datetime"), tz)
	except (ValueError, TypeError, OverflowError) as e:
		raise InvalidDuration(name, f"Appointment {name} has unusable timestamps: {e}")

	if end <= start:
		raise InvalidDuration(name)

	return start, end


def intervals_overlap(
	a_start: datetime,
	a_end: datetime,
	b_start: datetime,
	b_end: datetime
) -> bool:
	"""Open overlap: touching endpoints do not count."""
	return a_start < b_end and b_start < a_end


def valid_intervals(
	records: Iterable[Any],
	tz: pytz.BaseTzInfo,
	context: str
) -> List[Tuple[Any, datetime, datetime]]:
	"""
	Pairs every usable record with its interval, in input order.

	Malformed records are skipped and logged, one bad appointment must not
	abort the computation for the rest of the day.
	"""
	result = []
	for record in records:
		try:
			start, end = get_interval(record, tz)
		except InvalidDuration as e:
			log_skipped_record(e, context)
			continue
		result.append((record, start, end))
	return result


def log_skipped_record(error: InvalidDuration, context: str) -> None:
	frappe.logger("hospital_scheduling").warning(
		f"{context}: skipping appointment {error.appointment_name}: {error}"
	)


def day_bounds(target_date: date, tz: pytz.BaseTzInfo) -> Tuple[datetime, datetime]:
	"""[00:00, next day 00:00) of a calendar day on the given clock."""
	start = tz.localize(datetime.combine(target_date, datetime.min.time()))
	end = tz.localize(datetime.combine(target_date + timedelta(days=1), datetime.min.time()))
	return start, end


def local_date(value: DateTimeLike, tz: pytz.BaseTzInfo) -> date:
	return to_instant(value, tz).astimezone(tz).date()


def coerce_date(value: Union[date, str, None]) -> Optional[date]:
	if value is None or isinstance(value, date) and not isinstance(value, datetime):
		return value
	if isinstance(value, datetime):
		return value.date()
	return getdate(value)


def record_to_dict(record: Any, **extra) -> frappe._dict:
	"""Copy of a record as frappe._dict, with `extra` fields set."""
	if isinstance(record, dict):
		data = frappe._dict(record)
	else:
		data = frappe._dict(record.as_dict())
	data.update(extra)
	return data
