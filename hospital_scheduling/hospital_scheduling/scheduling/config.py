"""
Scheduling Configuration

Operating window and display settings shared by the scheduling engines:
- start_hour / end_hour: bookable window of a room for one day
- slot_minutes: slot granularity
- max_display_lanes: cap for parallel lanes in calendar views
- timezone: hospital clock used for naive timestamps and day boundaries

Values come from the "Scheduling Settings" single DocType when a site is
available; the engines themselves only take a SchedulingConfig.
"""

from dataclasses import dataclass, replace
from typing import Optional, Tuple

import frappe
from frappe.utils import get_system_timezone
import pytz

from .errors import SchedulingConfigError


DEFAULT_START_HOUR = 8
DEFAULT_END_HOUR = 18
DEFAULT_SLOT_MINUTES = 30
DEFAULT_MAX_DISPLAY_LANES = 4
DEFAULT_TIMEZONE = "UTC"
SYSTEM_TIMEZONE = "system timezone"

# Select options of Appointment.room
DEFAULT_ROOMS: Tuple[str, ...] = (
	"Labor",
	"Bloodtest",
	"X-Ray",
	"Doctor Checkings",
	"Emergency Room",
	"Surgery Room",
	"Consultation Room",
	"Physical Therapy",
	"Cardiology",
	"Neurology",
)


@dataclass(frozen=True)
class SchedulingConfig:
	start_hour: int = DEFAULT_START_HOUR
	end_hour: int = DEFAULT_END_HOUR
	slot_minutes: int = DEFAULT_SLOT_MINUTES
	max_display_lanes: int = DEFAULT_MAX_DISPLAY_LANES
	timezone: str = DEFAULT_TIMEZONE

	def __post_init__(self):
		if not 0 <= self.start_hour < self.end_hour <= 24:
			raise SchedulingConfigError(
				f"Invalid operating window {self.start_hour}:00-{self.end_hour}:00"
			)
		if self.slot_minutes <= 0:
			raise SchedulingConfigError(f"slot_minutes must be > 0, got {self.slot_minutes}")
		if ((self.end_hour - self.start_hour) * 60) % self.slot_minutes != 0:
			raise SchedulingConfigError(
				f"slot_minutes={self.slot_minutes} does not divide the operating window"
			)
		if self.max_display_lanes < 1:
			raise SchedulingConfigError(
				f"max_display_lanes must be >= 1, got {self.max_display_lanes}"
			)
		try:
			pytz.timezone(self.timezone)
		except pytz.UnknownTimeZoneError:
			raise SchedulingConfigError(f"Unknown timezone '{self.timezone}'")

	@property
	def tz(self) -> pytz.BaseTzInfo:
		return pytz.timezone(self.timezone)

	@property
	def slots_per_day(self) -> int:
		return (self.end_hour - self.start_hour) * 60 // self.slot_minutes

	def with_overrides(self, **overrides) -> "SchedulingConfig":
		"""Copy with the non-None overrides applied."""
		return replace(self, **{k: v for k, v in overrides.items() if v is not None})


DEFAULT_CONFIG = SchedulingConfig()


def resolve_config(config: Optional[SchedulingConfig]) -> SchedulingConfig:
	return config if config is not None else DEFAULT_CONFIG


def resolve_timezone_name(name: Optional[str]) -> str:
	"""Empty or "system timezone" means the site's system timezone."""
	name = (name or "").strip()
	if not name or name.lower() == SYSTEM_TIMEZONE:
		return get_system_timezone()
	return name


def get_scheduling_config() -> SchedulingConfig:
	"""
	Build the SchedulingConfig from the Scheduling Settings single.

	Empty fields fall back to the defaults; a never-saved single (end_hour
	0) yields the default window.
	"""
	settings = frappe.get_cached_doc("Scheduling Settings")
	tz_name = resolve_timezone_name(settings.timezone)

	if not settings.end_hour:
		return SchedulingConfig(timezone=tz_name)

	return SchedulingConfig(
		start_hour=settings.start_hour or 0,
		end_hour=settings.end_hour,
		slot_minutes=settings.slot_minutes or DEFAULT_SLOT_MINUTES,
		max_display_lanes=settings.max_display_lanes or DEFAULT_MAX_DISPLAY_LANES,
		timezone=tz_name,
	)


def get_rooms() -> Tuple[str, ...]:
	"""Rooms configured as the Select options of Appointment.room."""
	field = frappe.get_meta("Appointment").get_field("room")
	if not field or not field.options:
		return DEFAULT_ROOMS

	rooms = tuple(option.strip() for option in field.options.split("\n") if option.strip())
	return rooms or DEFAULT_ROOMS
