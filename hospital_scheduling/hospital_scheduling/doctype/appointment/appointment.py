# Copyright (c) 2026, Hospital Scheduling Contributors
# For license information, please see license.txt

"""
Appointment DocType

A patient booking of one hospital room for a time range.
"""

import frappe
from frappe import _
from frappe.model.document import Document
from frappe.utils import get_datetime

from hospital_scheduling.hospital_scheduling.scheduling.config import get_rooms, get_scheduling_config
from hospital_scheduling.hospital_scheduling.scheduling.reschedule import find_conflicts
from hospital_scheduling.hospital_scheduling.scheduling.store import list_appointments


class Appointment(Document):
	"""
	Appointment DocType with scheduling validation.

	Double-bookings are advisory: they are reported to the user but never
	block the save (last write wins).
	"""

	def validate(self) -> None:
		"""
		Validation before save.

		Runs:
		1. Room required and configured
		2. start_datetime < end_datetime
		3. Duration vs slot granularity (warning)
		4. Room double-booking (warning)
		"""
		self._validate_room()
		self._validate_datetime_consistency()
		self._validate_slot_granularity()
		self._warn_room_conflicts()

	# ===== VALIDATION METHODS =====

	def _validate_room(self) -> None:
		"""Room is required and must be one of the configured rooms."""
		if not self.room:
			frappe.throw(_("Room is required"))

		if self.room not in get_rooms():
			frappe.throw(_("Room {0} is not configured").format(self.room))

	def _validate_datetime_consistency(self) -> None:
		"""Validates that start_datetime < end_datetime."""
		if not self.start_datetime or not self.end_datetime:
			frappe.throw(_("Start DateTime and End DateTime are required"))

		start = get_datetime(self.start_datetime)
		end = get_datetime(self.end_datetime)

		if start >= end:
			frappe.throw(_("Start DateTime must be before End DateTime"))

	def _validate_slot_granularity(self) -> None:
		"""
		Warns when the duration is not a multiple of the slot length.

		Off-grid durations are allowed, they occupy every slot they touch.
		"""
		slot_minutes = get_scheduling_config().slot_minutes

		start = get_datetime(self.start_datetime)
		end = get_datetime(self.end_datetime)
		duration_minutes = (end - start).total_seconds() / 60

		if duration_minutes % slot_minutes != 0:
			frappe.msgprint(
				_("The duration ({0} min) is not a multiple of the slot length ({1} min)").format(
					int(duration_minutes), slot_minutes
				),
				indicator="yellow",
				alert=True
			)

	def _warn_room_conflicts(self) -> None:
		"""Reports other appointments booked in the same room at the same time."""
		if self.status == "Cancelled":
			return

		start = get_datetime(self.start_datetime)
		end = get_datetime(self.end_datetime)

		same_room = list_appointments(
			filters={"room": self.room},
			from_date=start.date(),
			to_date=end.date()
		)

		conflicts = find_conflicts(
			self,
			start,
			end,
			same_room,
			get_scheduling_config()
		)

		if conflicts:
			frappe.msgprint(
				_("Room {0} is already booked in this time range by: {1}").format(
					self.room, ", ".join(conflicts)
				),
				indicator="orange",
				alert=True
			)
