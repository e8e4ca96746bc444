"""
Scheduling Errors

Exception types raised by the scheduling engines.
All derive from frappe.ValidationError so whitelisted endpoints surface them
as validation failures.
"""

import frappe


class SchedulingError(frappe.ValidationError):
	"""Base class for scheduling engine errors."""
	pass


class InvalidDuration(SchedulingError):
	"""An appointment whose end is not after its start (or has no usable timestamps)."""

	def __init__(self, appointment_name=None, message=None):
		self.appointment_name = appointment_name
		super().__init__(message or f"Appointment {appointment_name or '<unsaved>'} has an invalid duration")


class UnknownRoomError(SchedulingError):
	"""A room identifier that is not part of the configured room list."""
	pass


class SchedulingConfigError(SchedulingError):
	"""Operating window configuration that cannot produce a slot grid."""
	pass
