# Copyright (c) 2026, Hospital Scheduling Contributors
# For license information, please see license.txt

"""
Scheduling Settings DocType

Single with the operating window used by the scheduling engines.
"""

import frappe
from frappe import _
from frappe.model.document import Document
from frappe.utils import cint

from hospital_scheduling.hospital_scheduling.scheduling.config import SchedulingConfig, resolve_timezone_name
from hospital_scheduling.hospital_scheduling.scheduling.errors import SchedulingConfigError


class SchedulingSettings(Document):
	def validate(self) -> None:
		"""The window must produce a slot grid (see SchedulingConfig)."""
		try:
			SchedulingConfig(
				start_hour=cint(self.start_hour),
				end_hour=cint(self.end_hour),
				slot_minutes=cint(self.slot_minutes),
				max_display_lanes=cint(self.max_display_lanes),
				timezone=resolve_timezone_name(self.timezone)
			)
		except SchedulingConfigError as e:
			frappe.throw(_("Invalid scheduling settings: {0}").format(str(e)))
