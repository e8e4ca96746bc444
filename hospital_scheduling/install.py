"""
Installation hooks.
"""

import frappe

from hospital_scheduling.hospital_scheduling.scheduling.config import DEFAULT_CONFIG


def after_install() -> None:
	"""Seed Scheduling Settings with the default operating window (08:00-18:00, 30 min, 4 lanes)."""
	settings = frappe.get_single("Scheduling Settings")
	settings.start_hour = DEFAULT_CONFIG.start_hour
	settings.end_hour = DEFAULT_CONFIG.end_hour
	settings.slot_minutes = DEFAULT_CONFIG.slot_minutes
	settings.max_display_lanes = DEFAULT_CONFIG.max_display_lanes
	settings.save(ignore_permissions=True)

	frappe.logger("hospital_scheduling").info("Scheduling Settings initialised with defaults")
