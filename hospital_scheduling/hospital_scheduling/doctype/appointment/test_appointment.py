"""
Tests for doctype/appointment/appointment.py

The validation methods are called on a plain record so no site is needed.
"""

import unittest
from unittest.mock import patch

import frappe

from hospital_scheduling.hospital_scheduling.doctype.appointment.appointment import Appointment
from hospital_scheduling.hospital_scheduling.scheduling.config import DEFAULT_ROOMS, SchedulingConfig


CONTROLLER = "hospital_scheduling.hospital_scheduling.doctype.appointment.appointment"


def raise_exception(msg, exc=frappe.ValidationError, *args, **kwargs):
	raise exc(msg)


class TestAppointmentValidation(unittest.TestCase):
	"""Tests for Appointment validation."""

	def setUp(self):
		for target, kwargs in (
			(f"{CONTROLLER}._", {"side_effect": lambda msg: msg}),
			(f"{CONTROLLER}.get_rooms", {"return_value": DEFAULT_ROOMS}),
			(f"{CONTROLLER}.get_scheduling_config", {"return_value": SchedulingConfig()}),
			("frappe.throw", {"side_effect": raise_exception})
		):
			patcher = patch(target, **kwargs)
			patcher.start()
			self.addCleanup(patcher.stop)

		self.doc = frappe._dict(
			name="APT-00001",
			room="X-Ray",
			status="Scheduled",
			start_datetime="2026-01-20 09:00:00",
			end_datetime="2026-01-20 09:30:00"
		)

	def test_room_required(self):
		self.doc.room = None
		with self.assertRaises(frappe.ValidationError):
			Appointment._validate_room(self.doc)

	def test_unknown_room(self):
		self.doc.room = "Broom Closet"
		with self.assertRaises(frappe.ValidationError):
			Appointment._validate_room(self.doc)

	def test_end_before_start(self):
		self.doc.end_datetime = "2026-01-20 08:00:00"
		with self.assertRaises(frappe.ValidationError):
			Appointment._validate_datetime_consistency(self.doc)

	def test_zero_duration(self):
		self.doc.end_datetime = self.doc.start_datetime
		with self.assertRaises(frappe.ValidationError):
			Appointment._validate_datetime_consistency(self.doc)

	@patch("frappe.msgprint")
	def test_off_grid_duration_warns(self, msgprint):
		"""A 20-minute booking is allowed with a warning."""
		self.doc.end_datetime = "2026-01-20 09:20:00"

		Appointment._validate_slot_granularity(self.doc)

		msgprint.assert_called_once()
		self.assertEqual(msgprint.call_args.kwargs["indicator"], "yellow")

	@patch("frappe.msgprint")
	def test_on_grid_duration_is_silent(self, msgprint):
		Appointment._validate_slot_granularity(self.doc)
		msgprint.assert_not_called()

	@patch("frappe.msgprint")
	@patch(f"{CONTROLLER}.list_appointments")
	def test_room_conflict_warns(self, list_appointments, msgprint):
		"""Double-booking is reported, not blocked."""
		list_appointments.return_value = [
			frappe._dict(
				name="APT-00002",
				room="X-Ray",
				start_datetime="2026-01-20 09:15:00",
				end_datetime="2026-01-20 10:00:00"
			)
		]

		Appointment._warn_room_conflicts(self.doc)

		msgprint.assert_called_once()
		self.assertIn("APT-00002", msgprint.call_args.args[0])
		self.assertEqual(msgprint.call_args.kwargs["indicator"], "orange")

	@patch("frappe.msgprint")
	@patch(f"{CONTROLLER}.list_appointments")
	def test_cancelled_skips_conflict_check(self, list_appointments, msgprint):
		self.doc.status = "Cancelled"

		Appointment._warn_room_conflicts(self.doc)

		list_appointments.assert_not_called()
		msgprint.assert_not_called()


def run_tests():
	"""Run all tests in this module."""
	unittest.main()
