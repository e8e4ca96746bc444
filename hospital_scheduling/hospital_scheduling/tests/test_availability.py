"""
Tests for scheduling/availability.py

Tests the slot grid, room occupancy and half-open interval semantics.
"""

import unittest
from unittest.mock import patch
from datetime import date, datetime

import pytz

from hospital_scheduling.hospital_scheduling.scheduling.availability import (
	generate_slot_grid,
	get_available_end_times,
	get_available_slots,
	get_day_slots,
	get_room_availability
)
from hospital_scheduling.hospital_scheduling.scheduling.config import DEFAULT_ROOMS, SchedulingConfig
from hospital_scheduling.hospital_scheduling.scheduling.errors import UnknownRoomError


DAY = date(2026, 1, 20)


def make_appointment(name, room, start, end):
	return {
		"name": name,
		"room": room,
		"start_datetime": start,
		"end_datetime": end,
		"status": "Scheduled"
	}


def slot_times(slots):
	return [slot["time"] for slot in slots]


class TestSlotGrid(unittest.TestCase):
	"""Tests for generate_slot_grid."""

	def test_default_grid(self):
		"""Default window is 08:00-18:00 in 30-minute slots."""
		grid = generate_slot_grid(DAY)

		self.assertEqual(len(grid), 20)
		self.assertEqual(grid[0]["time"], "08:00")
		self.assertEqual(grid[-1]["time"], "17:30")
		self.assertEqual(grid[-1]["end"], pytz.UTC.localize(datetime(2026, 1, 20, 18, 0)))
		self.assertTrue(all(slot["is_available"] for slot in grid))

	def test_grid_accepts_date_string(self):
		"""Dates can be passed as YYYY-MM-DD strings."""
		grid = generate_slot_grid("2026-01-20")
		self.assertEqual(grid[0]["date"], "2026-01-20")
		self.assertEqual(grid[0]["start"], pytz.UTC.localize(datetime(2026, 1, 20, 8, 0)))

	def test_custom_window(self):
		"""Custom window and granularity."""
		config = SchedulingConfig(start_hour=9, end_hour=12, slot_minutes=60)
		grid = generate_slot_grid(DAY, config)
		self.assertEqual(slot_times(grid), ["09:00", "10:00", "11:00"])

	def test_grid_is_restartable(self):
		"""Two calls give the same grid."""
		self.assertEqual(generate_slot_grid(DAY), generate_slot_grid(DAY))


class TestAvailableSlots(unittest.TestCase):
	"""Tests for get_available_slots / get_day_slots."""

	def test_xray_single_appointment(self):
		"""One X-Ray booking 10:00-10:30 removes exactly the 10:00 slot."""
		appointments = [
			make_appointment("APT-1", "X-Ray", "2026-01-20 10:00:00", "2026-01-20 10:30:00")
		]

		times = slot_times(get_available_slots("X-Ray", DAY, appointments))

		self.assertEqual(len(times), 19)
		self.assertNotIn("10:00", times)
		self.assertIn("09:30", times)
		self.assertIn("10:30", times)
		self.assertIn("11:00", times)

	def test_end_on_boundary_leaves_next_slot_free(self):
		"""[09:00, 09:30) occupies 09:00 and leaves 09:30 available."""
		appointments = [
			make_appointment("APT-1", "Labor", datetime(2026, 1, 20, 9, 0), datetime(2026, 1, 20, 9, 30))
		]

		times = slot_times(get_available_slots("Labor", DAY, appointments))

		self.assertNotIn("09:00", times)
		self.assertIn("09:30", times)

	def test_partial_overlap_occupies_whole_slots(self):
		"""[09:15, 09:45) occupies both the 09:00 and 09:30 slots."""
		appointments = [
			make_appointment("APT-1", "Labor", datetime(2026, 1, 20, 9, 15), datetime(2026, 1, 20, 9, 45))
		]

		times = slot_times(get_available_slots("Labor", DAY, appointments))

		self.assertNotIn("09:00", times)
		self.assertNotIn("09:30", times)
		self.assertIn("08:30", times)
		self.assertIn("10:00", times)

	def test_long_appointment_occupies_every_touched_slot(self):
		"""A 2h15 booking blocks five slots."""
		appointments = [
			make_appointment("APT-1", "Surgery Room", "2026-01-20 13:00:00", "2026-01-20 15:15:00")
		]

		slots = get_day_slots("Surgery Room", DAY, appointments)
		occupied = [slot["time"] for slot in slots if not slot["is_available"]]

		self.assertEqual(occupied, ["13:00", "13:30", "14:00", "14:30", "15:00"])

	def test_other_rooms_do_not_block(self):
		"""Only bookings of the selected room count."""
		appointments = [
			make_appointment("APT-1", "Cardiology", "2026-01-20 10:00:00", "2026-01-20 11:00:00")
		]

		self.assertEqual(len(get_available_slots("X-Ray", DAY, appointments)), 20)

	def test_no_room_selected(self):
		"""No room selected returns an empty list, not an error."""
		appointments = [
			make_appointment("APT-1", "X-Ray", "2026-01-20 10:00:00", "2026-01-20 10:30:00")
		]

		self.assertEqual(get_available_slots(None, DAY, appointments), [])
		self.assertEqual(get_available_slots("", DAY, appointments), [])

	def test_no_appointments_full_grid(self):
		"""A room without bookings is fully available."""
		slots = get_available_slots("X-Ray", DAY, [])
		self.assertEqual(slot_times(slots), slot_times(generate_slot_grid(DAY)))

	def test_appointments_outside_window(self):
		"""Bookings before opening or after closing contribute nothing."""
		appointments = [
			make_appointment("APT-1", "X-Ray", "2026-01-20 06:00:00", "2026-01-20 07:30:00"),
			make_appointment("APT-2", "X-Ray", "2026-01-20 18:00:00", "2026-01-20 20:00:00"),
			make_appointment("APT-3", "X-Ray", "2026-01-21 10:00:00", "2026-01-21 11:00:00")
		]

		self.assertEqual(len(get_available_slots("X-Ray", DAY, appointments)), 20)

	def test_appointment_from_previous_day(self):
		"""An overnight booking still occupies the morning slots it covers."""
		appointments = [
			make_appointment("APT-1", "Emergency Room", "2026-01-19 22:00:00", "2026-01-20 08:45:00")
		]

		times = slot_times(get_available_slots("Emergency Room", DAY, appointments))

		self.assertNotIn("08:00", times)
		self.assertNotIn("08:30", times)
		self.assertEqual(times[0], "09:00")

	def test_results_are_chronological(self):
		"""Free slots come back in time order whatever the input order."""
		appointments = [
			make_appointment("APT-2", "X-Ray", "2026-01-20 15:00:00", "2026-01-20 16:00:00"),
			make_appointment("APT-1", "X-Ray", "2026-01-20 09:00:00", "2026-01-20 09:30:00")
		]

		slots = get_available_slots("X-Ray", DAY, appointments)
		starts = [slot["start"] for slot in slots]
		self.assertEqual(starts, sorted(starts))

	def test_unknown_room_raises(self):
		"""A room outside the configured list is a programming error."""
		with self.assertRaises(UnknownRoomError):
			get_available_slots("Broom Closet", DAY, [], rooms=DEFAULT_ROOMS)

	def test_known_room_with_room_list(self):
		"""A configured room passes the room list check."""
		slots = get_available_slots("X-Ray", DAY, [], rooms=DEFAULT_ROOMS)
		self.assertEqual(len(slots), 20)

	@patch("frappe.logger")
	def test_malformed_appointment_is_skipped(self, logger):
		"""A booking with end <= start is logged and ignored."""
		appointments = [
			make_appointment("APT-BAD", "X-Ray", "2026-01-20 11:00:00", "2026-01-20 10:00:00"),
			make_appointment("APT-NONE", "X-Ray", None, "2026-01-20 10:00:00"),
			make_appointment("APT-1", "X-Ray", "2026-01-20 09:00:00", "2026-01-20 09:30:00")
		]

		times = slot_times(get_available_slots("X-Ray", DAY, appointments))

		self.assertEqual(len(times), 19)
		self.assertNotIn("09:00", times)
		self.assertIn("10:00", times)
		self.assertEqual(logger.return_value.warning.call_count, 2)

	def test_aware_timestamps_on_hospital_clock(self):
		"""Aware instants are placed on the configured hospital clock."""
		config = SchedulingConfig(timezone="America/Bogota")
		# 15:00 UTC == 10:00 in Bogota (UTC-5)
		appointments = [
			make_appointment(
				"APT-1",
				"X-Ray",
				pytz.UTC.localize(datetime(2026, 1, 20, 15, 0)),
				pytz.UTC.localize(datetime(2026, 1, 20, 15, 30))
			)
		]

		times = slot_times(get_available_slots("X-Ray", DAY, appointments, config))

		self.assertNotIn("10:00", times)
		self.assertIn("09:30", times)
		self.assertEqual(len(times), 19)


class TestAvailableEndTimes(unittest.TestCase):
	"""Tests for get_available_end_times."""

	def setUp(self):
		self.appointments = [
			make_appointment("APT-1", "X-Ray", "2026-01-20 10:00:00", "2026-01-20 10:30:00")
		]

	def test_end_times_stop_at_next_booking(self):
		"""From 09:00 the booking can end at 09:30 or 10:00."""
		end_times = get_available_end_times("X-Ray", DAY, "09:00", self.appointments)
		self.assertEqual(end_times, ["09:30", "10:00"])

	def test_end_times_run_to_closing(self):
		"""From 17:00 the booking can end at 17:30 or 18:00."""
		end_times = get_available_end_times("X-Ray", DAY, "17:00", self.appointments)
		self.assertEqual(end_times, ["17:30", "18:00"])

	def test_occupied_start_has_no_end_times(self):
		"""An occupied start slot offers nothing."""
		self.assertEqual(get_available_end_times("X-Ray", DAY, "10:00", self.appointments), [])

	def test_off_grid_start_has_no_end_times(self):
		"""A start that is not on the grid offers nothing."""
		self.assertEqual(get_available_end_times("X-Ray", DAY, "09:10", self.appointments), [])

	def test_datetime_start(self):
		"""The start can be a datetime."""
		end_times = get_available_end_times("X-Ray", DAY, datetime(2026, 1, 20, 9, 30), self.appointments)
		self.assertEqual(end_times, ["10:00"])


class TestRoomAvailability(unittest.TestCase):
	"""Tests for get_room_availability."""

	def test_every_room_is_reported(self):
		"""One entry per configured room, each with its own occupancy."""
		appointments = [
			make_appointment("APT-1", "X-Ray", "2026-01-20 10:00:00", "2026-01-20 11:00:00"),
			make_appointment("APT-2", "Labor", "2026-01-20 08:00:00", "2026-01-20 08:30:00")
		]

		result = get_room_availability(DAY, appointments, ["X-Ray", "Labor", "Neurology"])

		self.assertEqual(set(result), {"X-Ray", "Labor", "Neurology"})
		self.assertEqual(len(result["X-Ray"]), 18)
		self.assertEqual(len(result["Labor"]), 19)
		self.assertEqual(len(result["Neurology"]), 20)

	def test_accepts_generator_input(self):
		"""The appointment list is read once for every room."""
		appointments = (
			make_appointment(f"APT-{i}", "X-Ray", "2026-01-20 10:00:00", "2026-01-20 11:00:00")
			for i in range(2)
		)

		result = get_room_availability(DAY, appointments, ["X-Ray", "Labor"])

		self.assertEqual(len(result["X-Ray"]), 18)
		self.assertEqual(len(result["Labor"]), 20)


def run_tests():
	"""Run all tests in this module."""
	unittest.main()
