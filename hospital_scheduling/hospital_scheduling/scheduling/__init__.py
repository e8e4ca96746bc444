"""
Scheduling Services Module

This module provides the appointment scheduling engines:
- Availability calculation per room and day (availability.py)
- Lane layout for overlapping appointments (lanes.py)
- Drag-and-drop reschedule arithmetic (reschedule.py)
- Calendar view windows and list grouping (views.py)
- Frappe-backed appointment store (store.py)
"""
