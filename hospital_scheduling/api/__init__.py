"""
Hospital Scheduling API

Structure:
    api/
    ├── __init__.py              # This file
    ├── scheduling_api.py        # Whitelisted calendar endpoints
    └── shared/                  # Shared utilities
        ├── __init__.py          # Re-exports validators
        └── validators.py        # Input validators

Usage:
    frappe.call("hospital_scheduling.api.scheduling_api.get_available_slots", ...)
"""
