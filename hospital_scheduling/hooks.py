app_name = "hospital_scheduling"
app_title = "Hospital Scheduling"
app_publisher = "Hospital Scheduling Contributors"
app_description = "Room availability, calendar lane layout and drag-and-drop rescheduling for hospital appointments"
app_email = "dev@hospital-scheduling.local"
app_license = "mit"

# Apps
# ------------------

# required_apps = []

# Includes in <head>
# ------------------

# include js, css files in header of desk.html
# app_include_css = "/assets/hospital_scheduling/css/hospital_scheduling.css"
# app_include_js = "/assets/hospital_scheduling/js/hospital_scheduling.js"

# include js in doctype views
# doctype_js = {"doctype" : "public/js/doctype.js"}
# doctype_calendar_js = {"doctype" : "public/js/doctype_calendar.js"}

# Installation
# ------------

after_install = "hospital_scheduling.install.after_install"

# Document Events
# ---------------
# Hook on document methods and events

# doc_events = {
# 	"*": {
# 		"on_update": "method",
# 		"on_cancel": "method",
# 		"on_trash": "method"
# 	}
# }

# Testing
# -------

# before_tests = "hospital_scheduling.install.before_tests"

# Overriding Methods
# ------------------------------
#
# override_whitelisted_methods = {
# 	"frappe.desk.doctype.event.event.get_events": "hospital_scheduling.event.get_events"
# }

# Request Events
# ----------------
# before_request = ["hospital_scheduling.utils.before_request"]
# after_request = ["hospital_scheduling.utils.after_request"]

# Automatically update python controller files with type annotations for this app.
# export_python_type_annotations = True
