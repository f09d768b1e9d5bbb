"""
checker_constants.py
user: vhao
date: 10-17-2026

Set USING_AWS_LAMBDA to True if running on AWS lambda.
"""

import os

# TTP APIs
SCHEDULER_API = "https://ttp.cbp.dhs.gov/schedulerapi/slots"
LOCATIONS_API = "https://ttp.cbp.dhs.gov/schedulerapi/locations/"

# Fixed locations params, serviceName is added per request
LOCATIONS_PARAMS = {
    "temporary": "false",
    "inviteOnly": "false",
    "operational": "true",
}

# Default scheduler params, limit and locationId are added per request
SCHEDULER_PARAMS = {
    "orderBy": "soonest",
    "minimum": 1,
}

# Trusted Traveler Programs to serviceName sent to the locations API
ttp_to_service_name = {
    "Global Entry": "Global Entry",
    "NEXUS": "NEXUS",
    "SENTRI": "SENTRI",
    "FAST Mexico": "U.S. / Mexico FAST",
    "FAST Canada": "U.S. / Canada FAST",
}

# Selected Trusted Traveler Program to check for
SELECTED_TTP = "Global Entry"

# Only locations in these states are checked
DEFAULT_REGIONS = ["OH", "KY", "IN", "IL", "TN"]

# Number of soonest appointments requested per location
DEFAULT_LIMIT = 1

# All appointment times are displayed in this timezone
DISPLAY_TIMEZONE = "America/New_York"

# Shown when a slot's locationId is missing from the locations list
UNKNOWN_LOCATION = "Unknown"

# Networking
REQUEST_TIMEOUT: float = 10
MAX_CONCURRENT_REQUESTS = 10

# Seconds between checks when running periodically
RERUN_INTERVAL = 5 * 60

# Twilio, texts are only sent when all of these are set
TWILIO_NUMBER: str = ""
TWILIO_SID: str = ""
TWILIO_AUTH: str = ""
NOTIFY_PHONE_NUMBER: str = ""

# AWS Lambda related
USING_AWS_LAMBDA: bool = False

# Log paths
LOG_TO_FILE: bool = False
LOGS_PATH = os.path.join("logs", "checker.log")
