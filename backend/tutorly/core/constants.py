"""Application-wide constants for the Tutorly platform."""

from __future__ import annotations

BRAND_NAME = "Tutorly"

API_TITLE = f"{BRAND_NAME} API"
API_DESCRIPTION = "Tutoring marketplace: teacher directory, weekly availability and bookings"
API_VERSION = "1.0.0"

# Booking duration constraints (minutes)
MIN_BOOKING_DURATION = 15
MAX_BOOKING_DURATION = 480

# Text constraints
MIN_NAME_LENGTH = 2
MIN_PASSWORD_LENGTH = 6
MAX_NOTES_LENGTH = 500
MAX_REVIEW_LENGTH = 1000

# Rating bounds
MIN_RATING = 1
MAX_RATING = 5

# Query limits
DEFAULT_PAGE_LIMIT = 10
MAX_PAGE_LIMIT = 100

# HH:MM with optional leading zero on the hour
TIME_PATTERN = r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$"
