"""Application-wide constants for the TutorBook platform."""

BRAND_NAME = "TutorBook"

# Session duration constraints
MIN_SESSION_DURATION = 15  # minutes
MAX_SESSION_DURATION = 480  # minutes (8 hours)

# Rating scale shared by student ratings and tutor feedback
MIN_RATING = 1
MAX_RATING = 5

# Progress scale reported by tutors on a booking
MIN_PROGRESS = 0
MAX_PROGRESS = 100

# Free-text limits
MAX_COMMENT_LENGTH = 1000
MAX_QUESTION_LENGTH = 4000

DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M"
