"""Constants and defaults.

Note: Keep constants here to avoid magic strings spread across code.
"""

DEFAULT_LOCATION = "School Campus"
DEFAULT_AVAILABILITY = "Mon-Fri, 7am-4pm"
NOT_AVAILABLE = "N/A"
DEFAULT_NATIONALITY = "India"
END_OF_ROUTE = "End of Route"

DEFAULT_ADMIN_EMAIL = "admin@sdm.in"
DEFAULT_EXPIRY_WARNING_DAYS = 30

MIN_STUDENT_AGE = 3
MIN_TEACHER_AGE = 18
MIN_PASSWORD_LENGTH = 6

AVATAR_URL_TEMPLATE = "https://picsum.photos/seed/{seed}/100/100"
STOP_TIME_FORMAT = "%I:%M %p"


def avatar_url(seed: str) -> str:
    return AVATAR_URL_TEMPLATE.format(seed=seed)
