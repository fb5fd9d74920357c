"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_TOKEN_DAYS = 30
MIN_PASSWORD_LENGTH = 6
DEFAULT_REQUEST_TIMEOUT = 15.0
TOKEN_ALGORITHM = "HS256"
MYSQL_DUPLICATE_ENTRY = 1062
