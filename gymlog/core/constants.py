"""Application constants."""

# Exercise defaults (new exercises in a plan)
DEFAULT_SETS = 3
DEFAULT_REPS = 12
DEFAULT_REST_SECONDS = 60

# Exercise validation ranges
MIN_DEFAULT_SETS = 1
MAX_DEFAULT_SETS = 10
MIN_DEFAULT_REPS = 1
MAX_DEFAULT_REPS = 50
MAX_REST_SECONDS = 300

# Plan names
MAX_PLAN_NAME_LENGTH = 100

# Brzycki 1RM coefficients
BRZYCKI_INTERCEPT = 1.0278
BRZYCKI_SLOPE = 0.0278
BRZYCKI_MAX_REPS = 37

# Rest timer completion notification
REST_NOTIFICATION_ID = "rest-timer-complete"
REST_NOTIFICATION_DELAY_SECONDS = 1
