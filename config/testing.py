SECRET_KEY = "test-secret"

TIMEZONE = "Europe/Zagreb"

# tests run against the built-in company rules, never the local .env
POLICY = {}

RECAP_TOP_N = 5

DEBUG = False
TESTING = True

LOG_LEVEL = "WARNING"
