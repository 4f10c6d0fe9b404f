import os

from config import policy_from_env

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

TIMEZONE = os.getenv("EPR_TIMEZONE", "Europe/Zagreb")

POLICY = policy_from_env()

RECAP_TOP_N = int(os.getenv("EPR_RECAP_TOP_N", "5"))

DEBUG = True

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
