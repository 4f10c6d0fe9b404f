import os

from config import policy_from_env

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

TIMEZONE = os.getenv("EPR_TIMEZONE", "Europe/Zagreb")

POLICY = policy_from_env()

RECAP_TOP_N = int(os.getenv("EPR_RECAP_TOP_N", "5"))

DEBUG = False

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
