import os

# env var -> AttendancePolicy field; unset variables keep the built-in default
POLICY_ENV_VARS = {
    "EPR_NOMINAL_START": "nominal_start",
    "EPR_NOMINAL_END": "nominal_end",
    "EPR_LATE_GRACE_MAX_MINUTES": "late_grace_max_minutes",
    "EPR_LATE_DEBT_MULTIPLIER": "late_debt_multiplier",
    "EPR_SUSPICIOUS_SHORT_MAX_MINUTES": "suspicious_short_max_minutes",
    "EPR_ONSITE_READER_ADDRESSES": "onsite_reader_addresses",
    "EPR_WFH_NOTE_MARKER": "wfh_note_marker",
}


def get_settings_module() -> str:
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "config.production"

    if env in {"test", "testing"}:
        return "config.testing"

    return "config.development"


def policy_from_env() -> dict:
    return {field: os.getenv(var) for var, field in POLICY_ENV_VARS.items() if os.getenv(var)}
