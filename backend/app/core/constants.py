"""Application-wide constants for the SkillSwap platform."""

from __future__ import annotations

BRAND_NAME = "SkillSwap"
API_VERSION = "1.0.0"
API_TITLE = f"{BRAND_NAME} Scheduling API"

# Text constraints
MAX_NOTES_LENGTH = 2000

# ULID path parameters (Crockford base32, 26 chars)
ULID_PATH_PATTERN = r"^[0-9A-HJKMNP-TV-Z]{26}$"
