"""Input validation helpers shared by services and routes."""

from __future__ import annotations

import re
from datetime import datetime
from typing import Any

from flask import current_app, has_app_context

from utils.errors import ValidationError
from utils.time import to_naive_utc, utcnow

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 20
USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_-]+$")

GAME_NAME_MIN_LENGTH = 2
GAME_NAME_MAX_LENGTH = 100
GAME_CATEGORIES = ("video", "table", "card")
IMAGE_URL_MAX_LENGTH = 500
NOTES_MAX_LENGTH = 500

# SQLite INTEGER is a signed 64-bit value.
MAX_ID = 2**63 - 1


def log_validation_error(err: ValidationError, *, context: str | None = None) -> None:
    if not has_app_context():
        return
    suffix = f" ({context})" if context else ""
    current_app.logger.warning(
        "Validation error%s: field=%s value=%r message=%s",
        suffix,
        err.field,
        err.value,
        err.message,
    )


def sanitize_string(value: Any, max_length: int = 255) -> str:
    """Strip control characters and surrounding whitespace."""
    if not isinstance(value, str):
        value = str(value) if value is not None else ""
    value = re.sub(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]", "", value)
    return value.strip()[:max_length]


def parse_id(value: Any, *, label: str) -> int:
    """Parse a path/body identifier; anything but a positive integer is rejected."""
    message = f"Invalid {label} ID"
    if isinstance(value, bool):
        raise ValidationError(message, field="id", value=value)
    try:
        out = int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError(message, field="id", value=value)
    if out < 1 or out > MAX_ID:
        raise ValidationError(message, field="id", value=value)
    return out


def parse_positive_int(value: Any, *, field: str = "id", min_value: int = 1) -> int:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"Missing {field}.", field=field, value=value)
    if isinstance(value, bool):
        raise ValidationError(f"Invalid {field}.", field=field, value=value)
    try:
        out = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {field}.", field=field, value=value)
    if out < min_value or out > MAX_ID:
        raise ValidationError(f"Invalid {field}.", field=field, value=value)
    return out


def parse_optional_positive_int(value: Any, *, field: str = "id", min_value: int = 1) -> int | None:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return parse_positive_int(value, field=field, min_value=min_value)


def parse_limit(value: Any, *, default: int = 10, maximum: int = 100) -> int:
    if value is None or (isinstance(value, str) and not value.strip()):
        return default
    return min(parse_positive_int(value, field="limit"), maximum)


def validate_username(value: Any) -> str:
    """Return the trimmed username or raise ``ValidationError``."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("Username is required", field="username", value=value)
    username = value.strip()
    if len(username) < USERNAME_MIN_LENGTH:
        raise ValidationError(
            f"Username must be at least {USERNAME_MIN_LENGTH} characters long",
            field="username",
            value=value,
        )
    if len(username) > USERNAME_MAX_LENGTH:
        raise ValidationError(
            f"Username must be at most {USERNAME_MAX_LENGTH} characters long",
            field="username",
            value=value,
        )
    if not USERNAME_PATTERN.match(username):
        raise ValidationError(
            "Username can only contain letters, numbers, underscores, and hyphens",
            field="username",
            value=value,
        )
    return username


def validate_game_name(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("Game name is required", field="name", value=value)
    name = sanitize_string(value, max_length=GAME_NAME_MAX_LENGTH + 1)
    if len(name) < GAME_NAME_MIN_LENGTH:
        raise ValidationError(
            f"Game name must be at least {GAME_NAME_MIN_LENGTH} characters long",
            field="name",
            value=value,
        )
    if len(name) > GAME_NAME_MAX_LENGTH:
        raise ValidationError(
            f"Game name must be at most {GAME_NAME_MAX_LENGTH} characters long",
            field="name",
            value=value,
        )
    return name


def validate_game_category(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("Game type is required", field="type", value=value)
    category = value.strip().lower()
    # Older clients send video_game / table_game / card_game.
    if category.endswith("_game"):
        category = category[: -len("_game")]
    if category not in GAME_CATEGORIES:
        raise ValidationError(
            f"Game type must be one of: {', '.join(GAME_CATEGORIES)}",
            field="type",
            value=value,
        )
    return category


def validate_image_url(value: Any) -> str | None:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if not isinstance(value, str):
        raise ValidationError("Invalid image reference", field="image_url", value=value)
    url = value.strip()
    if len(url) > IMAGE_URL_MAX_LENGTH:
        raise ValidationError(
            f"Image reference must be at most {IMAGE_URL_MAX_LENGTH} characters long",
            field="image_url",
            value=value,
        )
    if not (url.startswith(("http://", "https://")) or (url.startswith("/") and not url.startswith("//"))):
        raise ValidationError("Invalid image reference", field="image_url", value=value)
    return url


def validate_notes(value: Any) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError("Notes must be text", field="notes", value=value)
    notes = sanitize_string(value, max_length=NOTES_MAX_LENGTH + 1)
    if len(notes) > NOTES_MAX_LENGTH:
        raise ValidationError(
            f"Notes cannot exceed {NOTES_MAX_LENGTH} characters", field="notes", value=value
        )
    return notes or None


def parse_score(value: Any, *, field: str = "score") -> float:
    """Scores are any finite JSON number; booleans and numeric strings are rejected."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError("Score must be a number", field=field, value=value)
    score = float(value)
    if score != score or score in (float("inf"), float("-inf")):
        raise ValidationError("Score must be a number", field=field, value=value)
    return score


def parse_played_at(value: Any) -> datetime:
    """Parse an ISO-8601 timestamp (default: now) and reject future values."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return utcnow()
    if not isinstance(value, str):
        raise ValidationError("Invalid played at date", field="played_at", value=value)
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        played_at = to_naive_utc(datetime.fromisoformat(text))
    except ValueError:
        raise ValidationError("Invalid played at date", field="played_at", value=value)
    if played_at > utcnow():
        raise ValidationError("Played at date cannot be in the future", field="played_at", value=value)
    return played_at
