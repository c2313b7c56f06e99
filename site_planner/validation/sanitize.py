# site_planner/validation/sanitize.py
"""
Input sanitization and validation utilities.

Used by the tool layer: every failure surfaces as a ToolError with a
message fit for the caller.
"""

import logging
import re
from datetime import date

from fastmcp.exceptions import ToolError

logger = logging.getLogger(__name__)

# Bounds of the sub-phase duration field in the phase editor
MIN_DURATION_HOURS = 1
MAX_DURATION_HOURS = 500

_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


def sanitize_project_id(project_id: str) -> str:
    """
    Sanitize and validate a project ID.

    Project IDs are 1-64 letters, digits, underscores or hyphens.

    Raises:
        ToolError: If the ID format is invalid
    """
    cleaned = (project_id or "").strip()
    if not _ID_PATTERN.match(cleaned):
        raise ToolError(
            f"Invalid project ID '{project_id}': must be 1-64 letters, digits, '_' or '-'"
        )
    return cleaned


def sanitize_phase_id(phase_id: str) -> str:
    """
    Sanitize and validate a sub-phase ID.

    Raises:
        ToolError: If the ID format is invalid
    """
    cleaned = (phase_id or "").strip()
    if not _ID_PATTERN.match(cleaned):
        raise ToolError(
            f"Invalid phase ID '{phase_id}': must be 1-64 letters, digits, '_' or '-'"
        )
    return cleaned


def sanitize_label(text: str | None, max_length: int = 200) -> str | None:
    """
    Strip a label, mapping blank input to None.

    Labels longer than max_length are truncated with a warning.
    """
    if text is None:
        return None
    cleaned = text.strip()
    if not cleaned:
        return None
    if len(cleaned) > max_length:
        logger.warning(f"Label truncated from {len(cleaned)} to {max_length} characters")
        cleaned = cleaned[:max_length]
    return cleaned


def parse_date(value: str | date, field: str = "date") -> date:
    """
    Parse an ISO date (YYYY-MM-DD).

    Args:
        value: ISO string or date
        field: Field name used in the error message

    Returns:
        Parsed date

    Raises:
        ToolError: If the value is not a valid ISO date
    """
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError:
        raise ToolError(f"Invalid {field} '{value}': expected YYYY-MM-DD")


def validate_hour(value: int, field: str = "hour") -> int:
    """
    Validate an hour of day (0-23).

    Raises:
        ToolError: If the hour is not an integer within 0-23
    """
    if not isinstance(value, int) or isinstance(value, bool) or not 0 <= value <= 23:
        raise ToolError(f"Invalid {field} {value!r}: must be an integer within 0-23")
    return value


def validate_duration(value: int) -> int:
    """
    Validate a sub-phase duration in working hours.

    Raises:
        ToolError: If the duration is outside MIN_DURATION_HOURS-MAX_DURATION_HOURS
    """
    if (
        not isinstance(value, int)
        or isinstance(value, bool)
        or not MIN_DURATION_HOURS <= value <= MAX_DURATION_HOURS
    ):
        raise ToolError(
            f"Invalid duration {value!r}: must be between "
            f"{MIN_DURATION_HOURS} and {MAX_DURATION_HOURS} hours"
        )
    return value


def validate_budget(value: int | None) -> int | None:
    """
    Validate a group budget (None or 0 means no budget).

    Raises:
        ToolError: If the budget is negative or not an integer
    """
    if value is None:
        return None
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        raise ToolError(f"Invalid budget {value!r}: must be a non-negative integer")
    return value


def validate_group_number(value: int) -> int:
    """
    Validate a phase group number (positive integer).

    Raises:
        ToolError: If the number is not a positive integer
    """
    if not isinstance(value, int) or isinstance(value, bool) or value < 1:
        raise ToolError(f"Invalid group number {value!r}: must be a positive integer")
    return value
