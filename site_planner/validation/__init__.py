# site_planner/validation/__init__.py
"""Input validation and sanitization utilities."""

from .sanitize import (
    MAX_DURATION_HOURS,
    parse_date,
    sanitize_label,
    sanitize_phase_id,
    sanitize_project_id,
    validate_budget,
    validate_duration,
    validate_group_number,
    validate_hour,
)

__all__ = [
    "MAX_DURATION_HOURS",
    "sanitize_project_id",
    "sanitize_phase_id",
    "sanitize_label",
    "parse_date",
    "validate_hour",
    "validate_duration",
    "validate_budget",
    "validate_group_number",
]
