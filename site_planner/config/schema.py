# site_planner/config/schema.py
"""
Pydantic configuration models for site-planner.

All models use extra="ignore" to allow unknown YAML keys without crashing.
"""

from datetime import date
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from site_planner.scheduling.holidays import FRENCH_HOLIDAYS


class WorkHoursConfig(BaseModel):
    """Daily work blocks (whole hours)."""

    model_config = ConfigDict(extra="ignore")

    morning_start: int = Field(default=8, ge=0, le=24, description="Opening hour")
    morning_end: int = Field(default=12, ge=0, le=24, description="Start of the midday break")
    afternoon_start: int = Field(default=13, ge=0, le=24, description="End of the midday break")
    afternoon_end: int = Field(default=17, ge=0, le=24, description="Closing hour")

    @model_validator(mode="after")
    def _check_order(self) -> "WorkHoursConfig":
        if not (
            self.morning_start < self.morning_end <= self.afternoon_start < self.afternoon_end
        ):
            raise ValueError(
                "work hours must satisfy morning_start < morning_end <= "
                "afternoon_start < afternoon_end"
            )
        return self


class CalendarConfig(BaseModel):
    """Working calendar configuration."""

    model_config = ConfigDict(extra="ignore")

    work_hours: WorkHoursConfig = Field(default_factory=WorkHoursConfig)
    weekend_days: list[int] = Field(
        default_factory=lambda: [5, 6],
        description="Non-working weekdays (0=Monday ... 6=Sunday)",
    )
    holidays: list[date] = Field(
        default_factory=lambda: list(FRENCH_HOLIDAYS),
        description="Non-working dates (YYYY-MM-DD)",
    )

    @model_validator(mode="after")
    def _check_weekend(self) -> "CalendarConfig":
        if any(not 0 <= d <= 6 for d in self.weekend_days):
            raise ValueError("weekend_days must be weekday numbers within 0-6")
        if len(set(self.weekend_days)) >= 7:
            raise ValueError("weekend_days must leave at least one working weekday")
        return self


class StorageConfig(BaseModel):
    """Persistence configuration."""

    model_config = ConfigDict(extra="ignore")

    db_path: str | None = Field(
        default=None,
        description="SQLite database path (defaults to phases.db in the config directory)",
    )
    group_metadata: Literal["placeholder", "entity"] = Field(
        default="placeholder",
        description="Where group label/budget live: placeholder row or group record",
    )
    write_retries: int = Field(
        default=3, ge=1, le=10, description="Attempts per write on a locked database"
    )


class OutputConfig(BaseModel):
    """Output configuration."""

    model_config = ConfigDict(extra="ignore")

    verbosity: Literal["quiet", "normal", "verbose"] = Field(
        default="normal", description="Logging verbosity level"
    )


class SitePlannerConfig(BaseModel):
    """Root configuration for site-planner."""

    model_config = ConfigDict(extra="ignore")

    calendar: CalendarConfig = Field(default_factory=CalendarConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
