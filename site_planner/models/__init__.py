# site_planner/models/__init__.py
"""
Data models for site-planner.

Provides internal sub-phase records, the store contract, and Pydantic
response models.
"""

from site_planner.models.phases import (
    PLACEHOLDER_SUB_NUMBER,
    GroupRecord,
    HistoryEntry,
    InMemoryPhaseStore,
    PhaseGroup,
    SubPhase,
    SubPhaseUpdate,
    generate_phase_id,
)
from site_planner.models.store import PhaseStore

__all__ = [
    # Records
    "SubPhase",
    "SubPhaseUpdate",
    "PhaseGroup",
    "GroupRecord",
    "HistoryEntry",
    "PLACEHOLDER_SUB_NUMBER",
    # Storage
    "PhaseStore",
    "InMemoryPhaseStore",
    "generate_phase_id",
]
