# site_planner/planning/errors.py
"""Errors raised by the phase engine."""

from site_planner.scheduling.work_calendar import InvalidScheduleInput

__all__ = ["InvalidScheduleInput", "PartialWriteError"]


class PartialWriteError(RuntimeError):
    """
    A multi-record operation stopped partway through.

    Writes already applied are NOT undone. Re-running the same operation
    completes it (both renumbering and group deletion are idempotent).

    Attributes:
        operation: Name of the batch operation ("renumber", "delete_group",
            "cascade", "promote_placeholders")
        applied: Targets (phase IDs, or "group-N" for group records) written
            successfully before the failure
        pending: Targets not written (the failing one first)
        cause: The underlying store exception
    """

    def __init__(
        self,
        operation: str,
        applied: list[str],
        pending: list[str],
        cause: BaseException,
    ) -> None:
        self.operation = operation
        self.applied = list(applied)
        self.pending = list(pending)
        self.cause = cause
        super().__init__(
            f"{operation} stopped after {len(self.applied)} of "
            f"{len(self.applied) + len(self.pending)} writes: {cause}"
        )
