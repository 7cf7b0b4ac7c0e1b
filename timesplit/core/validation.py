from __future__ import annotations


class AllocationError(ValueError):
    """Raised when a request cannot be allocated at all."""


class ZeroAllocationError(AllocationError):
    """A weight set sums to zero or less."""

    def __init__(self, context: str) -> None:
        super().__init__(f"Total percentage is zero for {context}. Check your centers and projects.")
        self.context = context


class OrphanedShareError(AllocationError):
    """A center holds a share of the week but none of its projects do."""

    def __init__(self, center_label: str, share: float) -> None:
        super().__init__(f'Center "{center_label}" has {share:.2f}% but no project allocation.')
        self.center_label = center_label
        self.share = share


class DuplicateProjectError(AllocationError):
    def __init__(self, project_id: str) -> None:
        super().__init__(f"Duplicate project id: {project_id}")
        self.project_id = project_id


class RoundingStepError(AllocationError):
    """The rounding step is too small to count the hours in steps."""

    def __init__(self, step: float, hours: float) -> None:
        super().__init__(f"Rounding step {step:g} is too small to round {hours:g}h.")
        self.step = step
        self.hours = hours
