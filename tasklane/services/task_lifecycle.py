"""Task lifecycle: persisted status, Kanban presentation, completion timestamps.

Only ACTIVE, IN_PROGRESS and COMPLETED are ever stored. The Kanban lane
names NOT_STARTED and FINISHED exist at the API boundary only:

    ACTIVE, not completed, in a project  -> NOT_STARTED
    ACTIVE, not completed, inbox         -> ACTIVE
    IN_PROGRESS                          -> IN_PROGRESS
    COMPLETED, in a project              -> FINISHED
    COMPLETED, inbox                     -> COMPLETED

``completed_at`` is set exactly when the stored status is COMPLETED.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import TypeVar

from tasklane.models.task import TaskStatus


class PresentedStatus(str, Enum):
    """Status vocabulary accepted from and returned to clients."""

    ACTIVE = "ACTIVE"
    NOT_STARTED = "NOT_STARTED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    FINISHED = "FINISHED"


BOARD_LANES: tuple[PresentedStatus, ...] = (
    PresentedStatus.NOT_STARTED,
    PresentedStatus.IN_PROGRESS,
    PresentedStatus.FINISHED,
)

_TO_PERSISTED: dict[PresentedStatus, TaskStatus] = {
    PresentedStatus.ACTIVE: TaskStatus.ACTIVE,
    PresentedStatus.NOT_STARTED: TaskStatus.ACTIVE,
    PresentedStatus.IN_PROGRESS: TaskStatus.IN_PROGRESS,
    PresentedStatus.COMPLETED: TaskStatus.COMPLETED,
    PresentedStatus.FINISHED: TaskStatus.COMPLETED,
}


@dataclass(frozen=True)
class LifecycleState:
    """The persisted fields the lifecycle owns."""

    status: TaskStatus
    completed_at: datetime | None


def to_persisted(status: PresentedStatus | TaskStatus | str) -> TaskStatus:
    """Translate any accepted status name to the stored enum.

    Raises ValueError for names outside the vocabulary.
    """
    return _TO_PERSISTED[PresentedStatus(_value(status))]


def present_status(
    status: TaskStatus | str,
    completed_at: datetime | None,
    project_id: int | None,
) -> PresentedStatus:
    """Map stored (status, completed_at, project_id) to the client vocabulary."""
    stored = TaskStatus(_value(status))
    in_project = project_id is not None
    if stored == TaskStatus.IN_PROGRESS:
        return PresentedStatus.IN_PROGRESS
    if stored == TaskStatus.COMPLETED:
        return PresentedStatus.FINISHED if in_project else PresentedStatus.COMPLETED
    if completed_at is None and in_project:
        return PresentedStatus.NOT_STARTED
    return PresentedStatus.ACTIVE


def initial_state() -> LifecycleState:
    """State of a newly created task.

    Project tasks land in the NOT_STARTED lane and inbox tasks show as ACTIVE;
    both are the same stored state.
    """
    return LifecycleState(status=TaskStatus.ACTIVE, completed_at=None)


def apply_status(
    current: LifecycleState,
    requested: PresentedStatus | TaskStatus | str,
    now: datetime | None = None,
) -> LifecycleState:
    """Compute the next stored state for a status change.

    Entering COMPLETED stamps ``completed_at``; staying COMPLETED keeps the
    original stamp; leaving COMPLETED clears it.
    """
    target = to_persisted(requested)
    if target == TaskStatus.COMPLETED:
        if current.status == TaskStatus.COMPLETED and current.completed_at is not None:
            return LifecycleState(status=target, completed_at=current.completed_at)
        return LifecycleState(status=target, completed_at=now or datetime.now(UTC))
    return LifecycleState(status=target, completed_at=None)


def is_consistent(status: TaskStatus | str, completed_at: datetime | None) -> bool:
    return (TaskStatus(_value(status)) == TaskStatus.COMPLETED) == (completed_at is not None)


T = TypeVar("T")


def group_by_lane(
    items: Iterable[T],
    status_of: Callable[[T], PresentedStatus | str],
) -> dict[str, list[T]]:
    """Bucket items into the three Kanban lanes by their presented status.

    Inbox-only statuses (ACTIVE, COMPLETED) do not occur for project tasks;
    they are folded into NOT_STARTED and FINISHED respectively.
    """
    lanes: dict[str, list[T]] = {lane.value: [] for lane in BOARD_LANES}
    for item in items:
        presented = PresentedStatus(_value(status_of(item)))
        if presented == PresentedStatus.ACTIVE:
            presented = PresentedStatus.NOT_STARTED
        elif presented == PresentedStatus.COMPLETED:
            presented = PresentedStatus.FINISHED
        lanes[presented.value].append(item)
    return lanes


def _value(status: Enum | str) -> str:
    return status.value if isinstance(status, Enum) else str(status)
