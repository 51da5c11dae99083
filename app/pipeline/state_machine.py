from app.pipeline.exceptions import InvalidStatusTransitionError
from app.pipeline.models import FileStatus

_TRANSITIONS: dict[FileStatus, frozenset[FileStatus]] = {
    FileStatus.QUEUED: frozenset({FileStatus.EXTRACTING, FileStatus.FAILED}),
    FileStatus.EXTRACTING: frozenset({FileStatus.AI_EXTRACTING, FileStatus.FAILED}),
    FileStatus.AI_EXTRACTING: frozenset({FileStatus.NORMALIZING, FileStatus.FAILED}),
    FileStatus.NORMALIZING: frozenset({FileStatus.COMPLETED, FileStatus.FAILED}),
    FileStatus.COMPLETED: frozenset(),
    FileStatus.FAILED: frozenset(),
}


class FileStateMachine:
    """Tracks one file's status and rejects transitions the lifecycle does not allow."""

    def __init__(self, status: FileStatus = FileStatus.QUEUED) -> None:
        self._status = status

    @property
    def status(self) -> FileStatus:
        return self._status

    def can_transition(self, target: FileStatus) -> bool:
        return target in _TRANSITIONS[self._status]

    def transition(self, target: FileStatus) -> FileStatus:
        if not self.can_transition(target):
            raise InvalidStatusTransitionError(
                f"Cannot move file from '{self._status.value}' to '{target.value}'"
            )
        self._status = target
        return target
