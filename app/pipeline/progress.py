from collections.abc import Callable
from dataclasses import dataclass

from app.logging.logger import Log

ProgressSink = Callable[[str, int], None]


@dataclass(frozen=True)
class ProgressBand:
    """Maps a stage-local fraction (0.0-1.0) onto a slice of the 0-100 scale."""

    start: int
    end: int

    def scale(self, fraction: float) -> int:
        clamped = max(0.0, min(1.0, fraction))
        return int(round(self.start + (self.end - self.start) * clamped))


class ProgressChannel:
    """Per-file progress that never decreases and stops moving once frozen.

    Each accepted value is pushed to every sink as ``(file_id, value)``.
    A failing sink is logged and skipped; it never affects the pipeline.
    """

    def __init__(self, file_id: str, sinks: list[ProgressSink] | None = None) -> None:
        self._file_id = file_id
        self._sinks = list(sinks or [])
        self._value = 0
        self._frozen = False

    @property
    def value(self) -> int:
        return self._value

    @property
    def frozen(self) -> bool:
        return self._frozen

    def report(self, value: int) -> int:
        """Publish *value* if it moves progress forward; return the current progress."""
        if self._frozen:
            return self._value
        value = max(0, min(100, int(value)))
        if value < self._value:
            return self._value
        self._value = value
        self._publish()
        return self._value

    def freeze(self) -> None:
        self._frozen = True

    def _publish(self) -> None:
        for sink in self._sinks:
            try:
                sink(self._file_id, self._value)
            except Exception as exc:
                Log.warning(f"Progress sink failed: {exc}", file_id=self._file_id)
