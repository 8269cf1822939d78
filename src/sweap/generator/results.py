"""Result objects for guest generation runs.

Workers report a ProcessedBatch each; the combiner folds them into a
single GenerationResult for logging and CLI output.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Any


@dataclass
class ProcessedBatch:
    """Everything one worker handled during a run."""

    worker: int
    """Number of the reporting worker."""

    num_rows: int = 0
    """Guests the worker handled, successful or not."""

    first_names: list[str] = field(default_factory=list)
    """First names of the handled guests, in order."""

    last_names: list[str] = field(default_factory=list)
    """Last names of the handled guests, in order."""

    errors: Counter[str] = field(default_factory=Counter)
    """Error messages and how often they occurred."""

    batches: int = 0
    """Number of batches received from the reader."""

    @property
    def num_errors(self) -> int:
        return sum(self.errors.values())

    def record_row(self, first_name: str, last_name: str) -> None:
        self.first_names.append(first_name)
        self.last_names.append(last_name)
        self.num_rows += 1

    def record_error(self, error: Exception | str) -> None:
        self.errors[str(error)] += 1


@dataclass
class GenerationResult:
    """Aggregated result of a guest generation run.

    Holds the run parameters next to the outcome so the rendered
    result is self-describing.
    """

    workers: int = 0
    batch_size: int = 0
    inter_row_delay_ms: int = 0
    batch_delay_ms: int = 0
    mode: str = ""

    guests_requested: int = 0
    """Number of guests handed to the reader."""

    event_name: str = ""

    execution_seconds: float = 0.0
    """Wall clock time from the first worker start until the last report."""

    num_rows: int = 0
    """Guests processed by all workers."""

    people_count: int = 0
    """Distinct first name and last name pairs."""

    common_name: str = ""
    """Most common first name."""

    common_name_count: int = 0

    errors: Counter[str] = field(default_factory=Counter)
    """Error messages across all workers and how often they occurred."""

    _first_names: Counter[str] = field(default_factory=Counter, repr=False)
    _people: set[tuple[str, str]] = field(default_factory=set, repr=False)

    @property
    def num_errors(self) -> int:
        return sum(self.errors.values())

    @property
    def avg_per_second(self) -> float:
        """Average number of processed guests per second."""
        if self.execution_seconds <= 0:
            return 0.0
        return self.num_rows / self.execution_seconds

    def add(self, processed: ProcessedBatch) -> None:
        """Fold a worker report into this result."""
        self.num_rows += processed.num_rows
        self.errors.update(processed.errors)

        self._people.update(zip(processed.first_names, processed.last_names, strict=True))
        self.people_count = len(self._people)

        self._first_names.update(processed.first_names)
        if self._first_names:
            self.common_name, self.common_name_count = self._first_names.most_common(1)[0]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "workers": self.workers,
            "batch_size": self.batch_size,
            "inter_row_delay_ms": self.inter_row_delay_ms,
            "batch_delay_ms": self.batch_delay_ms,
            "mode": self.mode,
            "guests_requested": self.guests_requested,
            "event_name": self.event_name,
            "num_rows": self.num_rows,
            "people_count": self.people_count,
            "common_name": self.common_name,
            "common_name_count": self.common_name_count,
            "execution_seconds": round(self.execution_seconds, 2),
            "avg_per_second": round(self.avg_per_second, 2),
            "num_errors": self.num_errors,
            "errors": dict(self.errors),
        }

    def render(self) -> str:
        """Human readable multi-line summary."""
        lines = [
            "Result:",
            f"  Workers: {self.workers}",
            f"  Mode: {self.mode}",
            f"  Batch Size: {self.batch_size}",
            f"  Delay between creates (ms): {self.inter_row_delay_ms}",
            f"  Delay between batches (ms): {self.batch_delay_ms}",
            f"  Guests Requested: {self.guests_requested}",
            f"  Event Name: {self.event_name}",
            f"  Num Rows: {self.num_rows}",
            f"  People Count: {self.people_count}",
            f"  Common Name: {self.common_name}",
            f"  Common Name Count: {self.common_name_count}",
            f"  Execution Time (s): {self.execution_seconds:.2f}",
            f"  Avg Guests/s: {self.avg_per_second:.2f}",
            f"  Num Errors: {self.num_errors}",
            "  Errors:",
        ]
        for message, count in self.errors.most_common():
            lines.append(f"    {count}: {message}")
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.render()
