#!/usr/bin/env python3
"""Task and batch bookkeeping types shared by the pipeline and the coordinator."""

import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from vidscribe.errors import TaskFailedError, describe_exception


class TaskStage(Enum):
    """States of the per-video state machine, in execution order."""
    PENDING = "pending"
    EXTRACTING = "extracting"
    TRANSCRIBING = "transcribing"
    FORMATTING = "formatting"
    BURNING = "burning"
    PLACING = "placing"
    DONE = "done"
    FAILED = "failed"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @property
    def is_terminal(self) -> bool:
        return self in (TaskStage.DONE, TaskStage.FAILED)


@dataclass(frozen=True)
class BatchJob:
    """Input root plus the resolved, ordered source videos. Immutable once built."""
    root: Path
    sources: Tuple[Path, ...]
    is_directory: bool = False

    def __len__(self) -> int:
        return len(self.sources)


@dataclass
class VideoTask:
    """
    One source video moving through the pipeline.

    Owned by a single pipeline execution. ``stage`` records where the task
    is (or where it failed); the terminal outcome is written exactly once.
    """
    index: int
    source: Path
    stage: TaskStage = TaskStage.PENDING
    failed_stage: Optional[TaskStage] = None
    output_path: Optional[Path] = None
    error: Optional[TaskFailedError] = None
    started_at: Optional[float] = None
    finished_at: Optional[float] = None

    @property
    def name(self) -> str:
        return self.source.name

    @property
    def is_terminal(self) -> bool:
        return self.stage.is_terminal

    @property
    def succeeded(self) -> bool:
        return self.stage is TaskStage.DONE

    @property
    def duration(self) -> Optional[float]:
        if self.started_at is None or self.finished_at is None:
            return None
        return self.finished_at - self.started_at

    def advance(self, stage: TaskStage):
        if self.is_terminal:
            raise RuntimeError(f"Task {self.name} is already {self.stage.value}")
        if self.started_at is None:
            self.started_at = time.time()
        self.stage = stage

    def mark_done(self, output_path: Path):
        if self.is_terminal:
            raise RuntimeError(f"Task {self.name} is already {self.stage.value}")
        self.output_path = Path(output_path)
        self.stage = TaskStage.DONE
        self.finished_at = time.time()

    def mark_failed(self, error: TaskFailedError):
        if self.is_terminal:
            raise RuntimeError(f"Task {self.name} is already {self.stage.value}")
        self.failed_stage = error.stage
        self.error = error
        self.stage = TaskStage.FAILED
        self.finished_at = time.time()

    def to_dict(self) -> Dict:
        return {
            "file": str(self.source),
            "status": "success" if self.succeeded else "failed",
            "output": str(self.output_path) if self.output_path else None,
            "failed_stage": self.failed_stage.value if self.failed_stage else None,
            "error": describe_exception(self.error.cause) if self.error else None,
            "duration": self.duration,
        }


@dataclass(frozen=True)
class TaskFailure:
    """A failed task as it appears in the batch report."""
    source: Path
    stage: TaskStage
    error: TaskFailedError

    def describe(self) -> str:
        return f"{self.source}: {self.stage.label}: {describe_exception(self.error.cause)}"


@dataclass
class BatchResult:
    """
    Aggregated outcome of a batch.

    Every mutation and every progress read goes through ``_lock``; worker
    threads report through ``record`` and nothing else writes the counters.
    """
    total: int = 0
    success_count: int = 0
    failures: List[TaskFailure] = field(default_factory=list)
    outputs: List[Path] = field(default_factory=list)
    tasks: List[VideoTask] = field(default_factory=list)
    elapsed_seconds: float = 0.0
    cancelled: bool = False
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def record(self, task: VideoTask) -> int:
        """Record a terminal task; returns the completed count after recording."""
        if not task.is_terminal:
            raise ValueError(f"Task {task.name} has not finished (stage={task.stage.value})")
        with self._lock:
            if task.succeeded:
                self.success_count += 1
                self.outputs.append(task.output_path)
            else:
                self.failures.append(TaskFailure(task.source, task.failed_stage, task.error))
            self.tasks.append(task)
            return self.success_count + len(self.failures)

    def mark_cancelled(self):
        with self._lock:
            self.cancelled = True

    @property
    def failed_count(self) -> int:
        with self._lock:
            return len(self.failures)

    @property
    def completed(self) -> int:
        with self._lock:
            return self.success_count + len(self.failures)

    @property
    def all_succeeded(self) -> bool:
        with self._lock:
            return not self.failures

    def summary_line(self) -> str:
        with self._lock:
            return (f"Processed {self.success_count} videos successfully; "
                    f"{len(self.failures)} failed in {self.elapsed_seconds:.2f} seconds")
