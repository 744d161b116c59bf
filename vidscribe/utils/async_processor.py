#!/usr/bin/env python3
"""Concurrent batch processor for VidScribe.

Runs one pipeline execution per resolved video on a bounded
ThreadPoolExecutor and folds every outcome into a single BatchResult.
Individual failures never abort the batch; only a fatal service error
(for example a rejected API key) cancels the work that has not started yet.
"""

import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from functools import partial
from typing import List, Optional

from vidscribe.errors import TaskCancelledError, TaskFailedError
from vidscribe.pipelines.base_pipeline import BasePipeline
from vidscribe.pipelines.task import BatchJob, BatchResult, TaskStage, VideoTask
from vidscribe.utils.logger import logger
from vidscribe.utils.progress_display import DummyProgress

DEFAULT_MAX_WORKERS = 4


class BatchCoordinator:
    """Fan-out/join execution of a BatchJob with mutex-guarded aggregation."""

    def __init__(self,
                 pipeline: BasePipeline,
                 max_workers: int = DEFAULT_MAX_WORKERS,
                 progress=None,
                 cancel_event: Optional[threading.Event] = None):
        """
        Args:
            pipeline: Pipeline whose ``run(task)`` drives one video to a terminal state
            max_workers: Upper bound on concurrently processed videos
            progress: Object with ``file_complete(name, success, completed)`` and ``close()``
            cancel_event: Shared cancellation signal; defaults to the pipeline's own
        """
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.pipeline = pipeline
        self.max_workers = max_workers
        self.progress = progress or DummyProgress()
        self.cancel_event = cancel_event or getattr(pipeline, "cancel_event", None) or threading.Event()

    def cancel(self):
        """Stop every task at its next stage boundary."""
        self.cancel_event.set()

    def run(self, job: BatchJob) -> BatchResult:
        """
        Process every source in ``job`` and return the aggregated result.

        Never raises because tasks failed; an all-failed batch is a valid result.
        """
        tasks = [VideoTask(index=i, source=source) for i, source in enumerate(job.sources, 1)]
        result = BatchResult(total=len(tasks))
        start_time = time.time()

        if not tasks:
            logger.info("Nothing to process")
            self.progress.close()
            return result

        workers = min(self.max_workers, len(tasks))
        logger.info(f"Processing {len(tasks)} video(s) with {workers} worker(s)")

        executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="VidScribe-Worker")
        futures: List[Future] = []
        try:
            for task in tasks:
                future = executor.submit(self.pipeline.run, task)
                future.add_done_callback(partial(self._on_task_complete, task, result))
                futures.append(future)
            # Joining the workers also guarantees every done-callback has run
            executor.shutdown(wait=True)
        except KeyboardInterrupt:
            logger.warning("Interrupted: cancelling remaining tasks")
            self.cancel()
            executor.shutdown(wait=True, cancel_futures=True)
            raise
        finally:
            result.elapsed_seconds = time.time() - start_time
            self.progress.close()

        logger.info(result.summary_line())
        return result

    def _on_task_complete(self, task: VideoTask, result: BatchResult, future: Future):
        """Record exactly one outcome for ``task``. Runs on the worker thread."""
        try:
            if future.cancelled():
                task.mark_failed(TaskFailedError(task.source, task.stage, TaskCancelledError("batch cancelled")))
            elif future.exception() is not None and not task.is_terminal:
                # Pipelines are not supposed to raise; keep the batch consistent if one does
                error = future.exception()
                logger.error(f"Pipeline raised for {task.source}: {error}")
                stage = task.stage if task.stage is not TaskStage.PENDING else TaskStage.EXTRACTING
                task.mark_failed(TaskFailedError(task.source, stage, error))

            completed = result.record(task)
        except Exception as e:
            # Exceptions in done-callbacks are otherwise dropped by concurrent.futures
            logger.error(f"Failed to record result for {task.source}: {e}", exc_info=True)
            return

        if not task.succeeded and task.error is not None and task.error.fatal and not self.cancel_event.is_set():
            logger.error(f"Fatal error while processing {task.name}; cancelling remaining tasks")
            result.mark_cancelled()
            self.cancel()

        self.progress.file_complete(task.name, task.succeeded, completed)
