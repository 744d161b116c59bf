#!/usr/bin/env python3
"""
Per-video pipeline.

    Pending -> Extracting -> Transcribing -> Formatting -> Burning -> Placing -> Done
                   |             |              |            |         |
                   +-------------+--------------+------------+---------+
                                             |
                                  Failed(stage, error)

Failed is terminal: once a stage fails nothing else runs, and Placing is
only reached after every earlier stage succeeded, so a half-made video is
never moved to the output location.
"""

import threading
import time
from pathlib import Path
from typing import Optional

from vidscribe.config.settings import PipelineSettings
from vidscribe.errors import StageError, TaskCancelledError, TaskFailedError
from vidscribe.modules.audio_extraction import AudioExtractor
from vidscribe.modules.gemini_transcriber import GeminiTranscriber
from vidscribe.modules.output_placement import OutputPlacer
from vidscribe.modules.srt_formatter import SRTFormatter
from vidscribe.modules.subtitle_burner import SubtitleBurner
from vidscribe.pipelines.base_pipeline import BasePipeline
from vidscribe.pipelines.task import TaskStage, VideoTask
from vidscribe.utils.logger import logger
from vidscribe.utils.workspace import Workspace


class VideoPipeline(BasePipeline):
    """Runs the five stages for one video at a time; safe to share across worker threads."""

    def __init__(self,
                 workspace: Workspace,
                 settings: Optional[PipelineSettings] = None,
                 api_key: Optional[str] = None,
                 job_root: Optional[Path] = None,
                 cancel_event: Optional[threading.Event] = None,
                 audio_extractor: Optional[AudioExtractor] = None,
                 transcriber: Optional[GeminiTranscriber] = None,
                 formatter: Optional[SRTFormatter] = None,
                 burner: Optional[SubtitleBurner] = None,
                 placer: Optional[OutputPlacer] = None,
                 **kwargs):
        """
        Args:
            workspace: Open workspace shared by every task of the run
            settings: Run settings (model variant, output directory)
            api_key: Gemini API key, used when no transcriber is injected
            job_root: Input root, used to mirror folders in a dedicated output dir
            cancel_event: Checked before every stage; set it to stop remaining work
            audio_extractor, transcriber, formatter, burner, placer: Stage
                implementations; defaults are built from ``settings``
        """
        super().__init__(**kwargs)
        self.settings = settings or PipelineSettings()
        self.workspace = workspace
        self.job_root = Path(job_root) if job_root else None
        self.cancel_event = cancel_event or threading.Event()

        self.audio_extractor = audio_extractor or AudioExtractor()
        self.transcriber = transcriber or GeminiTranscriber(
            api_key=api_key,
            model_variant=self.settings.model_variant,
        )
        self.formatter = formatter or SRTFormatter()
        self.burner = burner or SubtitleBurner()
        self.placer = placer or OutputPlacer(self.settings.output_dir)

    def get_mode_name(self) -> str:
        return "burn-in"

    def run(self, task: VideoTask) -> VideoTask:
        """Drive ``task`` to Done or Failed. Never raises for stage failures."""
        start_time = time.time()
        source = task.source
        logger.info(f"Starting pipeline for: {source}")

        try:
            self._enter(task, TaskStage.EXTRACTING)
            task_dir = self._stage(task, lambda: self.workspace.task_dir(task.index, source))
            audio_path = self._stage(task, lambda: self.audio_extractor.extract(source, task_dir))

            self._enter(task, TaskStage.TRANSCRIBING)
            transcript = self._stage(task, lambda: self.transcriber.transcribe(audio_path))
            logger.debug(f"{task.name}: {len(transcript.segments)} segments, language={transcript.language}")

            self._enter(task, TaskStage.FORMATTING)
            subtitle_file = self._stage(task, lambda: self.formatter.write(transcript, source, task_dir))

            self._enter(task, TaskStage.BURNING)
            burned = self._stage(task, lambda: self.burner.burn(source, subtitle_file, task_dir))

            self._enter(task, TaskStage.PLACING)
            final_path = self._stage(task, lambda: self.placer.place(burned, source, self.job_root))

        except TaskFailedError as failure:
            task.mark_failed(failure)
            if isinstance(failure.cause, TaskCancelledError):
                logger.warning(f"Cancelled {task.name} before {failure.stage_name}")
            else:
                logger.error(str(failure))
            return task

        task.mark_done(final_path)
        logger.info(f"Finished {task.name} in {time.time() - start_time:.1f}s -> {final_path}")
        return task

    def process(self, source: Path, index: int = 1) -> Path:
        """Single-file helper: run one source and raise if it fails."""
        task = self.run(VideoTask(index=index, source=Path(source)))
        if not task.succeeded:
            raise task.error
        return task.output_path

    def _enter(self, task: VideoTask, stage: TaskStage):
        """Move to ``stage`` unless the batch has been cancelled."""
        task.advance(stage)
        logger.debug(f"{task.name}: {stage.label}")
        if self.cancel_event.is_set():
            raise TaskFailedError(task.source, stage, TaskCancelledError("batch cancelled"))

    def _stage(self, task: VideoTask, action):
        """Run one stage action, wrapping any failure with the task identity."""
        try:
            return action()
        except StageError as e:
            raise TaskFailedError(task.source, task.stage, e) from e
        except Exception as e:
            logger.error(f"Unexpected error in {task.stage.label} for {task.source}", exc_info=True)
            raise TaskFailedError(task.source, task.stage, e) from e
