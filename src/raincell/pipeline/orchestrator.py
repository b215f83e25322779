"""Sequential pipeline orchestration.

Locates the composites of a time window, processes them one after the other
and returns the frame results sorted by timestamp.
"""

import logging
import time
from pathlib import Path
from typing import TYPE_CHECKING, List

from raincell.contracts import ContractViolation, FailurePolicy, assert_time_ordered
from raincell.errors import DuplicateTimestampError, NoDataAvailableError, RadarIngestError
from raincell.pipeline.processor import FrameProcessor, FrameResult
from raincell.radar.locator import locate_radar_files

if TYPE_CHECKING:
    from raincell.schemas import InternalConfig

__all__ = ['PipelineOrchestrator']

logger = logging.getLogger(__name__)


class PipelineOrchestrator:
    """Runs the precipitation-cell pipeline over a time window.

    This is the main entry point for running ``raincell``. Files are
    handled strictly one at a time: each is opened, read, reprojected and
    closed before the next one is touched.

    **Failure handling:**

    - A missing file is logged as a warning by the locator and skipped.
    - No file at all in the window raises ``NoDataAvailableError``.
    - A file whose time was already read from another file raises
      ``DuplicateTimestampError``, a ``RadarIngestError``.
    - A file that cannot be ingested raises a ``RadarIngestError``; with
      ``processor.failure_policy = "fail_fast"`` (default) it propagates,
      with ``"skip_file"`` it is logged with its traceback and the run
      continues.
    - A ``ContractViolation`` is a pipeline bug and always propagates.

    **Logging:**

    ``start()`` configures the root logger (console, plus
    ``logging.log_file`` when set) from ``logging.level``. ``run()`` leaves
    logging alone so that the pipeline can be embedded.

    Example usage::

        from raincell.schemas import load_user_config
        from raincell.pipeline import PipelineOrchestrator

        config = load_user_config("scripts/user_config.py")
        results = PipelineOrchestrator(config).start()
    """

    def __init__(self, config: "InternalConfig"):
        """Initialize orchestrator.

        Parameters
        ----------
        config : InternalConfig
            Fully validated runtime configuration. ``locator.base_dir``,
            ``locator.start_time`` and ``locator.end_time`` must be set.

        Raises
        ------
        ValueError
            If the archive directory or the time window is not configured.
        """
        locator = config.locator
        missing = [name for name in ("base_dir", "start_time", "end_time")
                   if getattr(locator, name) is None]
        if missing:
            raise ValueError(f"Pipeline needs locator settings: {', '.join(missing)}")

        self.config = config
        self.policy = FailurePolicy(config.processor.failure_policy)
        self.processor = FrameProcessor(config)
        self.failed: List[Path] = []

    def _setup_logging(self):
        """Configure root logger with console and optional file handlers."""
        log_level = getattr(logging, self.config.logging.level.upper(), logging.INFO)

        formatter = logging.Formatter(
            fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        # Clear existing handlers and add new ones
        root = logging.getLogger()
        root.setLevel(log_level)
        for handler in root.handlers[:]:
            root.removeHandler(handler)

        log_file = self.config.logging.log_file
        if log_file:
            log_path = Path(log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)
            fh = logging.FileHandler(log_path)
            fh.setLevel(log_level)
            fh.setFormatter(formatter)
            root.addHandler(fh)

        ch = logging.StreamHandler()
        ch.setLevel(log_level)
        ch.setFormatter(formatter)
        root.addHandler(ch)

        logger.info("Logging: level=%s, file=%s", self.config.logging.level, log_file)

    def locate(self) -> List[Path]:
        """Existing composite files of the configured window, in time order."""
        locator = self.config.locator
        return locate_radar_files(
            locator.base_dir, locator.start_time, locator.end_time, locator.step_minutes
        )

    def run(self) -> List[FrameResult]:
        """Process every file of the window.

        Returns
        -------
        list of FrameResult
            One result per successfully processed file, sorted by
            strictly ascending timestamp.

        Raises
        ------
        NoDataAvailableError
            If no file exists in the window.
        RadarIngestError
            On the first unusable file, under the fail-fast policy.
        ContractViolation
            If a stage breaks its contract.
        """
        files = self.locate()
        if not files:
            locator = self.config.locator
            raise NoDataAvailableError(
                f"No data available for requested window "
                f"{locator.start_time} - {locator.end_time} in {locator.base_dir}"
            )

        self.failed = []
        results = []
        seen = {}
        for path in files:
            try:
                result = self.processor.process_file(path)
                if result.timestamp in seen:
                    raise DuplicateTimestampError(result.timestamp, path, seen[result.timestamp])
                seen[result.timestamp] = path
                results.append(result)
            except ContractViolation:
                logger.critical("Pipeline contract violated while processing %s", path.name)
                raise
            except RadarIngestError:
                if self.policy != FailurePolicy.SKIP_FILE:
                    raise
                logger.exception("Skipping unusable file %s", path.name)
                self.failed.append(path)

        results.sort(key=lambda r: r.timestamp)
        assert_time_ordered([r.timestamp for r in results])

        total_cells = sum(r.num_cells for r in results)
        logger.info("Processed %d/%d files (%d skipped), %d cells",
                    len(results), len(files), len(self.failed), total_cells)
        return results

    def start(self) -> List[FrameResult]:
        """Configure logging, run the pipeline and log the runtime."""
        self._setup_logging()

        logger.info("=" * 60)
        logger.info("Starting precipitation cell pipeline")
        logger.info("=" * 60)

        start_time = time.time()
        try:
            return self.run()
        finally:
            logger.info("Pipeline stopped. Runtime: %.1f seconds", time.time() - start_time)
