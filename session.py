import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Optional

import numpy as np

from errors import ModelUnavailableError, PoseEstimationError
from keypoints import mirror_pose
from pose_types import Pose
from scoring import calculate_posture_score
from smoothing import ScoreSmoother
from ui import describe_score
from visualization import draw_pose, mirror_frame


logger = logging.getLogger(__name__)

STATUS_LOADING = "Loading AI Model..."
STATUS_READY = "Ready to start camera"
STATUS_MODEL_ERROR = "Error: Could not load AI model."
STATUS_MODEL_NOT_READY = "AI Model is not ready. Please refresh."
STATUS_RUNNING = "Live analysis running..."
STATUS_STOPPED = "Camera off. Start to begin analysis."
STATUS_CAMERA_ERROR = "Camera permission denied or error."
STATUS_ANALYSIS_ERROR = "Analysis stopped unexpectedly. Start to retry."


@dataclass
class CycleResult:
    pose: Pose
    raw_score: int
    score: int
    view: np.ndarray


class PostureSession:
    """
    Owns the per-capture state: the smoothed score, the status line and the
    latest rendered view.

    Analysis cycles run one at a time on the event loop; the pose estimate is
    the only await inside a cycle, so at most one estimate is in flight.
    """

    def __init__(self, camera, detector_factory: Callable, mirror: bool = True, target_fps: int = 30):
        self.camera = camera
        self._detector_factory = detector_factory
        self.mirror = mirror
        self.frame_interval = 1.0 / target_fps if target_fps > 0 else 0.0
        self.smoother = ScoreSmoother()
        self.detector = None
        self.status_text = STATUS_LOADING
        self.latest_view: Optional[np.ndarray] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def score(self) -> int:
        return self.smoother.value

    @property
    def feedback_text(self) -> str:
        return describe_score(self.score)

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def load_model(self) -> bool:
        self.status_text = STATUS_LOADING
        loop = asyncio.get_running_loop()
        try:
            self.detector = await loop.run_in_executor(None, self._detector_factory)
        except ModelUnavailableError as e:
            logger.error("[Session] failed to load pose model: %s", e)
            self.detector = None
            self.status_text = STATUS_MODEL_ERROR
            return False
        self.status_text = STATUS_READY
        return True

    async def start(self) -> bool:
        if self.running:
            return True
        if self.detector is None:
            self.status_text = STATUS_MODEL_NOT_READY
            return False
        if not self.camera.open():
            self.status_text = STATUS_CAMERA_ERROR
            return False
        self.smoother.reset()
        self.status_text = STATUS_RUNNING
        self._task = asyncio.create_task(self._run())
        self._task.add_done_callback(self._on_task_done)
        logger.info("[Session] analysis started")
        return True

    async def stop(self) -> None:
        task = self._task
        self._task = None
        try:
            if task is not None:
                task.cancel()
                try:
                    await task
                except asyncio.CancelledError:
                    pass
                except Exception as e:
                    logger.warning("[Session] analysis task had failed: %s", e)
        finally:
            self.camera.release()
            self.latest_view = None
            self.status_text = STATUS_STOPPED
            logger.info("[Session] analysis stopped")

    def _on_task_done(self, task: asyncio.Task) -> None:
        if task.cancelled() or task.exception() is None or self._task is not task:
            return
        logger.error("[Session] analysis task failed: %r", task.exception())
        self._task = None
        self.camera.release()
        self.latest_view = None
        self.status_text = STATUS_ANALYSIS_ERROR

    async def toggle(self) -> bool:
        if self.running:
            await self.stop()
            return False
        return await self.start()

    def close(self) -> None:
        if self.detector is not None:
            self.detector.close()
            self.detector = None

    async def process_frame(self, frame: np.ndarray) -> CycleResult:
        if self.detector is None:
            raise ModelUnavailableError("pose model is not loaded")
        pose = await self.detector.estimate(frame)
        return self._apply(pose, frame)

    def _apply(self, pose: Pose, frame: np.ndarray) -> CycleResult:
        raw_score = calculate_posture_score(pose)
        score = self.smoother.update(raw_score)

        if self.mirror:
            view = mirror_frame(frame)
            overlay_pose = mirror_pose(pose, frame.shape[1])
        else:
            view = frame.copy()
            overlay_pose = pose
        draw_pose(view, overlay_pose)

        self.latest_view = view
        logger.debug("[Session] raw=%s smoothed=%s", raw_score, score)
        return CycleResult(pose=pose, raw_score=raw_score, score=score, view=view)

    async def _run(self) -> None:
        loop = asyncio.get_running_loop()
        while True:
            started = loop.time()
            cam_frame = self.camera.read()
            if not cam_frame.ok:
                logger.warning("[Session] camera frame not available")
            else:
                try:
                    await self.process_frame(cam_frame.frame)
                except PoseEstimationError as e:
                    logger.warning("[Session] pose estimate failed: %s", e)
            # One cycle per refresh interval, never faster.
            elapsed = loop.time() - started
            await asyncio.sleep(max(0.0, self.frame_interval - elapsed))
