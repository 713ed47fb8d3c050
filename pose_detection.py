import asyncio
import logging
from typing import Dict, Sequence

import cv2

from errors import ModelUnavailableError, PoseEstimationError
from pose_types import COCO17_NAMES, Keypoint, Pose


logger = logging.getLogger(__name__)


def landmarks_to_pose(landmarks: Sequence, width: int, height: int, index_map: Dict[str, int]) -> Pose:
    # MediaPipe landmarks are normalized; keypoints are kept in pixel space.
    keypoints = []
    for name, idx in index_map.items():
        if idx >= len(landmarks):
            continue
        lm = landmarks[idx]
        keypoints.append(
            Keypoint(
                name=name,
                x=float(lm.x) * width,
                y=float(lm.y) * height,
                score=float(getattr(lm, "visibility", 0.0) or 0.0),
            )
        )
    return Pose(keypoints=tuple(keypoints), width=width, height=height)


class PoseDetector:
    def __init__(
        self,
        model_complexity: int = 1,
        min_detection_confidence: float = 0.5,
        min_tracking_confidence: float = 0.5,
    ):
        try:
            import mediapipe as mp
        except ImportError as e:
            raise ModelUnavailableError("MediaPipe is not installed") from e

        try:
            mp_pose = mp.solutions.pose
            self._pose = mp_pose.Pose(
                static_image_mode=False,
                model_complexity=model_complexity,
                smooth_landmarks=True,
                min_detection_confidence=min_detection_confidence,
                min_tracking_confidence=min_tracking_confidence,
            )
        except (AttributeError, RuntimeError, ValueError) as e:
            raise ModelUnavailableError(f"Could not initialise MediaPipe Pose: {e}") from e

        self._index_map = {name: int(getattr(mp_pose.PoseLandmark, name.upper())) for name in COCO17_NAMES}
        logger.info("[Pose] MediaPipe Pose ready (model_complexity=%s)", model_complexity)

    def process(self, frame_bgr) -> Pose:
        if self._pose is None:
            raise PoseEstimationError("pose detector is closed")
        height, width = frame_bgr.shape[:2]
        frame_rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)
        try:
            results = self._pose.process(frame_rgb)
        except (RuntimeError, ValueError) as e:
            raise PoseEstimationError(f"MediaPipe Pose failed: {e}") from e
        if results.pose_landmarks is None:
            return Pose(width=width, height=height)
        return landmarks_to_pose(results.pose_landmarks.landmark, width, height, self._index_map)

    async def estimate(self, frame_bgr) -> Pose:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.process, frame_bgr)

    def close(self) -> None:
        if self._pose is not None:
            self._pose.close()
            self._pose = None
