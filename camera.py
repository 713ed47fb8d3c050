import logging
import time
from dataclasses import dataclass
from typing import Optional

import cv2
import numpy as np


logger = logging.getLogger(__name__)

CAPTURE_BACKENDS = {
    "any": cv2.CAP_ANY,
    "dshow": cv2.CAP_DSHOW,
    "msmf": cv2.CAP_MSMF,
    "v4l2": cv2.CAP_V4L2,
    "avfoundation": cv2.CAP_AVFOUNDATION,
}


@dataclass
class CameraFrame:
    frame: Optional[np.ndarray]
    timestamp: float
    ok: bool


class CameraStream:
    def __init__(self, camera_index: int = 0, width: int = 640, height: int = 480, backend: str = "any"):
        self.camera_index = camera_index
        self.width = width
        self.height = height
        self.backend = backend
        self._capture: Optional[cv2.VideoCapture] = None

    @property
    def is_open(self) -> bool:
        return self._capture is not None

    def open(self) -> bool:
        self.release()
        api = CAPTURE_BACKENDS.get(self.backend, cv2.CAP_ANY)
        capture = cv2.VideoCapture(self.camera_index, api)
        if not capture.isOpened():
            logger.warning("[Camera] could not open camera %s (backend=%s)", self.camera_index, self.backend)
            capture.release()
            return False
        capture.set(cv2.CAP_PROP_FRAME_WIDTH, self.width)
        capture.set(cv2.CAP_PROP_FRAME_HEIGHT, self.height)
        self._capture = capture
        logger.info("[Camera] opened camera %s at %sx%s", self.camera_index, self.width, self.height)
        return True

    def read(self) -> CameraFrame:
        if self._capture is None:
            return CameraFrame(None, time.time(), False)

        ok, frame = self._capture.read()
        now = time.time()
        if not ok:
            return CameraFrame(None, now, False)

        # Keep the drawing surface a fixed size even if the driver ignored the request.
        h, w = frame.shape[:2]
        if (w, h) != (self.width, self.height):
            frame = cv2.resize(frame, (self.width, self.height))
        return CameraFrame(frame, now, True)

    def release(self) -> None:
        if self._capture is not None:
            self._capture.release()
            self._capture = None
            logger.info("[Camera] released camera %s", self.camera_index)
