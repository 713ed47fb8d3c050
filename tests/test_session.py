import asyncio

import numpy as np
import pytest

from camera import CameraFrame
from errors import ModelUnavailableError, PoseEstimationError
from pose_types import Keypoint, Pose
from session import (
    STATUS_ANALYSIS_ERROR,
    STATUS_CAMERA_ERROR,
    STATUS_MODEL_ERROR,
    STATUS_MODEL_NOT_READY,
    STATUS_READY,
    STATUS_RUNNING,
    STATUS_STOPPED,
    PostureSession,
)


class FakeCamera:
    def __init__(self, can_open=True, width=64, height=48):
        self.can_open = can_open
        self.width = width
        self.height = height
        self.opened = 0
        self.released = 0
        self.reads = 0

    def open(self):
        self.opened += 1
        return self.can_open

    def read(self):
        self.reads += 1
        frame = np.zeros((self.height, self.width, 3), dtype=np.uint8)
        return CameraFrame(frame, float(self.reads), True)

    def release(self):
        self.released += 1


class FakeDetector:
    def __init__(self, pose, fail_every=0):
        self.pose = pose
        self.fail_every = fail_every
        self.calls = 0
        self.successes = 0
        self.in_flight = 0
        self.max_in_flight = 0
        self.closed = False

    async def estimate(self, frame):
        self.calls += 1
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(0)
            if self.fail_every and self.calls % self.fail_every == 0:
                raise PoseEstimationError("no result")
            self.successes += 1
            return self.pose
        finally:
            self.in_flight -= 1

    def close(self):
        self.closed = True


def _session(detector, camera=None):
    return PostureSession(camera or FakeCamera(), lambda: detector, mirror=True, target_fps=0)


async def _spin(condition, limit=500):
    for _ in range(limit):
        if condition():
            return
        await asyncio.sleep(0)


def test_load_model_failure_blocks_start():
    def broken():
        raise ModelUnavailableError("missing weights")

    async def scenario():
        camera = FakeCamera()
        session = PostureSession(camera, broken, target_fps=0)
        assert await session.load_model() is False
        assert session.status_text == STATUS_MODEL_ERROR
        assert await session.start() is False
        assert session.status_text == STATUS_MODEL_NOT_READY
        assert camera.opened == 0
        assert session.score == 100

    asyncio.run(scenario())


def test_camera_failure_is_reported_as_status():
    async def scenario():
        camera = FakeCamera(can_open=False)
        session = _session(FakeDetector(Pose()), camera)
        await session.load_model()
        assert session.status_text == STATUS_READY
        assert await session.start() is False
        assert session.status_text == STATUS_CAMERA_ERROR
        assert not session.running

    asyncio.run(scenario())


def test_missing_pose_folds_zero_into_score():
    async def scenario():
        detector = FakeDetector(Pose(width=64, height=48))
        session = _session(detector)
        await session.load_model()
        assert await session.start()
        assert session.status_text == STATUS_RUNNING
        await _spin(lambda: detector.calls >= 3)
        await session.stop()
        assert detector.calls >= 3
        assert session.score < 100
        assert detector.max_in_flight == 1

    asyncio.run(scenario())


def test_stop_cancels_further_cycles_and_releases_camera():
    async def scenario():
        camera = FakeCamera()
        detector = FakeDetector(Pose())
        session = _session(detector, camera)
        await session.load_model()
        await session.start()
        await _spin(lambda: detector.calls >= 2)
        await session.stop()
        calls = detector.calls
        for _ in range(20):
            await asyncio.sleep(0)
        assert detector.calls == calls
        assert camera.released == 1
        assert session.latest_view is None
        assert session.status_text == STATUS_STOPPED
        assert not session.running

    asyncio.run(scenario())


def test_restart_resets_smoothed_score():
    async def scenario():
        detector = FakeDetector(Pose())
        session = _session(detector)
        await session.load_model()
        await session.start()
        await _spin(lambda: detector.calls >= 4)
        await session.stop()
        assert session.score < 100
        await session.start()
        assert session.score == 100
        await session.stop()

    asyncio.run(scenario())


def test_estimation_errors_skip_the_cycle():
    async def scenario():
        detector = FakeDetector(Pose(), fail_every=2)
        session = _session(detector)
        await session.load_model()
        await session.start()
        await _spin(lambda: detector.calls >= 6)
        assert session.running
        await session.stop()
        # Only the successful estimates were scored.
        assert detector.successes < detector.calls
        expected = 100
        for _ in range(detector.successes):
            expected = int(expected * 0.8 + 0.5)
        assert session.score == expected

    asyncio.run(scenario())


def test_process_frame_scores_and_renders_mirrored(upright_pose):
    async def scenario():
        detector = FakeDetector(upright_pose)
        session = _session(detector)
        await session.load_model()
        frame = np.zeros((480, 640, 3), dtype=np.uint8)
        result = await session.process_frame(frame)
        assert result.raw_score == 100
        assert result.score == 100
        assert result.view is session.latest_view
        assert not frame.any()
        # Nose at x=300 lands at x=340 once mirrored.
        assert result.view[220, 340].any()
        assert session.feedback_text == "Excellent! Keep it up."

    asyncio.run(scenario())


def test_close_releases_detector():
    async def scenario():
        detector = FakeDetector(Pose())
        session = _session(detector)
        await session.load_model()
        session.close()
        assert detector.closed
        assert session.detector is None

    asyncio.run(scenario())


class CrashingDetector(FakeDetector):
    async def estimate(self, frame):
        self.calls += 1
        await asyncio.sleep(0)
        raise RuntimeError("graph timestamp mismatch")


def test_unexpected_detector_error_stops_analysis_cleanly():
    async def scenario():
        camera = FakeCamera()
        detector = CrashingDetector(Pose())
        session = _session(detector, camera)
        await session.load_model()
        assert await session.start()
        await _spin(lambda: session.status_text == STATUS_ANALYSIS_ERROR)
        assert detector.calls == 1
        assert not session.running
        assert camera.released == 1
        assert session.latest_view is None

        await session.stop()
        assert session.status_text == STATUS_STOPPED
        assert camera.released == 2

        assert await session.toggle()
        assert camera.opened == 2
        assert session.status_text == STATUS_RUNNING
        await session.stop()

    asyncio.run(scenario())


def test_process_frame_without_model_does_not_score():
    async def scenario():
        session = _session(FakeDetector(Pose()))
        frame = np.zeros((48, 64, 3), dtype=np.uint8)
        with pytest.raises(ModelUnavailableError):
            await session.process_frame(frame)

        await session.load_model()
        session.close()
        with pytest.raises(ModelUnavailableError):
            await session.process_frame(frame)
        assert session.score == 100
        assert session.latest_view is None

    asyncio.run(scenario())


def test_pose_without_frame_size_is_mirrored_onto_the_frame():
    async def scenario():
        pose = Pose(keypoints=(Keypoint("nose", 300, 220, 0.9),))
        session = _session(FakeDetector(pose))
        await session.load_model()
        result = await session.process_frame(np.zeros((480, 640, 3), dtype=np.uint8))
        assert result.view.any()
        assert result.view[220, 340].any()
        assert not result.view[220, 300].any()

    asyncio.run(scenario())
