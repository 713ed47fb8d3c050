import pytest

from pose_types import Keypoint, Pose


def _make_pose(points, width=640, height=480, score=0.9):
    keypoints = []
    for name, value in points.items():
        if len(value) == 3:
            x, y, s = value
        else:
            x, y = value
            s = score
        keypoints.append(Keypoint(name=name, x=float(x), y=float(y), score=float(s)))
    return Pose(keypoints=tuple(keypoints), width=width, height=height)


@pytest.fixture
def make_pose():
    return _make_pose


@pytest.fixture
def upright_pose():
    return _make_pose(
        {
            "nose": (300, 220),
            "left_eye": (280, 200),
            "right_eye": (320, 200),
            "left_shoulder": (200, 300),
            "right_shoulder": (400, 300),
            "left_hip": (220, 450, 0.3),
        }
    )
