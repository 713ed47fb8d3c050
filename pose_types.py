from dataclasses import dataclass
from typing import Optional, Tuple


COCO17_NAMES = (
    "nose",
    "left_eye",
    "right_eye",
    "left_ear",
    "right_ear",
    "left_shoulder",
    "right_shoulder",
    "left_elbow",
    "right_elbow",
    "left_wrist",
    "right_wrist",
    "left_hip",
    "right_hip",
    "left_knee",
    "right_knee",
    "left_ankle",
    "right_ankle",
)


@dataclass(frozen=True)
class Keypoint:
    name: str
    x: float
    y: float
    score: float


@dataclass(frozen=True)
class Pose:
    keypoints: Tuple[Keypoint, ...] = ()
    width: int = 0
    height: int = 0

    def get(self, name: str) -> Optional[Keypoint]:
        # Unfiltered lookup; use keypoints.get_keypoint for the confidence gate.
        for kp in self.keypoints:
            if kp.name == name:
                return kp
        return None
