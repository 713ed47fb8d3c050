from dataclasses import replace
from typing import List, Optional

from pose_types import Keypoint, Pose


MIN_CONFIDENCE = 0.5


def is_confident(kp: Keypoint) -> bool:
    return kp.score > MIN_CONFIDENCE


def get_keypoint(pose: Pose, part: str) -> Optional[Keypoint]:
    for kp in pose.keypoints:
        if kp.name == part and is_confident(kp):
            return kp
    return None


def accepted_keypoints(pose: Pose) -> List[Keypoint]:
    return [kp for kp in pose.keypoints if is_confident(kp)]


def mirror_pose(pose: Pose, width: Optional[int] = None) -> Pose:
    # Flip x so keypoints line up with a cv2.flip(frame, 1) image of the given width.
    if width is None:
        width = pose.width
    flipped = tuple(replace(kp, x=width - kp.x) for kp in pose.keypoints)
    return Pose(keypoints=flipped, width=pose.width or width, height=pose.height)
