from keypoints import MIN_CONFIDENCE, accepted_keypoints, get_keypoint, mirror_pose
from pose_types import Pose


def test_get_keypoint_returns_confident_match(make_pose):
    pose = make_pose({"nose": (10, 20, 0.8)})
    kp = get_keypoint(pose, "nose")
    assert kp is not None
    assert (kp.x, kp.y, kp.score) == (10.0, 20.0, 0.8)


def test_get_keypoint_is_idempotent(make_pose):
    pose = make_pose({"nose": (10, 20, 0.8)})
    assert get_keypoint(pose, "nose") == get_keypoint(pose, "nose")


def test_threshold_is_exclusive(make_pose):
    pose = make_pose({"nose": (10, 20, MIN_CONFIDENCE), "left_eye": (5, 5, 0.2)})
    for _ in range(3):
        assert get_keypoint(pose, "nose") is None
        assert get_keypoint(pose, "left_eye") is None


def test_missing_part_is_unavailable(make_pose):
    pose = make_pose({"nose": (10, 20)})
    assert get_keypoint(pose, "left_shoulder") is None
    assert get_keypoint(Pose(), "nose") is None


def test_raw_lookup_ignores_confidence(make_pose):
    pose = make_pose({"nose": (10, 20, 0.1)})
    assert pose.get("nose") is not None
    assert get_keypoint(pose, "nose") is None


def test_accepted_keypoints_keeps_order(upright_pose):
    names = [kp.name for kp in accepted_keypoints(upright_pose)]
    assert names == ["nose", "left_eye", "right_eye", "left_shoulder", "right_shoulder"]


def test_mirror_pose_flips_x(make_pose):
    pose = make_pose({"nose": (100, 50, 0.3), "left_eye": (600, 40)}, width=640)
    flipped = mirror_pose(pose)
    assert [(kp.name, kp.x, kp.y, kp.score) for kp in flipped.keypoints] == [
        ("nose", 540.0, 50.0, 0.3),
        ("left_eye", 40.0, 40.0, 0.9),
    ]
    assert (flipped.width, flipped.height) == (pose.width, pose.height)


def test_mirror_pose_uses_explicit_width(make_pose):
    pose = Pose(keypoints=make_pose({"nose": (300, 220)}).keypoints)
    flipped = mirror_pose(pose, 640)
    assert flipped.get("nose").x == 340.0
    assert flipped.width == 640
