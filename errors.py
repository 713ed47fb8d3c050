class PostureError(Exception):
    pass


class ModelUnavailableError(PostureError):
    """The pose model could not be loaded or initialised."""


class PoseEstimationError(PostureError):
    """A single pose estimate failed, or the pose source was already closed."""
