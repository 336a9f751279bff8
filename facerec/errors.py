class FaceRecError(Exception):
    """Base class for errors raised by facerec."""


class ShapeMismatchError(FaceRecError, ValueError):
    """Matrix or image dimensions do not agree."""


class UnsupportedAlgorithmError(FaceRecError, ValueError):
    """Unknown face recognizer algorithm name."""


class TrainingError(FaceRecError):
    """The training set cannot produce a model (too few samples or classes)."""
