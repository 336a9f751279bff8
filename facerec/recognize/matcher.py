from __future__ import annotations
import logging
from typing import Any, Optional, Tuple
import cv2
import numpy as np

from ..errors import ShapeMismatchError
from .subspace import subspace_project, subspace_reconstruct
from .types import MatchResult, RecognizerConfig

logger = logging.getLogger(__name__)

# Returned for images that cannot be compared (different sizes, empty).
UNRANKABLE_SIMILARITY = 100000000.0


def get_similarity(a: np.ndarray, b: np.ndarray) -> float:
    """
    L2 error between two images divided by the pixel count; 0 for identical
    images, lower is more similar.
    """
    if a is None or b is None:
        return UNRANKABLE_SIMILARITY
    if a.ndim < 2 or b.ndim < 2 or a.shape != b.shape or a.shape[0] == 0 or a.shape[1] == 0:
        return UNRANKABLE_SIMILARITY

    error_l2 = cv2.norm(a.astype(np.float64), b.astype(np.float64), cv2.NORM_L2)
    return float(error_l2 / float(a.shape[0] * a.shape[1]))


def has_subspace(model: Any) -> bool:
    """
    True if the model exposes a mean face and a basis to reconstruct with.
    """
    mean = getattr(model, "mean", None)
    vecs = getattr(model, "eigenvectors", None)
    if not isinstance(mean, np.ndarray) or not isinstance(vecs, np.ndarray):
        return False
    return mean.size > 0 and vecs.ndim == 2 and vecs.size > 0


def project(model: Any, face: np.ndarray) -> np.ndarray:
    """
    (1, k) projection of a preprocessed face into the model's subspace.
    """
    return subspace_project(model.eigenvectors, model.mean, np.asarray(face).reshape(1, -1))


def reconstruct(model: Any, projection: np.ndarray, face_height: Optional[int] = None) -> np.ndarray:
    """
    (h, w) uint8 face rebuilt from a projection row. Returns an empty (0, 0)
    image when the model has no subspace to reconstruct from.
    """
    if not has_subspace(model):
        logger.warning("Missing face recognizer properties (mean / eigenvectors), cannot reconstruct")
        return np.zeros((0, 0), dtype=np.uint8)

    row = subspace_reconstruct(model.eigenvectors, model.mean, projection)
    if face_height is None:
        face_height = model.face_size[0]
    if face_height <= 0 or row.shape[1] % face_height != 0:
        raise ShapeMismatchError(
            f"Cannot reshape {row.shape[1]} pixels into rows of a face {face_height} pixels high."
        )

    # Already in pixel range, so no min-max normalization, just saturate.
    return np.clip(np.rint(row.reshape(face_height, -1)), 0, 255).astype(np.uint8)


def reconstruct_face(model: Any, preprocessed_face: np.ndarray) -> np.ndarray:
    """
    Back-project the face through the model's subspace. Returns an empty
    (0, 0) image when the model has no subspace to project into.
    """
    if not has_subspace(model):
        return reconstruct(model, np.zeros((1, 0)))

    return reconstruct(model, project(model, preprocessed_face), preprocessed_face.shape[0])


def predict(model: Any, face: np.ndarray) -> Tuple[int, float]:
    """
    Nearest training sample in the subspace: (label, distance), or (-1, inf)
    when the model has no training projections.
    """
    projections = getattr(model, "projections", None)
    if projections is None or len(projections) == 0:
        return -1, float("inf")

    q = project(model, face)
    dists = np.linalg.norm(projections - q, axis=1)
    best_i = int(np.argmin(dists))
    return int(model.labels[best_i]), float(dists[best_i])


def recognize(
    model: Any,
    preprocessed_face: np.ndarray,
    unknown_threshold: Optional[float] = None,
    config: Optional[RecognizerConfig] = None,
) -> MatchResult:
    """
    Identify a preprocessed face. The face is reconstructed from the subspace;
    if the reconstruction is too different from the input the model does not
    know this person and the result is not accepted.
    """
    cfg = config or RecognizerConfig()
    if unknown_threshold is None:
        unknown_threshold = cfg.unknown_threshold

    reconstructed = reconstruct_face(model, preprocessed_face)
    similarity = get_similarity(preprocessed_face, reconstructed)
    if similarity >= unknown_threshold:
        logger.debug("unknown person (similarity %.4f >= %.4f)", similarity, unknown_threshold)
        return MatchResult(label=None, distance=float("inf"), similarity=similarity, accepted=False)

    label, distance = predict(model, preprocessed_face)
    return MatchResult(label=label, distance=distance, similarity=similarity, accepted=label >= 0)
