"""
Training of the linear appearance models.

Eigenfaces: PCA over the flattened faces, the basis keeps the directions of
largest variance.
Fisherfaces: PCA down to (n - C) dimensions, then LDA down to (C - 1)
dimensions, the basis keeps the directions that best separate the people.

Training is a single batch step; a new model replaces the old one as a whole.
"""

from __future__ import annotations
import logging
from collections.abc import Mapping
from typing import Iterable, List, Optional, Sequence, Tuple, Union
import numpy as np

from ..errors import ShapeMismatchError, TrainingError
from .subspace import subspace_project
from .types import AppearanceModel, RecognizerAlgorithm, RecognizerConfig

logger = logging.getLogger(__name__)

Sample = Tuple[np.ndarray, int]


# -------------------------
# Math
# -------------------------

def _pca(X: np.ndarray, num_components: int) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Returns (mean (d,), W (d, k), eigenvalues (k,)), eigenvalues descending.
    """
    n = X.shape[0]
    mean = X.mean(axis=0)
    _, s, vt = np.linalg.svd(X - mean, full_matrices=False)

    # Directions with no variance are noise from the decomposition.
    tol = s.max(initial=0.0) * max(X.shape) * np.finfo(np.float64).eps
    rank = int(np.count_nonzero(s > tol))
    k = rank if num_components <= 0 else min(num_components, rank)
    if k == 0:
        raise TrainingError("The training faces have no variance (all images identical)")

    eigenvalues = (s[:k] ** 2) / n
    return mean, vt[:k].T.copy(), eigenvalues


def _lda(Y: np.ndarray, labels: np.ndarray, num_components: int) -> Tuple[np.ndarray, np.ndarray]:
    """
    Returns (W (p, k), eigenvalues (k,)) maximising between-class over
    within-class scatter.
    """
    classes = np.unique(labels)
    p = Y.shape[1]
    mean_total = Y.mean(axis=0)
    Sw = np.zeros((p, p))
    Sb = np.zeros((p, p))

    for c in classes:
        Yc = Y[labels == c]
        mean_c = Yc.mean(axis=0)
        diff = Yc - mean_c
        Sw += diff.T @ diff
        md = (mean_c - mean_total).reshape(-1, 1)
        Sb += Yc.shape[0] * (md @ md.T)

    eigvals, eigvecs = np.linalg.eig(np.linalg.pinv(Sw) @ Sb)
    eigvals = eigvals.real
    eigvecs = eigvecs.real
    order = np.argsort(eigvals)[::-1]

    k = len(classes) - 1
    if 0 < num_components < k:
        k = num_components
    order = order[:k]
    return eigvecs[:, order], eigvals[order]


def _normalize_columns(W: np.ndarray) -> np.ndarray:
    norms = np.linalg.norm(W, axis=0)
    norms[norms == 0] = 1.0
    return W / norms


# -------------------------
# Training
# -------------------------

def _stack_faces(faces: Sequence[np.ndarray]) -> Tuple[np.ndarray, Tuple[int, int]]:
    if len(faces) < 2:
        raise TrainingError(f"Need at least 2 faces to train, got {len(faces)}")

    shape = np.asarray(faces[0]).shape
    if len(shape) != 2:
        raise ShapeMismatchError(f"Training faces must be single-channel 2-D images, got shape {shape}")
    for i, f in enumerate(faces):
        if np.asarray(f).shape != shape:
            raise ShapeMismatchError(f"Face {i} has shape {np.asarray(f).shape}, expected {shape}")

    X = np.stack([np.asarray(f, dtype=np.float64).reshape(-1) for f in faces], axis=0)
    return X, (int(shape[0]), int(shape[1]))


def _train_eigenfaces(X: np.ndarray, labels: np.ndarray, num_components: int):
    return _pca(X, num_components)


def _train_fisherfaces(X: np.ndarray, labels: np.ndarray, num_components: int):
    n = X.shape[0]
    C = len(np.unique(labels))
    if C < 2:
        raise TrainingError("Fisherfaces needs faces of at least 2 different people")
    if n <= C:
        raise TrainingError(f"Fisherfaces needs more faces ({n}) than people ({C})")

    mean, W_pca, _ = _pca(X, n - C)
    Y = subspace_project(W_pca, mean, X)
    W_lda, eigenvalues = _lda(Y, labels, num_components)
    return mean, _normalize_columns(W_pca @ W_lda), eigenvalues


_TRAINERS = {
    RecognizerAlgorithm.EIGENFACES: _train_eigenfaces,
    RecognizerAlgorithm.FISHERFACES: _train_fisherfaces,
}


def learn_collected_faces(
    faces: Sequence[np.ndarray],
    labels: Sequence[int],
    algorithm: Union[str, RecognizerAlgorithm, None] = None,
    num_components: Optional[int] = None,
    config: Optional[RecognizerConfig] = None,
) -> AppearanceModel:
    """
    Train a model from preprocessed faces (all the same size) and their labels.
    `algorithm` / `num_components` override the config when given.
    """
    cfg = config or RecognizerConfig()
    algo = cfg.algorithm if algorithm is None else RecognizerAlgorithm.parse(algorithm)
    if num_components is None:
        num_components = cfg.num_components
    if len(faces) != len(labels):
        raise ShapeMismatchError(f"Got {len(faces)} faces but {len(labels)} labels")

    X, face_size = _stack_faces(faces)
    y = np.asarray(labels, dtype=np.int64).reshape(-1)

    logger.info("Learning %d collected faces using the [%s] algorithm ...", X.shape[0], algo.value)
    mean, W, eigenvalues = _TRAINERS[algo](X, y, int(num_components))

    model = AppearanceModel(
        algorithm=algo,
        mean=mean,
        eigenvectors=W,
        eigenvalues=np.asarray(eigenvalues, dtype=np.float64),
        labels=y,
        projections=subspace_project(W, mean, X),
        face_size=face_size,
    )
    logger.info("trained %s: %d components, %d pixels", algo.value, model.num_components, model.dim)
    return model


def train(
    samples: Union[Iterable[Sample], Mapping],
    algorithm: Union[str, RecognizerAlgorithm, None] = None,
    num_components: Optional[int] = None,
    config: Optional[RecognizerConfig] = None,
) -> AppearanceModel:
    """
    Train from (face, label) pairs, or from a {sample index: (face, label)} mapping.
    """
    if algorithm is not None:
        algorithm = RecognizerAlgorithm.parse(algorithm)
    if isinstance(samples, Mapping):
        pairs: List[Sample] = [samples[k] for k in sorted(samples)]
    else:
        pairs = list(samples)
    faces = [face for face, _ in pairs]
    labels = [int(label) for _, label in pairs]
    return learn_collected_faces(faces, labels, algorithm, num_components, config)
